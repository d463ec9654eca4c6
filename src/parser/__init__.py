"""Interfaces for parsing JavaScript source and indexing the resulting tree."""

from .es_parser import SOURCE_TYPES, ParseError, ParseResult, parse_js
from .unit import NodeKind, Unit, UnitError, kind_of

__all__ = [
    "NodeKind",
    "ParseError",
    "ParseResult",
    "SOURCE_TYPES",
    "Unit",
    "UnitError",
    "kind_of",
    "parse_js",
]
