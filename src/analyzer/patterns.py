"""Helpers for binding patterns (identifiers and destructuring forms)."""

from __future__ import annotations

from typing import Any, Iterator

from parser.unit import NodeKind, kind_of


def extract_identifiers(pattern: Any) -> Iterator[str]:
    """
    Yield every name bound by `pattern`, left to right.

    Handles identifiers, object and array patterns, rest elements and
    default-value patterns. Member expressions and holes bind nothing.
    """
    stack = [pattern]
    while stack:
        node = stack.pop()
        kind = kind_of(node)
        if kind is NodeKind.IDENTIFIER:
            yield node.get("name")
        elif kind is NodeKind.OBJECT_PATTERN:
            nested = []
            for prop in node.get("properties", []):
                if kind_of(prop) is NodeKind.REST:
                    nested.append(prop.get("argument"))
                elif isinstance(prop, dict) and prop.get("type") == "Property":
                    nested.append(prop.get("value"))
            stack.extend(reversed(nested))
        elif kind is NodeKind.ARRAY_PATTERN:
            stack.extend(reversed(node.get("elements", [])))
        elif kind is NodeKind.ASSIGNMENT_PATTERN:
            stack.append(node.get("left"))
        elif kind is NodeKind.REST:
            stack.append(node.get("argument"))


def pattern_contains_identifier(pattern: Any, name: str) -> bool:
    return any(bound == name for bound in extract_identifiers(pattern))


def params_contain_identifier(params: Any, name: str) -> bool:
    return any(pattern_contains_identifier(param, name) for param in params or ())


__all__ = [
    "extract_identifiers",
    "params_contain_identifier",
    "pattern_contains_identifier",
]
