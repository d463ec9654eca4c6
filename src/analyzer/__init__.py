"""Conservative static-safety analysis for JavaScript rewrites."""

from .aliasing import is_safe_initializer, is_wrapped_value, is_wrapper_call, resolve_alias
from .bindings import Binding, BindingCatalog, DeclarationKind, SourcePosition, Write, WriteKind
from .capabilities import has_index_of_and_includes, is_iterable, is_known_promise, numeric_value
from .equivalence import equivalent
from .mutability import Mutability, classify, suggest_kind
from .patterns import extract_identifiers, pattern_contains_identifier
from .session import AnalysisOptions, Session, binds_name_at
from .shadowing import is_shadowed

__all__ = [
    "AnalysisOptions",
    "Binding",
    "BindingCatalog",
    "DeclarationKind",
    "Mutability",
    "Session",
    "SourcePosition",
    "Write",
    "WriteKind",
    "binds_name_at",
    "classify",
    "equivalent",
    "extract_identifiers",
    "has_index_of_and_includes",
    "is_iterable",
    "is_known_promise",
    "is_safe_initializer",
    "is_shadowed",
    "is_wrapped_value",
    "is_wrapper_call",
    "numeric_value",
    "pattern_contains_identifier",
    "resolve_alias",
    "suggest_kind",
]
