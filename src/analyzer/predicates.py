"""
Small syntactic predicates that rewrite rules consult alongside the analyzer.

Traversals stop at nested functions, which own their identifiers. Arrow
functions share `this` and `arguments` with their surroundings, so the checks
for those two keep walking into arrows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from parser.unit import (
    FUNCTION_TYPES,
    NodeKind,
    identifier_name,
    is_string_literal,
    iter_children,
    kind_of,
    literal_value,
    property_name,
)

from .equivalence import equivalent

Predicate = Callable[[Dict[str, Any]], bool]


def _count(node: Any, predicate: Predicate, *, enter_arrows: bool, limit: Optional[int] = None) -> int:
    if not isinstance(node, dict):
        return 0
    count = 0
    stack = [node]
    while stack:
        current = stack.pop()
        if predicate(current):
            count += 1
            if limit is not None and count >= limit:
                return count
        node_type = current.get("type")
        if node_type in FUNCTION_TYPES and current is not node:
            if not (enter_arrows and node_type == "ArrowFunctionExpression"):
                continue
        stack.extend(iter_children(current))
    return count


def _any(node: Any, predicate: Predicate, *, enter_arrows: bool = False) -> bool:
    return _count(node, predicate, enter_arrows=enter_arrows, limit=1) > 0


def uses_this(node: Any) -> bool:
    return _any(node, lambda n: n.get("type") == "ThisExpression", enter_arrows=True)


def uses_arguments(node: Any) -> bool:
    """`arguments` inside `node`; a function node is searched through its body."""
    if isinstance(node, dict) and node.get("type") in FUNCTION_TYPES:
        node = node.get("body")
    return _any(node, lambda n: identifier_name(n) == "arguments", enter_arrows=True)


def uses_identifier(node: Any, name: str) -> bool:
    return _any(node, lambda n: identifier_name(n) == name)


def count_identifier_usages(node: Any, name: str) -> int:
    return _count(node, lambda n: identifier_name(n) == name, enter_arrows=False)


def contains_string_literal(node: Any) -> bool:
    """A string literal anywhere along a chain of binary `+`."""
    stack = [node]
    while stack:
        current = stack.pop()
        if is_string_literal(current):
            return True
        if kind_of(current) is NodeKind.BINARY and current.get("operator") == "+":
            stack.append(current.get("right"))
            stack.append(current.get("left"))
    return False


def is_access_on_base(node: Any, base: Any) -> bool:
    """`base.x` or `base(...)`."""
    kind = kind_of(node)
    if kind is NodeKind.MEMBER:
        return equivalent(node.get("object"), base)
    if kind is NodeKind.CALL:
        return equivalent(node.get("callee"), base)
    return False


def is_constructor_name(node: Any) -> bool:
    name = identifier_name(node)
    return bool(name) and "A" <= name[0] <= "Z"


@dataclass(frozen=True)
class IndexOfInfo:
    call: Dict[str, Any]
    comparison: Dict[str, Any]
    call_on_left: bool


def index_of_info(node: Any) -> Optional[IndexOfInfo]:
    """Locate the `x.indexOf(...)` side of a binary comparison."""
    if kind_of(node) is not NodeKind.BINARY:
        return None
    left, right = node.get("left"), node.get("right")
    if kind_of(left) is NodeKind.CALL and property_name(left.get("callee")) == "indexOf":
        return IndexOfInfo(call=left, comparison=right, call_on_left=True)
    if kind_of(right) is NodeKind.CALL and property_name(right.get("callee")) == "indexOf":
        return IndexOfInfo(call=right, comparison=left, call_on_left=False)
    return None


@dataclass(frozen=True)
class Check:
    value: Dict[str, Any]
    negated: bool


def _strict_check(node: Any, matches: Callable[[Any], bool]) -> Optional[Check]:
    if kind_of(node) is not NodeKind.BINARY or node.get("operator") not in ("===", "!=="):
        return None
    negated = node.get("operator") == "!=="
    if matches(node.get("right")):
        return Check(value=node.get("left"), negated=negated)
    if matches(node.get("left")):
        return Check(value=node.get("right"), negated=negated)
    return None


def _is_null(node: Any) -> bool:
    return kind_of(node) is NodeKind.LITERAL and node.get("raw") == "null" and literal_value(node) is None


def null_check(node: Any) -> Optional[Check]:
    """`x === null` / `null !== x`."""
    return _strict_check(node, _is_null)


def undefined_check(node: Any) -> Optional[Check]:
    """`x === undefined` / `undefined !== x`."""
    return _strict_check(node, lambda n: identifier_name(n) == "undefined")


__all__ = [
    "Check",
    "IndexOfInfo",
    "contains_string_literal",
    "count_identifier_usages",
    "index_of_info",
    "is_access_on_base",
    "is_constructor_name",
    "null_check",
    "undefined_check",
    "uses_arguments",
    "uses_identifier",
    "uses_this",
]
