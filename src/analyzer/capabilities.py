"""
Capability oracle: prove from syntax alone that an expression has a runtime
capability. Every predicate accepts a closed list of shapes and answers False
for everything else; an identifier on its own never proves anything.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from parser.unit import (
    NodeKind,
    identifier_name,
    is_number,
    is_string_literal,
    kind_of,
    literal_value,
    property_name,
)

ARRAY_CONSTRUCTING_STATICS = frozenset({"from", "of"})

STRING_METHODS_RETURNING_ITERABLE = frozenset(
    {
        "matchAll",
        "split",
        "slice",
        "substr",
        "substring",
        "toLowerCase",
        "toUpperCase",
        "trim",
        "trimStart",
        "trimEnd",
    }
)

STRING_METHODS_RETURNING_STRING = frozenset(
    {
        "slice",
        "substr",
        "substring",
        "toLowerCase",
        "toUpperCase",
        "trim",
        "trimStart",
        "trimEnd",
        "trimLeft",
        "trimRight",
        "repeat",
        "padStart",
        "padEnd",
        "concat",
        "replace",
        "replaceAll",
    }
)

ARRAY_METHODS_RETURNING_ARRAY = frozenset(
    {"slice", "concat", "map", "filter", "flat", "flatMap", "reverse", "sort", "splice"}
)

PROMISE_STATICS = frozenset({"all", "race", "resolve", "reject", "allSettled", "any"})
PROMISE_METHODS = frozenset({"then", "catch", "finally"})
PROMISE_FUNCTIONS = frozenset({"fetch"})


def _method_call(node: Any) -> Optional[str]:
    """Method name of `obj.name(...)`, otherwise None."""
    if kind_of(node) is not NodeKind.CALL:
        return None
    return property_name(node.get("callee"))


def is_array_literal(node: Any) -> bool:
    return kind_of(node) is NodeKind.ARRAY


def is_new_array(node: Any) -> bool:
    return kind_of(node) is NodeKind.NEW and identifier_name(node.get("callee")) == "Array"


def is_array_static_call(node: Any, method_name: Optional[str] = None) -> bool:
    """`Array.from(...)` / `Array.of(...)`, or one specific static if given."""
    method = _method_call(node)
    if method is None or identifier_name(node["callee"].get("object")) != "Array":
        return False
    if method_name is not None:
        return method == method_name
    return method in ARRAY_CONSTRUCTING_STATICS


def is_string_literal_method_call(node: Any, method_names) -> bool:
    method = _method_call(node)
    return (
        method is not None
        and method in method_names
        and is_string_literal(node["callee"].get("object"))
    )


def is_constructed_array(node: Any) -> bool:
    return is_array_literal(node) or is_new_array(node) or is_array_static_call(node)


def is_iterable(node: Any) -> bool:
    """Statically guaranteed to be iterable (safe to spread or `for-of`)."""
    if is_constructed_array(node):
        return True
    return is_string_literal_method_call(node, STRING_METHODS_RETURNING_ITERABLE)


def has_index_of_and_includes(node: Any) -> bool:
    """
    Statically guaranteed to be an array or a string, so both `indexOf` and
    `includes` exist with matching semantics. Method chains are followed down
    to their base without recursion; every method in the chain must preserve
    the base's type.
    """
    methods = []
    current = node
    while True:
        if is_constructed_array(current):
            return all(method in ARRAY_METHODS_RETURNING_ARRAY for method in methods)
        if is_string_literal(current) or kind_of(current) is NodeKind.TEMPLATE:
            return all(method in STRING_METHODS_RETURNING_STRING for method in methods)
        method = _method_call(current)
        if method is None:
            return False
        methods.append(method)
        current = current["callee"].get("object")


def numeric_value(node: Any) -> Optional[Union[int, float]]:
    """Value of `5` or `-5` style literals; None for anything else."""
    value = literal_value(node)
    if is_number(value):
        return value
    if kind_of(node) is NodeKind.UNARY and node.get("operator") == "-":
        inner = literal_value(node.get("argument"))
        if is_number(inner):
            return -inner
    return None


def is_known_promise(node: Any) -> bool:
    """`new Promise(...)`, `Promise.all(...)`, `fetch(...)` and `.then/.catch/.finally` on those."""
    current = node
    while True:
        kind = kind_of(current)
        if kind is NodeKind.NEW:
            return identifier_name(current.get("callee")) == "Promise"
        if kind is not NodeKind.CALL:
            return False
        callee = current.get("callee")
        if identifier_name(callee) in PROMISE_FUNCTIONS:
            return True
        method = property_name(callee)
        if method is None:
            return False
        if identifier_name(callee.get("object")) == "Promise":
            return method in PROMISE_STATICS
        if method not in PROMISE_METHODS:
            return False
        current = callee.get("object")


__all__ = [
    "ARRAY_CONSTRUCTING_STATICS",
    "ARRAY_METHODS_RETURNING_ARRAY",
    "STRING_METHODS_RETURNING_ITERABLE",
    "STRING_METHODS_RETURNING_STRING",
    "has_index_of_and_includes",
    "is_array_literal",
    "is_array_static_call",
    "is_constructed_array",
    "is_iterable",
    "is_known_promise",
    "is_new_array",
    "is_string_literal_method_call",
    "numeric_value",
]
