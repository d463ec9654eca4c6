"""
Purely syntactic equality of expression subtrees.

Only identifiers, literals, member accesses and calls are compared by
structure; every other node is equal only to itself. No evaluation happens,
so `1 + 1` and `2` are different.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

from parser.unit import NodeKind, is_number, kind_of

Pair = Tuple[Any, Any]


def _same_literal(left: Dict[str, Any], right: Dict[str, Any]) -> bool:
    # Every regular expression literal evaluates to a fresh object.
    if "regex" in left or "regex" in right:
        return False
    a, b = left.get("value"), right.get("value")
    if is_number(a) and is_number(b):
        return a == b
    return type(a) is type(b) and a == b


def _identifiers(left, right, pending: List[Pair]) -> bool:
    return left.get("name") == right.get("name")


def _literals(left, right, pending: List[Pair]) -> bool:
    return _same_literal(left, right)


def _members(left, right, pending: List[Pair]) -> bool:
    if bool(left.get("computed")) != bool(right.get("computed")):
        return False
    pending.append((left.get("property"), right.get("property")))
    pending.append((left.get("object"), right.get("object")))
    return True


def _calls(left, right, pending: List[Pair]) -> bool:
    left_args = left.get("arguments") or []
    right_args = right.get("arguments") or []
    if len(left_args) != len(right_args):
        return False
    pending.extend(reversed(list(zip(left_args, right_args))))
    pending.append((left.get("callee"), right.get("callee")))
    return True


_COMPARATORS: Dict[NodeKind, Callable[[Dict[str, Any], Dict[str, Any], List[Pair]], bool]] = {
    NodeKind.IDENTIFIER: _identifiers,
    NodeKind.LITERAL: _literals,
    NodeKind.MEMBER: _members,
    NodeKind.CALL: _calls,
}


def equivalent(left: Optional[Dict[str, Any]], right: Optional[Dict[str, Any]]) -> bool:
    """True when both subtrees have the same shape and leaves."""
    pending: List[Pair] = [(left, right)]
    while pending:
        a, b = pending.pop()
        if a is b and a is not None:
            continue
        kind = kind_of(a)
        if kind is not kind_of(b):
            return False
        comparator = _COMPARATORS.get(kind)
        if comparator is None or not comparator(a, b, pending):
            return False
    return True


__all__ = ["equivalent"]
