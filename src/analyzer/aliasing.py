"""
Alias resolution for variables built from a single-argument wrapper call.

Given `var el = $(node)`, rules that rewrite `el.hide()` need to know that `el`
stands for `node`. Resolution succeeds only when every initialization of the
name wraps the same argument, the name is never incremented, and every usage
is a declaration, an assignment target, or the object of a member access.
Answers are memoised in the session, failures included.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from parser.unit import NodeKind, identifier_name, kind_of

from .bindings import DeclarationKind
from .equivalence import equivalent

if TYPE_CHECKING:
    from .session import Session

logger = logging.getLogger(__name__)

_VARIABLE_KINDS = (DeclarationKind.VAR, DeclarationKind.LET, DeclarationKind.CONST)


def is_wrapper_call(node: Any, callees: Iterable[str]) -> bool:
    """`$(x)` style call: a marker callee with exactly one plain argument."""
    if kind_of(node) is not NodeKind.CALL:
        return False
    if identifier_name(node.get("callee")) not in set(callees):
        return False
    arguments = node.get("arguments") or []
    return len(arguments) == 1 and arguments[0].get("type") != "SpreadElement"


def _is_top_level(session: "Session", declarator: Dict[str, Any]) -> bool:
    declaration = session.unit.parent(declarator)
    return declaration is not None and session.unit.parent(declaration) is session.unit.root


def _is_safe_usage(session: "Session", identifier: Dict[str, Any]) -> bool:
    parent = session.unit.parent(identifier)
    if parent is None:
        return False
    parent_type = parent.get("type")
    if parent_type == "VariableDeclarator":
        return parent.get("id") is identifier
    if parent_type == "AssignmentExpression":
        return parent.get("left") is identifier and parent.get("operator") == "="
    if parent_type == "MemberExpression":
        return parent.get("object") is identifier
    return False


def _agreeing_argument(initializers: List[Dict[str, Any]], callees) -> Optional[Dict[str, Any]]:
    found: Optional[Dict[str, Any]] = None
    for init in initializers:
        if not is_wrapper_call(init, callees):
            return None
        argument = init["arguments"][0]
        if found is None:
            found = argument
        elif not equivalent(found, argument):
            return None
    return found


def _resolve(session: "Session", name: str) -> Optional[Dict[str, Any]]:
    unit = session.unit
    catalog = session.catalog
    options = session.options
    callees = options.wrapper_callees

    bindings = catalog.bindings_of(name)
    if any(binding.kind not in _VARIABLE_KINDS for binding in bindings):
        logger.debug("%s: %r has a non-variable declaration", unit.source_name, name)
        return None

    initializers: List[Dict[str, Any]] = []
    for binding in bindings:
        declarator = binding.node
        if identifier_name(declarator.get("id")) != name:
            return None
        if options.unsafe_alias_prefix and name.startswith(options.unsafe_alias_prefix):
            if _is_top_level(session, declarator):
                logger.debug("%s: %r is a top-level %r name", unit.source_name, name, options.unsafe_alias_prefix)
                return None
        initializers.append(declarator.get("init"))

    # Later assignments must wrap the same argument as the declarations.
    for write in catalog.assignments_of(name):
        node = write.node
        if (
            node.get("type") != "AssignmentExpression"
            or node.get("operator") != "="
            or identifier_name(node.get("left")) != name
        ):
            return None
        initializers.append(node.get("right"))
    if not initializers:
        return None

    target = _agreeing_argument(initializers, callees)
    if target is None:
        logger.debug("%s: %r initialisers disagree", unit.source_name, name)
        return None

    if catalog.updates_of(name):
        return None

    for identifier in catalog.references_of(name):
        if not _is_safe_usage(session, identifier):
            logger.debug("%s: %r escapes at line %s", unit.source_name, name,
                         (identifier.get("loc") or {}).get("start", {}).get("line"))
            return None
    return target


def resolve_alias(session: "Session", name: str) -> Optional[Dict[str, Any]]:
    """Return the argument `name` was wrapped from, or None when unprovable."""
    if not name:
        return None
    cache = session.alias_cache
    if name in cache:
        logger.debug("%s: alias cache hit for %r", session.unit.source_name, name)
        return cache[name]
    logger.debug("%s: alias cache miss for %r", session.unit.source_name, name)
    target = _resolve(session, name)
    cache[name] = target
    return target


def is_wrapped_value(session: "Session", node: Any) -> bool:
    """A wrapper call, or an identifier that resolves to one."""
    if kind_of(node) is NodeKind.CALL:
        return is_wrapper_call(node, session.options.wrapper_callees)
    name = identifier_name(node)
    return name is not None and resolve_alias(session, name) is not None


def is_safe_initializer(session: "Session", call: Dict[str, Any]) -> bool:
    """
    May a wrapper call that initialises or is assigned to a variable be
    rewritten on its own? Only if the variable is never used, or resolves.
    """
    unit = session.unit
    parent = unit.parent(call) if unit.contains(call) else None
    if parent is None:
        return True
    prefix = session.options.unsafe_alias_prefix

    if parent.get("type") == "VariableDeclarator" and parent.get("init") is call:
        name = identifier_name(parent.get("id"))
        if name is None:
            return True
        if prefix and name.startswith(prefix) and _is_top_level(session, parent):
            return False
        usages = [
            ident for ident in session.catalog.references_of(name)
            if not (unit.parent(ident) is parent and parent.get("id") is ident)
        ]
        if not usages:
            return True
        return resolve_alias(session, name) is not None

    if parent.get("type") == "AssignmentExpression" and parent.get("right") is call:
        name = identifier_name(parent.get("left"))
        if name is None:
            return True
        if prefix and name.startswith(prefix):
            return False
        return resolve_alias(session, name) is not None

    return True


__all__ = ["is_safe_initializer", "is_wrapped_value", "is_wrapper_call", "resolve_alias"]
