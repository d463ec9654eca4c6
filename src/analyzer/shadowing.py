"""
Shadow resolution: does a nearer declaration intercept a usage of a name
before the usage reaches the declaration we care about?

The walk goes outward from the usage, one function boundary at a time, ending
at the unit root. At each boundary:

* a parameter (or the function expression's own name) with the name shadows;
* a declaration owned by the boundary that is not the original one shadows,
  unless it is a `var`/function redeclaration in the original's own function
  (same binding) or a block-scoped declaration (including a function
  declared inside a nested block) whose block does not enclose the usage;
* a usage inside a parameter list only sees the parameters, never the body;
* reaching the original declaration's function ends the walk unshadowed.

Catch clauses crossed on the way shadow like parameters.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List

from .bindings import (
    Binding,
    DeclarationKind,
    binding_owner,
    binding_scope,
    is_block_level_function,
    is_function_node,
)
from .patterns import params_contain_identifier, pattern_contains_identifier

if TYPE_CHECKING:
    from .session import Session

logger = logging.getLogger(__name__)


def _binds_like_parameter(boundary: Dict[str, Any], name: str) -> bool:
    if params_contain_identifier(boundary.get("params"), name):
        return True
    if boundary.get("type") == "FunctionExpression":
        identifier = boundary.get("id")
        return isinstance(identifier, dict) and identifier.get("name") == name
    return False


def _in_params(unit, function: Dict[str, Any], usage: Dict[str, Any]) -> bool:
    return any(unit.is_ancestor(param, usage) for param in function.get("params") or ())


def _boundaries(session: "Session", usage: Dict[str, Any]):
    """Function boundaries and catch clauses around `usage`, innermost first, then the root."""
    unit = session.unit
    previous = usage
    for ancestor in unit.ancestors(usage):
        if is_function_node(ancestor):
            yield ancestor
        elif ancestor.get("type") == "CatchClause" and ancestor.get("param") is not previous:
            yield ancestor
        previous = ancestor
    yield unit.root


def is_shadowed(
    session: "Session",
    usage: Dict[str, Any],
    name: str,
    declaring_node: Dict[str, Any],
) -> bool:
    """
    Decide whether `usage` of `name` belongs to a different, nearer binding
    than the one declared by `declaring_node`.

    Unknown or foreign nodes get the conservative answer (not shadowed).
    """
    unit = session.unit
    if not unit.contains(usage) or not unit.contains(declaring_node):
        return False

    candidates: List[Binding] = [
        binding
        for binding in session.catalog.bindings_of(name)
        if binding.kind not in (DeclarationKind.PARAMETER, DeclarationKind.FUNCTION_NAME, DeclarationKind.CATCH_PARAMETER)
    ]
    original = next((b for b in candidates if b.node is declaring_node), None)
    original_scope = binding_scope(unit, original) if original else None

    for boundary in _boundaries(session, usage):
        if boundary.get("type") == "CatchClause":
            if pattern_contains_identifier(boundary.get("param"), name):
                return True
            continue
        if is_function_node(boundary):
            if _binds_like_parameter(boundary, name):
                return True
            # Parameter expressions cannot see declarations in the body.
            if _in_params(unit, boundary, usage):
                continue

        local = [b for b in candidates if binding_owner(unit, b) is boundary]
        home = original is not None and any(b is original for b in local)
        for binding in local:
            if binding is original:
                continue
            if binding.kind.is_function_scoped and not is_block_level_function(unit, binding):
                if not home:
                    return True
                continue
            scope = binding_scope(unit, binding)
            if not unit.is_ancestor(scope, usage):
                continue
            if not home or (scope is not original_scope and unit.is_ancestor(original_scope, scope)):
                return True
        if home:
            return False

    logger.debug("%s: usage of %r reached the root unshadowed", unit.source_name, name)
    return False


__all__ = ["is_shadowed"]
