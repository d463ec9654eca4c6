"""
Mutability classification of variable declarators.

A declarator is immutable-safe when nothing in the unit writes to any name it
binds, except writes that belong to some other, nearer binding. Anything the
classifier cannot account for keeps the declarator reassignable.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Tuple

from .bindings import Write, is_block_level_function
from .patterns import extract_identifiers
from .shadowing import is_shadowed

if TYPE_CHECKING:
    from .session import Session

logger = logging.getLogger(__name__)


class Mutability(str, Enum):
    IMMUTABLE_SAFE = "immutable-safe"
    MUST_ALLOW_REASSIGNMENT = "must-allow-reassignment"

    @property
    def declaration_kind(self) -> str:
        return "const" if self is Mutability.IMMUTABLE_SAFE else "let"


def is_loop_variable(session: "Session", declarator: Dict[str, Any]) -> bool:
    """True for the declarator of `for (x of ...)` / `for (x in ...)`."""
    declaration = session.unit.parent(declarator)
    if declaration is None:
        return False
    loop = session.unit.parent(declaration)
    return (
        loop is not None
        and loop.get("type") in {"ForOfStatement", "ForInStatement"}
        and loop.get("left") is declaration
    )


def _competing_writes(
    session: "Session", declarator: Dict[str, Any], name: str
) -> Iterator[Tuple[Dict[str, Any], bool]]:
    """Nodes that may write `name`, each flagged when it writes regardless of shadowing."""
    unit = session.unit
    catalog = session.catalog
    writes: List[Write] = list(catalog.assignments_of(name)) + list(catalog.updates_of(name))
    for write in writes:
        yield write.node, False
    # Redeclaring a hoisted name writes it as well.
    for binding in catalog.bindings_of(name):
        if binding.node is declarator or not binding.kind.is_function_scoped:
            continue
        # Sloppy scripts copy a block-level function into the enclosing function's var.
        hoisted = is_block_level_function(unit, binding) and (
            unit.scope_owner(binding.node) is unit.scope_owner(declarator)
        )
        yield binding.node, hoisted


def classify(session: "Session", declarator: Dict[str, Any]) -> Mutability:
    """
    Decide whether `declarator` may be declared immutably.

    Declarators without an initializer must stay reassignable, except loop
    variables of `for-of`/`for-in`, which receive a value on every iteration.
    For destructuring, one reassigned name is enough to keep the whole
    declarator reassignable.
    """
    unit = session.unit
    if (
        not isinstance(declarator, dict)
        or declarator.get("type") != "VariableDeclarator"
        or not unit.contains(declarator)
    ):
        return Mutability.MUST_ALLOW_REASSIGNMENT

    if declarator.get("init") is None and not is_loop_variable(session, declarator):
        return Mutability.MUST_ALLOW_REASSIGNMENT

    for name in extract_identifiers(declarator.get("id")):
        for usage, hoisted in _competing_writes(session, declarator, name):
            if hoisted or not is_shadowed(session, usage, name, declarator):
                logger.debug(
                    "%s: %r is written at line %s",
                    unit.source_name,
                    name,
                    (usage.get("loc") or {}).get("start", {}).get("line"),
                )
                return Mutability.MUST_ALLOW_REASSIGNMENT
    return Mutability.IMMUTABLE_SAFE


def suggest_kind(session: "Session", declaration: Dict[str, Any]) -> List[str]:
    """`"const"` or `"let"` for every declarator of a VariableDeclaration."""
    if not isinstance(declaration, dict) or declaration.get("type") != "VariableDeclaration":
        return []
    return [
        classify(session, declarator).declaration_kind
        for declarator in declaration.get("declarations", [])
    ]


__all__ = ["Mutability", "classify", "is_loop_variable", "suggest_kind"]
