"""
Per-unit analysis session.

A Session owns everything the analyzer caches for one tree: the binding
catalog (built on first use) and the alias-resolution memo. It is created per
unit and dropped with it; nothing is shared between sessions, so units can be
analysed on separate threads as long as each thread keeps its own session.
After the tree is modified, call `restart()` and continue with the new session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional

from parser.unit import Unit

from .aliasing import is_safe_initializer, is_wrapped_value, resolve_alias
from .bindings import BindingCatalog, DeclarationKind, binding_scope, is_block_level_function
from .mutability import Mutability, classify, suggest_kind
from .shadowing import is_shadowed

logger = logging.getLogger(__name__)

DEFAULT_WRAPPER_CALLEES: FrozenSet[str] = frozenset({"$", "jQuery"})


@dataclass(frozen=True)
class AnalysisOptions:
    """Tunable parts of the analysis."""

    wrapper_callees: FrozenSet[str] = field(default_factory=lambda: DEFAULT_WRAPPER_CALLEES)
    unsafe_alias_prefix: str = "$"


class Session:
    """Cached analysis state for exactly one unit."""

    def __init__(self, unit: Unit, options: Optional[AnalysisOptions] = None) -> None:
        self.unit = unit
        self.options = options or AnalysisOptions()
        self.alias_cache: Dict[str, Optional[Dict[str, Any]]] = {}
        self._catalog: Optional[BindingCatalog] = None

    @property
    def catalog(self) -> BindingCatalog:
        if self._catalog is None:
            logger.debug("%s: building binding catalog (%d nodes)", self.unit.source_name, len(self.unit))
            self._catalog = BindingCatalog(self.unit)
        return self._catalog

    def restart(self) -> "Session":
        """A fresh session over a re-indexed copy of the (possibly mutated) tree."""
        return Session(Unit(self.unit.root, source_name=self.unit.source_name), self.options)

    # ----------------------------------------------------------------- queries

    def bindings_of(self, name: str):
        return self.catalog.bindings_of(name)

    def is_shadowed(self, usage: Dict[str, Any], name: str, declaring_node: Dict[str, Any]) -> bool:
        return is_shadowed(self, usage, name, declaring_node)

    def classify(self, declarator: Dict[str, Any]) -> Mutability:
        return classify(self, declarator)

    def suggest_kind(self, declaration: Dict[str, Any]) -> List[str]:
        return suggest_kind(self, declaration)

    def resolve_alias(self, name: str) -> Optional[Dict[str, Any]]:
        return resolve_alias(self, name)

    def is_wrapped_value(self, node: Any) -> bool:
        return is_wrapped_value(self, node)

    def is_safe_initializer(self, call: Dict[str, Any]) -> bool:
        return is_safe_initializer(self, call)

    def binds_name_at(self, node: Dict[str, Any], name: str) -> bool:
        return binds_name_at(self, node, name)


def binds_name_at(session: Session, node: Dict[str, Any], name: str) -> bool:
    """
    True when a declaration of `name` in this unit is visible at `node`, i.e.
    the name does not refer to a global there. Unknown nodes answer True so that
    callers relying on the global meaning back off.
    """
    unit = session.unit
    if not unit.contains(node):
        return True
    for binding in session.catalog.bindings_of(name):
        scope = binding_scope(unit, binding)
        if is_block_level_function(unit, binding):
            # Sloppy scripts also hoist it to the function.
            scope = unit.scope_owner(binding.node)
        elif binding.kind is DeclarationKind.CATCH_PARAMETER:
            scope = binding.node.get("body") or scope
        if unit.is_ancestor(scope, node):
            return True
    return False


__all__ = ["AnalysisOptions", "DEFAULT_WRAPPER_CALLEES", "Session", "binds_name_at"]
