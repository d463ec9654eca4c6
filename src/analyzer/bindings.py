"""
Binding catalog for one analysis unit.

A single pass over the unit records, per identifier name, where it is declared
(`var`, `let`, `const`, functions, classes, parameters, catch parameters), where
it is written (assignments, destructuring targets, bare `for-in`/`for-of`
targets), where it is incremented or decremented, and where it is referenced.
Later queries (shadowing, mutability, alias resolution) only read these tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from parser.unit import FUNCTION_TYPES, Unit

from .patterns import extract_identifiers


class DeclarationKind(str, Enum):
    VAR = "var"
    LET = "let"
    CONST = "const"
    FUNCTION = "function"
    CLASS = "class"
    PARAMETER = "parameter"
    CATCH_PARAMETER = "catch_parameter"
    FUNCTION_NAME = "function_name"

    @property
    def is_function_scoped(self) -> bool:
        """`var` and function declarations hoist to the enclosing function."""
        return self in (DeclarationKind.VAR, DeclarationKind.FUNCTION)

    @property
    def is_block_scoped(self) -> bool:
        return self in (DeclarationKind.LET, DeclarationKind.CONST, DeclarationKind.CLASS)


class WriteKind(str, Enum):
    ASSIGNMENT = "assignment"
    UPDATE = "update"
    LOOP_TARGET = "loop_target"


@dataclass(frozen=True)
class SourcePosition:
    line: Optional[int]
    column: Optional[int]

    @classmethod
    def of(cls, node: Dict[str, Any]) -> "SourcePosition":
        loc = node.get("loc") or {}
        start = loc.get("start") or {}
        return cls(line=start.get("line"), column=start.get("column"))


@dataclass(frozen=True)
class Binding:
    """A name together with the node that declares it.

    `node` is the VariableDeclarator for variables, the function or class node
    for declarations and parameters, and the CatchClause for catch parameters.
    """

    name: str
    kind: DeclarationKind
    node: Dict[str, Any] = field(compare=False, repr=False)
    loc: SourcePosition = field(compare=False)


@dataclass(frozen=True)
class Write:
    """An assignment, increment/decrement, or loop-target write of a name."""

    name: str
    kind: WriteKind
    node: Dict[str, Any] = field(compare=False, repr=False)
    loc: SourcePosition = field(compare=False)


_DECLARATION_KINDS = {
    "var": DeclarationKind.VAR,
    "let": DeclarationKind.LET,
    "const": DeclarationKind.CONST,
}


class BindingCatalog:
    """Per-name declarations, writes and references of one unit."""

    def __init__(self, unit: Unit) -> None:
        self.unit = unit
        self._declarations: Dict[str, List[Binding]] = {}
        self._writes: Dict[str, List[Write]] = {}
        self._references: Dict[str, List[Dict[str, Any]]] = {}
        for node in unit.walk():
            handler = getattr(self, f"_visit_{node['type']}", None)
            if handler:
                handler(node)

    # ----------------------------------------------------------------- queries

    def names(self) -> List[str]:
        return sorted(set(self._declarations) | set(self._writes) | set(self._references))

    def bindings_of(self, name: str) -> Tuple[Binding, ...]:
        return tuple(self._declarations.get(name, ()))

    def writes_of(self, name: str, *kinds: WriteKind) -> Tuple[Write, ...]:
        writes = self._writes.get(name, ())
        if kinds:
            return tuple(write for write in writes if write.kind in kinds)
        return tuple(writes)

    def assignments_of(self, name: str) -> Tuple[Write, ...]:
        return self.writes_of(name, WriteKind.ASSIGNMENT, WriteKind.LOOP_TARGET)

    def updates_of(self, name: str) -> Tuple[Write, ...]:
        return self.writes_of(name, WriteKind.UPDATE)

    def references_of(self, name: str) -> Tuple[Dict[str, Any], ...]:
        """Identifier nodes that name a binding (property names excluded)."""
        return tuple(self._references.get(name, ()))

    def declarator_bindings(self, declarator: Dict[str, Any]) -> Tuple[Binding, ...]:
        found = []
        for name in extract_identifiers(declarator.get("id")):
            found.extend(b for b in self.bindings_of(name) if b.node is declarator)
        return tuple(found)

    # ----------------------------------------------------------------- helpers

    def _declare(self, name: Optional[str], kind: DeclarationKind, node: Dict[str, Any], at: Dict[str, Any]) -> None:
        if not name:
            return
        binding = Binding(name=name, kind=kind, node=node, loc=SourcePosition.of(at))
        self._declarations.setdefault(name, []).append(binding)

    def _write(self, pattern: Any, kind: WriteKind, node: Dict[str, Any]) -> None:
        for name in extract_identifiers(pattern):
            write = Write(name=name, kind=kind, node=node, loc=SourcePosition.of(node))
            self._writes.setdefault(name, []).append(write)

    def _is_reference(self, identifier: Dict[str, Any]) -> bool:
        parent = self.unit.parent(identifier)
        if parent is None:
            return True
        parent_type = parent.get("type")
        if parent_type == "MemberExpression":
            return parent.get("object") is identifier or bool(parent.get("computed"))
        if parent_type in {"Property", "MethodDefinition"} and parent.get("key") is identifier:
            return bool(parent.get("computed"))
        if parent_type in {"LabeledStatement", "BreakStatement", "ContinueStatement"}:
            return False
        return True

    # ----------------------------------------------------------------- visitors

    def _visit_VariableDeclarator(self, node: Dict[str, Any]) -> None:
        declaration = self.unit.parent(node) or {}
        kind = _DECLARATION_KINDS.get(declaration.get("kind"), DeclarationKind.VAR)
        for name in extract_identifiers(node.get("id")):
            self._declare(name, kind, node, node)

    def _visit_function(self, node: Dict[str, Any]) -> None:
        for param in node.get("params", []):
            for name in extract_identifiers(param):
                self._declare(name, DeclarationKind.PARAMETER, node, param)

    def _visit_FunctionDeclaration(self, node: Dict[str, Any]) -> None:
        identifier = node.get("id")
        if isinstance(identifier, dict):
            self._declare(identifier.get("name"), DeclarationKind.FUNCTION, node, identifier)
        self._visit_function(node)

    def _visit_FunctionExpression(self, node: Dict[str, Any]) -> None:
        identifier = node.get("id")
        if isinstance(identifier, dict):
            # Named function expressions bind the name within the inner scope.
            self._declare(identifier.get("name"), DeclarationKind.FUNCTION_NAME, node, identifier)
        self._visit_function(node)

    def _visit_ArrowFunctionExpression(self, node: Dict[str, Any]) -> None:
        self._visit_function(node)

    def _visit_ClassDeclaration(self, node: Dict[str, Any]) -> None:
        identifier = node.get("id")
        if isinstance(identifier, dict):
            self._declare(identifier.get("name"), DeclarationKind.CLASS, node, identifier)

    def _visit_CatchClause(self, node: Dict[str, Any]) -> None:
        param = node.get("param")
        for name in extract_identifiers(param):
            self._declare(name, DeclarationKind.CATCH_PARAMETER, node, param)

    def _visit_AssignmentExpression(self, node: Dict[str, Any]) -> None:
        self._write(node.get("left"), WriteKind.ASSIGNMENT, node)

    def _visit_UpdateExpression(self, node: Dict[str, Any]) -> None:
        argument = node.get("argument")
        if isinstance(argument, dict) and argument.get("type") == "Identifier":
            self._write(argument, WriteKind.UPDATE, node)

    def _visit_ForInStatement(self, node: Dict[str, Any]) -> None:
        left = node.get("left")
        if isinstance(left, dict) and left.get("type") != "VariableDeclaration":
            self._write(left, WriteKind.LOOP_TARGET, node)

    _visit_ForOfStatement = _visit_ForInStatement

    def _visit_Identifier(self, node: Dict[str, Any]) -> None:
        if self._is_reference(node):
            self._references.setdefault(node.get("name"), []).append(node)


_EXPORT_TYPES = frozenset({"ExportNamedDeclaration", "ExportDefaultDeclaration"})


def is_block_level_function(unit: Unit, binding: Binding) -> bool:
    """
    A function declaration nested in a block rather than sitting directly in a
    function body or the program. Strict and module code scope it to that block.
    """
    if binding.kind is not DeclarationKind.FUNCTION:
        return False
    container = unit.parent(binding.node)
    if container is not None and container.get("type") in _EXPORT_TYPES:
        container = unit.parent(container)
    if container is None or container is unit.root:
        return False
    return not (container.get("type") == "BlockStatement" and is_function_node(unit.parent(container)))


def binding_scope(unit: Unit, binding: Binding) -> Dict[str, Any]:
    """The node whose extent a binding is visible in."""
    node = binding.node
    if binding.kind in (DeclarationKind.PARAMETER, DeclarationKind.FUNCTION_NAME):
        return node
    if binding.kind is DeclarationKind.CATCH_PARAMETER:
        return node
    if is_block_level_function(unit, binding):
        return unit.enclosing_block(node)
    if binding.kind.is_function_scoped:
        return unit.scope_owner(node)
    # let/const/class: the nearest block around the declaration statement.
    anchor = unit.parent(node) if node.get("type") == "VariableDeclarator" else node
    if anchor is None:
        return unit.root
    return unit.enclosing_block(anchor)


def binding_owner(unit: Unit, binding: Binding) -> Dict[str, Any]:
    """The function (or program) a binding is registered in."""
    if binding.kind in (DeclarationKind.PARAMETER, DeclarationKind.FUNCTION_NAME):
        return binding.node
    return unit.scope_owner(binding.node)


def is_function_node(node: Any) -> bool:
    return isinstance(node, dict) and node.get("type") in FUNCTION_TYPES


__all__ = [
    "Binding",
    "BindingCatalog",
    "DeclarationKind",
    "SourcePosition",
    "Write",
    "WriteKind",
    "binding_owner",
    "binding_scope",
    "is_block_level_function",
    "is_function_node",
]
