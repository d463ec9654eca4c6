"""
Read-only view over one parsed JavaScript program.

esprima hands back plain dictionaries without parent links. A `Unit` indexes the
tree once (iteratively, so deep expressions cannot exhaust the Python stack) and
answers the structural questions the analyzer keeps asking: who is the parent
of a node, which function encloses it, which nodes of a given type exist.
The tree itself is never modified here.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional

META_KEYS = frozenset(
    {
        "type",
        "loc",
        "range",
        "comments",
        "errors",
        "tokens",
        "leadingComments",
        "trailingComments",
        "innerComments",
        "regex",
    }
)

FUNCTION_TYPES = frozenset(
    {"FunctionDeclaration", "FunctionExpression", "ArrowFunctionExpression"}
)

# Nodes that open a lexical block for `let`, `const` and `class`.
BLOCK_TYPES = frozenset(
    {
        "Program",
        "BlockStatement",
        "SwitchStatement",
        "ForStatement",
        "ForInStatement",
        "ForOfStatement",
        "CatchClause",
    }
)


class UnitError(ValueError):
    """Raised when a tree cannot be wrapped as an analysis unit."""


class NodeKind(str, Enum):
    IDENTIFIER = "identifier"
    MEMBER = "member"
    CALL = "call"
    NEW = "new"
    LITERAL = "literal"
    TEMPLATE = "template"
    ARRAY = "array"
    UNARY = "unary"
    BINARY = "binary"
    UPDATE = "update"
    ASSIGNMENT = "assignment"
    DECLARATION = "declaration"
    DECLARATOR = "declarator"
    FUNCTION = "function"
    CLASS = "class"
    PROGRAM = "program"
    ARRAY_PATTERN = "array_pattern"
    OBJECT_PATTERN = "object_pattern"
    REST = "rest"
    ASSIGNMENT_PATTERN = "assignment_pattern"
    BLOCK = "block"
    OTHER = "other"


_KIND_BY_TYPE: Dict[str, NodeKind] = {
    "Identifier": NodeKind.IDENTIFIER,
    "MemberExpression": NodeKind.MEMBER,
    "CallExpression": NodeKind.CALL,
    "NewExpression": NodeKind.NEW,
    "Literal": NodeKind.LITERAL,
    "TemplateLiteral": NodeKind.TEMPLATE,
    "ArrayExpression": NodeKind.ARRAY,
    "UnaryExpression": NodeKind.UNARY,
    "BinaryExpression": NodeKind.BINARY,
    "UpdateExpression": NodeKind.UPDATE,
    "AssignmentExpression": NodeKind.ASSIGNMENT,
    "VariableDeclaration": NodeKind.DECLARATION,
    "VariableDeclarator": NodeKind.DECLARATOR,
    "FunctionDeclaration": NodeKind.FUNCTION,
    "FunctionExpression": NodeKind.FUNCTION,
    "ArrowFunctionExpression": NodeKind.FUNCTION,
    "ClassDeclaration": NodeKind.CLASS,
    "ClassExpression": NodeKind.CLASS,
    "Program": NodeKind.PROGRAM,
    "ArrayPattern": NodeKind.ARRAY_PATTERN,
    "ObjectPattern": NodeKind.OBJECT_PATTERN,
    "RestElement": NodeKind.REST,
    "AssignmentPattern": NodeKind.ASSIGNMENT_PATTERN,
    "BlockStatement": NodeKind.BLOCK,
}


def kind_of(node: Any) -> NodeKind:
    """Classify a node; anything unrecognised (including non-nodes) is OTHER."""
    if not isinstance(node, dict):
        return NodeKind.OTHER
    return _KIND_BY_TYPE.get(node.get("type"), NodeKind.OTHER)


def is_node(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("type"), str)


def iter_children(node: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    """Yield direct child nodes in source field order."""
    for key, value in node.items():
        if key in META_KEYS:
            continue
        if isinstance(value, list):
            for element in value:
                if is_node(element):
                    yield element
        elif is_node(value):
            yield value


def literal_value(node: Any) -> Any:
    """Return the value of a Literal node; `null` literals yield None."""
    if kind_of(node) is not NodeKind.LITERAL:
        return None
    return node.get("value")


def is_string_literal(node: Any) -> bool:
    return kind_of(node) is NodeKind.LITERAL and isinstance(node.get("value"), str)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def identifier_name(node: Any) -> Optional[str]:
    if kind_of(node) is NodeKind.IDENTIFIER:
        return node.get("name")
    return None


def property_name(member: Any) -> Optional[str]:
    """Name of a non-computed `obj.name` property, otherwise None."""
    if kind_of(member) is not NodeKind.MEMBER or member.get("computed"):
        return None
    return identifier_name(member.get("property"))


class Unit:
    """An indexed, immutable snapshot of one program tree."""

    def __init__(self, root: Dict[str, Any], *, source_name: str = "<input>") -> None:
        if not isinstance(root, dict) or root.get("type") != "Program":
            raise UnitError("Expected Program node at the root.")
        self.root = root
        self.source_name = source_name
        self._parents: Dict[int, Dict[str, Any]] = {}
        self._by_type: Dict[str, List[Dict[str, Any]]] = {}
        self._order: List[Dict[str, Any]] = []
        self._index()

    def _index(self) -> None:
        stack = [self.root]
        while stack:
            node = stack.pop()
            self._order.append(node)
            self._by_type.setdefault(node["type"], []).append(node)
            children = list(iter_children(node))
            for child in children:
                self._parents[id(child)] = node
            stack.extend(reversed(children))

    # ----------------------------------------------------------------- queries

    def __len__(self) -> int:
        return len(self._order)

    def walk(self) -> Iterable[Dict[str, Any]]:
        """Every node in document (pre-)order."""
        return iter(self._order)

    def nodes(self, *types: str) -> List[Dict[str, Any]]:
        if len(types) == 1:
            return list(self._by_type.get(types[0], ()))
        wanted = set(types)
        return [node for node in self._order if node["type"] in wanted]

    def contains(self, node: Any) -> bool:
        return node is self.root or (
            isinstance(node, dict) and id(node) in self._parents
        )

    def parent(self, node: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._parents.get(id(node))

    def ancestors(self, node: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
        current = self.parent(node)
        while current is not None:
            yield current
            current = self.parent(current)

    def is_ancestor(self, ancestor: Dict[str, Any], node: Dict[str, Any]) -> bool:
        """True when `ancestor` is `node` or lies above it."""
        if ancestor is node:
            return True
        return any(candidate is ancestor for candidate in self.ancestors(node))

    def enclosing_function(self, node: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for ancestor in self.ancestors(node):
            if ancestor["type"] in FUNCTION_TYPES:
                return ancestor
        return None

    def scope_owner(self, node: Dict[str, Any]) -> Dict[str, Any]:
        """Nearest enclosing function, or the program itself."""
        return self.enclosing_function(node) or self.root

    def enclosing_block(self, node: Dict[str, Any]) -> Dict[str, Any]:
        for ancestor in self.ancestors(node):
            if ancestor["type"] in BLOCK_TYPES or ancestor["type"] in FUNCTION_TYPES:
                return ancestor
        return self.root

    def source_of(self, node: Dict[str, Any], source: str) -> Optional[str]:
        span = node.get("range")
        if not span or len(span) != 2:
            return None
        return source[span[0] : span[1]]


__all__ = [
    "BLOCK_TYPES",
    "FUNCTION_TYPES",
    "NodeKind",
    "Unit",
    "UnitError",
    "identifier_name",
    "is_node",
    "is_number",
    "is_string_literal",
    "iter_children",
    "kind_of",
    "literal_value",
    "property_name",
]
