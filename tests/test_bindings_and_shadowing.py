from typing import List

from analyzer import DeclarationKind, WriteKind
from frontend import run_frontend

CATALOG_SOURCE = """
var a = 1;
let b = 2;
const c = 3;
function d(e, { f }, ...g) {
  try { run(); } catch (h) { report(h); }
}
class K {}
a = 4;
b++;
for (loose in obj) {}
obj.a = a;
({ a: 1 });
"""


def _session(source: str):
    result = run_frontend(source, source_name="bindings.js")
    assert result.session is not None
    return result.session


def _kinds(session, name: str) -> List[DeclarationKind]:
    return [binding.kind for binding in session.catalog.bindings_of(name)]


def test_catalog_records_declaration_kinds():
    session = _session(CATALOG_SOURCE)
    assert _kinds(session, "a") == [DeclarationKind.VAR]
    assert _kinds(session, "b") == [DeclarationKind.LET]
    assert _kinds(session, "c") == [DeclarationKind.CONST]
    assert _kinds(session, "d") == [DeclarationKind.FUNCTION]
    for name in ("e", "f", "g"):
        assert _kinds(session, name) == [DeclarationKind.PARAMETER]
    assert _kinds(session, "h") == [DeclarationKind.CATCH_PARAMETER]
    assert _kinds(session, "K") == [DeclarationKind.CLASS]
    assert session.catalog.bindings_of("never") == ()


def test_declaration_kind_scoping():
    assert DeclarationKind.VAR.is_function_scoped
    assert DeclarationKind.FUNCTION.is_function_scoped
    assert not DeclarationKind.LET.is_function_scoped
    assert DeclarationKind.CONST.is_block_scoped
    assert not DeclarationKind.PARAMETER.is_block_scoped


def test_catalog_records_writes():
    session = _session(CATALOG_SOURCE)
    catalog = session.catalog
    assert [write.kind for write in catalog.writes_of("a")] == [WriteKind.ASSIGNMENT]
    assert [write.kind for write in catalog.updates_of("b")] == [WriteKind.UPDATE]
    assert [write.kind for write in catalog.assignments_of("loose")] == [WriteKind.LOOP_TARGET]
    assert catalog.writes_of("c") == ()
    assert catalog.assignments_of("a")[0].loc.line == 9


def test_references_skip_property_names():
    session = _session(CATALOG_SOURCE)
    references = session.catalog.references_of("a")
    # `var a`, `a = 4` and the right-hand side of `obj.a = a`.
    assert len(references) == 3
    assert "a" in session.catalog.names()


def test_declarator_bindings():
    session = _session("var { x, y: [z] } = obj;")
    declarator = session.unit.nodes("VariableDeclarator")[0]
    names = sorted(binding.name for binding in session.catalog.declarator_bindings(declarator))
    assert names == ["x", "z"]


def _first_assignment(session, name: str):
    for node in session.unit.nodes("AssignmentExpression"):
        left = node.get("left") or {}
        if left.get("name") == name:
            return node
    raise AssertionError(f"no assignment to {name}")


def _declarator(session, name: str, index: int = 0):
    matches = [
        node
        for node in session.unit.nodes("VariableDeclarator")
        if (node.get("id") or {}).get("name") == name
    ]
    return matches[index]


def test_parameter_shadows_assignment():
    session = _session("let x = 1; function f(x) { x = 2; }")
    assert session.is_shadowed(_first_assignment(session, "x"), "x", _declarator(session, "x"))


def test_same_scope_assignment_is_not_shadowed():
    session = _session("let x = 1; x = 2;")
    assert not session.is_shadowed(_first_assignment(session, "x"), "x", _declarator(session, "x"))


def test_nested_function_var_shadows():
    session = _session("var x = 1; function f() { var x = 2; x = 3; }")
    outer = _declarator(session, "x", 0)
    inner = _declarator(session, "x", 1)
    assignment = _first_assignment(session, "x")
    assert session.is_shadowed(assignment, "x", outer)
    assert not session.is_shadowed(assignment, "x", inner)


def test_declaration_in_sibling_function_does_not_shadow():
    session = _session("var x = 1; function f() { x = 2; } function g() { var x; }")
    assert not session.is_shadowed(_first_assignment(session, "x"), "x", _declarator(session, "x"))


def test_deeper_function_reaches_home_scope():
    session = _session("function outer() { var x = 1; function inner() { return function () { x = 2; }; } }")
    assert not session.is_shadowed(_first_assignment(session, "x"), "x", _declarator(session, "x"))


def test_block_scoped_declaration_only_shadows_inside_its_block():
    source = "function f() { var x = 1; { let x = 2; } x = 3; }"
    session = _session(source)
    assert not session.is_shadowed(_first_assignment(session, "x"), "x", _declarator(session, "x"))


def test_catch_parameter_shadows():
    session = _session("var err = null; try { run(); } catch (err) { err = 1; }")
    assert session.is_shadowed(_first_assignment(session, "err"), "err", _declarator(session, "err"))


def test_foreign_nodes_are_not_shadowed():
    session = _session("var x = 1;")
    stray = {"type": "AssignmentExpression", "operator": "="}
    assert not session.is_shadowed(stray, "x", _declarator(session, "x"))
