import pytest

from analyzer import equivalent
from parser import parse_js


def _expression(source: str):
    result = parse_js(source, source_name="equivalence.js")
    statement = result.ast["body"][0]
    return statement["expression"]


def _pair(left: str, right: str):
    return _expression(left), _expression(right)


@pytest.mark.parametrize(
    "left, right",
    [
        ("a", "a"),
        ("a.b.c", "a.b.c"),
        ("a[0]", "a[0]"),
        ("a[i]", "a[i]"),
        ("f(x, 'y')", "f(x, 'y')"),
        ("obj.method(1).other", "obj.method(1).other"),
        ("1", "1.0"),
        ("'s'", '"s"'),
        ("null", "null"),
        ("true", "true"),
    ],
)
def test_structurally_equal_expressions(left, right):
    assert equivalent(*_pair(left, right))


@pytest.mark.parametrize(
    "left, right",
    [
        ("a", "b"),
        ("a.b", "a.c"),
        ("a.b", "a['b']"),
        ("f(x)", "f(x, y)"),
        ("f(x)", "g(x)"),
        ("1", "'1'"),
        ("1", "true"),
        ("0", "false"),
        ("null", "0"),
        ("/a/", "/a/"),
        ("1 + 1", "2"),
        ("a + b", "a + b"),
        ("this.x", "this.x"),
        ("new A()", "new A()"),
    ],
)
def test_structurally_different_expressions(left, right):
    assert not equivalent(*_pair(left, right))


def test_every_node_is_equivalent_to_itself():
    for source in ("a + b", "this.x", "/a/", "new A()", "(function () {})"):
        node = _expression(source)
        assert equivalent(node, node)


def test_missing_nodes_are_not_equivalent():
    node = _expression("a")
    assert not equivalent(node, None)
    assert not equivalent(None, node)


def test_deep_member_chains_do_not_recurse():
    depth = 20000
    left = {"type": "Identifier", "name": "root"}
    right = {"type": "Identifier", "name": "root"}
    for _ in range(depth):
        prop = {"type": "Identifier", "name": "next"}
        left = {"type": "MemberExpression", "computed": False, "object": left, "property": prop}
        right = {"type": "MemberExpression", "computed": False, "object": right, "property": dict(prop)}
    assert equivalent(left, right)
    right["property"] = {"type": "Identifier", "name": "other"}
    assert not equivalent(left, right)
