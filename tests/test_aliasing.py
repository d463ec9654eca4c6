import logging

import pytest

from analyzer import AnalysisOptions, is_wrapper_call
from frontend import run_frontend

WRAP = AnalysisOptions(wrapper_callees=frozenset({"wrap"}))


def _session(source: str, options=None):
    result = run_frontend(source, source_name="aliasing.js", options=options)
    assert result.session is not None
    return result.session


def _wrapper_call(session, callee: str = "$", index: int = 0):
    calls = [
        node
        for node in session.unit.nodes("CallExpression")
        if (node.get("callee") or {}).get("name") == callee
    ]
    return calls[index]


def test_single_wrap_with_member_use_resolves():
    session = _session("function f(node) { let el = wrap(node); use(el.prop); }", WRAP)
    target = session.resolve_alias("el")
    assert target is not None
    assert target["type"] == "Identifier"
    assert target["name"] == "node"


def test_reassignment_with_different_argument_is_unresolved():
    session = _session("function f(node, other) { let el = wrap(node); el = wrap(other); }", WRAP)
    assert session.resolve_alias("el") is None


def test_agreeing_initialisers_resolve_to_first_argument():
    source = "function f(ctx) { var el = $(ctx.node); el.show(); el = $(ctx.node); el.hide(); }"
    session = _session(source)
    target = session.resolve_alias("el")
    assert target is _wrapper_call(session)["arguments"][0]


def test_assignment_without_declaration_resolves():
    session = _session("el = $(node); el.hide();")
    assert session.resolve_alias("el")["name"] == "node"


def test_jquery_is_a_default_wrapper():
    session = _session("function f(node) { var el = jQuery(node); el.hide(); }")
    assert session.resolve_alias("el")["name"] == "node"


@pytest.mark.parametrize(
    "source",
    [
        "function f(node) { var el = $(node); use(el); }",
        "function f(node) { var el = $(node); return el; }",
        "function f(node) { var el = $(node); el++; }",
        "function f(node) { var el = $(node); el += 1; }",
        "function f(node) { var el = other(node); el.hide(); }",
        "function f(node, ctx) { var el = $(node, ctx); el.hide(); }",
        "function f(nodes) { var el = $(...nodes); el.hide(); }",
        "function f(node) { var el; el = $(node); el.hide(); }",
        "function f(node) { var el = $(node); el = node; }",
        "function f(node) { var [el] = $(node); }",
        "function el() {} var el = $(node);",
        "var $el = $(node); $el.hide();",
        "function f(node) { var el = $(node); obj[el] = 1; }",
    ],
)
def test_unprovable_aliases_are_unresolved(source):
    session = _session(source)
    name = "$el" if "$el" in source else "el"
    assert session.resolve_alias(name) is None


def test_function_local_dollar_name_resolves():
    session = _session("function f(node) { var $el = $(node); $el.hide(); }")
    assert session.resolve_alias("$el")["name"] == "node"


def test_unknown_or_empty_name_is_unresolved():
    session = _session("var x = 1;")
    assert session.resolve_alias("missing") is None
    assert session.resolve_alias("") is None


def test_answers_are_memoised_including_failures():
    session = _session("function f(node) { var el = $(node); el.hide(); var bad = $(node); use(bad); }")
    first = session.resolve_alias("el")
    assert session.alias_cache["el"] is first
    assert session.resolve_alias("el") is first
    assert session.resolve_alias("bad") is None
    assert "bad" in session.alias_cache


def test_is_wrapper_call_shapes():
    session = _session("$(a); $(a, b); $(); other(a); $.ajax(a);")
    calls = session.unit.nodes("CallExpression")
    callees = {"$"}
    assert [is_wrapper_call(call, callees) for call in calls] == [True, False, False, False, False]
    assert not is_wrapper_call(None, callees)


def test_is_wrapped_value():
    session = _session("function f(node) { var el = $(node); el.hide(); var raw = node; use(raw); }")
    assert session.is_wrapped_value(_wrapper_call(session))
    assert session.is_wrapped_value({"type": "Identifier", "name": "el"})
    assert not session.is_wrapped_value({"type": "Identifier", "name": "raw"})
    assert not session.is_wrapped_value({"type": "Literal", "value": 1, "raw": "1"})


def test_unused_initialiser_is_safe():
    session = _session("function f(node) { var el = $(node); }")
    assert session.is_safe_initializer(_wrapper_call(session))


def test_resolvable_initialiser_is_safe():
    session = _session("function f(node) { var el = $(node); el.hide(); }")
    assert session.is_safe_initializer(_wrapper_call(session))


def test_escaping_initialiser_is_unsafe():
    session = _session("function f(node) { var el = $(node); use(el); }")
    assert not session.is_safe_initializer(_wrapper_call(session))


def test_top_level_dollar_initialiser_is_unsafe():
    session = _session("var $el = $(node);")
    assert not session.is_safe_initializer(_wrapper_call(session))


def test_assigned_wrapper_call():
    session = _session("function f(node) { var el = $(node); el = $(node); el.hide(); $x = $(node); }")
    assert session.is_safe_initializer(_wrapper_call(session, index=1))
    assert not session.is_safe_initializer(_wrapper_call(session, index=2))


def test_standalone_wrapper_call_is_safe():
    session = _session("$(node).hide();")
    assert session.is_safe_initializer(_wrapper_call(session))


def test_cache_hits_and_misses_are_logged(caplog):
    session = _session("function f(node) { var el = $(node); el.hide(); }")
    with caplog.at_level(logging.DEBUG, logger="analyzer.aliasing"):
        session.resolve_alias("el")
        session.resolve_alias("el")
    messages = [record.getMessage() for record in caplog.records]
    assert any("alias cache miss for 'el'" in message for message in messages)
    assert any("alias cache hit for 'el'" in message for message in messages)
