import pytest

from humptykit.method import Method


def test_parse_get():
    assert Method.parse("GET") == Method.GET


@pytest.mark.parametrize("verb", ["GET", "HEAD", "POST", "PUT", "DELETE", "OPTIONS", "TRACE", "PATCH"])
def test_well_known_round_trip(verb):
    method = Method.parse(verb)
    assert method.is_well_known()
    assert not method.is_custom()
    assert method.as_str() == verb
    assert str(method) == verb
    assert method.well_known_str() == verb


def test_custom_method_is_upper_cased():
    method = Method.parse("query")
    assert method.is_custom()
    assert method.as_str() == "QUERY"
    assert method.well_known_str() is None
    assert method == Method.parse("QUERY")


def test_lower_case_well_known_verb_is_custom():
    method = Method.parse("get")
    assert method.is_custom()
    assert method != Method.GET
    assert method.as_str() == "GET"


def test_well_known_list():
    methods = Method.well_known()
    assert len(methods) == 8
    assert all(m.is_well_known() for m in methods)
    assert methods[0] == Method.GET
    assert methods[-1] == Method.PATCH


def test_ordering_follows_declaration_then_custom():
    unordered = [Method.parse("QUERY"), Method.PATCH, Method.GET, Method.POST]
    assert sorted(unordered) == [Method.GET, Method.POST, Method.PATCH, Method.parse("QUERY")]
    assert Method.GET < Method.HEAD
    assert Method.parse("AAA") < Method.parse("ZZZ")
    assert Method.PATCH < Method.parse("AAA")


def test_hash_consistent_with_equality():
    assert {Method.parse("POST"), Method.POST, Method.parse("query"), Method.parse("QUERY")} == {
        Method.POST,
        Method.parse("QUERY"),
    }


def test_parse_accepts_method():
    assert Method.parse(Method.PUT) is Method.PUT