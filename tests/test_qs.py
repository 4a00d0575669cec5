"""Tests for nested query-string serialization."""

from dino_http.qs import flatten, stringify


def test_flatten_nested_mapping():
    assert flatten({"a": 1, "b": {"c": [1, 2]}}) == [("a", 1), ("b[c]", 1), ("b[c]", 2)]


def test_flatten_list_of_mappings_uses_indices():
    assert flatten({"items": [{"id": 1}, {"id": 2}]}) == [("items[0][id]", 1), ("items[1][id]", 2)]


def test_flatten_skips_none_and_encodes_bools():
    assert flatten({"a": None, "b": True, "c": False}) == [("b", "true"), ("c", "false")]


def test_stringify():
    assert stringify({"a": 1, "b": {"c": 2}}) == "a=1&b%5Bc%5D=2"
    assert stringify({"q": "a b"}) == "q=a+b"
    assert stringify("already=encoded") == "already=encoded"
    assert stringify(None) == ""
