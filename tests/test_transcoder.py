"""Tests for the key-casing transcoder."""

import datetime
import re

import pytest

from dino_http.transcoder import to_camel_object, to_snake_object, transcode_keys


def test_camel_nested_structures():
    """Keys are renamed at every depth, including inside lists."""
    source = {"user_name": "dino", "tags": [{"tag_id": 1}, {"tag_id": 2}], "meta_info": {"created_at": 1}}

    assert to_camel_object(source) == {
        "userName": "dino",
        "tags": [{"tagId": 1}, {"tagId": 2}],
        "metaInfo": {"createdAt": 1},
    }


def test_snake_nested_structures():
    source = [{"userAge": 18, "homeAddress": {"zipCode": "123"}}]

    assert to_snake_object(source) == [{"user_age": 18, "home_address": {"zip_code": "123"}}]


def test_reserved_keys_are_preserved_at_depth():
    """Keys starting with @ keep their name, but their values are transcoded."""
    source = {"outer_key": {"@type": {"inner_key": 1}, "@user_name": "x"}}

    result = to_camel_object(source)

    assert result == {"outerKey": {"@type": {"innerKey": 1}, "@user_name": "x"}}


@pytest.mark.parametrize(
    "value",
    [None, "user_name", 42, 3.5, True, datetime.date(2024, 1, 1), re.compile("a_b")],
)
def test_non_structured_values_unchanged(value):
    assert to_camel_object(value) is value
    assert to_snake_object(value) is value


def test_round_trip_of_snake_data():
    source = {"user_id": 1, "profile": {"display_name": "d", "items": [{"item_no": 2}]}}

    assert to_snake_object(to_camel_object(source)) == source


def test_single_word_keys_are_fixed_points():
    source = {"id": 1, "name": "n", "data": [{"code": 0}]}

    assert to_camel_object(source) == source
    assert to_snake_object(source) == source


def test_source_not_mutated():
    source = {"user_name": {"first_name": "a"}}

    to_camel_object(source)

    assert source == {"user_name": {"first_name": "a"}}


def test_tuples_and_non_string_keys():
    result = transcode_keys({1: ({"a_b": 1},)}, str.upper)

    assert result == {1: ({"A_B": 1},)}


@pytest.mark.parametrize(
    "key, expected",
    [
        ("UserName", "userName"),
        ("HTTPStatus", "httpStatus"),
        ("user-name", "userName"),
        ("userName", "userName"),
        ("user_name", "userName"),
    ],
)
def test_camel_handles_any_key_shape(key, expected):
    assert to_camel_object({key: 1}) == {expected: 1}


def test_snake_preserves_reserved_keys_at_depth():
    source = {"outerKey": [{"@rawKey": {"innerKey": 1}}]}

    assert to_snake_object(source) == {"outer_key": [{"@rawKey": {"inner_key": 1}}]}


def test_round_trip_of_camel_data():
    source = {"userName": {"@rawKey": {"innerKey": 1}}, "createdAt": 2, "tags": [{"tagId": 3}]}

    assert to_camel_object(to_snake_object(source)) == source
