"""Recursive key-casing transcoder.

Converts the keys of plain structured data between the wire convention
(snake_case, used for outbound query parameters and bodies) and the
application convention (camelCase, used for inbound bodies).

Only mappings and sequences are walked. Everything else - ``None``, text,
numbers, booleans, dates, compiled patterns, callables and arbitrary
objects - is returned unchanged. Keys starting with ``@`` are never
renamed; only their values are transcoded.

Example:
    >>> to_camel_object({"user_name": "dinos", "@type": {"sub_type": 1}})
    {'userName': 'dinos', '@type': {'subType': 1}}
    >>> to_snake_object([{"userAge": 18}])
    [{'user_age': 18}]
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

from pydantic.alias_generators import to_camel, to_snake

RESERVED_KEY_MARKER = "@"


def transcode_keys(source: Any, rename: Callable[[str], str]) -> Any:
    """Rename mapping keys recursively with ``rename``.

    Shared by both directions so they cannot drift apart.

    Args:
        source: Value to transcode
        rename: Key conversion applied to every non-reserved string key

    Returns:
        A new structure; ``source`` is never modified.
    """
    if isinstance(source, Mapping):
        result = {}
        for key, value in source.items():
            if isinstance(key, str) and not key.startswith(RESERVED_KEY_MARKER):
                key = rename(key)
            result[key] = transcode_keys(value, rename)
        return result

    if isinstance(source, list):
        return [transcode_keys(item, rename) for item in source]
    if isinstance(source, tuple):
        return tuple(transcode_keys(item, rename) for item in source)

    return source


def to_camel_key(key: str) -> str:
    """Convert a single key to camelCase.

    Keys are normalized to snake_case first, so PascalCase, acronyms and
    kebab-case keys convert too (``HTTPStatus`` -> ``httpStatus``).
    """
    return to_camel(to_snake(key))


def to_snake_key(key: str) -> str:
    """Convert a single key to snake_case."""
    return to_snake(key)


def to_camel_object(source: Any) -> Any:
    """Recursively convert keys to camelCase (wire -> application)."""
    return transcode_keys(source, to_camel_key)


def to_snake_object(source: Any) -> Any:
    """Recursively convert keys to snake_case (application -> wire)."""
    return transcode_keys(source, to_snake_key)
