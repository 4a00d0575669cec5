"""Small helpers shared across dino-http."""

from __future__ import annotations

import inspect
from collections.abc import Iterable
from typing import Any, TypeVar

T = TypeVar("T")


def as_array(value: T | Iterable[T] | None) -> list[T]:
    """Normalize ``T | Iterable[T] | None`` into a list.

    Strings, bytes and mappings count as single values.

    Example:
        >>> as_array(0)
        [0]
        >>> as_array([630, 631])
        [630, 631]
        >>> as_array(None)
        []
    """
    if value is None:
        return []
    if isinstance(value, (str, bytes, dict)) or not isinstance(value, Iterable):
        return [value]  # type: ignore[list-item]
    return list(value)


async def resolve_value(value: Any, *args: Any) -> Any:
    """Resolve a plain value, a callable, or an awaitable.

    Callables are invoked with ``args``; if the result (or ``value`` itself)
    is awaitable it is awaited.

    Example:
        >>> await resolve_value(lambda: "a")
        'a'
        >>> async def token():
        ...     return "b"
        >>> await resolve_value(token)
        'b'
    """
    if callable(value):
        value = value(*args)
    if inspect.isawaitable(value):
        value = await value
    return value
