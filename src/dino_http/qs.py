"""Nested query-string serialization.

Flattens nested mappings into bracket notation (``a[b]=1``) so nested query
parameters and form-urlencoded bodies survive the trip to a backend that
parses them the same way.

Rules:
    - ``None`` values are skipped
    - booleans become ``true``/``false``
    - lists of scalars repeat the key (``ids=1&ids=2``)
    - lists containing mappings or lists use indices (``a[0][b]=1``)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode


def _scalar(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def flatten(value: Any, prefix: str = "") -> list[tuple[str, Any]]:
    """Flatten ``value`` into ``(key, scalar)`` pairs.

    Example:
        >>> flatten({"a": 1, "b": {"c": [1, 2]}})
        [('a', 1), ('b[c]', 1), ('b[c]', 2)]
    """
    pairs: list[tuple[str, Any]] = []

    if isinstance(value, Mapping):
        for key, item in value.items():
            name = f"{prefix}[{key}]" if prefix else str(key)
            pairs.extend(flatten(item, name))
    elif isinstance(value, (list, tuple)):
        nested = any(isinstance(item, (Mapping, list, tuple)) for item in value)
        for index, item in enumerate(value):
            pairs.extend(flatten(item, f"{prefix}[{index}]" if nested else prefix))
    elif value is not None:
        pairs.append((prefix, _scalar(value)))

    return pairs


def stringify(value: Any) -> str:
    """Serialize ``value`` as an ``application/x-www-form-urlencoded`` string."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return urlencode(flatten(value))
