"""Normalization helpers.

Centralizes the numeric/array checks applied to raw TLC-FI JSON values.
"""

from __future__ import annotations

import math
from typing import Any


def as_uint(value: Any) -> int | None:
    """Return *value* as a non-negative int, or ``None`` if it isn't one.

    JSON numbers may arrive as integral floats (``12.0``); booleans are
    never numbers here even though Python treats them as ints.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value) or not value.is_integer() or value < 0:
            return None
        return int(value)
    return None


def as_list(value: Any) -> list[Any] | None:
    """Return *value* if it is a JSON array, else ``None``."""
    if isinstance(value, list):
        return value
    return None


def dig(data: Any, *path: str) -> Any:
    """Walk nested JSON objects, returning ``None`` where the path breaks."""
    current = data
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current
