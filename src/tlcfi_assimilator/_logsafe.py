"""Helpers for quoting records in logs and error messages.

TLC-FI payloads can carry hundreds of entities.  Diagnostics should
identify the offending record without flooding the terminal, so long
values are shortened before they are formatted.
"""

from __future__ import annotations

import json
from typing import Any


def shorten_for_log(value: Any, *, max_string: int = 256) -> str:
    """Return a single-line, length-bounded rendering of *value*."""
    if isinstance(value, str):
        text = value
    else:
        try:
            text = json.dumps(value, separators=(",", ":"), default=repr)
        except (TypeError, ValueError):
            text = repr(value)
    text = text.replace("\r", "\\r").replace("\n", "\\n")
    if len(text) > max_string:
        return f"{text[:max_string]}…<truncated {len(text) - max_string} chars>"
    return text
