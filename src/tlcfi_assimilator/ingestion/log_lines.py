"""TLC-FI log line adapter.

The logger writes lines such as::

    2021-10-15 16:07:42,994 INFO tlcFiMessages:41 - IN - {"jsonrpc":"2.0",...}

Splitting on ``"- "`` yields the log prefix (with the timestamp), the
message direction and the JSON-RPC payload.  Only ``IN`` messages, sent
by the TLC, carry state updates we care about.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from tlcfi_assimilator._logsafe import shorten_for_log
from tlcfi_assimilator.exceptions import LogLineError

_SEPARATOR = "- "
_LOG_TIMESTAMP_LEN = len("2021-12-15 11:00:00,074")
_ISO_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"


@dataclasses.dataclass(frozen=True)
class LogRecord:
    """One split log line."""

    prefix: str
    direction: str
    payload: str

    @property
    def is_inbound(self) -> bool:
        return "IN" in self.direction

    def parse_payload(self) -> Any:
        """Return the JSON payload, raising :class:`LogLineError` when it isn't JSON."""
        try:
            return json.loads(self.payload)
        except json.JSONDecodeError as exc:
            raise LogLineError(
                f"Payload is not JSON: {shorten_for_log(self.payload)}",
                line=self.payload,
            ) from exc


def split_log_line(line: str) -> LogRecord:
    """Split a raw log line into prefix, direction and payload."""
    filtered = line.replace('""', '"')
    parts = filtered.split(_SEPARATOR)
    if len(parts) != 3:
        raise LogLineError(
            f"Line could not be split by '{_SEPARATOR}' into three parts: {shorten_for_log(line)}",
            line=line,
        )
    prefix, direction, payload = parts
    return LogRecord(prefix=prefix, direction=direction, payload=payload)


def sort_lines(lines: Iterable[str], chronological: bool) -> list[str]:
    """Return *lines* oldest first; TLC-FI logs are newest first unless *chronological*."""
    ordered = [line.rstrip("\r\n") for line in lines]
    if not chronological:
        ordered.reverse()
    return ordered


def parse_date_time(text: str) -> datetime:
    """Parse an ISO 8601 timestamp with milliseconds, e.g. ``2021-12-15T11:00:00.000``."""
    try:
        parsed = datetime.strptime(text, _ISO_FORMAT)
    except ValueError as exc:
        raise LogLineError(f"Failed to transform {text!r} into a date time: {exc}", line=text) from exc
    # Exactly three fractional digits.
    if len(text.rpartition(".")[2]) != 3:
        raise LogLineError(f"Failed to transform {text!r} into a date time: expected milliseconds", line=text)
    return parsed


def start_date_time_from_lines(lines: Iterable[str]) -> datetime:
    """Take the start time from the first log line in *lines*."""
    stamp = ""
    for line in lines:
        if len(line) >= _LOG_TIMESTAMP_LEN and len(line.split(_SEPARATOR)) == 3:
            stamp = line[:_LOG_TIMESTAMP_LEN]
            break
    if not stamp:
        raise LogLineError("No log line with a timestamp found; pass the start date time explicitly")
    return parse_date_time(stamp.replace(",", ".").replace(" ", "T"))
