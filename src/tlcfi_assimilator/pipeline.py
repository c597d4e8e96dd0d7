"""Batch conversion of a TLC-FI log into a V-Log file.

The pipeline is strictly sequential: lines are put in chronological
order, inbound payloads are decoded, their ticks normalized against one
:class:`~tlcfi_assimilator.ingestion.clock.ClockState`, and the resulting
change sets are encoded in a single pass.

Malformed lines and payloads are logged and dropped.  Length mismatches,
unknown state codes, unmapped names and field overflows abort the run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

from tlcfi_assimilator.config import AssimilatorConfig, VlogMapping
from tlcfi_assimilator.exceptions import (
    ConfigError,
    LogLineError,
    MalformedNameError,
    MalformedStateError,
    MissingTickError,
)
from tlcfi_assimilator.ingestion import (
    ClockState,
    advance_clock,
    decode_updates,
    extract_tick,
    start_clock,
    to_change_set,
)
from tlcfi_assimilator.ingestion.log_lines import sort_lines, split_log_line, start_date_time_from_lines
from tlcfi_assimilator.models import TimestampedChangeSet
from tlcfi_assimilator.vlog import to_vlog

_logger = logging.getLogger(__name__)


def inbound_payloads(lines: Iterable[str]) -> Iterator[Any]:
    """Yield the parsed JSON payload of every ``IN`` log line."""
    for line in lines:
        if not line.strip():
            _logger.debug("Skipping empty log line")
            continue
        try:
            record = split_log_line(line)
            if not record.is_inbound:
                continue
            yield record.parse_payload()
        except LogLineError as exc:
            _logger.warning("Skipping log line: %s", exc)


def assimilate_payloads(payloads: Iterable[Any]) -> list[TimestampedChangeSet]:
    """Turn chronologically ordered TLC-FI payloads into change sets.

    The first payload carrying a valid tick starts the clock, whatever it
    updates.  Every later payload holding a signal or detector update
    advances it exactly once.
    """
    clock = ClockState()
    change_sets: list[TimestampedChangeSet] = []
    for payload in payloads:
        if not clock.is_running:
            try:
                start_clock(clock, extract_tick(payload))
            except MissingTickError as exc:
                _logger.warning("Skipping TLC-FI message before the first tick: %s", exc)
                continue
        try:
            updates = decode_updates(payload)
        except (MissingTickError, MalformedStateError, MalformedNameError) as exc:
            _logger.warning("Skipping TLC-FI message: %s", exc)
            continue
        if not updates:
            continue

        ms_from_beginning = advance_clock(clock, updates[0].tick)
        for update in updates:
            change_set = to_change_set(update, ms_from_beginning)
            if change_set is not None:
                change_sets.append(change_set)
    return change_sets


def assimilate_lines(lines: Iterable[str]) -> list[TimestampedChangeSet]:
    """Turn chronologically ordered log lines into change sets."""
    return assimilate_payloads(inbound_payloads(lines))


def create_file_name(tlc_name: str, start_date_time: datetime) -> str:
    """Return ``<tlc name>_<YYYYMMDD>_<HHMMSS>.vlg``; milliseconds are dropped."""
    return f"{tlc_name}_{start_date_time:%Y%m%d}_{start_date_time:%H%M%S}.vlg"


def write_vlog(path: Path, messages: Iterable[str]) -> None:
    """Write one message per line, CRLF terminated."""
    with path.open("w", encoding="ascii", newline="") as handle:
        for message in messages:
            handle.write(f"{message}\r\n")


def read_log_lines(path: str | Path, chronological: bool) -> list[str]:
    """Read the TLC-FI log; lines that are not valid UTF-8 are logged and skipped."""
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise ConfigError(f"Couldn't open the TLC-FI log {str(path)!r}: {exc}") from exc

    lines: list[str] = []
    for number, raw_line in enumerate(raw.splitlines(), start=1):
        try:
            lines.append(raw_line.decode("utf-8"))
        except UnicodeDecodeError as exc:
            _logger.warning("Skipping line %d of %s, not valid UTF-8: %s", number, path, exc)
    return sort_lines(lines, chronological)


def run(config: AssimilatorConfig) -> Path:
    """Convert ``config.tlcfi_log_file`` and return the path of the written V-Log file."""
    lines = read_log_lines(config.tlcfi_log_file, config.chronological)
    start_date_time = config.start_date_time or start_date_time_from_lines(lines)
    mapping = VlogMapping.from_file(config.mapping_file)

    change_sets = assimilate_lines(lines)
    messages = to_vlog(change_sets, start_date_time, mapping, config.encoder)

    output = Path(config.output_dir) / create_file_name(mapping.tlc_name, start_date_time)
    write_vlog(output, messages)
    _logger.info(
        "Converted %d log lines into %d change sets and %d V-Log messages: %s",
        len(lines),
        len(change_sets),
        len(messages),
        output,
    )
    return output
