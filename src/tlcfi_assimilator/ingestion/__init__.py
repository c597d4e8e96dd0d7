"""Ingestion layer.

This package contains adapters that read TLC-FI log lines, decode their
``UpdateState`` payloads, normalize the TLC clock and emit
:class:`~tlcfi_assimilator.models.TimestampedChangeSet` objects.
"""

from tlcfi_assimilator.ingestion.accumulate import to_change_set
from tlcfi_assimilator.ingestion.clock import ClockState, advance_clock, normalize_tick, start_clock
from tlcfi_assimilator.ingestion.decode import decode_updates, extract_tick

__all__ = [
    "ClockState",
    "advance_clock",
    "decode_updates",
    "extract_tick",
    "normalize_tick",
    "start_clock",
    "to_change_set",
]
