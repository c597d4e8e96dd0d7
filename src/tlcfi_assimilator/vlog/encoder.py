"""V-Log 3 message encoding.

Every V-Log message is a string of upper-case hex digits starting with a
one-byte message type.  Only the messages needed to replay TLC-FI state
updates are produced:

* ``01`` time reference
* ``04`` V-Log information (version and controller name)
* ``06`` detection information change
* ``0E`` external signal group status change

Change messages carry their time as deciseconds since the latest time
reference, in three hex digits, so a fresh time reference is inserted
every five minutes.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timedelta

from tlcfi_assimilator._constants import (
    MAX_DELTA_DS,
    MAX_ENTRY_COUNT,
    MS_PER_DECISECOND,
    MSG_DETECTOR_CHANGE,
    MSG_SIGNAL_CHANGE,
    MSG_TIME_REFERENCE,
    MSG_VLOG_INFO,
    TLC_NAME_PAD,
    TLC_NAME_UNITS,
    VLOG_VERSION,
)
from tlcfi_assimilator.config import EncoderSettings, VlogMapping
from tlcfi_assimilator.exceptions import EncodingError, UnknownNameError
from tlcfi_assimilator.models import EntityKind, TimestampedChangeSet

_logger = logging.getLogger(__name__)

_CHANGE_MESSAGE_TYPES: dict[EntityKind, int] = {
    EntityKind.SIGNAL: MSG_SIGNAL_CHANGE,
    EntityKind.DETECTOR: MSG_DETECTOR_CHANGE,
}


def time_reference(start_date_time: datetime, ms_from_beginning: int) -> str:
    """Build a time reference message for *start_date_time* + *ms_from_beginning*.

    Date and time fields are written as their decimal digits ("BCD"), so
    the year 2021 reads ``2021`` in the hex string:

    ========  ===========
    element   hex digits
    ========  ===========
    type      2
    year      4
    month     2
    day       2
    hour      2
    minute    2
    second    2
    tenths    1
    empty     1
    ========  ===========
    """
    moment = start_date_time + timedelta(milliseconds=ms_from_beginning)
    return (
        f"{MSG_TIME_REFERENCE:02X}"
        f"{moment.year:04}{moment.month:02}{moment.day:02}"
        f"{moment.hour:02}{moment.minute:02}{moment.second:02}"
        f"{moment.microsecond // 100_000:01}0"
    )


def vlog_info(tlc_name: str) -> str:
    """Build the V-Log information message: ``<type><version><tlc name>``.

    The name is written as UTF-16 code units of two hex digits each,
    truncated or padded with spaces to twenty units (``3031`` becomes
    ``3330333120202020202020202020202020202020``).
    """
    raw = tlc_name.encode("utf-16-le")
    units = [int.from_bytes(raw[i : i + 2], "little") for i in range(0, len(raw), 2)][:TLC_NAME_UNITS]
    for unit in units:
        if unit > 0xFF:
            raise EncodingError(f"TLC name {tlc_name!r} contains a character that does not fit in two hex digits")
    encoded = "".join(f"{unit:02X}" for unit in units)
    encoded += f"{TLC_NAME_PAD:02X}" * (TLC_NAME_UNITS - len(units))
    return f"{MSG_VLOG_INFO:02X}{VLOG_VERSION}{encoded}"


def split_evenly(entries: Sequence[tuple[int, int]], max_entries: int) -> list[Sequence[tuple[int, int]]]:
    """Split *entries* into as few chunks of at most *max_entries* as possible.

    Chunks are balanced, so 18 entries with a cap of 10 become 9 + 9.
    """
    if len(entries) <= max_entries:
        return [entries]
    parts = math.ceil(len(entries) / max_entries)
    size = math.ceil(len(entries) / parts)
    return [entries[i : i + size] for i in range(0, len(entries), size)]


def change_messages(
    change_set: TimestampedChangeSet,
    vlog_ids: Mapping[str, int],
    delta_ds: int,
    *,
    max_entries: int | None = None,
) -> list[str]:
    """Encode *change_set* as one or more change messages.

    The structure of both ``CHANGE_EXTERNAL_SIGNALGROUP_STATUS_WUS`` and
    ``CHANGE_DETECTION_INFORMATION``:

    ============  ===========
    description   hex digits
    ============  ===========
    type          2
    time delta    3
    data amount   1
    amount times
      id          2
      state       2
    ============  ===========

    Entries are ordered by V-Log id.  With *max_entries* set, a change set
    that does not fit is split over several messages sharing the same
    time delta.
    """
    if not 0 <= delta_ds <= MAX_DELTA_DS:
        raise EncodingError(
            f"Time delta of {delta_ds} ds at {change_set.ms_from_beginning} ms does not fit in three hex digits"
        )

    entries: list[tuple[int, int]] = []
    for name, state in zip(change_set.names, change_set.states, strict=True):
        vlog_id = vlog_ids.get(name)
        if vlog_id is None:
            raise UnknownNameError(
                f"No V-Log id mapped for {change_set.kind} {name!r} (change at {change_set.ms_from_beginning} ms)",
                kind=change_set.kind,
                name=name,
            )
        if not 0 <= vlog_id <= 0xFF:
            raise EncodingError(f"V-Log id {vlog_id} of {change_set.kind} {name!r} does not fit in two hex digits")
        entries.append((vlog_id, state.to_vlog_state()))
    # sort() is stable: equal ids keep message order.
    entries.sort(key=lambda entry: entry[0])

    chunks = split_evenly(entries, max_entries) if max_entries else [entries]
    if len(chunks) > 1:
        _logger.debug(
            "Split %d %s changes at %d ms over %d messages",
            len(entries),
            change_set.kind,
            change_set.ms_from_beginning,
            len(chunks),
        )

    message_type = _CHANGE_MESSAGE_TYPES[change_set.kind]
    messages: list[str] = []
    for chunk in chunks:
        if len(chunk) > MAX_ENTRY_COUNT:
            raise EncodingError(
                f"{len(chunk)} {change_set.kind} changes at {change_set.ms_from_beginning} ms "
                f"do not fit in one message (max {MAX_ENTRY_COUNT})"
            )
        body = "".join(f"{vlog_id:02X}{vlog_state:02X}" for vlog_id, vlog_state in chunk)
        messages.append(f"{message_type:02X}{delta_ds:03X}{len(chunk):X}{body}")
    return messages


class VlogEncoder:
    """Stateful encoder for one ordered run of change sets."""

    def __init__(
        self,
        start_date_time: datetime,
        mapping: VlogMapping,
        settings: EncoderSettings | None = None,
    ) -> None:
        self._start_date_time = start_date_time
        self._mapping = mapping
        self._settings = settings or EncoderSettings()
        self._ms_of_last_time_reference = 0

    def header(self) -> list[str]:
        """Messages every V-Log file starts with."""
        self._ms_of_last_time_reference = 0
        return [time_reference(self._start_date_time, 0), vlog_info(self._mapping.tlc_name)]

    def encode_change_set(self, change_set: TimestampedChangeSet) -> list[str]:
        """Encode one change set, preceded by a time reference when one is due."""
        messages: list[str] = []
        ms = change_set.ms_from_beginning
        elapsed = ms - self._ms_of_last_time_reference
        if elapsed < 0:
            _logger.warning(
                "Change at %d ms precedes the time reference at %d ms, inserting a new time reference",
                ms,
                self._ms_of_last_time_reference,
            )
        if elapsed < 0 or elapsed >= self._settings.time_reference_interval_ms:
            messages.append(time_reference(self._start_date_time, ms))
            _logger.debug("Time reference at %d ms: %s", ms, messages[-1])
            self._ms_of_last_time_reference = ms

        delta_ds = (ms - self._ms_of_last_time_reference) // MS_PER_DECISECOND
        split = change_set.is_signal or self._settings.split_detector_records
        messages.extend(
            change_messages(
                change_set,
                self._mapping.ids_for(change_set.kind),
                delta_ds,
                max_entries=self._settings.max_entries_per_record if split else None,
            )
        )
        return messages

    def encode(self, change_sets: Iterable[TimestampedChangeSet]) -> list[str]:
        """Encode a full run: header first, then every change set in order."""
        messages = self.header()
        for change_set in change_sets:
            messages.extend(self.encode_change_set(change_set))
        return messages


def to_vlog(
    change_sets: Iterable[TimestampedChangeSet],
    start_date_time: datetime,
    mapping: VlogMapping,
    settings: EncoderSettings | None = None,
) -> list[str]:
    """Transform ordered change sets into V-Log 3 messages.

    A time reference and the V-Log information message are inserted in
    front; further time references follow every
    :attr:`EncoderSettings.time_reference_interval_ms`.
    """
    return VlogEncoder(start_date_time, mapping, settings).encode(change_sets)
