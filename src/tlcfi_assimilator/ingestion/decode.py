"""TLC-FI ``UpdateState`` decoding.

Turns one parsed JSON-RPC payload, e.g.::

    {"jsonrpc": "2.0", "method": "UpdateState",
     "params": {"ticks": 4087808637,
                "update": [{"objects": {"ids": ["D713"], "type": 4},
                            "states": [{"state": 1}]}]}}

into typed :class:`~tlcfi_assimilator.models.Update` objects.  Only
signal groups (``type`` 3) and detectors (``type`` 4) are understood;
other object types are skipped so newer TLC-FI messages do not break a run.
"""

from __future__ import annotations

import logging
from typing import Any

from tlcfi_assimilator._constants import MAX_TICK
from tlcfi_assimilator._logsafe import shorten_for_log
from tlcfi_assimilator.exceptions import (
    LengthMismatchError,
    MalformedNameError,
    MalformedStateError,
    MissingTickError,
)
from tlcfi_assimilator.ingestion.normalize import as_list, as_uint, dig
from tlcfi_assimilator.models import EntityKind, Update

_logger = logging.getLogger(__name__)


def extract_tick(payload: Any) -> int:
    """Return ``params.ticks`` of *payload*.

    Raises :class:`MissingTickError` when it is absent or not an unsigned
    32-bit integer.
    """
    tick = as_uint(dig(payload, "params", "ticks"))
    if tick is None or tick > MAX_TICK:
        raise MissingTickError(
            f"No valid tick in TLC-FI message: {shorten_for_log(payload)}",
            payload=payload,
        )
    return tick


def decode_updates(payload: Any) -> list[Update]:
    """Decode every supported element of ``params.update``.

    All returned updates share the payload's tick.  An empty list means
    the message carried nothing this tool understands.
    """
    tick = extract_tick(payload)
    elements = as_list(dig(payload, "params", "update")) or []

    updates: list[Update] = []
    for element in elements:
        tlcfi_type = dig(element, "objects", "type")
        kind = EntityKind.from_tlcfi_type(tlcfi_type)
        if kind is None:
            _logger.debug("Skipping unsupported TLC-FI object type %r", tlcfi_type)
            continue
        updates.append(Update(tick=tick, kind=kind, entries=_decode_entries(element, payload)))
    return updates


def _decode_entries(element: Any, payload: Any) -> list[tuple[str, int]]:
    ids = dig(element, "objects", "ids")
    if ids is None:
        return []
    if not isinstance(ids, list):
        raise MalformedNameError(
            f"'objects.ids' is not an array in TLC-FI message: {shorten_for_log(payload)}",
            payload=payload,
        )

    raw_states = dig(element, "states")
    if raw_states is None:
        raw_states = []
    elif not isinstance(raw_states, list):
        raise MalformedStateError(
            f"'states' is not an array in TLC-FI message: {shorten_for_log(payload)}",
            payload=payload,
        )

    if len(ids) != len(raw_states):
        raise LengthMismatchError(
            f"Expected as many ids as states, got {len(ids)} ids and {len(raw_states)} states "
            f"in TLC-FI message: {shorten_for_log(payload)}",
            payload=payload,
        )

    entries: list[tuple[str, int]] = []
    for name, state_obj in zip(ids, raw_states, strict=True):
        if not isinstance(name, str):
            raise MalformedNameError(
                f"Entity id {name!r} is not a string in TLC-FI message: {shorten_for_log(payload)}",
                payload=payload,
            )
        code = _decode_state(state_obj, payload)
        if code is None:
            # No change reported for this entity.
            continue
        entries.append((name, code))
    return entries


def _decode_state(state_obj: Any, payload: Any) -> int | None:
    if state_obj is None:
        return None
    if not isinstance(state_obj, dict):
        raise MalformedStateError(
            f"State entry {shorten_for_log(state_obj, max_string=64)} is not an object "
            f"in TLC-FI message: {shorten_for_log(payload)}",
            payload=payload,
        )
    raw = state_obj.get("state")
    if raw is None:
        return None
    code = as_uint(raw)
    if code is None:
        raise MalformedStateError(
            f"State value {raw!r} is neither an integer nor null in TLC-FI message: {shorten_for_log(payload)}",
            payload=payload,
        )
    return code
