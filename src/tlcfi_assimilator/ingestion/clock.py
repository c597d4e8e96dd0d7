"""TLC tick normalization.

The TLC reports time as a free-running 32-bit millisecond counter.  This
module turns those ticks into "milliseconds since the first processed
message" while coping with the counter wrapping at ``2**32 - 1`` and with
controller restarts that reset it.

The clock context is an explicit :class:`ClockState` owned by the caller
and threaded through every call; there is no module-level state.

.. note::

   In the regular (non-wrapping) branch the ``bonus_ms`` accumulated by an
   earlier overflow or reset is *not* added to the result.  Only the
   message at the wrap/reset point carries the accumulated offset; later
   messages are measured from the new ``first_tick`` again, so the
   timeline restarts near zero.  This mirrors the behaviour of the tool
   whose output we must match and is covered by
   ``test_offset_is_not_carried_after_reset``.
"""

from __future__ import annotations

import dataclasses
import logging

from tlcfi_assimilator._constants import MAX_TICK, OVERFLOW_WINDOW_MS
from tlcfi_assimilator.exceptions import NormalizeBeforeInitError

_logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ClockState:
    """Mutable clock context for one batch run."""

    first_tick: int | None = None
    previous_tick: int | None = None
    bonus_ms: int | None = None

    @property
    def is_running(self) -> bool:
        return self.first_tick is not None


def start_clock(state: ClockState, tick: int) -> int:
    """Anchor *state* at *tick*; the anchoring message is at 0 ms."""
    state.first_tick = tick
    state.previous_tick = tick
    state.bonus_ms = 0
    return 0


def normalize_tick(state: ClockState, tick: int) -> int:
    """Return the milliseconds elapsed at *tick* and advance *state*.

    Raises :class:`NormalizeBeforeInitError` when *state* was never started.
    """
    if state.first_tick is None or state.previous_tick is None:
        raise NormalizeBeforeInitError(
            f"Cannot normalize tick {tick}: the clock has no first tick yet, call start_clock() first"
        )

    if tick >= state.first_tick:
        ms_from_beginning = tick - state.first_tick
    elif MAX_TICK - state.previous_tick < OVERFLOW_WINDOW_MS:
        state.bonus_ms = MAX_TICK - state.first_tick
        _logger.warning(
            "TLC tick overflowed (%d -> %d), %d ms carried over",
            state.previous_tick,
            tick,
            state.bonus_ms,
        )
        state.first_tick = tick
        ms_from_beginning = state.bonus_ms + tick
    else:
        state.bonus_ms = state.previous_tick - state.first_tick
        _logger.warning(
            "TLC tick jumped back from %d to %d, assuming a controller reset after %d ms",
            state.previous_tick,
            tick,
            state.bonus_ms,
        )
        state.first_tick = tick
        ms_from_beginning = state.bonus_ms

    state.previous_tick = tick
    return ms_from_beginning


def advance_clock(state: ClockState, tick: int) -> int:
    """Start *state* on its first tick, normalize every later one."""
    if not state.is_running:
        return start_clock(state, tick)
    return normalize_tick(state, tick)
