"""Entity kinds and state enums.

Each state enum carries two closed tables: TLC-FI raw code -> member
(applied when updates are accumulated) and member -> V-Log state code
(applied when records are encoded).
"""

from __future__ import annotations

import enum

from tlcfi_assimilator._constants import TLCFI_TYPE_DETECTOR, TLCFI_TYPE_SIGNAL
from tlcfi_assimilator.exceptions import UnknownStateCodeError


class EntityKind(enum.StrEnum):
    """Kind of TLC entity an update reports on."""

    SIGNAL = "signal"
    DETECTOR = "detector"

    @classmethod
    def from_tlcfi_type(cls, value: object) -> EntityKind | None:
        """Map a TLC-FI ``objects.type`` value, ``None`` for unsupported types."""
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        if value == TLCFI_TYPE_SIGNAL:
            return cls.SIGNAL
        if value == TLCFI_TYPE_DETECTOR:
            return cls.DETECTOR
        return None


class SignalState(enum.StrEnum):
    """Signal group aspect."""

    UNAVAILABLE = "unavailable"
    DARK = "dark"
    RED = "red"
    AMBER = "amber"
    GREEN = "green"
    AMBER_FLASHING = "amber_flashing"

    @classmethod
    def from_tlcfi(cls, code: int) -> SignalState:
        """Return the state for a TLC-FI signal code.

        Raises :class:`UnknownStateCodeError` for codes outside the table.
        """
        state = _SIGNAL_FROM_TLCFI.get(code)
        if state is None:
            raise UnknownStateCodeError(
                f"Don't know what SignalState to transform '{code}' into",
                kind=EntityKind.SIGNAL,
                code=code,
            )
        return state

    def to_vlog_state(self) -> int:
        """Return the V-Log ``CHANGE_EXTERNAL_SIGNALGROUP_STATUS`` code."""
        return _SIGNAL_TO_VLOG[self]


class DetectorState(enum.StrEnum):
    """Detector occupancy."""

    FREE = "free"
    OCCUPIED = "occupied"

    @classmethod
    def from_tlcfi(cls, code: int) -> DetectorState:
        """Return the state for a TLC-FI detector code.

        Raises :class:`UnknownStateCodeError` for codes outside the table.
        """
        state = _DETECTOR_FROM_TLCFI.get(code)
        if state is None:
            raise UnknownStateCodeError(
                f"Don't know what DetectorState to transform '{code}' into",
                kind=EntityKind.DETECTOR,
                code=code,
            )
        return state

    def to_vlog_state(self) -> int:
        """Return the V-Log ``CHANGE_DETECTION_INFORMATION`` code."""
        return _DETECTOR_TO_VLOG[self]


_SIGNAL_FROM_TLCFI: dict[int, SignalState] = {
    0: SignalState.UNAVAILABLE,
    1: SignalState.DARK,
    2: SignalState.RED,
    3: SignalState.RED,
    5: SignalState.GREEN,
    6: SignalState.GREEN,
    7: SignalState.AMBER,
    8: SignalState.AMBER,
    9: SignalState.AMBER_FLASHING,
}

_SIGNAL_TO_VLOG: dict[SignalState, int] = {
    SignalState.UNAVAILABLE: 4,
    SignalState.DARK: 4,
    SignalState.RED: 0,
    SignalState.GREEN: 1,
    SignalState.AMBER: 2,
    SignalState.AMBER_FLASHING: 5,
}

_DETECTOR_FROM_TLCFI: dict[int, DetectorState] = {
    0: DetectorState.FREE,
    1: DetectorState.OCCUPIED,
}

_DETECTOR_TO_VLOG: dict[DetectorState, int] = {
    DetectorState.FREE: 0,
    DetectorState.OCCUPIED: 1,
}
