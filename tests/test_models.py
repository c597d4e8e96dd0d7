"""Tests for the state enums and the pydantic models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tlcfi_assimilator._constants import MAX_TICK
from tlcfi_assimilator.exceptions import UnknownStateCodeError
from tlcfi_assimilator.models import (
    DetectorState,
    EntityKind,
    SignalState,
    TimestampedChangeSet,
    Update,
)

# ------------------------------------------------------------------
# State tables
# ------------------------------------------------------------------


class TestSignalState:
    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            (0, SignalState.UNAVAILABLE),
            (1, SignalState.DARK),
            (2, SignalState.RED),
            (3, SignalState.RED),
            (5, SignalState.GREEN),
            (6, SignalState.GREEN),
            (7, SignalState.AMBER),
            (8, SignalState.AMBER),
            (9, SignalState.AMBER_FLASHING),
        ],
    )
    def test_from_tlcfi(self, code: int, expected: SignalState) -> None:
        assert SignalState.from_tlcfi(code) == expected

    @pytest.mark.parametrize("code", [4, 10, 255])
    def test_unknown_code_raises(self, code: int) -> None:
        with pytest.raises(UnknownStateCodeError) as exc_info:
            SignalState.from_tlcfi(code)
        assert exc_info.value.code == code
        assert exc_info.value.kind == EntityKind.SIGNAL

    def test_vlog_codes(self) -> None:
        assert SignalState.UNAVAILABLE.to_vlog_state() == 4
        assert SignalState.DARK.to_vlog_state() == 4
        assert SignalState.RED.to_vlog_state() == 0
        assert SignalState.GREEN.to_vlog_state() == 1
        assert SignalState.AMBER.to_vlog_state() == 2
        assert SignalState.AMBER_FLASHING.to_vlog_state() == 5

    def test_every_member_has_a_vlog_code(self) -> None:
        for state in SignalState:
            assert isinstance(state.to_vlog_state(), int)


class TestDetectorState:
    def test_from_tlcfi(self) -> None:
        assert DetectorState.from_tlcfi(0) == DetectorState.FREE
        assert DetectorState.from_tlcfi(1) == DetectorState.OCCUPIED

    def test_unknown_code_raises(self) -> None:
        with pytest.raises(UnknownStateCodeError):
            DetectorState.from_tlcfi(2)

    def test_vlog_codes(self) -> None:
        assert DetectorState.FREE.to_vlog_state() == 0
        assert DetectorState.OCCUPIED.to_vlog_state() == 1


def test_entity_kind_from_tlcfi_type() -> None:
    assert EntityKind.from_tlcfi_type(3) == EntityKind.SIGNAL
    assert EntityKind.from_tlcfi_type(4) == EntityKind.DETECTOR
    assert EntityKind.from_tlcfi_type(5) is None
    assert EntityKind.from_tlcfi_type(None) is None
    assert EntityKind.from_tlcfi_type("3") is None
    assert EntityKind.from_tlcfi_type(True) is None


# ------------------------------------------------------------------
# Update
# ------------------------------------------------------------------


class TestUpdate:
    def test_changed_entries_drop_unchanged(self) -> None:
        update = Update(tick=10, kind=EntityKind.SIGNAL, entries=[("01", 6), ("02", None)])
        assert update.changed_entries == [("01", 6)]

    def test_tick_range(self) -> None:
        Update(tick=MAX_TICK, kind=EntityKind.DETECTOR)
        with pytest.raises(ValidationError):
            Update(tick=MAX_TICK + 1, kind=EntityKind.DETECTOR)
        with pytest.raises(ValidationError):
            Update(tick=-1, kind=EntityKind.DETECTOR)

    def test_is_frozen(self) -> None:
        update = Update(tick=10, kind=EntityKind.SIGNAL)
        with pytest.raises(ValidationError):
            update.tick = 11  # type: ignore[misc]


# ------------------------------------------------------------------
# TimestampedChangeSet
# ------------------------------------------------------------------


class TestTimestampedChangeSet:
    def test_valid_signal_set(self) -> None:
        change_set = TimestampedChangeSet(
            ms_from_beginning=864,
            kind=EntityKind.SIGNAL,
            names=["71"],
            states=[SignalState.GREEN],
        )
        assert change_set.names == ("71",)
        assert change_set.states == (SignalState.GREEN,)
        assert change_set.is_signal

    def test_names_and_states_must_match(self) -> None:
        with pytest.raises(ValidationError):
            TimestampedChangeSet(
                ms_from_beginning=0,
                kind=EntityKind.DETECTOR,
                names=["D1", "D2"],
                states=[DetectorState.FREE],
            )

    def test_kinds_are_never_mixed(self) -> None:
        with pytest.raises(ValidationError):
            TimestampedChangeSet(
                ms_from_beginning=0,
                kind=EntityKind.SIGNAL,
                names=["01", "D1"],
                states=[SignalState.RED, DetectorState.OCCUPIED],
            )

    def test_negative_time_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TimestampedChangeSet(
                ms_from_beginning=-1,
                kind=EntityKind.DETECTOR,
                names=["D1"],
                states=[DetectorState.FREE],
            )
