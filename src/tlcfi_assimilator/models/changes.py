"""Timestamped change sets handed to the V-Log encoder."""

from __future__ import annotations

from pydantic import model_validator

from tlcfi_assimilator.models._base import AssimilatorModel, ElapsedMs
from tlcfi_assimilator.models.states import DetectorState, EntityKind, SignalState

_STATE_TYPES: dict[EntityKind, type[SignalState] | type[DetectorState]] = {
    EntityKind.SIGNAL: SignalState,
    EntityKind.DETECTOR: DetectorState,
}


class TimestampedChangeSet(AssimilatorModel):
    """Simultaneous state changes of one entity kind.

    ``names[i]`` changed to ``states[i]`` at ``ms_from_beginning``.
    A set never mixes signal and detector data.
    """

    ms_from_beginning: ElapsedMs
    kind: EntityKind
    names: tuple[str, ...]
    states: tuple[SignalState | DetectorState, ...]

    @model_validator(mode="after")
    def _check_parallel(self) -> TimestampedChangeSet:
        if len(self.names) != len(self.states):
            raise ValueError(f"{len(self.names)} names but {len(self.states)} states")
        expected = _STATE_TYPES[self.kind]
        for state in self.states:
            if not isinstance(state, expected):
                raise ValueError(f"{self.kind} change set holds a {type(state).__name__}")
        return self

    @property
    def is_signal(self) -> bool:
        return self.kind == EntityKind.SIGNAL
