"""Typed TLC-FI state update."""

from __future__ import annotations

from pydantic import Field

from tlcfi_assimilator.models._base import AssimilatorModel, Tick
from tlcfi_assimilator.models.states import EntityKind


class Update(AssimilatorModel):
    """One decoded ``UpdateState`` element.

    Parameters
    ----------
    tick : int
        Raw TLC tick of the enclosing message.
    kind : EntityKind
        Whether the entries describe signal groups or detectors.
    entries : tuple of (str, int or None)
        ``(name, raw_state)`` pairs in message order. ``None`` means the
        TLC reported no change for that entity.
    """

    tick: Tick
    kind: EntityKind
    entries: tuple[tuple[str, int | None], ...] = Field(default_factory=tuple)

    @property
    def changed_entries(self) -> list[tuple[str, int]]:
        """Entries that actually carry a state code."""
        return [(name, state) for name, state in self.entries if state is not None]
