"""Turn decoded updates into timestamped change sets."""

from __future__ import annotations

from tlcfi_assimilator.models import (
    DetectorState,
    EntityKind,
    SignalState,
    TimestampedChangeSet,
    Update,
)


def to_change_set(update: Update, ms_from_beginning: int) -> TimestampedChangeSet | None:
    """Map the raw codes of *update* to domain states.

    Returns ``None`` when no entity actually changed.  Unknown state codes
    raise :class:`~tlcfi_assimilator.exceptions.UnknownStateCodeError`.
    """
    entries = update.changed_entries
    if not entries:
        return None

    from_tlcfi = SignalState.from_tlcfi if update.kind == EntityKind.SIGNAL else DetectorState.from_tlcfi
    return TimestampedChangeSet(
        ms_from_beginning=ms_from_beginning,
        kind=update.kind,
        names=tuple(name for name, _ in entries),
        states=tuple(from_tlcfi(code) for _, code in entries),
    )
