"""Data models for TLC-FI updates and V-Log change sets."""

from tlcfi_assimilator.models._base import AssimilatorModel, ElapsedMs, Tick
from tlcfi_assimilator.models.changes import TimestampedChangeSet
from tlcfi_assimilator.models.states import DetectorState, EntityKind, SignalState
from tlcfi_assimilator.models.update import Update

__all__ = [
    "AssimilatorModel",
    "DetectorState",
    "ElapsedMs",
    "EntityKind",
    "SignalState",
    "Tick",
    "TimestampedChangeSet",
    "Update",
]
