"""tlcfi_assimilator - Convert TLC-FI traffic controller logs into V-Log 3 messages."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tlcfi-assimilator")
except PackageNotFoundError:
    __version__ = "0+local"
from tlcfi_assimilator.config import AssimilatorConfig, EncoderSettings, VlogMapping
from tlcfi_assimilator.exceptions import (
    AssimilatorError,
    ConfigError,
    DecodeError,
    EncodingError,
    LengthMismatchError,
    LogLineError,
    MalformedNameError,
    MalformedStateError,
    MappingFileError,
    MissingTickError,
    NormalizeBeforeInitError,
    UnknownNameError,
    UnknownStateCodeError,
)
from tlcfi_assimilator.ingestion import (
    ClockState,
    advance_clock,
    decode_updates,
    normalize_tick,
    start_clock,
    to_change_set,
)
from tlcfi_assimilator.models import DetectorState, EntityKind, SignalState, TimestampedChangeSet, Update
from tlcfi_assimilator.pipeline import assimilate_lines, assimilate_payloads, run
from tlcfi_assimilator.vlog import VlogEncoder, to_vlog

__all__ = [
    "__version__",
    "AssimilatorConfig",
    "AssimilatorError",
    "ClockState",
    "ConfigError",
    "DecodeError",
    "DetectorState",
    "EncoderSettings",
    "EncodingError",
    "EntityKind",
    "LengthMismatchError",
    "LogLineError",
    "MalformedNameError",
    "MalformedStateError",
    "MappingFileError",
    "MissingTickError",
    "NormalizeBeforeInitError",
    "SignalState",
    "TimestampedChangeSet",
    "UnknownNameError",
    "UnknownStateCodeError",
    "Update",
    "VlogEncoder",
    "VlogMapping",
    "advance_clock",
    "assimilate_lines",
    "assimilate_payloads",
    "decode_updates",
    "normalize_tick",
    "run",
    "start_clock",
    "to_change_set",
    "to_vlog",
]
