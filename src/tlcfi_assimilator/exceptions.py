"""Custom exception hierarchy for tlcfi_assimilator."""

from __future__ import annotations

from typing import Any


class AssimilatorError(Exception):
    """Base exception for all tlcfi_assimilator errors."""


class ConfigError(AssimilatorError):
    """Invalid or missing configuration."""


class MappingFileError(ConfigError):
    """The V-Log/TLC-FI mapping file is unreadable or incomplete."""


class LogLineError(AssimilatorError):
    """A raw log line could not be split or its payload is not JSON."""

    def __init__(self, message: str, *, line: str = "") -> None:
        self.line = line
        super().__init__(message)


class DecodeError(AssimilatorError):
    """A TLC-FI payload does not have the expected update shape."""

    def __init__(self, message: str, *, payload: Any = None) -> None:
        self.payload = payload
        super().__init__(message)


class MissingTickError(DecodeError):
    """``params.ticks`` is absent or not an unsigned 32-bit integer."""


class LengthMismatchError(DecodeError):
    """The ``ids`` and ``states`` arrays of an update differ in length.

    This breaks an invariant of the TLC-FI wrapper protocol, so unlike the
    other decode errors it aborts the whole run.
    """


class MalformedStateError(DecodeError):
    """A state object carries something other than an integer or null."""


class MalformedNameError(DecodeError):
    """An entry of the ``ids`` array is not a string."""


class UnknownStateCodeError(AssimilatorError):
    """A raw TLC-FI state code has no matching signal/detector state."""

    def __init__(self, message: str, *, kind: str, code: int) -> None:
        self.kind = kind
        self.code = code
        super().__init__(message)


class UnknownNameError(AssimilatorError):
    """An entity name is missing from the V-Log mapping."""

    def __init__(self, message: str, *, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(message)


class NormalizeBeforeInitError(AssimilatorError):
    """A tick was normalized before the clock received its first tick."""


class EncodingError(AssimilatorError):
    """A value does not fit the fixed-width V-Log field it is written to."""
