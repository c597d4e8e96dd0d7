"""Run configuration and the V-Log/TLC-FI mapping file."""

from __future__ import annotations

import dataclasses
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from tlcfi_assimilator._constants import (
    MAX_DELTA_DS,
    MAX_ENTRIES_PER_RECORD,
    MAX_VLOG_ID,
    MS_PER_DECISECOND,
    TIME_REFERENCE_INTERVAL_MS,
)

# Longest interval whose last millisecond still fits the three hex digit delta.
_MAX_TIME_REFERENCE_INTERVAL_MS = (MAX_DELTA_DS + 1) * MS_PER_DECISECOND
from tlcfi_assimilator.exceptions import ConfigError, MappingFileError
from tlcfi_assimilator.ingestion.log_lines import parse_date_time
from tlcfi_assimilator.models import EntityKind

_logger = logging.getLogger(__name__)

_COMMENT = "//"
_TLC_NAME_MARKER = "TLC"
_SECTION_MARKERS: dict[EntityKind, str] = {
    EntityKind.SIGNAL: "Signals",
    EntityKind.DETECTOR: "Detectors",
}


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _find_tlc_name(lines: list[str]) -> str | None:
    announced = False
    for line in lines:
        if not announced and _COMMENT in line and _TLC_NAME_MARKER in line:
            announced = True
        if announced and _COMMENT not in line and line:
            return line
    return None


def _parse_section(lines: list[str], kind: EntityKind) -> dict[str, int]:
    marker = _SECTION_MARKERS[kind]
    mappings: dict[str, int] = {}
    in_section = False
    for line in lines:
        if not in_section:
            in_section = _COMMENT in line and marker in line
            continue
        if not line or _COMMENT in line:
            break
        vlog_id_text, sep, name = (part.strip() for part in line.partition(","))
        if not sep or not name:
            raise MappingFileError(f"Expected '<vlog id>, <tlc-fi name>' in {marker} section, got {line!r}")
        try:
            vlog_id = int(vlog_id_text)
        except ValueError as exc:
            raise MappingFileError(f"V-Log id {vlog_id_text!r} for {name!r} is not an integer") from exc
        if not 0 <= vlog_id <= MAX_VLOG_ID:
            raise MappingFileError(f"V-Log id {vlog_id} for {name!r} is outside 0..{MAX_VLOG_ID}")
        if name in mappings:
            _logger.warning("%s %r mapped twice, using V-Log id %d", kind, name, vlog_id)
        mappings[name] = vlog_id

    if not mappings:
        raise MappingFileError(f"No {marker} mappings found in the mapping file")
    return mappings


@dataclasses.dataclass(frozen=True)
class VlogMapping:
    """Controller name and TLC-FI name -> V-Log id tables.

    The mapping file is plain text with ``//`` comment headers::

        // TLC name
        3031

        // Signals: vlog id, tlc-fi id
        0, 01
        1, 02

        // Detectors: vlog id, tlc-fi id
        0, D011
    """

    tlc_name: str
    signals: dict[str, int]
    detectors: dict[str, int]

    @classmethod
    def from_text(cls, text: str) -> VlogMapping:
        lines = [line.strip() for line in text.splitlines()]
        tlc_name = _find_tlc_name(lines)
        if tlc_name is None:
            raise MappingFileError("We didn't find a TLC name in the mapping file")
        mapping = cls(
            tlc_name=tlc_name,
            signals=_parse_section(lines, EntityKind.SIGNAL),
            detectors=_parse_section(lines, EntityKind.DETECTOR),
        )
        _logger.debug("Found tlc name: %s", mapping.tlc_name)
        _logger.debug("Found signal mapping: %s", mapping.signals)
        _logger.debug("Found detector mapping: %s", mapping.detectors)
        return mapping

    @classmethod
    def from_file(cls, path: str | Path) -> VlogMapping:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise MappingFileError(f"Couldn't read the V-Log TLC-FI mapping file {str(path)!r}: {exc}") from exc
        return cls.from_text(text)

    def ids_for(self, kind: EntityKind) -> dict[str, int]:
        return self.signals if kind == EntityKind.SIGNAL else self.detectors


@dataclasses.dataclass(frozen=True)
class EncoderSettings:
    """V-Log encoder tuning.

    Parameters
    ----------
    time_reference_interval_ms : int
        Emit a new time reference record once this many milliseconds have
        passed since the previous one.  At most 409 600, so the delta time
        of every record fits its three hex digits.
    max_entries_per_record : int
        Maximum number of (id, state) pairs in one change record; larger
        change sets are split over several records.
    split_detector_records : bool
        Also split detector change records.  Off by default: only signal
        change records are split.
    """

    time_reference_interval_ms: int = TIME_REFERENCE_INTERVAL_MS
    max_entries_per_record: int = MAX_ENTRIES_PER_RECORD
    split_detector_records: bool = False

    def __post_init__(self) -> None:
        if not 0 < self.time_reference_interval_ms <= _MAX_TIME_REFERENCE_INTERVAL_MS:
            raise ConfigError(
                f"time_reference_interval_ms must be between 1 and {_MAX_TIME_REFERENCE_INTERVAL_MS}, "
                f"got {self.time_reference_interval_ms}"
            )
        if not 1 <= self.max_entries_per_record <= 15:
            raise ConfigError("max_entries_per_record must be between 1 and 15")


@dataclasses.dataclass(frozen=True)
class AssimilatorConfig:
    """Configuration of one conversion run.

    Parameters
    ----------
    mapping_file : str
        V-Log/TLC-FI mapping file (controller name, signal and detector ids).
    tlcfi_log_file : str
        TLC-FI log to convert.
    chronological : bool
        Whether the log is oldest first.  TLC-FI logs are newest first by default.
    start_date_time : datetime or None
        Absolute time of the first log line.  Taken from the log when ``None``.
    output_dir : str
        Directory the ``.vlg`` file is written to.
    encoder : EncoderSettings
        V-Log encoder tuning.
    """

    mapping_file: str
    tlcfi_log_file: str = "tlcfi.txt"
    chronological: bool = False
    start_date_time: datetime | None = None
    output_dir: str = "."
    encoder: EncoderSettings = dataclasses.field(default_factory=EncoderSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> AssimilatorConfig:
        """Create configuration from ``TLCFI_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "TLCFI_MAPPING_FILE": "mapping_file",
            "TLCFI_LOG_FILE": "tlcfi_log_file",
            "TLCFI_OUTPUT_DIR": "output_dir",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        if "chronological" not in overrides:
            config_kwargs["chronological"] = _env_bool(env.get("TLCFI_CHRONOLOGICAL"), False)

        start_env = env.get("TLCFI_START_DATE_TIME")
        if start_env is not None and "start_date_time" not in overrides:
            config_kwargs["start_date_time"] = parse_date_time(start_env)

        config_kwargs.update(overrides)
        if "mapping_file" not in config_kwargs:
            raise ConfigError("No mapping file given; pass mapping_file or set TLCFI_MAPPING_FILE")

        return cls(**config_kwargs)
