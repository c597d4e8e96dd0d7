from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from tlcfi_assimilator.config import AssimilatorConfig, EncoderSettings, VlogMapping
from tlcfi_assimilator.exceptions import ConfigError, LogLineError, MappingFileError
from tlcfi_assimilator.models import EntityKind

MAPPING_TEXT = """\
// TLC name
3031

// Signals: vlog id, tlc-fi id
0, 01
1, 02
2, 03

// Detectors: vlog id, tlc-fi id
0, D011
1, D012
"""


def test_mapping_from_text() -> None:
    mapping = VlogMapping.from_text(MAPPING_TEXT)

    assert mapping.tlc_name == "3031"
    assert mapping.signals == {"01": 0, "02": 1, "03": 2}
    assert mapping.detectors == {"D011": 0, "D012": 1}
    assert mapping.ids_for(EntityKind.SIGNAL) is mapping.signals
    assert mapping.ids_for(EntityKind.DETECTOR) is mapping.detectors


def test_mapping_from_file(tmp_path: Path) -> None:
    path = tmp_path / "vlog_tlcfi_mapping.txt"
    path.write_text(MAPPING_TEXT.replace("\n", "\r\n"), encoding="utf-8")

    mapping = VlogMapping.from_file(path)

    assert mapping.tlc_name == "3031"
    assert mapping.detectors["D012"] == 1


def test_mapping_section_ends_at_comment() -> None:
    text = MAPPING_TEXT.replace("2, 03\n", "2, 03\n// Detectors: vlog id, tlc-fi id\n0, D011\n")
    mapping = VlogMapping.from_text(text)
    assert mapping.signals == {"01": 0, "02": 1, "03": 2}


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(MappingFileError):
        VlogMapping.from_file(tmp_path / "missing.txt")


def test_missing_tlc_name_raises() -> None:
    with pytest.raises(MappingFileError):
        VlogMapping.from_text(MAPPING_TEXT.replace("// TLC name\n3031\n", ""))


def test_missing_section_raises() -> None:
    text = MAPPING_TEXT.split("// Detectors")[0]
    with pytest.raises(MappingFileError, match="Detectors"):
        VlogMapping.from_text(text)


@pytest.mark.parametrize("line", ["x, 01", "255, 01", "-1, 01", "0 01", "0,"])
def test_invalid_mapping_line_raises(line: str) -> None:
    with pytest.raises(MappingFileError):
        VlogMapping.from_text(MAPPING_TEXT.replace("0, 01", line))


def test_encoder_settings_defaults() -> None:
    settings = EncoderSettings()
    assert settings.time_reference_interval_ms == 300_000
    assert settings.max_entries_per_record == 10
    assert settings.split_detector_records is False


@pytest.mark.parametrize(
    "kwargs",
    [
        {"time_reference_interval_ms": 0},
        {"time_reference_interval_ms": 409_601},
        {"time_reference_interval_ms": 1_000_000},
        {"max_entries_per_record": 16},
    ],
)
def test_encoder_settings_validation(kwargs: dict) -> None:
    with pytest.raises(ConfigError):
        EncoderSettings(**kwargs)


def test_longest_time_reference_interval_is_accepted() -> None:
    # 409 599 ms after a time reference is delta 0xFFF.
    assert EncoderSettings(time_reference_interval_ms=409_600).time_reference_interval_ms == 409_600


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TLCFI_MAPPING_FILE", "mapping.txt")
    monkeypatch.setenv("TLCFI_LOG_FILE", "log.txt")
    monkeypatch.setenv("TLCFI_CHRONOLOGICAL", "yes")
    monkeypatch.setenv("TLCFI_START_DATE_TIME", "2021-12-15T11:00:00.000")

    config = AssimilatorConfig.from_env(output_dir="out")

    assert config.mapping_file == "mapping.txt"
    assert config.tlcfi_log_file == "log.txt"
    assert config.chronological is True
    assert config.start_date_time == datetime(2021, 12, 15, 11, 0, 0)
    assert config.output_dir == "out"


def test_config_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TLCFI_MAPPING_FILE", "mapping.txt")
    monkeypatch.setenv("TLCFI_CHRONOLOGICAL", "true")

    config = AssimilatorConfig.from_env(mapping_file="other.txt", chronological=False)

    assert config.mapping_file == "other.txt"
    assert config.chronological is False
    assert config.tlcfi_log_file == "tlcfi.txt"


def test_config_requires_mapping_file(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TLCFI_MAPPING_FILE", raising=False)
    with pytest.raises(ConfigError):
        AssimilatorConfig.from_env()


def test_config_rejects_bad_start_time(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TLCFI_START_DATE_TIME", "2021-12-15 11:00:00")
    with pytest.raises(LogLineError):
        AssimilatorConfig.from_env(mapping_file="mapping.txt")
