from __future__ import annotations

from datetime import datetime

import pytest

from tlcfi_assimilator.exceptions import LogLineError
from tlcfi_assimilator.ingestion.log_lines import (
    parse_date_time,
    sort_lines,
    split_log_line,
    start_date_time_from_lines,
)

OUT_LINE = (
    "2021-12-15 11:00:00,074 INFO  tlcFiMessages:41 - OUT - "
    '{"jsonrpc":"2.0","method":"UpdateState","params":{"ticks":4087974612,'
    '"update":[{"objects":{"ids":["D681"],"type":4},"states":[{"state":0}]}]}}'
)


def test_split_log_line() -> None:
    record = split_log_line(OUT_LINE)

    assert record.prefix.startswith("2021-12-15 11:00:00,074")
    assert record.direction == "OUT "
    assert not record.is_inbound
    assert record.parse_payload()["params"]["ticks"] == 4_087_974_612


def test_inbound_direction() -> None:
    assert split_log_line(OUT_LINE.replace("- OUT -", "- IN -")).is_inbound


def test_doubled_quotes_are_collapsed() -> None:
    line = '2021-12-15 11:00:00,074 INFO x - IN - {""params"":{""ticks"":1}}'
    assert split_log_line(line).parse_payload() == {"params": {"ticks": 1}}


@pytest.mark.parametrize("line", ["", "no separators here", "a - b - c - d"])
def test_unsplittable_line_raises(line: str) -> None:
    with pytest.raises(LogLineError):
        split_log_line(line)


def test_non_json_payload_raises() -> None:
    record = split_log_line("2021-12-15 11:00:00,074 INFO x - IN - {not json")
    with pytest.raises(LogLineError):
        record.parse_payload()


def test_sort_lines() -> None:
    assert sort_lines(["new\r\n", "old\n"], chronological=False) == ["old", "new"]
    assert sort_lines(["old", "new"], chronological=True) == ["old", "new"]


def test_parse_date_time() -> None:
    assert parse_date_time("2021-12-15T11:00:00.000") == datetime(2021, 12, 15, 11, 0, 0)


@pytest.mark.parametrize(
    "text",
    ["2021-12-15T11:00:00,000", "2021-12-15 11:00:00.000", "2021-12-15T11:00:00", "2021-12-15T11:00:00.0"],
)
def test_parse_date_time_rejects_other_formats(text: str) -> None:
    with pytest.raises(LogLineError):
        parse_date_time(text)


def test_start_date_time_from_lines() -> None:
    lines = ["", "garbage", OUT_LINE]
    assert start_date_time_from_lines(lines) == datetime(2021, 12, 15, 11, 0, 0, 74_000)


def test_start_date_time_without_log_lines_raises() -> None:
    with pytest.raises(LogLineError):
        start_date_time_from_lines(["", "garbage"])
