"""Command line entry point.

Usage
-----
    tlcfi-assimilator --start-date-time 2021-12-15T11:00:00.000 vlog_tlcfi_mapping.txt
    tlcfi-assimilator --chronological true --tlcfi-log-file today.txt vlog_tlcfi_mapping.txt
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from tlcfi_assimilator.config import AssimilatorConfig
from tlcfi_assimilator.exceptions import AssimilatorError
from tlcfi_assimilator.ingestion.log_lines import parse_date_time
from tlcfi_assimilator.pipeline import run

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}
_DEFAULT_LOG_FILE = "tlcfi.txt"


def _bool_arg(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {value!r}")


def _date_time_arg(value: str) -> datetime:
    try:
        return parse_date_time(value)
    except AssimilatorError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _existing_file(value: str) -> str:
    if not Path(value).is_file():
        raise argparse.ArgumentTypeError(
            f"File name passed as argument {value!r} could not be opened. Did you make a typo?"
        )
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tlcfi-assimilator",
        description="Convert a TLC-FI log into a V-Log 3 file.",
    )
    parser.add_argument(
        "vlog_tlcfi_mapping_file",
        type=_existing_file,
        help="Mapping file with the TLC name and V-Log ids of signals and detectors",
    )
    parser.add_argument(
        "--chronological",
        type=_bool_arg,
        default=False,
        metavar="BOOL",
        help="Whether the logs are in chronological order, newest last (default: false)",
    )
    parser.add_argument(
        "--start-date-time",
        type=_date_time_arg,
        default=None,
        metavar="STRING",
        help="ISO 8601 timestamp for the start moment of the TLC-FI logs (e.g. 2021-12-15T11:00:00.000)",
    )
    parser.add_argument(
        "--tlcfi-log-file",
        type=_existing_file,
        default=None,
        metavar="STRING",
        help=f"TLC-FI log file to load (default: {_DEFAULT_LOG_FILE})",
    )
    parser.add_argument("--output-dir", default=".", help="Directory to write the .vlg file to")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    config = AssimilatorConfig(
        mapping_file=args.vlog_tlcfi_mapping_file,
        tlcfi_log_file=args.tlcfi_log_file or _DEFAULT_LOG_FILE,
        chronological=args.chronological,
        start_date_time=args.start_date_time,
        output_dir=args.output_dir,
    )
    try:
        output = run(config)
    except AssimilatorError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Created file: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
