"""Tempmonitor CLI entry point.

This module maps ``tempmonitor [options] <output>`` onto one
forecast ingest run and turns domain errors into exit codes.
"""

from __future__ import annotations

import argparse
from datetime import datetime
import sys
from typing import Sequence

from core.config import TempMonitorConfig
from core.constants import DEFAULT_SOURCE_URI, PROGRAM_NAME, PROGRAM_VERSION
from core.errors import TempMonitorError
from core.types import IngestOptions
from ingest.pipeline import ingest_forecast


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Import a DataPoint temperature forecast into a SQLite series store",
    )
    parser.add_argument("output", help="SQLite database file to write")
    parser.add_argument(
        "-R",
        "--recreate",
        action="store_true",
        help="Recreate the database tables",
    )
    parser.add_argument(
        "--source",
        default=DEFAULT_SOURCE_URI,
        help="Forecast source: datapoint[:<location_id>], s3://bucket/key, or a local JSON file",
    )
    parser.add_argument(
        "--ingestion-time",
        type=_parse_ingestion_time,
        help="ISO-8601 ingestion stamp to record instead of now (naive values are UTC)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {PROGRAM_VERSION}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the tempmonitor CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    print(f'Rendering to database "{args.output}"')
    if args.recreate:
        print("Recreating database from scratch")
    options = IngestOptions(
        store_path=args.output,
        source_uri=args.source,
        recreate=args.recreate,
        ingestion_time=args.ingestion_time,
    )
    try:
        config = TempMonitorConfig.from_env()
        result = ingest_forecast(options, config)
    except TempMonitorError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    print(f"Inserted {result.row_count} readings")
    return 0


def _parse_ingestion_time(raw_value: str) -> datetime:
    """Parse an ISO-8601 ingestion stamp for argparse."""
    try:
        return datetime.fromisoformat(raw_value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(
            f"invalid ISO-8601 timestamp: '{raw_value}'"
        ) from error
