"""neofeed CLI entry points.
This module exposes commands for ingest runs and index inspection.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import asdict
from datetime import date
import json
import sys
from typing import Any, Sequence

from cli.schedule_command import add_schedule_command, run_schedule_command
from core.config import NeoFeedConfig, load_config
from core.constants import MAX_LOOKBACK_DAYS, MIN_LOOKBACK_DAYS
from core.errors import NeoFeedConfigError, NeoFeedError
from core.types import RunResult
from store.feed_sdk import NeoFeedClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="neofeed",
        description="Load NASA near-Earth-object feed data into a search index",
    )
    parser.add_argument("--config", help="Optional YAML config file overriding environment")
    parser.add_argument("--index", help="Override NEOFEED_INDEX_NAME for this command")
    parser.add_argument(
        "--lookback-days",
        type=int,
        help=f"Override NEOFEED_LOOKBACK_DAYS ({MIN_LOOKBACK_DAYS}-{MAX_LOOKBACK_DAYS})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_run_command(subparsers)
    _add_ensure_index_command(subparsers)
    _add_show_command(subparsers)
    add_schedule_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the neofeed CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
        client = _build_client(config)
    except NeoFeedConfigError as error:
        print(f"config_error={error}", file=sys.stderr)
        return 2
    if args.command == "run":
        return _run_ingest_command(client, args)
    if args.command == "ensure-index":
        return _run_ensure_index_command(client)
    if args.command == "show":
        return _run_show_command(client, args)
    if args.command == "schedule":
        return run_schedule_command(client, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(args: argparse.Namespace) -> NeoFeedConfig:
    """Load config and apply command-line overrides."""
    config = load_config(args.config)
    return config.with_overrides(
        {"index_name": args.index, "lookback_days": args.lookback_days}
    )


def _build_client(config: NeoFeedConfig) -> NeoFeedClient:
    """Build SDK client from resolved config."""
    return NeoFeedClient(config)


def _run_ingest_command(client: NeoFeedClient, args: argparse.Namespace) -> int:
    """Handle run command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code; 1 only when the run failed.
    """
    result = client.run(end_date=args.end_date)
    _print_run_result(result)
    return 1 if result.status == "failed" else 0


def _run_ensure_index_command(client: NeoFeedClient) -> int:
    """Handle ensure-index command."""
    try:
        created = client.ensure_index()
    except NeoFeedError as error:
        print(f"error={error}", file=sys.stderr)
        return 1
    print(f"index_name={client.config.index_name}")
    print(f"created={str(created).lower()}")
    return 0


def _run_show_command(client: NeoFeedClient, args: argparse.Namespace) -> int:
    """Handle show command."""
    try:
        record = client.get_record(args.record_id)
    except NeoFeedError as error:
        print(f"error={error}", file=sys.stderr)
        return 1
    if record is None:
        print(f"not_found={args.record_id}", file=sys.stderr)
        return 1
    print(json.dumps(asdict(record), sort_keys=True))
    return 0


def _print_run_result(result: RunResult) -> None:
    print(f"status={result.status}")
    if result.window is not None:
        window = result.window
        print(f"window={window.start_date.isoformat()}..{window.end_date.isoformat()}")
    print(f"fetched_count={result.fetched_count}")
    print(f"written_count={result.written_count}")
    print(f"failed_count={result.failed_count}")
    if result.status == "no_data":
        print("message=no data to update")
    if result.error:
        print(f"error={result.error}")


def _parse_iso_date(raw_value: str) -> date:
    try:
        return date.fromisoformat(raw_value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(
            f"invalid date '{raw_value}': expected YYYY-MM-DD"
        ) from error


def _add_run_command(subparsers: Any) -> None:
    """Register run subcommand."""
    parser = subparsers.add_parser("run", help="Fetch the feed once and upsert it")
    parser.add_argument(
        "--end-date",
        type=_parse_iso_date,
        help="Window end date (YYYY-MM-DD); defaults to today in UTC",
    )


def _add_ensure_index_command(subparsers: Any) -> None:
    """Register ensure-index subcommand."""
    subparsers.add_parser("ensure-index", help="Create the destination index if missing")


def _add_show_command(subparsers: Any) -> None:
    """Register show subcommand."""
    parser = subparsers.add_parser("show", help="Print one indexed record as JSON")
    parser.add_argument("record_id", help="Near-Earth-object id")
