"""Interval scheduling for repeated ingest runs.

This module replaces an external timer trigger for long-running
deployments: it runs one pass per interval, strictly sequentially.
"""

from __future__ import annotations

import argparse
import time
from typing import Any, Callable, Protocol

from core.constants import DEFAULT_SCHEDULE_INTERVAL_SECONDS
from core.logging_config import get_logger
from core.types import RunResult

_LOGGER = get_logger(__name__)


class ScheduledRunner(Protocol):
    """Client API contract required by the scheduler."""

    def run(self) -> RunResult: ...


def add_schedule_command(subparsers: Any) -> None:
    """Register schedule subcommand."""
    parser = subparsers.add_parser(
        "schedule",
        help="Run ingest passes on a fixed interval until interrupted",
    )
    parser.add_argument(
        "--interval-seconds",
        type=float,
        default=DEFAULT_SCHEDULE_INTERVAL_SECONDS,
        help="Seconds between run starts",
    )
    parser.add_argument(
        "--max-runs",
        type=int,
        help="Stop after this many runs",
    )


def run_schedule_command(client: ScheduledRunner, args: argparse.Namespace) -> int:
    """Execute the schedule loop from parsed CLI args."""
    run_schedule(client, args.interval_seconds, max_runs=args.max_runs)
    return 0


def run_schedule(
    client: ScheduledRunner,
    interval_seconds: float,
    max_runs: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
    logger: Any | None = None,
) -> list[RunResult]:
    """Run ingest passes every ``interval_seconds``.

    A run that takes longer than the interval is logged as past due and the
    next run starts immediately. Runs never overlap.

    Args:
        client: Object whose ``run`` performs one pass.
        interval_seconds: Target seconds between run starts.
        max_runs: Optional run limit; unbounded when omitted.
        sleep: Sleep function.
        clock: Monotonic clock function.
        logger: Optional structured logger.

    Returns:
        Results of completed runs, in order.
    """
    schedule_logger = logger or _LOGGER
    results: list[RunResult] = []
    try:
        while max_runs is None or len(results) < max_runs:
            started_at = clock()
            results.append(client.run())
            if max_runs is not None and len(results) >= max_runs:
                break
            elapsed = clock() - started_at
            if elapsed > interval_seconds:
                schedule_logger.warning(
                    "run_past_due",
                    elapsed_seconds=round(elapsed, 3),
                    interval_seconds=interval_seconds,
                )
                continue
            sleep(interval_seconds - elapsed)
    except KeyboardInterrupt:
        schedule_logger.info("schedule_stopped", run_count=len(results), reason="interrupted")
        return results
    schedule_logger.info("schedule_stopped", run_count=len(results), reason="max_runs")
    return results
