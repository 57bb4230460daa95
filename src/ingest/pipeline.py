"""Feed ingest orchestration.

This module runs one fetch, flatten, and upsert pass and converts every
domain failure into a structured run result plus a terminal log entry.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol, Sequence

from core.errors import NeoFeedError, NeoFeedFetchError
from core.logging_config import get_logger
from core.types import (
    BulkWriteSummary,
    FeedWindow,
    IngestOptions,
    NeoRecord,
    RunResult,
    RunStatus,
)
from ingest.feed_client import build_feed_window
from transforms.feed_flattening import flatten_feed, remove_duplicate_ids

_LOGGER = get_logger(__name__)

FeedFetcher = Callable[[FeedWindow], Mapping[str, Any]]


class RecordIndex(Protocol):
    """Index operations required by the ingest pipeline."""

    def ensure_index(self) -> bool: ...

    def upsert_records(self, records: Sequence[NeoRecord]) -> BulkWriteSummary: ...


class FeedIngestRunner:
    """Runner for a single ingest pass."""

    def __init__(
        self,
        options: IngestOptions,
        fetcher: FeedFetcher,
        index: RecordIndex,
        logger: Any | None = None,
    ) -> None:
        self._options = options
        self._fetcher = fetcher
        self._index = index
        self._logger = logger or _LOGGER

    def run(self) -> RunResult:
        """Execute the pass and return its result without raising domain errors."""
        window = build_feed_window(self._options.lookback_days, self._options.end_date)
        try:
            return self._run_stages(window)
        except NeoFeedFetchError as error:
            self._logger.error("fetch_failed", **_window_fields(window), error=str(error))
            return RunResult(status="failed", window=window, error=str(error))
        except NeoFeedError as error:
            self._logger.error(
                "run_failed",
                **_window_fields(window),
                index_name=self._options.index_name,
                error_type=type(error).__name__,
                error=str(error),
            )
            return RunResult(status="failed", window=window, error=str(error))

    def _run_stages(self, window: FeedWindow) -> RunResult:
        objects_by_date = self._fetcher(window)
        self._logger.info(
            "feed_fetched", **_window_fields(window), date_count=len(objects_by_date)
        )
        flattened = flatten_feed(objects_by_date)
        records = self._remove_duplicates(flattened)
        if not records:
            self._logger.info("no_data_to_update", **_window_fields(window))
            return RunResult(status="no_data", window=window)
        self._index.ensure_index()
        summary = self._index.upsert_records(records)
        return self._build_result(window, len(flattened), records, summary)

    def _remove_duplicates(self, flattened: list[NeoRecord]) -> list[NeoRecord]:
        records = remove_duplicate_ids(flattened)
        if len(records) != len(flattened):
            self._logger.warning(
                "duplicate_ids_dropped", dropped_count=len(flattened) - len(records)
            )
        self._logger.info("feed_flattened", record_count=len(records))
        return records

    def _build_result(
        self,
        window: FeedWindow,
        fetched_count: int,
        records: list[NeoRecord],
        summary: BulkWriteSummary,
    ) -> RunResult:
        if summary.failed_count:
            self._logger.warning(
                "bulk_write_partial_failure",
                index_name=self._options.index_name,
                written_count=summary.written_count,
                failed_count=summary.failed_count,
                failure_reasons=list(summary.failure_reasons),
            )
        status: RunStatus = "degraded" if summary.failed_count else "success"
        self._logger.info(
            "run_completed",
            **_window_fields(window),
            index_name=self._options.index_name,
            status=status,
            record_count=len(records),
            written_count=summary.written_count,
            failed_count=summary.failed_count,
        )
        return RunResult(
            status=status,
            window=window,
            fetched_count=fetched_count,
            written_count=summary.written_count,
            failed_count=summary.failed_count,
            failure_reasons=summary.failure_reasons,
        )


def run_feed_ingest(
    options: IngestOptions,
    fetcher: FeedFetcher,
    index: RecordIndex,
    logger: Any | None = None,
) -> RunResult:
    """Run one fetch, flatten, and upsert pass.

    Args:
        options: Per-run options.
        fetcher: Callable returning date-keyed objects for a window.
        index: Destination index.
        logger: Optional structured logger; the module logger by default.

    Returns:
        Run result. Fetch failures and schema failures yield ``failed`` with
        nothing written; an empty feed yields ``no_data``; rejected documents
        yield ``degraded``.
    """
    runner = FeedIngestRunner(options, fetcher, index, logger)
    return runner.run()


def _window_fields(window: FeedWindow) -> dict[str, str]:
    return {
        "start_date": window.start_date.isoformat(),
        "end_date": window.end_date.isoformat(),
    }
