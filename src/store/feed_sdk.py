"""Python SDK for feed ingest operations.

This module exposes high-level APIs for running ingest passes and
inspecting the destination index with one explicitly owned client.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from core.config import NeoFeedConfig
from core.types import FeedWindow, IngestOptions, NeoRecord, RunResult
from ingest.feed_client import fetch_feed
from ingest.pipeline import run_feed_ingest
from store.search_client import build_search_client
from store.search_index import SearchIndexStore


class NeoFeedClient:
    """Primary SDK entry point for feed ingest workflows."""

    def __init__(
        self,
        config: NeoFeedConfig | None = None,
        search_client: Any | None = None,
        http_session: Any | None = None,
        logger: Any | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            search_client: Optional prebuilt Elasticsearch client; built from
                config when omitted.
            http_session: Optional ``requests``-compatible session for the feed.
            logger: Optional structured logger passed to each run.
        """
        self._config = config or NeoFeedConfig.from_env()
        self._search_client = search_client or build_search_client(self._config)
        self._http_session = http_session
        self._logger = logger

    @property
    def config(self) -> NeoFeedConfig:
        """Runtime configuration."""
        return self._config

    def index(self, index_name: str | None = None) -> SearchIndexStore:
        """Get an index store handle.

        Args:
            index_name: Optional index name; the configured one by default.

        Returns:
            Index store.
        """
        return SearchIndexStore(self._search_client, index_name or self._config.index_name)

    def run(
        self,
        end_date: date | None = None,
        lookback_days: int | None = None,
        index_name: str | None = None,
    ) -> RunResult:
        """Run one ingest pass.

        Args:
            end_date: Optional reference end date; today (UTC) by default.
            lookback_days: Optional window width override.
            index_name: Optional destination index override.

        Returns:
            Structured run result. Domain failures are reported, not raised.

        Raises:
            NeoFeedConfigError: If an override is invalid.
        """
        run_config = self._config.with_overrides(
            {"index_name": index_name, "lookback_days": lookback_days}
        )
        options = IngestOptions(
            index_name=run_config.index_name,
            lookback_days=run_config.lookback_days,
            end_date=end_date,
        )
        return run_feed_ingest(
            options,
            fetcher=self._fetch,
            index=self.index(options.index_name),
            logger=self._logger,
        )

    def ensure_index(self, index_name: str | None = None) -> bool:
        """Create the destination index if missing.

        Returns:
            True when the index was created by this call.
        """
        return self.index(index_name).ensure_index()

    def get_record(self, record_id: str, index_name: str | None = None) -> NeoRecord | None:
        """Load one indexed record by id."""
        return self.index(index_name).get_record(record_id)

    def _fetch(self, window: FeedWindow) -> Mapping[str, Any]:
        return fetch_feed(
            window,
            api_key=self._config.nasa_api_key,
            timeout_seconds=self._config.request_timeout_seconds,
            session=self._http_session,
        )
