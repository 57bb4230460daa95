"""Public SDK surface for neofeed.

This module provides a stable import path for library users.
It re-exports the primary client, pipeline entry point, and typed models.
"""

from __future__ import annotations

from core.config import NeoFeedConfig, load_config
from core.types import BulkWriteSummary, FeedWindow, IngestOptions, NeoRecord, RunResult
from ingest.feed_client import build_feed_window, fetch_feed
from ingest.pipeline import run_feed_ingest
from store.feed_sdk import NeoFeedClient
from store.search_client import build_search_client
from store.search_index import SearchIndexStore
from transforms.feed_flattening import flatten_feed

__all__ = [
    "BulkWriteSummary",
    "FeedWindow",
    "IngestOptions",
    "NeoFeedClient",
    "NeoFeedConfig",
    "NeoRecord",
    "RunResult",
    "SearchIndexStore",
    "build_feed_window",
    "build_search_client",
    "fetch_feed",
    "flatten_feed",
    "load_config",
    "run_feed_ingest",
]
