"""Unit tests for the feed fetcher."""

from __future__ import annotations

from datetime import date

import pytest
import requests

from core.constants import NEO_FEED_URL
from core.errors import NeoFeedFetchError
from core.types import FeedWindow
from ingest.feed_client import build_feed_params, build_feed_window, fetch_feed
from tests.fakes import FakeResponse, FakeSession
from tests.fixture_paths import load_json_fixture

_WINDOW = FeedWindow(start_date=date(2024, 1, 1), end_date=date(2024, 1, 2))


def test_build_feed_window_counts_back_from_end_date() -> None:
    """Window start should be lookback days before the end date."""
    window = build_feed_window(7, end_date=date(2024, 1, 8))

    assert (window.start_date, window.end_date, window.days) == (
        date(2024, 1, 1),
        date(2024, 1, 8),
        7,
    )


def test_build_feed_window_defaults_to_today() -> None:
    """Window should end on the current date when no end date is given."""
    window = build_feed_window(1)

    assert window.days == 1


def test_build_feed_params_formats_iso_dates() -> None:
    """Query params should carry ISO dates and the API key."""
    params = build_feed_params(_WINDOW, "key")

    assert params == {"api_key": "key", "start_date": "2024-01-01", "end_date": "2024-01-02"}


def test_fetch_feed_returns_objects_by_date() -> None:
    """Fetcher should unwrap the near_earth_objects mapping."""
    session = FakeSession(FakeResponse(load_json_fixture("feed/sample_feed.json")))

    objects_by_date = fetch_feed(_WINDOW, "key", session=session)

    assert sorted(objects_by_date) == ["2024-01-01", "2024-01-02"]


def test_fetch_feed_sends_one_bounded_request() -> None:
    """Fetcher should issue exactly one request with a timeout."""
    session = FakeSession(FakeResponse({"near_earth_objects": {}}))

    fetch_feed(_WINDOW, "key", timeout_seconds=5.0, session=session)

    assert len(session.calls) == 1
    assert session.calls[0]["url"] == NEO_FEED_URL
    assert session.calls[0]["timeout"] == 5.0


def test_fetch_feed_raises_for_network_error() -> None:
    """Transport failures should surface as fetch errors."""
    session = FakeSession(error=requests.ConnectionError("connection refused"))

    with pytest.raises(NeoFeedFetchError):
        fetch_feed(_WINDOW, "key", session=session)


def test_fetch_feed_raises_for_http_error() -> None:
    """Non-2xx upstream statuses should surface as fetch errors."""
    session = FakeSession(FakeResponse({"error": "rate limited"}, status_code=429))

    with pytest.raises(NeoFeedFetchError):
        fetch_feed(_WINDOW, "key", session=session)


def test_fetch_feed_raises_for_invalid_json() -> None:
    """Unparseable bodies should surface as fetch errors."""
    session = FakeSession(FakeResponse(ValueError("Expecting value")))

    with pytest.raises(NeoFeedFetchError):
        fetch_feed(_WINDOW, "key", session=session)


def test_fetch_feed_raises_for_missing_objects_field() -> None:
    """Responses without near_earth_objects are not usable feed data."""
    session = FakeSession(FakeResponse({"element_count": 0}))

    with pytest.raises(NeoFeedFetchError):
        fetch_feed(_WINDOW, "key", session=session)
