"""NeoWs feed fetcher.

This module computes the query window and issues the single outbound
feed request for a run. It returns the date-keyed object mapping.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, Mapping

import requests

from core.constants import (
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    NEO_FEED_PAYLOAD_KEY,
    NEO_FEED_URL,
)
from core.errors import NeoFeedFetchError
from core.types import FeedWindow


def build_feed_window(lookback_days: int, end_date: date | None = None) -> FeedWindow:
    """Build the feed query window ending at ``end_date``.

    Args:
        lookback_days: Days between start and end date.
        end_date: Reference end date; current UTC date when omitted.

    Returns:
        Query window.
    """
    resolved_end = end_date or datetime.now(timezone.utc).date()
    return FeedWindow(
        start_date=resolved_end - timedelta(days=lookback_days),
        end_date=resolved_end,
    )


def build_feed_params(window: FeedWindow, api_key: str) -> dict[str, str]:
    """Build query parameters for a feed request."""
    return {
        "api_key": api_key,
        "start_date": window.start_date.isoformat(),
        "end_date": window.end_date.isoformat(),
    }


def fetch_feed(
    window: FeedWindow,
    api_key: str,
    timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    session: Any | None = None,
) -> Mapping[str, Any]:
    """Fetch date-keyed near-Earth objects for a window.

    Args:
        window: Query window.
        api_key: NeoWs API key.
        timeout_seconds: Request timeout.
        session: Optional ``requests``-compatible session.

    Returns:
        Mapping of ISO date to raw object list.

    Raises:
        NeoFeedFetchError: If the request fails or the response is malformed.
    """
    http = session or requests
    try:
        response = http.get(
            NEO_FEED_URL,
            params=build_feed_params(window, api_key),
            headers={"User-Agent": DEFAULT_USER_AGENT, "Accept": "application/json"},
            timeout=timeout_seconds,
        )
        response.raise_for_status()
        body = response.json()
    except requests.RequestException as error:
        raise NeoFeedFetchError(
            f"Feed request for {window.start_date}..{window.end_date} failed: {error}"
        ) from error
    except ValueError as error:
        raise NeoFeedFetchError(
            f"Feed response for {window.start_date}..{window.end_date} is not valid JSON."
        ) from error
    return _extract_objects_by_date(body)


def _extract_objects_by_date(body: Any) -> Mapping[str, Any]:
    if not isinstance(body, Mapping):
        raise NeoFeedFetchError(
            f"Unexpected feed response: expected JSON object, got {type(body).__name__}."
        )
    objects_by_date = body.get(NEO_FEED_PAYLOAD_KEY)
    if not isinstance(objects_by_date, Mapping):
        raise NeoFeedFetchError(
            f"Unexpected feed response: missing '{NEO_FEED_PAYLOAD_KEY}' mapping."
        )
    return objects_by_date
