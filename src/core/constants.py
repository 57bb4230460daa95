"""Core constants used across neofeed modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

NEO_FEED_URL = "https://api.nasa.gov/neo/rest/v1/feed"
NEO_FEED_PAYLOAD_KEY = "near_earth_objects"
DEFAULT_NASA_API_KEY = "DEMO_KEY"
DEFAULT_USER_AGENT = "neofeed/0.1"
DEFAULT_INDEX_NAME = "nasa-neo-feed"
DEFAULT_LOOKBACK_DAYS = 7
MIN_LOOKBACK_DAYS = 1
MAX_LOOKBACK_DAYS = 7
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0
DEFAULT_SCHEDULE_INTERVAL_SECONDS = 86400.0
MAX_LOGGED_FAILURE_REASONS = 5
INDEX_ALREADY_EXISTS_ERROR = "resource_already_exists_exception"
