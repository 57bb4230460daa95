"""neofeed exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class NeoFeedError(Exception):
    """Base exception for all neofeed failures."""


class NeoFeedConfigError(NeoFeedError):
    """Raised for invalid runtime configuration."""


class NeoFeedFetchError(NeoFeedError):
    """Raised when the upstream feed request fails."""


class NeoFeedTransformError(NeoFeedError):
    """Raised for malformed feed payloads."""


class NeoFeedSchemaError(NeoFeedError):
    """Raised when the destination index cannot be created."""


class NeoFeedStoreError(NeoFeedError):
    """Raised when a bulk write request fails as a whole."""


class NeoFeedDependencyError(NeoFeedError):
    """Raised when an optional runtime dependency is missing."""
