"""Shared typed models.

This module defines immutable data models used by the fetch, transform,
and index layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Literal

RunStatus = Literal["success", "no_data", "degraded", "failed"]


@dataclass(frozen=True)
class FeedWindow:
    """Inclusive date range for one feed request.

    Attributes:
        start_date: First calendar day queried.
        end_date: Last calendar day queried.
    """

    start_date: date
    end_date: date

    @property
    def days(self) -> int:
        """Number of days between start and end."""
        return (self.end_date - self.start_date).days


@dataclass(frozen=True)
class NeoRecord:
    """Flat near-Earth-object record written to the index.

    Attributes:
        id: Stable upstream object id, used as the document key.
        name: Object designation.
        close_approach_date: Feed date key the object was listed under.
        miss_distance_km: Miss distance of the first close approach, if any.
        is_potentially_hazardous: Upstream hazard flag.
        absolute_magnitude_h: Absolute magnitude H.
        relative_velocity_km_s: Relative velocity of the first close approach.
    """

    id: str
    name: str
    close_approach_date: str
    miss_distance_km: float | None
    is_potentially_hazardous: bool | None = None
    absolute_magnitude_h: float | None = None
    relative_velocity_km_s: float | None = None


@dataclass(frozen=True)
class BulkWriteSummary:
    """Outcome of one bulk upsert request.

    Attributes:
        written_count: Documents accepted by the index.
        failed_count: Documents rejected by the index.
        failure_reasons: A bounded sample of rejection reasons.
    """

    written_count: int
    failed_count: int = 0
    failure_reasons: tuple[str, ...] = ()


@dataclass(frozen=True)
class IngestOptions:
    """Per-run ingest options.

    Attributes:
        index_name: Destination index name.
        lookback_days: Width of the feed query window.
        end_date: Optional reference end date; today (UTC) when omitted.
    """

    index_name: str
    lookback_days: int
    end_date: date | None = None


@dataclass(frozen=True)
class RunResult:
    """Structured result of one pipeline run.

    Attributes:
        status: Terminal status of the run.
        window: Date window queried, when one was computed.
        fetched_count: Records produced by the transform stage, before
            duplicate ids are dropped.
        written_count: Documents accepted by the index.
        failed_count: Documents rejected by the index.
        error: Failure message for failed runs.
        failure_reasons: Sample of document rejection reasons for degraded runs.
    """

    status: RunStatus
    window: FeedWindow | None = None
    fetched_count: int = 0
    written_count: int = 0
    failed_count: int = 0
    error: str | None = None
    failure_reasons: tuple[str, ...] = ()
