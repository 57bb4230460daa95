"""Document serialization for NeoRecord payloads.

This module centralizes the mapping between records and index documents.
It is shared by the bulk writer and anything reading documents back.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Mapping

from core.types import NeoRecord


def neo_record_to_document(record: NeoRecord) -> dict[str, object]:
    """Serialize a record into an index document.

    Null fields are kept so a re-upsert fully replaces earlier values.

    Args:
        record: Flat record.

    Returns:
        JSON-safe document body.
    """
    return asdict(record)


def neo_record_from_document(document: Mapping[str, Any]) -> NeoRecord:
    """Deserialize an index document into a record.

    Args:
        document: Document ``_source`` body.

    Returns:
        Parsed record.
    """
    return NeoRecord(
        id=str(document["id"]),
        name=str(document.get("name") or ""),
        close_approach_date=str(document["close_approach_date"]),
        miss_distance_km=_optional_float(document.get("miss_distance_km")),
        is_potentially_hazardous=document.get("is_potentially_hazardous"),
        absolute_magnitude_h=_optional_float(document.get("absolute_magnitude_h")),
        relative_velocity_km_s=_optional_float(document.get("relative_velocity_km_s")),
    )


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)
