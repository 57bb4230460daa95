"""Feed flattening transform.

This module turns the date-keyed NeoWs payload into flat index records.
It is a pure transform: no network or store access happens here.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from core.constants import NEO_FEED_PAYLOAD_KEY
from core.errors import NeoFeedTransformError
from core.types import NeoRecord


def flatten_feed(payload: Mapping[str, Any]) -> list[NeoRecord]:
    """Flatten a feed payload into one record per listed object.

    Args:
        payload: Date-keyed object lists, or a full feed response carrying
            them under ``near_earth_objects``.

    Returns:
        Records in payload iteration order.

    Raises:
        NeoFeedTransformError: If the payload shape is invalid or an object
            has no id.
    """
    objects_by_date = _unwrap_payload(payload)
    records: list[NeoRecord] = []
    for date_key, objects in objects_by_date.items():
        if not isinstance(objects, list):
            raise NeoFeedTransformError(
                f"Invalid feed payload: objects for {date_key} must be a list, "
                f"got {type(objects).__name__}."
            )
        for neo_object in objects:
            records.append(_build_record(str(date_key), neo_object))
    return records


def remove_duplicate_ids(records: Iterable[NeoRecord]) -> list[NeoRecord]:
    """Keep the first record seen for each id.

    Args:
        records: Flattened records.

    Returns:
        Ordered records with unique ids.
    """
    unique_records: list[NeoRecord] = []
    seen_ids: set[str] = set()
    for record in records:
        if record.id in seen_ids:
            continue
        seen_ids.add(record.id)
        unique_records.append(record)
    return unique_records


def _unwrap_payload(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise NeoFeedTransformError(
            f"Invalid feed payload: expected mapping, got {type(payload).__name__}."
        )
    if NEO_FEED_PAYLOAD_KEY not in payload:
        return payload
    objects_by_date = payload[NEO_FEED_PAYLOAD_KEY]
    if not isinstance(objects_by_date, Mapping):
        raise NeoFeedTransformError(
            f"Invalid feed payload: '{NEO_FEED_PAYLOAD_KEY}' must be a mapping of dates."
        )
    return objects_by_date


def _build_record(date_key: str, neo_object: Any) -> NeoRecord:
    """Build one flat record from a raw feed object.

    The close-approach date comes from the payload key, not the nested
    approach entry.
    """
    if not isinstance(neo_object, Mapping):
        raise NeoFeedTransformError(
            f"Invalid feed object under {date_key}: expected mapping, "
            f"got {type(neo_object).__name__}."
        )
    object_id = neo_object.get("id")
    if object_id is None or object_id == "":
        raise NeoFeedTransformError(
            f"Invalid feed object under {date_key}: missing 'id'. "
            "Every object needs an id to be used as the document key."
        )
    approach = _first_close_approach(neo_object)
    return NeoRecord(
        id=str(object_id),
        name=str(neo_object.get("name") or ""),
        close_approach_date=date_key,
        miss_distance_km=_nested_float(approach, "miss_distance", "kilometers"),
        is_potentially_hazardous=_optional_bool(
            neo_object.get("is_potentially_hazardous_asteroid")
        ),
        absolute_magnitude_h=_to_float(neo_object.get("absolute_magnitude_h")),
        relative_velocity_km_s=_nested_float(
            approach, "relative_velocity", "kilometers_per_second"
        ),
    )


def _first_close_approach(neo_object: Mapping[str, Any]) -> Mapping[str, Any]:
    approaches = neo_object.get("close_approach_data")
    if not isinstance(approaches, list) or not approaches:
        return {}
    if not isinstance(approaches[0], Mapping):
        return {}
    return approaches[0]


def _nested_float(approach: Mapping[str, Any], section: str, unit: str) -> float | None:
    values = approach.get(section)
    if not isinstance(values, Mapping):
        return None
    return _to_float(values.get(unit))


def _to_float(value: Any) -> float | None:
    # NeoWs serializes distances and velocities as strings.
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    return None
