"""Destination index schema.

This module declares the field mapping created before the first write.
Field names match the serialized record payload.
"""

from __future__ import annotations

NEO_INDEX_PROPERTIES: dict[str, dict[str, str]] = {
    "id": {"type": "keyword"},
    "name": {"type": "text"},
    "close_approach_date": {"type": "date"},
    "miss_distance_km": {"type": "float"},
    "is_potentially_hazardous": {"type": "boolean"},
    "absolute_magnitude_h": {"type": "float"},
    "relative_velocity_km_s": {"type": "float"},
}


def build_index_mappings() -> dict[str, object]:
    """Return index mappings for ``indices.create``."""
    properties = {name: dict(mapping) for name, mapping in NEO_INDEX_PROPERTIES.items()}
    return {"properties": properties}
