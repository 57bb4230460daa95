"""Elasticsearch-backed index store.

This module ensures the destination index exists and writes flat
records as id-keyed bulk upserts that are visible on return.
"""

from __future__ import annotations

from typing import Any, Sequence

from elasticsearch import ApiError, TransportError

from core.constants import INDEX_ALREADY_EXISTS_ERROR, MAX_LOGGED_FAILURE_REASONS
from core.errors import NeoFeedSchemaError, NeoFeedStoreError
from core.logging_config import get_logger
from core.types import BulkWriteSummary, NeoRecord
from store.index_schema import build_index_mappings
from store.record_payload import neo_record_from_document, neo_record_to_document

_LOGGER = get_logger(__name__)


class SearchIndexStore:
    """Index store for one destination index."""

    def __init__(self, client: Any, index_name: str) -> None:
        """Create an index store.

        Args:
            client: Elasticsearch client.
            index_name: Destination index name.
        """
        self._client = client
        self._index_name = index_name

    @property
    def index_name(self) -> str:
        """Destination index name."""
        return self._index_name

    def ensure_index(self) -> bool:
        """Create the index with its mappings if it does not exist.

        Safe to call on every run; an index created concurrently by another
        run counts as existing.

        Returns:
            True when this call created the index.

        Raises:
            NeoFeedSchemaError: If the existence check or creation is rejected.
        """
        try:
            if self._client.indices.exists(index=self._index_name):
                return False
            self._client.indices.create(index=self._index_name, mappings=build_index_mappings())
        except ApiError as error:
            if _is_already_exists_error(error):
                return False
            raise NeoFeedSchemaError(
                f"Failed to create index '{self._index_name}': {error}. "
                "Check cluster permissions and existing mappings."
            ) from error
        except TransportError as error:
            raise NeoFeedSchemaError(
                f"Failed to check or create index '{self._index_name}': {error}."
            ) from error
        _LOGGER.info("index_created", index_name=self._index_name)
        return True

    def upsert_records(self, records: Sequence[NeoRecord]) -> BulkWriteSummary:
        """Write records as one id-keyed bulk request with refresh.

        Args:
            records: Records with unique ids.

        Returns:
            Accepted and rejected document counts.

        Raises:
            NeoFeedStoreError: If the bulk request fails as a whole.
        """
        if not records:
            return BulkWriteSummary(written_count=0)
        operations = self._build_bulk_operations(records)
        try:
            response = self._client.bulk(operations=operations, refresh=True)
        except (ApiError, TransportError) as error:
            raise NeoFeedStoreError(
                f"Bulk upsert of {len(records)} documents into '{self._index_name}' "
                f"failed: {error}."
            ) from error
        return _summarize_bulk_response(response, len(records))

    def get_record(self, record_id: str) -> NeoRecord | None:
        """Load one record by id.

        Args:
            record_id: Document id.

        Returns:
            Stored record, or None when absent.

        Raises:
            NeoFeedStoreError: If the lookup fails.
        """
        try:
            response = self._client.options(ignore_status=404).get(
                index=self._index_name, id=record_id
            )
        except (ApiError, TransportError) as error:
            raise NeoFeedStoreError(
                f"Failed to read document '{record_id}' from '{self._index_name}': {error}."
            ) from error
        if "found" not in response or not response["found"]:
            return None
        return neo_record_from_document(response["_source"])

    def _build_bulk_operations(self, records: Sequence[NeoRecord]) -> list[dict[str, object]]:
        operations: list[dict[str, object]] = []
        for record in records:
            operations.append({"index": {"_index": self._index_name, "_id": record.id}})
            operations.append(neo_record_to_document(record))
        return operations


def _summarize_bulk_response(response: Any, record_count: int) -> BulkWriteSummary:
    """Count per-item failures in a bulk response."""
    if not response["errors"]:
        return BulkWriteSummary(written_count=record_count)
    failure_reasons: list[str] = []
    failed_count = 0
    for item in response["items"]:
        result = item.get("index", {})
        if "error" not in result:
            continue
        failed_count += 1
        if len(failure_reasons) < MAX_LOGGED_FAILURE_REASONS:
            failure_reasons.append(_format_item_error(result))
    return BulkWriteSummary(
        written_count=record_count - failed_count,
        failed_count=failed_count,
        failure_reasons=tuple(failure_reasons),
    )


def _format_item_error(result: dict[str, Any]) -> str:
    error = result["error"]
    if isinstance(error, dict):
        return f"{result.get('_id')}: {error.get('type')}: {error.get('reason')}"
    return f"{result.get('_id')}: {error}"


def _is_already_exists_error(error: ApiError) -> bool:
    body = error.body if isinstance(error.body, dict) else {}
    error_payload = body.get("error")
    if isinstance(error_payload, dict) and error_payload.get("type") == INDEX_ALREADY_EXISTS_ERROR:
        return True
    return error.message == INDEX_ALREADY_EXISTS_ERROR
