"""Integration tests for the fetch, flatten, and upsert flow."""

from __future__ import annotations

from datetime import date

from core.config import NeoFeedConfig
from store.feed_sdk import NeoFeedClient
from tests.fakes import FakeLogger, FakeResponse, FakeSearchClient, FakeSession
from tests.fixture_paths import load_json_fixture


def _client(search_client: FakeSearchClient, payload: object) -> NeoFeedClient:
    config = NeoFeedConfig(
        elastic_endpoint=None,
        elastic_cloud_id="deployment:abc",
        elastic_api_key="key",
        nasa_api_key="DEMO_KEY",
        index_name="neo-integration",
        lookback_days=1,
        request_timeout_seconds=30.0,
    )
    session = FakeSession(FakeResponse(payload))
    return NeoFeedClient(config, search_client, session, FakeLogger())


def test_repeated_runs_leave_index_unchanged() -> None:
    """Running the same window twice should match running it once."""
    search_client = FakeSearchClient()
    client = _client(search_client, load_json_fixture("feed/sample_feed.json"))

    first = client.run(end_date=date(2024, 1, 2))
    documents = search_client.documents["neo-integration"]
    snapshot = {doc_id: dict(doc) for doc_id, doc in documents.items()}
    second = client.run(end_date=date(2024, 1, 2))

    assert (first.status, second.status) == ("success", "success")
    assert search_client.documents["neo-integration"] == snapshot
    assert len(search_client.indices.create_calls) == 1


def test_empty_feed_creates_nothing() -> None:
    """An empty feed should neither create the index nor write documents."""
    search_client = FakeSearchClient()
    client = _client(search_client, load_json_fixture("feed/empty_feed.json"))

    result = client.run(end_date=date(2024, 1, 2))

    assert result.status == "no_data"
    assert search_client.documents == {} and search_client.bulk_calls == []


def test_partial_rejection_keeps_accepted_documents() -> None:
    """Rejected documents should not prevent the rest of the batch from landing."""
    search_client = FakeSearchClient(rejected_ids={"3542519"})
    client = _client(search_client, load_json_fixture("feed/sample_feed.json"))

    result = client.run(end_date=date(2024, 1, 2))

    assert (result.status, result.written_count, result.failed_count) == ("degraded", 2, 1)
    assert sorted(search_client.documents["neo-integration"]) == ["2415949", "54088823"]
