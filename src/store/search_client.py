"""Search cluster client construction.

This module builds the Elasticsearch client from validated config.
Callers own the returned client for the run or process lifetime.
"""

from __future__ import annotations

from typing import Any

from elasticsearch import Elasticsearch

from core.config import NeoFeedConfig, validate_store_addressing
from core.errors import NeoFeedConfigError


def build_search_client(config: NeoFeedConfig) -> Elasticsearch:
    """Create an Elasticsearch client for the configured cluster.

    Args:
        config: Runtime config with either an endpoint or a cloud id.

    Returns:
        Elasticsearch client.

    Raises:
        NeoFeedConfigError: If store addressing is missing or malformed.
    """
    validate_store_addressing(config)
    try:
        return Elasticsearch(**build_client_kwargs(config))
    except ValueError as error:
        raise NeoFeedConfigError(
            f"Invalid search cluster address: {error}. "
            "Check ELASTIC_ENDPOINT or ELASTIC_CLOUD_ID."
        ) from error


def build_client_kwargs(config: NeoFeedConfig) -> dict[str, Any]:
    """Build Elasticsearch constructor kwargs from config.

    Args:
        config: Runtime config.

    Returns:
        Client keyword arguments.
    """
    kwargs: dict[str, Any] = {
        "api_key": config.elastic_api_key,
        "request_timeout": config.request_timeout_seconds,
    }
    if config.elastic_cloud_id:
        kwargs["cloud_id"] = config.elastic_cloud_id
    else:
        kwargs["hosts"] = [config.elastic_endpoint]
    return kwargs
