"""Runtime configuration model for neofeed.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
import os
from pathlib import Path
from typing import Mapping

from core.constants import (
    DEFAULT_INDEX_NAME,
    DEFAULT_LOOKBACK_DAYS,
    DEFAULT_NASA_API_KEY,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    MAX_LOOKBACK_DAYS,
    MIN_LOOKBACK_DAYS,
)
from core.errors import NeoFeedConfigError, NeoFeedDependencyError

_STRING_FIELDS = frozenset(
    {"elastic_endpoint", "elastic_cloud_id", "elastic_api_key", "nasa_api_key", "index_name"}
)


@dataclass(frozen=True)
class NeoFeedConfig:
    """Validated runtime configuration.

    Attributes:
        elastic_endpoint: Direct Elasticsearch endpoint URL.
        elastic_cloud_id: Managed-cluster id, alternative to the endpoint.
        elastic_api_key: API key for the document store.
        nasa_api_key: API key for the NeoWs feed.
        index_name: Destination index name.
        lookback_days: Width of the feed query window in days.
        request_timeout_seconds: Timeout applied to outbound requests.
    """

    elastic_endpoint: str | None
    elastic_cloud_id: str | None
    elastic_api_key: str | None
    nasa_api_key: str
    index_name: str
    lookback_days: int
    request_timeout_seconds: float

    @classmethod
    def from_env(cls) -> "NeoFeedConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            NeoFeedConfigError: If environment values are invalid.
        """
        lookback_days = _parse_lookback_days(
            os.getenv("NEOFEED_LOOKBACK_DAYS", str(DEFAULT_LOOKBACK_DAYS))
        )
        request_timeout = _parse_timeout(
            os.getenv("NEOFEED_REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT_SECONDS))
        )
        return cls(
            elastic_endpoint=os.getenv("ELASTIC_ENDPOINT") or None,
            elastic_cloud_id=os.getenv("ELASTIC_CLOUD_ID") or None,
            elastic_api_key=os.getenv("ELASTIC_API_KEY") or None,
            nasa_api_key=os.getenv("NASA_API_KEY") or DEFAULT_NASA_API_KEY,
            index_name=os.getenv("NEOFEED_INDEX_NAME") or DEFAULT_INDEX_NAME,
            lookback_days=lookback_days,
            request_timeout_seconds=request_timeout,
        )

    def with_overrides(self, overrides: Mapping[str, object]) -> "NeoFeedConfig":
        """Return a copy with non-null override values applied and re-validated.

        Args:
            overrides: Field name to value mapping; ``None`` values are ignored.

        Returns:
            Updated config.

        Raises:
            NeoFeedConfigError: If a key is unknown or a value is invalid.
        """
        known_fields = {config_field.name for config_field in fields(self)}
        updates: dict[str, object] = {}
        for key, value in overrides.items():
            if key not in known_fields:
                raise NeoFeedConfigError(
                    f"Unknown config option '{key}'. Supported options: {sorted(known_fields)}."
                )
            if value is None:
                continue
            if key in _STRING_FIELDS and not isinstance(value, str):
                raise NeoFeedConfigError(
                    f"Invalid config option '{key}': expected string, "
                    f"got {type(value).__name__}."
                )
            updates[key] = value
        if "lookback_days" in updates:
            updates["lookback_days"] = _parse_lookback_days(str(updates["lookback_days"]))
        if "request_timeout_seconds" in updates:
            updates["request_timeout_seconds"] = _parse_timeout(
                str(updates["request_timeout_seconds"])
            )
        return replace(self, **updates)  # type: ignore[arg-type]


def load_config(config_path: str | None = None) -> NeoFeedConfig:
    """Build config from environment, optionally overlaid by a YAML file.

    Args:
        config_path: Optional path to a YAML mapping of config field names.

    Returns:
        Validated config.

    Raises:
        NeoFeedConfigError: If the file or any value is invalid.
    """
    config = NeoFeedConfig.from_env()
    if config_path is None:
        return config
    return config.with_overrides(_load_yaml_mapping(config_path))


def validate_store_addressing(config: NeoFeedConfig) -> None:
    """Check that exactly one store addressing form is configured.

    Args:
        config: Runtime configuration.

    Raises:
        NeoFeedConfigError: If neither or both of endpoint and cloud id are set,
            or if the store API key is missing.
    """
    if config.elastic_endpoint and config.elastic_cloud_id:
        raise NeoFeedConfigError(
            "Both ELASTIC_ENDPOINT and ELASTIC_CLOUD_ID are set. "
            "Configure exactly one way to address the search cluster."
        )
    if not config.elastic_endpoint and not config.elastic_cloud_id:
        raise NeoFeedConfigError(
            "No search cluster configured. Set ELASTIC_ENDPOINT or ELASTIC_CLOUD_ID."
        )
    if not config.elastic_api_key:
        raise NeoFeedConfigError(
            "ELASTIC_API_KEY is not set. Provide an API key for the search cluster."
        )


def _parse_lookback_days(raw_value: str) -> int:
    """Parse and range-check the lookback window width.

    Args:
        raw_value: Raw string value.

    Returns:
        Parsed day count.

    Raises:
        NeoFeedConfigError: If value is not an integer in the supported range.
    """
    try:
        lookback_days = int(raw_value)
    except ValueError as error:
        raise NeoFeedConfigError(
            "Invalid NEOFEED_LOOKBACK_DAYS value: "
            f"expected integer, got '{raw_value}'. "
            "Set NEOFEED_LOOKBACK_DAYS to a numeric value."
        ) from error
    if not MIN_LOOKBACK_DAYS <= lookback_days <= MAX_LOOKBACK_DAYS:
        raise NeoFeedConfigError(
            f"Invalid NEOFEED_LOOKBACK_DAYS value {lookback_days}: the feed accepts "
            f"windows of {MIN_LOOKBACK_DAYS} to {MAX_LOOKBACK_DAYS} days."
        )
    return lookback_days


def _parse_timeout(raw_value: str) -> float:
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise NeoFeedConfigError(
            "Invalid NEOFEED_REQUEST_TIMEOUT value: "
            f"expected number of seconds, got '{raw_value}'."
        ) from error
    if timeout <= 0:
        raise NeoFeedConfigError(
            f"Invalid NEOFEED_REQUEST_TIMEOUT value {timeout}: must be positive."
        )
    return timeout


def _load_yaml_mapping(config_path: str) -> Mapping[str, object]:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise NeoFeedDependencyError(
            "YAML config support requires PyYAML. Install with 'pip install pyyaml'."
        ) from error
    config_file = Path(config_path).expanduser().resolve()
    if not config_file.exists():
        raise NeoFeedConfigError(
            f"Config file does not exist at {config_file}. Provide a valid YAML file path."
        )
    try:
        payload = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except OSError as error:
        raise NeoFeedConfigError(
            f"Failed to read config at {config_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise NeoFeedConfigError(
            f"Failed to parse YAML config at {config_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise NeoFeedConfigError(
            f"Invalid config at {config_file}: expected mapping, got {type(payload).__name__}."
        )
    return payload
