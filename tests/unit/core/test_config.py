"""Unit tests for core config parsing."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from core.config import NeoFeedConfig, load_config, validate_store_addressing
from core.constants import DEFAULT_INDEX_NAME, DEFAULT_LOOKBACK_DAYS, DEFAULT_NASA_API_KEY
from core.errors import NeoFeedConfigError


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "ELASTIC_ENDPOINT",
        "ELASTIC_CLOUD_ID",
        "ELASTIC_API_KEY",
        "NASA_API_KEY",
        "NEOFEED_INDEX_NAME",
        "NEOFEED_LOOKBACK_DAYS",
        "NEOFEED_REQUEST_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


def test_from_env_applies_defaults() -> None:
    """Config should fall back to documented defaults."""
    config = NeoFeedConfig.from_env()

    assert (config.index_name, config.lookback_days, config.nasa_api_key) == (
        DEFAULT_INDEX_NAME,
        DEFAULT_LOOKBACK_DAYS,
        DEFAULT_NASA_API_KEY,
    )


def test_from_env_reads_store_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should read endpoint and API keys from environment."""
    monkeypatch.setenv("ELASTIC_ENDPOINT", "https://search.example:9200")
    monkeypatch.setenv("ELASTIC_API_KEY", "secret")
    monkeypatch.setenv("NEOFEED_LOOKBACK_DAYS", "1")

    config = NeoFeedConfig.from_env()

    assert config.elastic_endpoint == "https://search.example:9200"
    assert config.lookback_days == 1


def test_from_env_raises_for_invalid_lookback(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for non-numeric lookback values."""
    monkeypatch.setenv("NEOFEED_LOOKBACK_DAYS", "a week")

    with pytest.raises(NeoFeedConfigError):
        NeoFeedConfig.from_env()


def test_from_env_raises_for_lookback_beyond_feed_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject windows the feed does not serve."""
    monkeypatch.setenv("NEOFEED_LOOKBACK_DAYS", "8")

    with pytest.raises(NeoFeedConfigError):
        NeoFeedConfig.from_env()


def test_from_env_raises_for_non_positive_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject timeouts that would not bound the fetch."""
    monkeypatch.setenv("NEOFEED_REQUEST_TIMEOUT", "0")

    with pytest.raises(NeoFeedConfigError):
        NeoFeedConfig.from_env()


def test_with_overrides_ignores_none_values() -> None:
    """Overrides should only replace values that were provided."""
    config = NeoFeedConfig.from_env()

    updated = config.with_overrides({"index_name": None, "lookback_days": 3})

    assert (updated.index_name, updated.lookback_days) == (DEFAULT_INDEX_NAME, 3)


def test_with_overrides_rejects_unknown_keys() -> None:
    """Overrides should fail loudly on misspelled option names."""
    config = NeoFeedConfig.from_env()

    with pytest.raises(NeoFeedConfigError):
        config.with_overrides({"index": "other"})


def test_load_config_applies_yaml_file(tmp_path: Path) -> None:
    """YAML config values should override environment defaults."""
    config_file = tmp_path / "neofeed.yaml"
    config_file.write_text("index_name: neo-test\nlookback_days: 2\n", encoding="utf-8")

    config = load_config(str(config_file))

    assert (config.index_name, config.lookback_days) == ("neo-test", 2)


def test_load_config_raises_for_missing_file(tmp_path: Path) -> None:
    """Loading a missing config file should fail with a config error."""
    with pytest.raises(NeoFeedConfigError):
        load_config(str(tmp_path / "missing.yaml"))


def test_load_config_raises_for_non_mapping_file(tmp_path: Path) -> None:
    """Config files must hold a mapping of option names."""
    config_file = tmp_path / "neofeed.yaml"
    config_file.write_text("- index_name\n", encoding="utf-8")

    with pytest.raises(NeoFeedConfigError):
        load_config(str(config_file))


def test_validate_store_addressing_accepts_cloud_id() -> None:
    """A cloud id with API key is a complete store address."""
    config = replace(
        NeoFeedConfig.from_env(), elastic_cloud_id="deployment:abc", elastic_api_key="key"
    )

    validate_store_addressing(config)

    assert config.elastic_endpoint is None


def test_validate_store_addressing_rejects_both_forms() -> None:
    """Endpoint and cloud id together are ambiguous."""
    config = replace(
        NeoFeedConfig.from_env(),
        elastic_endpoint="https://search.example:9200",
        elastic_cloud_id="deployment:abc",
        elastic_api_key="key",
    )

    with pytest.raises(NeoFeedConfigError):
        validate_store_addressing(config)


def test_validate_store_addressing_rejects_missing_api_key() -> None:
    """Store writes need an API key."""
    config = replace(NeoFeedConfig.from_env(), elastic_endpoint="https://search.example:9200")

    with pytest.raises(NeoFeedConfigError):
        validate_store_addressing(config)


def test_with_overrides_rejects_non_string_index_name() -> None:
    """String options from YAML should not accept lists or numbers."""
    config = NeoFeedConfig.from_env()

    with pytest.raises(NeoFeedConfigError):
        config.with_overrides({"index_name": ["a"]})
