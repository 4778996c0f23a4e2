from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from apientities.config import (
    ConfigurationError,
    MissingConfigurationError,
    RateLimit,
    ResilienceConfig,
    get_client_config,
)
from apientities.config.client import DEFAULT_TIMEOUT_SECONDS

if TYPE_CHECKING:
    from pathlib import Path

_VARS = (
    "APIENTITIES_BASE_URL",
    "APIENTITIES_API_KEY",
    "APIENTITIES_TIMEOUT_SECONDS",
    "APIENTITIES_HTTP_CACHE",
    "APIENTITIES_RATE_LIMIT",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_base_url_is_required() -> None:
    with pytest.raises(MissingConfigurationError, match="APIENTITIES_BASE_URL"):
        get_client_config()


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APIENTITIES_BASE_URL", " https://api.example.com/v1/ ")

    config = get_client_config()

    assert config.base_url == "https://api.example.com/v1/"
    assert config.api_key is None
    assert config.resilience.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
    assert config.resilience.cache is None
    assert config.resilience.ratelimit is None


def test_reads_api_key_and_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APIENTITIES_BASE_URL", "https://api.example.com/")
    monkeypatch.setenv("APIENTITIES_API_KEY", "secret")
    monkeypatch.setenv("APIENTITIES_TIMEOUT_SECONDS", "5")

    config = get_client_config()

    assert config.api_key == "secret"
    assert config.resilience.timeout_seconds == 5.0


def test_memory_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APIENTITIES_BASE_URL", "https://api.example.com/")
    monkeypatch.setenv("APIENTITIES_HTTP_CACHE", "Memory")

    cache = get_client_config().resilience.cache

    assert cache is not None
    assert cache.backend == "memory"


def test_sqlite_cache_lives_in_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("APIENTITIES_BASE_URL", "https://api.example.com/")
    monkeypatch.setenv("APIENTITIES_HTTP_CACHE", "sqlite")
    monkeypatch.setenv("APIENTITIES_DATA_DIR", str(tmp_path / "data"))

    cache = get_client_config().resilience.cache

    assert cache is not None
    assert cache.backend == "sqlite"
    assert cache.sqlite_path == str((tmp_path / "data" / "http_cache.db").resolve())
    assert (tmp_path / "data").is_dir()


def test_unknown_cache_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APIENTITIES_BASE_URL", "https://api.example.com/")
    monkeypatch.setenv("APIENTITIES_HTTP_CACHE", "redis")

    with pytest.raises(ConfigurationError, match="APIENTITIES_HTTP_CACHE"):
        get_client_config()


def test_explicit_resilience_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APIENTITIES_BASE_URL", "https://api.example.com/")
    resilience = ResilienceConfig(name="custom", base_url="https://other.example.com/")

    assert get_client_config(resilience=resilience).resilience is resilience


def test_rate_limit_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APIENTITIES_BASE_URL", "https://api.example.com/")
    monkeypatch.setenv("APIENTITIES_RATE_LIMIT", "2.5")

    ratelimit = get_client_config().resilience.ratelimit

    assert ratelimit == RateLimit(max_calls=2.5, per_seconds=1.0)


@pytest.mark.parametrize("value", ["0", "-1", "fast"])
def test_invalid_rate_limit(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("APIENTITIES_BASE_URL", "https://api.example.com/")
    monkeypatch.setenv("APIENTITIES_RATE_LIMIT", value)

    with pytest.raises(ConfigurationError, match="APIENTITIES_RATE_LIMIT"):
        get_client_config()
