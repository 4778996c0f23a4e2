from __future__ import annotations

import asyncio

import httpx
import pytest
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage

from apientities.adapters.http_resilience import (
    ResilientClient,
    _build_cache_storage,  # type: ignore[reportPrivateUsage]
    build_retry,
)
from apientities.config import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy


def test_cache_storage_disabled_without_config() -> None:
    assert _build_cache_storage(None) is None
    assert _build_cache_storage(CacheConfig(enabled=False)) is None


def test_memory_cache_builds_sqlite_storage() -> None:
    assert isinstance(_build_cache_storage(CacheConfig(backend="memory")), AsyncSqliteStorage)


def test_unsupported_cache_backend_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported cache backend: redis"):
        _build_cache_storage(CacheConfig(backend="redis"))  # type: ignore[arg-type]


def test_retry_policy_is_translated() -> None:
    retry = build_retry(RetryPolicy(total=5, status_forcelist=frozenset({503})))

    assert retry.total == 5


def test_limiter_follows_rate_limit_config() -> None:
    unlimited = ResilientClient(ResilienceConfig(name="free"))
    limited = ResilientClient(
        ResilienceConfig(name="slow", ratelimit=RateLimit(max_calls=2, per_seconds=10.0))
    )

    assert unlimited.limiter is None
    assert isinstance(limited.limiter, AsyncLimiter)
    assert limited.limiter.max_rate == 2
    assert limited.limiter.time_period == 10.0


def test_requests_pass_through_injected_transport() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    config = ResilienceConfig(
        name="mocked",
        base_url="https://api.example.com/",
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
    )

    async def run() -> httpx.Response:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            return await client.request("GET", "widget/list", params={"page": 1})

    response = asyncio.run(run())

    assert response.json() == {"ok": True}
    assert str(seen[0].url) == "https://api.example.com/widget/list?page=1"
