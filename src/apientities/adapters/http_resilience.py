"""Long-lived async httpx client with retries, rate limiting and HTTP caching."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from apientities.config.http_resilience import CACHE_BACKENDS
from apientities.config.storage import get_storage_config

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._types import HeaderTypes, QueryParamTypes, TimeoutTypes, URLTypes

    from apientities.config.http_resilience import CacheConfig, ResilienceConfig, RetryPolicy

log = getLogger(__name__)


class RequestOptions(TypedDict, total=False):
    params: QueryParamTypes | None
    headers: HeaderTypes | None
    json: object


class AsyncClientOptions(TypedDict, total=False):
    base_url: str
    timeout: TimeoutTypes
    transport: httpx.AsyncBaseTransport


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


class ResilientClient:
    """Async httpx client with retries, optional rate limiting and optional caching.

    One instance is meant to serve many requests: the limiter window and the cache
    storage live as long as the client does. ``transport`` replaces the network
    transport underneath the retry layer.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter: AsyncLimiter | None = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )

        retry_transport = RetryTransport(transport=transport, retry=build_retry(config.retry))

        client_kwargs: AsyncClientOptions = {
            "timeout": config.timeout_seconds,
            "transport": retry_transport,
        }
        if config.base_url is not None:
            client_kwargs["base_url"] = config.base_url

        storage = _build_cache_storage(config.cache)
        if storage is not None:
            log.debug("HTTP cache enabled for %s", config.name)
            self._client = AsyncCacheClient(**client_kwargs, storage=storage)
        else:
            self._client = httpx.AsyncClient(**client_kwargs)

    @property
    def limiter(self) -> AsyncLimiter | None:
        return self._limiter

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        if self._limiter is None:
            return await self._client.request(method, url, **kwargs)
        async with self._limiter:
            return await self._client.request(method, url, **kwargs)


def _build_cache_storage(config: CacheConfig | None) -> AsyncSqliteStorage | None:
    if config is None or not config.enabled:
        return None

    if config.backend not in CACHE_BACKENDS:
        msg = f"Unsupported cache backend: {config.backend}"
        raise ValueError(msg)

    if config.backend == "sqlite":
        database_path = config.sqlite_path or str(get_storage_config().http_cache_path())
    else:
        database_path = ":memory:"
    return AsyncSqliteStorage(
        database_path=database_path,
        default_ttl=config.default_ttl_seconds,
        refresh_ttl_on_access=config.refresh_ttl_on_access,
    )
