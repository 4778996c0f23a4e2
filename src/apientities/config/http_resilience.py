"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

import httpx

CacheBackend = Literal["sqlite", "memory"]

CACHE_BACKENDS: frozenset[str] = frozenset({"sqlite", "memory"})


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    total: int = 3
    backoff_factor: float = 0.5
    max_backoff_wait: float = 30.0
    respect_retry_after_header: bool = True
    # non-idempotent verbs are not replayed by default
    allowed_methods: frozenset[str] = field(
        default_factory=lambda: frozenset({"DELETE", "GET", "HEAD", "OPTIONS", "PUT"})
    )
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 502, 503, 504})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0


@dataclass(slots=True, frozen=True)
class RateLimit:
    """At most ``max_calls`` requests within any ``per_seconds`` window."""

    max_calls: float
    per_seconds: float = 1.0


@dataclass(slots=True, frozen=True)
class CacheConfig:
    enabled: bool = True
    backend: CacheBackend = "memory"
    sqlite_path: str | None = None
    default_ttl_seconds: float | None = None
    refresh_ttl_on_access: bool = True


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
