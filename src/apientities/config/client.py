"""API client configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, optional_float_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import CACHE_BACKENDS, CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .storage import get_storage_config

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "apientities-client/0.1"


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Connection settings for an entities API."""

    resilience: ResilienceConfig
    api_key: str | None = None

    @property
    def base_url(self) -> str | None:
        return self.resilience.base_url


def get_client_config(*, resilience: ResilienceConfig | None = None) -> ClientConfig:
    """Build a client configuration from ``APIENTITIES_*`` environment variables."""

    values = require_env_vars(("APIENTITIES_BASE_URL",))
    base_url = values["APIENTITIES_BASE_URL"].strip()
    api_key = optional_env_var("APIENTITIES_API_KEY")
    timeout = optional_float_env_var("APIENTITIES_TIMEOUT_SECONDS") or DEFAULT_TIMEOUT_SECONDS

    return ClientConfig(
        api_key=api_key,
        resilience=resilience
        or ResilienceConfig(
            name="apientities",
            base_url=base_url,
            timeout_seconds=timeout,
            retry=RetryPolicy(),
            ratelimit=_ratelimit_from_environment(),
            cache=_cache_from_environment(),
        ),
    )


def _ratelimit_from_environment() -> RateLimit | None:
    calls_per_second = optional_float_env_var("APIENTITIES_RATE_LIMIT")
    if calls_per_second is None:
        return None
    if calls_per_second <= 0:
        raise ConfigurationError(
            f"APIENTITIES_RATE_LIMIT must be a positive number of requests per second "
            f"(got {calls_per_second!r})"
        )
    return RateLimit(max_calls=calls_per_second, per_seconds=1.0)


def _cache_from_environment() -> CacheConfig | None:
    backend = (optional_env_var("APIENTITIES_HTTP_CACHE") or "off").lower()
    if backend == "off":
        return None
    if backend not in CACHE_BACKENDS:
        allowed = ", ".join(sorted({"off", *CACHE_BACKENDS}))
        raise ConfigurationError(
            f"APIENTITIES_HTTP_CACHE must be one of: {allowed} (got {backend!r})"
        )
    if backend == "sqlite":
        cache_path = get_storage_config().http_cache_path()
        return CacheConfig(backend="sqlite", sqlite_path=str(cache_path))
    return CacheConfig(backend="memory")
