"""Application configuration helpers."""

from __future__ import annotations

from .client import DEFAULT_USER_AGENT, ClientConfig, get_client_config
from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .storage import StorageConfig, get_storage_config

__all__ = [
    "DEFAULT_USER_AGENT",
    "CacheConfig",
    "ClientConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "get_client_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
]
