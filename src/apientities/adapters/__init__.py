"""Transport adapters implementing the JSON requester port."""

from __future__ import annotations

from .http_client import ApiClient, ApiError
from .http_resilience import ResilientClient

__all__ = ["ApiClient", "ApiError", "ResilientClient"]
