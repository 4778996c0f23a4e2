"""httpx mock transport helpers."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import httpx

from apientities.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from apientities.config import ResilienceConfig

Handler = Callable[[httpx.Request], httpx.Response]


def make_client_factory(handler: Handler) -> Callable[[ResilienceConfig], ResilientClient]:
    """Bypass retries, limiter and cache: requests go straight to ``handler``."""

    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory


class CountingFactory:
    """Builds fully configured resilient clients over a mock network transport."""

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.built: list[ResilientClient] = []

    def __call__(self, resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience, transport=httpx.MockTransport(self.handler))
        self.built.append(client)
        return client
