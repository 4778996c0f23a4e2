"""Shared fixtures for transport adapter tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from apientities.adapters.http_client import ApiClient
from apientities.config import ClientConfig, ResilienceConfig
from tests.support.http import make_client_factory

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from tests.support.http import Handler

BASE_URL = "https://api.example.com/v1/"


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(
        api_key="secret",
        resilience=ResilienceConfig(name="test", base_url=BASE_URL),
    )


@pytest.fixture
def open_clients() -> Iterator[list[ApiClient]]:
    clients: list[ApiClient] = []
    yield clients
    for client in clients:
        client.close()


@pytest.fixture
def make_api_client(
    client_config: ClientConfig, open_clients: list[ApiClient]
) -> Callable[..., ApiClient]:
    def make(
        handler: Handler,
        *,
        config: ClientConfig | None = None,
        default_headers: dict[str, str] | None = None,
    ) -> ApiClient:
        client = ApiClient(
            config=config or client_config,
            default_headers=default_headers,
            client_factory=make_client_factory(handler),
        )
        open_clients.append(client)
        return client

    return make
