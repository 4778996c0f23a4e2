"""httpx-backed JSON requester for entity repositories."""

from __future__ import annotations

import asyncio
import threading
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from apientities.config.client import DEFAULT_USER_AGENT, get_client_config
from apientities.config.errors import ConfigurationError
from apientities.domain.ports import HttpMethod

from .http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    from apientities.config.client import ClientConfig
    from apientities.config.http_resilience import ResilienceConfig
    from apientities.domain.ports import JsonPayload, QueryParams

log = getLogger(__name__)

BODY_PREVIEW_LENGTH = 200


class ApiError(RuntimeError):
    """Raised when a request fails in transport or the API replies with an error."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        body_preview: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.body_preview = body_preview

    @classmethod
    def from_response(cls, response: httpx.Response) -> ApiError:
        body = response.text.strip()
        preview = body[:BODY_PREVIEW_LENGTH] if body else "no response body"
        return cls(
            f"API responded with HTTP {response.status_code}: {preview}",
            status=response.status_code,
            body_preview=preview,
        )


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class ApiClient:
    """Sends one JSON request per call and returns the decoded object or array.

    Calls are synchronous. They share one event loop and one
    :class:`ResilientClient`, so the rate limit window and the HTTP cache carry
    over from call to call until :meth:`close`.
    """

    def __init__(
        self,
        *,
        config: ClientConfig,
        default_headers: Mapping[str, str] | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        if config.base_url is None:
            raise ConfigurationError(
                f"Missing base_url in resilience configuration {config.resilience.name!r}"
            )
        self._config = config
        self._client_factory = client_factory or _default_client_factory
        self._default_headers: dict[str, str] = {}
        self.set_default_headers(default_headers or {})
        if config.api_key:
            self.set_bearer_token(config.api_key)

        self._lock = threading.Lock()
        self._runner: asyncio.Runner | None = None
        self._client: ResilientClient | None = None

    @classmethod
    def from_environment(cls) -> ApiClient:
        return cls(config=get_client_config())

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def default_headers(self) -> dict[str, str]:
        return dict(self._default_headers)

    def set_default_headers(self, headers: Mapping[str, str]) -> None:
        for name, value in headers.items():
            self.set_default_header(name, value)

    def set_default_header(self, name: str, value: str) -> None:
        self._default_headers[name] = value

    def remove_default_header(self, name: str) -> None:
        self._default_headers.pop(name, None)

    def set_bearer_token(self, token: str) -> None:
        self.set_default_header("Authorization", f"Bearer {token}")

    def request_json(
        self,
        method: HttpMethod | str,
        path: str,
        *,
        query: QueryParams | None = None,
        json: object = None,
    ) -> JsonPayload:
        verb = HttpMethod(str(method).upper())
        with self._lock:
            if self._runner is None:
                self._runner = asyncio.Runner()
            return self._runner.run(self._request_json_async(verb, path, query=query, json=json))

    def close(self) -> None:
        """Close the underlying HTTP client and its event loop; later calls reopen them."""

        with self._lock:
            runner, client = self._runner, self._client
            self._runner = None
            self._client = None
            if runner is None:
                return
            try:
                if client is not None:
                    runner.run(client.aclose())
            finally:
                runner.close()

    async def _request_json_async(
        self,
        method: HttpMethod,
        path: str,
        *,
        query: QueryParams | None,
        json: object,
    ) -> JsonPayload:
        url = path.lstrip("/")
        params = {key: value for key, value in (query or {}).items() if value is not None}

        if self._client is None:
            self._client = self._client_factory(self._config.resilience)

        try:
            response = await self._client.request(
                method.value,
                url,
                params=params or None,
                headers=self._build_headers(),
                json=json,
            )
        except httpx.HTTPError as exc:
            log.error("%s %s failed: %s", method.value, url, exc)
            raise ApiError(f"HTTP request failed: {exc}") from exc

        if response.status_code >= 400:
            error = ApiError.from_response(response)
            log.error("%s %s: %s", method.value, url, error)
            raise error

        return _decode_json(response)

    def _build_headers(self) -> dict[str, str]:
        return {
            "User-Agent": DEFAULT_USER_AGENT,
            "Accept": "application/json",
            **self._default_headers,
        }


def _decode_json(response: httpx.Response) -> JsonPayload:
    if not response.content.strip():
        return {}
    try:
        payload = response.json()
    except ValueError as exc:
        raise ApiError(
            f"Invalid JSON response: {exc}", status=response.status_code
        ) from exc
    if not isinstance(payload, dict | list):
        raise ApiError(
            "Unexpected JSON response shape (expected object/array)",
            status=response.status_code,
        )
    return payload
