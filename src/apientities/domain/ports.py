"""Transport port consumed by repositories."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

type JsonScalar = str | int | float | bool | None
type JsonValue = JsonScalar | list[JsonValue] | dict[str, JsonValue]
type JsonObject = dict[str, JsonValue]
type JsonPayload = JsonObject | list[JsonValue]
type QueryValue = str | int
type QueryParams = Mapping[str, QueryValue | None]


class HttpMethod(StrEnum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


@runtime_checkable
class JsonRequester(Protocol):
    """Performs one JSON exchange and returns the decoded body.

    Implementations raise their own transport error on non-2xx statuses, network
    failures and bodies that are not a JSON object or array.
    """

    def request_json(
        self,
        method: HttpMethod | str,
        path: str,
        *,
        query: QueryParams | None = None,
    ) -> JsonPayload: ...


__all__ = [
    "HttpMethod",
    "JsonObject",
    "JsonPayload",
    "JsonRequester",
    "JsonScalar",
    "JsonValue",
    "QueryParams",
    "QueryValue",
]
