"""Client facade owning the entity manager."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Self

from apientities.adapters.http_client import ApiClient
from apientities.config.client import get_client_config
from apientities.domain.entity import Entity, EntityType
from apientities.domain.manager import EntityManager

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from apientities.config.client import ClientConfig
    from apientities.domain.manager import EntityRef
    from apientities.domain.ports import HttpMethod, JsonPayload, JsonRequester, QueryParams
    from apientities.domain.repository import Repository


class EntitiesClient:
    """Entry point of an entities API.

    Either subclass it and list ``REPOSITORIES``, or pass ``repositories``. Requests
    go through ``requester`` when given, else through an :class:`ApiClient` built
    from ``config``.
    """

    REPOSITORIES: ClassVar[Sequence[type[Repository[Any]]]] = ()

    def __init__(
        self,
        *,
        repositories: Sequence[type[Repository[Any]]] | None = None,
        requester: JsonRequester | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        self._owned_client: ApiClient | None = None
        if requester is None:
            if config is None:
                raise ValueError("EntitiesClient needs either a requester or a config")
            requester = self._owned_client = ApiClient(config=config)
        self._requester = requester
        self._entity_manager = EntityManager(
            self, repositories if repositories is not None else self.REPOSITORIES
        )

    @classmethod
    def from_environment(
        cls,
        repositories: Sequence[type[Repository[Any]]] | None = None,
    ) -> EntitiesClient:
        return cls(repositories=repositories, config=get_client_config())

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client this facade built; an injected requester is left alone."""

        if self._owned_client is not None:
            self._owned_client.close()

    @property
    def entity_manager(self) -> EntityManager:
        return self._entity_manager

    @property
    def requester(self) -> JsonRequester:
        return self._requester

    def get_repository(self, entity: EntityRef) -> Repository[Any]:
        return self._entity_manager.get(entity)

    def request_json(
        self,
        method: HttpMethod | str,
        path: str,
        *,
        query: QueryParams | None = None,
    ) -> JsonPayload:
        return self._requester.request_json(method, path, query=query)

    def build_entity_entrypoint(self, entity: EntityType | type[Entity], path: str) -> str:
        entity_type = entity if isinstance(entity, EntityType) else EntityType.of(entity)
        return f"{entity_type.name}/{path.lstrip('/')}"
