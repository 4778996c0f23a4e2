"""Per-entity repositories: fetch raw JSON and hydrate entities from it."""

from __future__ import annotations

from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar, cast
from urllib.parse import quote

from .entity import Entity, EntityType
from .errors import InvalidRepositoryConfigError, MalformedEntityPayloadError
from .payload import extract_list_items, parse_relationship, split_api_item, unwrap_item_payload
from .ports import HttpMethod

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .manager import EntityManager
    from .ports import JsonRequester, JsonValue, QueryValue

log = getLogger(__name__)

DEFAULT_LIST_ENDPOINT = "list"
DEFAULT_SHOW_ENDPOINT = "show"


class Repository[TEntity: Entity]:
    """Fetch logic for one entity type.

    Subclasses only declare the entity they serve::

        class WidgetRepository(Repository[Widget]):
            ENTITY = Widget

    Instances are built by an :class:`EntityManager`, once per manager, and use it
    to resolve the repositories of related entities.
    """

    ENTITY: ClassVar[type[Entity]]

    def __init__(self, client: JsonRequester, manager: EntityManager) -> None:
        self._client = client
        self._manager = manager

    @classmethod
    def get_entity_type(cls) -> EntityType:
        entity = getattr(cls, "ENTITY", None)
        if entity is None:
            raise InvalidRepositoryConfigError(
                f"{cls.__qualname__} must declare ENTITY", repository=cls
            )
        try:
            return EntityType.of(entity)
        except InvalidRepositoryConfigError as exc:
            raise InvalidRepositoryConfigError(
                f"{cls.__qualname__}: {exc}", repository=cls
            ) from exc

    @classmethod
    def get_entity_name(cls) -> str:
        return cls.get_entity_type().name

    @property
    def client(self) -> JsonRequester:
        return self._client

    @property
    def manager(self) -> EntityManager:
        return self._manager

    def fetch_list(
        self,
        page: int = 0,
        length: int | None = None,
        extra_query: Mapping[str, QueryValue] | None = None,
        endpoint: str = DEFAULT_LIST_ENDPOINT,
    ) -> list[TEntity]:
        """Fetch one page of entities from ``<entity_name>/<endpoint>``."""

        if page < 0:
            raise ValueError(f"page must be >= 0, got {page}")
        if length is not None and length < 1:
            raise ValueError(f"length must be >= 1, got {length}")

        query: dict[str, QueryValue] = dict(extra_query or {})
        query["page"] = page
        if length is not None:
            query["length"] = length

        path = self.build_path(endpoint)
        log.debug("GET %s query=%s", path, query)
        payload = self._client.request_json(HttpMethod.GET, path, query=query)
        return self.hydrate_collection(extract_list_items(payload))

    def fetch(self, identifier: str, endpoint: str = DEFAULT_SHOW_ENDPOINT) -> TEntity:
        """Fetch a single entity from ``<entity_name>/<endpoint>/<identifier>``."""

        path = self.build_path(f"{endpoint.strip('/')}/{quote(identifier, safe='')}")
        log.debug("GET %s", path)
        payload = self._client.request_json(HttpMethod.GET, path)
        return self.hydrate(unwrap_item_payload(payload))

    def build_path(self, suffix: str) -> str:
        return f"{self.get_entity_name()}/{suffix.lstrip('/')}"

    def hydrate(self, item: object) -> TEntity:
        """Build one entity from a raw item, attaching its metadata and relationships."""

        if not isinstance(item, Mapping):
            raise MalformedEntityPayloadError(
                f"{self.get_entity_name()} item must be a JSON object, got {type(item).__name__}",
                payload=item,
            )
        parts = split_api_item(cast("Mapping[str, JsonValue]", item))
        entity = cast("TEntity", self.get_entity_type().from_payload(parts.data))
        entity.attach_metadata(parts.metadata)
        entity.attach_relationships(self.create_relationships(parts.relationships))
        return entity

    def hydrate_collection(self, items: Iterable[object]) -> list[TEntity]:
        entities: list[TEntity] = []
        for index, item in enumerate(items):
            try:
                entities.append(self.hydrate(item))
            except MalformedEntityPayloadError as exc:
                if exc.index is not None:
                    raise
                raise MalformedEntityPayloadError(
                    str(exc), payload=exc.payload, index=index
                ) from exc.__cause__
        return entities

    def create_relationships(self, entries: Iterable[object]) -> tuple[Entity, ...]:
        """Hydrate related entities, skipping entries that cannot be used.

        Each entry's ``type`` is resolved through the manager; an unknown type is a
        configuration error and propagates.
        """

        relationships: list[Entity] = []
        for position, entry in enumerate(entries):
            ref = parse_relationship(entry)
            if ref is None:
                log.debug(
                    "Skipping relationship %d of %s: not an object with a type",
                    position,
                    self.get_entity_name(),
                )
                continue

            repository = self._manager.get(ref.type)
            try:
                related = repository.hydrate(ref.payload)
            except MalformedEntityPayloadError as exc:
                log.debug(
                    "Skipping %s relationship %d of %s: %s",
                    ref.type,
                    position,
                    self.get_entity_name(),
                    exc,
                )
                continue
            relationships.append(related)
        return tuple(relationships)
