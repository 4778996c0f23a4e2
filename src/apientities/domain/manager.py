"""Registry resolving entity names to lazily built repositories."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

from .entity import Entity, EntityType, normalize_entity_name
from .errors import DuplicateEntityError, InvalidRepositoryConfigError, UnregisteredEntityError
from .repository import Repository

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .ports import JsonRequester

log = getLogger(__name__)

type EntityRef = str | EntityType | type[Entity]


@dataclass(slots=True)
class RegistryEntry:
    entity_type: EntityType
    repository_class: type[Repository[Any]]
    instance: Repository[Any] | None = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)


class EntityManager:
    """Single source of truth for which repository handles an entity name.

    Repository classes are validated when the manager is built; each repository is
    instantiated on first access and reused for the lifetime of the manager.
    """

    def __init__(
        self,
        client: JsonRequester,
        repositories: Iterable[type[Repository[Any]]],
    ) -> None:
        self._client = client
        self._registry = self._build_registry(repositories)

    def get(self, entity: EntityRef) -> Repository[Any]:
        entity_name = self._resolve_entity_name(entity)
        entry = self._registry.get(entity_name)
        if entry is None:
            raise UnregisteredEntityError(entity_name, self._registry)

        instance = entry.instance
        if instance is None:
            with entry.lock:
                instance = entry.instance
                if instance is None:
                    instance = entry.repository_class(self._client, self)
                    entry.instance = instance
                    log.debug(
                        "Instantiated %s for entity %s",
                        entry.repository_class.__qualname__,
                        entity_name,
                    )
        return instance

    def all(self) -> dict[str, Repository[Any]]:
        """Instantiate and return every registered repository, keyed by entity name."""

        return {entity_name: self.get(entity_name) for entity_name in self._registry}

    def names(self) -> tuple[str, ...]:
        return tuple(self._registry)

    def entity_type(self, entity: EntityRef) -> EntityType:
        entity_name = self._resolve_entity_name(entity)
        entry = self._registry.get(entity_name)
        if entry is None:
            raise UnregisteredEntityError(entity_name, self._registry)
        return entry.entity_type

    def __contains__(self, entity: object) -> bool:
        if not isinstance(entity, str | EntityType | type):
            return False
        try:
            return self._resolve_entity_name(entity) in self._registry
        except (TypeError, InvalidRepositoryConfigError):
            return False

    @staticmethod
    def _build_registry(
        repositories: Iterable[type[Repository[Any]]],
    ) -> dict[str, RegistryEntry]:
        registry: dict[str, RegistryEntry] = {}
        for repository_class in repositories:
            if not isinstance(repository_class, type) or not issubclass(
                repository_class, Repository
            ):
                raise InvalidRepositoryConfigError(
                    f"{repository_class!r} is not a Repository subclass",
                    repository=repository_class,
                )
            entity_type = repository_class.get_entity_type()
            existing = registry.get(entity_type.name)
            if existing is not None:
                raise DuplicateEntityError(
                    entity_type.name,
                    repository=repository_class,
                    existing=existing.repository_class,
                )
            registry[entity_type.name] = RegistryEntry(
                entity_type=entity_type,
                repository_class=repository_class,
            )
        return registry

    @staticmethod
    def _resolve_entity_name(entity: EntityRef) -> str:
        if isinstance(entity, EntityType):
            return entity.name
        if isinstance(entity, type) and issubclass(entity, Entity):
            return EntityType.of(entity).name
        if isinstance(entity, str):
            return normalize_entity_name(entity)
        raise TypeError(f"Cannot resolve an entity name from {entity!r}")
