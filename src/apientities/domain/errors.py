"""Errors raised while resolving and hydrating API entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class EntityError(RuntimeError):
    """Base class for entity resolution errors."""


class UnregisteredEntityError(EntityError, LookupError):
    """Raised when no repository is registered for an entity name."""

    def __init__(self, entity_name: str, available: Iterable[str]) -> None:
        self.entity_name = entity_name
        self.available = tuple(available)
        available_list = ", ".join(self.available) or "<none>"
        super().__init__(
            f"Entity {entity_name!r} is not registered. Available repositories: {available_list}"
        )


class InvalidRepositoryConfigError(EntityError):
    """Raised at manager construction when a repository declaration is unusable."""

    def __init__(self, message: str, *, repository: object = None) -> None:
        super().__init__(message)
        self.repository = repository


class DuplicateEntityError(InvalidRepositoryConfigError):
    """Raised when two repositories declare the same entity name."""

    def __init__(self, entity_name: str, *, repository: object, existing: object) -> None:
        super().__init__(
            f"Entity {entity_name!r} is declared by both "
            f"{_qualname(existing)} and {_qualname(repository)}",
            repository=repository,
        )
        self.entity_name = entity_name
        self.existing = existing


class MalformedEntityPayloadError(EntityError, ValueError):
    """Raised when a payload cannot be turned into an entity."""

    def __init__(self, message: str, *, payload: object, index: int | None = None) -> None:
        if index is not None:
            message = f"item {index}: {message}"
        super().__init__(message)
        self.payload = payload
        self.index = index


def _qualname(value: object) -> str:
    return getattr(value, "__qualname__", repr(value))
