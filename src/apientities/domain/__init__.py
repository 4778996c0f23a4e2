"""Entity resolution and relationship hydration."""

from __future__ import annotations

from .entity import Entity, EntityType, normalize_entity_name
from .errors import (
    DuplicateEntityError,
    EntityError,
    InvalidRepositoryConfigError,
    MalformedEntityPayloadError,
    UnregisteredEntityError,
)
from .manager import EntityManager, RegistryEntry
from .payload import ApiItem, RelationshipRef, extract_list_items, split_api_item
from .ports import HttpMethod, JsonObject, JsonPayload, JsonRequester, JsonValue
from .repository import Repository

__all__ = [
    "ApiItem",
    "DuplicateEntityError",
    "Entity",
    "EntityError",
    "EntityManager",
    "EntityType",
    "HttpMethod",
    "InvalidRepositoryConfigError",
    "JsonObject",
    "JsonPayload",
    "JsonRequester",
    "JsonValue",
    "MalformedEntityPayloadError",
    "RegistryEntry",
    "RelationshipRef",
    "Repository",
    "UnregisteredEntityError",
    "extract_list_items",
    "normalize_entity_name",
    "split_api_item",
]
