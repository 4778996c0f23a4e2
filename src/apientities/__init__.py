from __future__ import annotations

from importlib import metadata

from .client import EntitiesClient
from .common import configure_logging
from .domain import (
    Entity,
    EntityError,
    EntityManager,
    EntityType,
    InvalidRepositoryConfigError,
    JsonRequester,
    MalformedEntityPayloadError,
    Repository,
    UnregisteredEntityError,
)

try:
    __version__ = metadata.version("apientities")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0+local"

__all__ = [
    "EntitiesClient",
    "Entity",
    "EntityError",
    "EntityManager",
    "EntityType",
    "InvalidRepositoryConfigError",
    "JsonRequester",
    "MalformedEntityPayloadError",
    "Repository",
    "UnregisteredEntityError",
    "__version__",
    "configure_logging",
]
