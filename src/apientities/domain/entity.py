"""
Entity building blocks:
typed API records and the static descriptors that construct them.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from .errors import InvalidRepositoryConfigError, MalformedEntityPayloadError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .ports import JsonValue

_ACRONYM_BOUNDARY = re.compile(r"(?<=[A-Z])(?=[A-Z][a-z])")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEPARATORS = re.compile(r"[\s\-./]+")


def normalize_entity_name(name: str) -> str:
    """Return the canonical ``lower_snake`` form of an entity name.

    ``"UserProfile"``, ``"user-profile"`` and ``"user_profile"`` all normalize to
    ``"user_profile"``.
    """

    value = _ACRONYM_BOUNDARY.sub("_", name.strip())
    value = _CAMEL_BOUNDARY.sub("_", value)
    value = _SEPARATORS.sub("_", value)
    return value.strip("_").lower()


class Entity(BaseModel):
    """One hydrated API object.

    Subclasses declare ``ENTITY_NAME``, the stable tag used as registry key and wire
    path segment. Fields are frozen; metadata and relationships are attached once by
    the repository that hydrates the entity.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    ENTITY_NAME: ClassVar[str]

    secure_id: str | None = Field(default=None, alias="secureId")

    _metadata: dict[str, JsonValue] = PrivateAttr(default_factory=dict)
    _relationships: tuple[Entity, ...] = PrivateAttr(default_factory=tuple)

    @classmethod
    def entity_type(cls) -> EntityType:
        return EntityType.of(cls)

    @classmethod
    def entity_name(cls) -> str:
        return cls.entity_type().name

    @classmethod
    def from_payload(cls, data: object) -> Self:
        if not isinstance(data, Mapping):
            raise MalformedEntityPayloadError(
                f"{cls.__name__} payload must be a JSON object, got {type(data).__name__}",
                payload=data,
            )
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            missing = sorted(
                ".".join(str(part) for part in error["loc"])
                for error in exc.errors()
                if error["type"] == "missing"
            )
            detail = f"missing {', '.join(missing)}" if missing else str(exc)
            raise MalformedEntityPayloadError(
                f"invalid {cls.__name__} payload: {detail}", payload=data
            ) from exc

    @classmethod
    def from_payload_collection(cls, payloads: Iterable[object]) -> list[Self]:
        entities: list[Self] = []
        for index, payload in enumerate(payloads):
            try:
                entities.append(cls.from_payload(payload))
            except MalformedEntityPayloadError as exc:
                raise MalformedEntityPayloadError(
                    str(exc), payload=exc.payload, index=index
                ) from exc.__cause__
        return entities

    @property
    def metadata(self) -> Mapping[str, JsonValue]:
        return MappingProxyType(self._metadata)

    @property
    def relationships(self) -> tuple[Entity, ...]:
        return self._relationships

    # Hydration only: called by the repository that built this entity.
    def attach_metadata(self, metadata: Mapping[str, JsonValue]) -> None:
        self._metadata = dict(metadata)

    def attach_relationships(self, relationships: Iterable[Entity]) -> None:
        self._relationships = tuple(relationships)

    def get_relationship(self, name: str) -> Entity | None:
        """Return the first related entity whose entity name matches ``name``."""

        wanted = normalize_entity_name(name)
        for related in self._relationships:
            if related.entity_name() == wanted:
                return related
        return None

    def get_relationships(self, name: str) -> tuple[Entity, ...]:
        wanted = normalize_entity_name(name)
        return tuple(
            related for related in self._relationships if related.entity_name() == wanted
        )


@dataclass(frozen=True, slots=True)
class EntityType:
    """Static descriptor of an entity kind: its registry name and constructor."""

    name: str
    model: type[Entity]

    @classmethod
    def of(cls, model: Any) -> EntityType:
        if not isinstance(model, type) or not issubclass(model, Entity):
            raise InvalidRepositoryConfigError(
                f"{model!r} is not an Entity subclass", repository=model
            )
        raw_name = getattr(model, "ENTITY_NAME", None)
        if not isinstance(raw_name, str) or not normalize_entity_name(raw_name):
            raise InvalidRepositoryConfigError(
                f"{model.__qualname__} must declare a non-empty ENTITY_NAME",
                repository=model,
            )
        return cls(name=normalize_entity_name(raw_name), model=model)

    def from_payload(self, data: object) -> Entity:
        return self.model.from_payload(data)

    def from_payload_collection(self, payloads: Sequence[object]) -> list[Entity]:
        return list(self.model.from_payload_collection(payloads))
