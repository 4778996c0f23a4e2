"""Envelope handling for list, item and relationship payloads.

The API may return entities flat or wrapped. These helpers only reshape decoded
JSON; they never construct entities.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ports import JsonValue

ENTITY_KEY = "entity"
DATA_KEY = "data"
ITEMS_KEY = "items"
METADATA_KEY = "metadata"
RELATIONSHIPS_KEY = "relationships"
TYPE_KEY = "type"


@dataclass(frozen=True, slots=True)
class ApiItem:
    """One raw item split into its entity data and out-of-band parts."""

    data: Mapping[str, JsonValue]
    metadata: Mapping[str, JsonValue] = field(default_factory=dict)
    relationships: tuple[JsonValue, ...] = ()


@dataclass(frozen=True, slots=True)
class RelationshipRef:
    """A relationship entry reduced to its declared type and nested payload."""

    type: str
    payload: JsonValue


def split_api_item(item: Mapping[str, JsonValue]) -> ApiItem:
    """Split ``{"entity": {...}, "metadata": {...}, "relationships": [...]}`` or a bare object."""

    entity = item.get(ENTITY_KEY)
    data = entity if isinstance(entity, Mapping) else item

    metadata = item.get(METADATA_KEY)
    relationships = item.get(RELATIONSHIPS_KEY)

    return ApiItem(
        data=data,
        metadata=metadata if isinstance(metadata, Mapping) else {},
        relationships=tuple(relationships) if isinstance(relationships, list) else (),
    )


def extract_list_items(payload: object) -> list[JsonValue]:
    """Return the item list of a list response, or ``[]`` when none can be found.

    Accepted shapes, most nested first: ``{"data": {"items": [...]}}``,
    ``{"data": [...]}``, ``{"items": [...]}`` and a bare ``[...]``.
    """

    if isinstance(payload, list):
        return list(payload)
    if not isinstance(payload, Mapping):
        return []

    data = payload.get(DATA_KEY)
    if isinstance(data, Mapping):
        items = data.get(ITEMS_KEY)
        if isinstance(items, list):
            return list(items)
    elif isinstance(data, list):
        return list(data)

    items = payload.get(ITEMS_KEY)
    if isinstance(items, list):
        return list(items)
    return []


def unwrap_item_payload(payload: object) -> object:
    """Return the ``data`` object of a single-item response when present."""

    if isinstance(payload, Mapping):
        data = payload.get(DATA_KEY)
        if isinstance(data, Mapping):
            return data
    return payload


def parse_relationship(entry: object) -> RelationshipRef | None:
    """Reduce one relationship entry, or return ``None`` when it cannot be used.

    The nested payload comes from ``entity``, else ``data``, else the entry itself
    without its ``type`` key.
    """

    if not isinstance(entry, Mapping):
        return None
    entity_type = entry.get(TYPE_KEY)
    if not isinstance(entity_type, str) or not entity_type.strip():
        return None

    if ENTITY_KEY in entry:
        nested = entry[ENTITY_KEY]
    elif DATA_KEY in entry:
        nested = entry[DATA_KEY]
    else:
        nested = {key: value for key, value in entry.items() if key != TYPE_KEY}
    return RelationshipRef(type=entity_type, payload=nested)
