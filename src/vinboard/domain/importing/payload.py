"""Resolve the accepted import payload shapes into a flat item list."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import cast


@dataclass(frozen=True, slots=True)
class SingleItem:
    item: Mapping[str, object]


@dataclass(frozen=True, slots=True)
class ItemList:
    items: list[object]


@dataclass(frozen=True, slots=True)
class Envelope:
    schema_version: object
    items: list[object]


type ImportPayload = SingleItem | ItemList | Envelope


def classify_payload(payload: object) -> ImportPayload:
    """Tag a decoded JSON document with the shape it was sent in."""

    if isinstance(payload, Mapping):
        mapping = cast(Mapping[str, object], payload)
        bottles = mapping.get("bottles")
        if "schema_version" in mapping and isinstance(bottles, list):
            return Envelope(
                schema_version=mapping["schema_version"],
                items=list(cast(list[object], bottles)),
            )
        return SingleItem(item=mapping)
    if isinstance(payload, (list, tuple)):
        return ItemList(items=list(cast(list[object], payload)))
    # anything else is handed on as one item so it is reported, not dropped
    return ItemList(items=[payload])


def resolve_import_items(payload: object) -> list[object]:
    """Return the raw items of ``payload`` in input order."""

    match classify_payload(payload):
        case SingleItem(item=item):
            return [item]
        case ItemList(items=items) | Envelope(items=items):
            return items


__all__ = [
    "Envelope",
    "ImportPayload",
    "ItemList",
    "SingleItem",
    "classify_payload",
    "resolve_import_items",
]
