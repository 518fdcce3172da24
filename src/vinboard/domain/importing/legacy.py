"""Legacy field aliasing for raw import items."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, cast

log = logging.getLogger(__name__)

# canonical name -> accepted names, first present wins
FIELD_ALIASES: Mapping[str, tuple[str, ...]] = {
    "sources": ("sources", "sources_json"),
    "price_sources": ("price_sources", "price_sources_json"),
    "price_updated_at": ("price_updated_at", "price_checked_at", "price_checked_date"),
    "price_min": ("price_min", "price_min_eur"),
    "price_typical": ("price_typical", "price_typical_eur"),
    "price_max": ("price_max", "price_max_eur"),
}

_SOURCE_LIST_FIELDS = frozenset({"sources", "price_sources"})


@dataclass(frozen=True, slots=True)
class LegacyImport:
    """Raw item kept verbatim next to its alias-resolved field mapping."""

    legacy: Mapping[str, Any]
    fields: dict[str, Any]

    @property
    def sources(self) -> list[str] | None:
        return self.fields.get("sources")

    @property
    def price_sources(self) -> list[str] | None:
        return self.fields.get("price_sources")

    @property
    def price_updated_at(self) -> object:
        return self.fields.get("price_updated_at")


def _parse_json_string(value: object) -> object:
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except ValueError:
        return value


def normalize_sources(value: object) -> list[str] | None:
    """Flatten a source list given natively or as a JSON string.

    String entries are kept, mapping entries contribute their ``url`` (or their JSON
    dump when they have none) and anything else is dropped. ``None`` means the value
    was not a list at all.
    """

    parsed = _parse_json_string(value)
    if not isinstance(parsed, list):
        return None
    sources: list[str] = []
    for entry in cast(list[object], parsed):
        if isinstance(entry, str):
            text = entry
        elif isinstance(entry, Mapping):
            mapping_entry = cast(Mapping[str, object], entry)
            url = mapping_entry.get("url")
            text = url if isinstance(url, str) and url else json.dumps(mapping_entry, default=str)
        else:
            continue
        if text:
            sources.append(text)
    return sources


def _first_present(item: Mapping[str, Any], names: tuple[str, ...]) -> object:
    for name in names:
        value = item.get(name)
        if value is not None:
            return value
    return None


def normalize_legacy_import(item: Mapping[str, Any]) -> LegacyImport:
    """Resolve legacy field names and encodings into canonical keys.

    The returned ``fields`` mapping only contains canonical names; the original item is
    exposed unchanged as ``legacy``.
    """

    alias_names = {name for names in FIELD_ALIASES.values() for name in names}
    fields: dict[str, Any] = {
        key: value for key, value in item.items() if key not in alias_names
    }

    for canonical, names in FIELD_ALIASES.items():
        value = _first_present(item, names)
        if canonical in _SOURCE_LIST_FIELDS:
            value = normalize_sources(value) if value is not None else None
        if value is not None:
            fields[canonical] = value

    grapes = item.get("grapes")
    if isinstance(grapes, list):
        fields["grapes"] = ", ".join(str(grape) for grape in cast(list[object], grapes) if grape)

    log.debug(
        "Resolved legacy import fields: external_key=%s aliases=%s",
        item.get("external_key"),
        sorted(alias_names.intersection(item)),
    )
    return LegacyImport(legacy=item, fields=fields)


__all__ = ["FIELD_ALIASES", "LegacyImport", "normalize_legacy_import", "normalize_sources"]
