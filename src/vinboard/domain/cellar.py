"""Inventory operations on bottles: direct entry, opening, filtering, demo data."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

from vinboard.domain.clock import utcnow
from vinboard.domain.importing.reconcile import canonical_fields, merge_into
from vinboard.domain.importing.schema import (
    ImportBottlePayload,
    raw_external_key,
    validate_import_item,
)
from vinboard.domain.model import (
    BottleRecord,
    BottleStatus,
    ImportValidationError,
    NormalizedField,
    OpenedRecord,
)
from vinboard.domain.normalization import normalize
from vinboard.domain.status import StatusResult, compute_bottle_status

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from vinboard.domain.clock import Clock

_SEARCH_FIELDS: Final[tuple[str, ...]] = (
    "producer",
    "wine",
    "appellation",
    "region",
    "country",
    "vintage",
    "barcode",
    "external_key",
)


def open_bottle(
    bottle: BottleRecord,
    *,
    quantity: int = 1,
    tasting_notes: str | None = None,
    rating_100: int | None = None,
    clock: Clock = utcnow,
) -> OpenedRecord:
    """Take ``quantity`` bottles out of stock and return the matching history entry."""

    if quantity <= 0:
        raise ValueError(f"Quantity opened must be positive, got {quantity}")
    now = clock()
    opened = OpenedRecord.snapshot(
        bottle,
        opened_at=now,
        quantity=quantity,
        tasting_notes=(tasting_notes or "").strip() or None,
        rating_100=rating_100,
    )
    bottle.adjust_quantity(-quantity)
    bottle.updated_at = now
    return opened


_LOCKED_FIELDS: Final[frozenset[str]] = frozenset(
    {"id", "owner_id", "external_key", "legacy", "created_at", "updated_at"}
)


def _check_field_names(fields: Mapping[str, Any], *, external_key: str) -> None:
    unknown = sorted(set(fields) - set(ImportBottlePayload.model_fields))
    if unknown:
        raise ImportValidationError(
            f"Unknown bottle field(s): {', '.join(unknown)}", external_key=external_key
        )


def new_bottle(
    fields: Mapping[str, Any],
    owner_id: str,
    *,
    clock: Clock = utcnow,
) -> BottleRecord:
    """Build a bottle from direct entry.

    Values are coerced and normalized the same way import items are, but unknown
    field names are rejected. Quantity defaults to one and must not be negative.
    """

    _check_field_names(fields, external_key=raw_external_key(fields))
    payload = validate_import_item(fields)
    quantity = 1 if payload.quantity is None else payload.quantity
    if quantity < 0:
        raise ImportValidationError(
            f"quantity: must not be negative, got {quantity}", external_key=payload.external_key
        )
    now = clock()
    return BottleRecord(
        owner_id=owner_id,
        external_key=payload.external_key,
        quantity=quantity,
        created_at=now,
        updated_at=now,
        **canonical_fields(payload),
    )


def edit_bottle(
    bottle: BottleRecord,
    fields: Mapping[str, Any],
    *,
    quantity_delta: int = 0,
    clock: Clock = utcnow,
) -> BottleRecord:
    """Apply a direct edit to ``bottle`` in place.

    Non-null values overwrite the stored ones after normalization. A ``quantity``
    value sets the stock and ``quantity_delta`` is added on top; the bottle is left
    untouched when either the values or the resulting stock are invalid.
    """

    locked = sorted(_LOCKED_FIELDS.intersection(fields))
    if locked:
        raise ImportValidationError(
            f"Field(s) cannot be edited: {', '.join(locked)}", external_key=bottle.external_key
        )
    _check_field_names(fields, external_key=bottle.external_key)
    payload = validate_import_item({**fields, "external_key": bottle.external_key})

    target = bottle.quantity if payload.quantity is None else payload.quantity
    bottle.adjust_quantity(target - bottle.quantity + quantity_delta)
    merge_into(bottle, canonical_fields(payload))
    bottle.updated_at = clock()
    return bottle


@dataclass(frozen=True, slots=True)
class BottleQuery:
    """List filters; enum-like values are compared after normalization."""

    q: str | None = None
    status: BottleStatus | None = None
    color: str | None = None
    type: str | None = None
    confidence: str | None = None
    window_source: str | None = None
    location: str | None = None

    def _field_filters(self) -> dict[str, str]:
        candidates = {
            "color": (NormalizedField.COLOR, self.color),
            "type": (NormalizedField.TYPE, self.type),
            "confidence": (NormalizedField.CONFIDENCE, self.confidence),
            "window_source": (NormalizedField.WINDOW_SOURCE, self.window_source),
            "location": (NormalizedField.LOCATION, self.location),
        }
        filters: dict[str, str] = {}
        for name, (kind, raw) in candidates.items():
            token = normalize(kind, raw)
            if token is not None:
                filters[name] = token
        return filters

    def matches(self, bottle: BottleRecord, status: StatusResult) -> bool:
        if self.status is not None and status.status is not self.status:
            return False
        for name, token in self._field_filters().items():
            kind = NormalizedField(name)
            if normalize(kind, getattr(bottle, name)) != token:
                return False
        return self.q is None or _matches_search(bottle, self.q)


def _matches_search(bottle: BottleRecord, term: str) -> bool:
    needle = term.strip().casefold()
    if not needle:
        return True
    for name in _SEARCH_FIELDS:
        value = getattr(bottle, name)
        if value and needle in str(value).casefold():
            return True
    return False


def with_status(
    bottles: Iterable[BottleRecord],
    *,
    now_year: int,
) -> list[tuple[BottleRecord, StatusResult]]:
    return [(bottle, compute_bottle_status(bottle, now_year=now_year)) for bottle in bottles]


def filter_bottles(
    bottles: Iterable[BottleRecord],
    query: BottleQuery,
    *,
    now_year: int,
) -> list[tuple[BottleRecord, StatusResult]]:
    return [
        (bottle, status)
        for bottle, status in with_status(bottles, now_year=now_year)
        if query.matches(bottle, status)
    ]


@dataclass(slots=True)
class FilterOptions:
    """Distinct values offered as list filters."""

    colors: list[str] = field(default_factory=list)
    types: list[str] = field(default_factory=list)
    confidences: list[str] = field(default_factory=list)
    window_sources: list[str] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "colors": self.colors,
            "types": self.types,
            "confidences": self.confidences,
            "window_sources": self.window_sources,
            "locations": self.locations,
        }


def _distinct(bottles: Sequence[BottleRecord], name: str) -> list[str]:
    values = {getattr(bottle, name) for bottle in bottles}
    return sorted(value for value in values if value)


def filter_options(bottles: Iterable[BottleRecord]) -> FilterOptions:
    materialized = list(bottles)
    return FilterOptions(
        colors=_distinct(materialized, "color"),
        types=_distinct(materialized, "type"),
        confidences=_distinct(materialized, "confidence"),
        window_sources=_distinct(materialized, "window_source"),
        locations=_distinct(materialized, "location"),
    )


DEMO_BOTTLES: Final[tuple[dict[str, Any], ...]] = (
    {
        "external_key": "demo-1",
        "producer": "Domaine de la Romanée-Conti",
        "wine": "Romanée-Conti",
        "vintage": "2015",
        "country": "France",
        "region": "Burgundy",
        "appellation": "Vosne-Romanée",
        "color": "red",
        "type": "still",
        "size_ml": 750,
        "quantity": 1,
        "window_start_year": 2025,
        "peak_start_year": 2030,
        "peak_end_year": 2040,
        "window_end_year": 2050,
        "confidence": "high",
        "notes": "The holy grail.",
    },
    {
        "external_key": "demo-2",
        "producer": "Château Margaux",
        "wine": "Grand Vin",
        "vintage": "2010",
        "country": "France",
        "region": "Bordeaux",
        "appellation": "Margaux",
        "color": "red",
        "type": "still",
        "size_ml": 750,
        "quantity": 3,
        "window_start_year": 2020,
        "peak_start_year": 2025,
        "peak_end_year": 2045,
        "window_end_year": 2060,
        "confidence": "high",
        "notes": "Perfect provenance.",
    },
    {
        "external_key": "demo-3",
        "producer": "Cloudy Bay",
        "wine": "Sauvignon Blanc",
        "vintage": "2023",
        "country": "New Zealand",
        "region": "Marlborough",
        "color": "white",
        "type": "still",
        "size_ml": 750,
        "quantity": 6,
        "window_start_year": 2023,
        "peak_start_year": 2023,
        "peak_end_year": 2024,
        "window_end_year": 2025,
        "confidence": "medium",
        "notes": "Drink fresh.",
    },
    {
        "external_key": "demo-4",
        "producer": "Dom Pérignon",
        "wine": "Vintage",
        "vintage": "2012",
        "country": "France",
        "region": "Champagne",
        "color": "sparkling",
        "type": "sparkling",
        "size_ml": 750,
        "quantity": 2,
        "window_start_year": 2020,
        "peak_start_year": 2022,
        "peak_end_year": 2035,
        "window_end_year": 2040,
        "confidence": "high",
    },
)


def demo_bottles(owner_id: str, *, clock: Clock = utcnow) -> list[BottleRecord]:
    now = clock()
    return [
        BottleRecord(owner_id=owner_id, created_at=now, updated_at=now, **sample)
        for sample in DEMO_BOTTLES
    ]


__all__ = [
    "DEMO_BOTTLES",
    "BottleQuery",
    "FilterOptions",
    "demo_bottles",
    "edit_bottle",
    "filter_bottles",
    "filter_options",
    "new_bottle",
    "open_bottle",
    "with_status",
]
