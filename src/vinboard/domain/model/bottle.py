"""Bottle inventory records and their opened-history snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import uuid4

from vinboard.domain.clock import utcnow
from vinboard.domain.model.errors import InsufficientQuantityError, InvalidRatingError

if TYPE_CHECKING:
    from datetime import datetime

DEFAULT_WINDOW_SOURCE = "unknown"


def new_id() -> str:
    return str(uuid4())


@dataclass(frozen=True, slots=True)
class DrinkingWindow:
    """Calendar-year bounds of a bottle's drinking window and peak."""

    window_start_year: int | None = None
    window_end_year: int | None = None
    peak_start_year: int | None = None
    peak_end_year: int | None = None


@dataclass(eq=False, kw_only=True)
class BottleRecord:
    """One line of a user's cellar inventory.

    ``external_key`` is the natural key used by imports and is unique per owner only.
    ``legacy`` keeps the raw payload of the latest import untouched for auditing.
    """

    owner_id: str
    external_key: str
    id: str = field(default_factory=new_id)

    producer: str | None = None
    wine: str | None = None
    vintage: str | None = None
    country: str | None = None
    region: str | None = None
    appellation: str | None = None
    color: str | None = None
    type: str | None = None
    grapes: str | None = None
    abv: float | None = None
    size_ml: int | None = None
    barcode: str | None = None

    window_start_year: int | None = None
    window_end_year: int | None = None
    peak_start_year: int | None = None
    peak_end_year: int | None = None
    window_source: str | None = DEFAULT_WINDOW_SOURCE
    confidence: str | None = None

    serving_temp_c: float | None = None
    decanting: str | None = None

    price_min: float | None = None
    price_typical: float | None = None
    price_max: float | None = None
    price_updated_at: datetime | None = None
    price_sources: list[str] | None = None

    sources: list[str] | None = None
    legacy: object = None
    notes: str | None = None

    quantity: int = 1
    location: str | None = None
    bin: str | None = None

    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def window(self) -> DrinkingWindow:
        return DrinkingWindow(
            window_start_year=self.window_start_year,
            window_end_year=self.window_end_year,
            peak_start_year=self.peak_start_year,
            peak_end_year=self.peak_end_year,
        )

    @property
    def in_stock(self) -> bool:
        return (self.quantity or 0) > 0

    def adjust_quantity(self, delta: int) -> int:
        """Add ``delta`` (possibly negative) to the quantity and return the new value."""

        current = self.quantity or 0
        updated = current + delta
        if updated < 0:
            raise InsufficientQuantityError(available=current, requested=-delta)
        self.quantity = updated
        return updated


def _check_rating(rating_100: int | None) -> int | None:
    if rating_100 is None:
        return None
    if not 0 <= rating_100 <= 100:  # noqa: PLR2004
        raise InvalidRatingError(f"Rating must be between 0 and 100, got {rating_100}")
    return rating_100


@dataclass(eq=False, kw_only=True)
class OpenedRecord:
    """History entry for bottles taken out of the cellar.

    Producer, wine and vintage are copied at open time; ``bottle_id`` may dangle once
    the source bottle is deleted.
    """

    owner_id: str
    external_key: str
    id: str = field(default_factory=new_id)
    bottle_id: str | None = None
    producer: str | None = None
    wine: str | None = None
    vintage: str | None = None
    opened_at: datetime = field(default_factory=utcnow)
    quantity_opened: int = 1
    tasting_notes: str | None = None
    rating_100: int | None = None
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        _check_rating(self.rating_100)

    @classmethod
    def snapshot(
        cls,
        bottle: BottleRecord,
        *,
        opened_at: datetime,
        quantity: int = 1,
        tasting_notes: str | None = None,
        rating_100: int | None = None,
    ) -> OpenedRecord:
        return cls(
            owner_id=bottle.owner_id,
            external_key=bottle.external_key,
            bottle_id=bottle.id,
            producer=bottle.producer,
            wine=bottle.wine,
            vintage=bottle.vintage,
            opened_at=opened_at,
            quantity_opened=quantity,
            tasting_notes=tasting_notes,
            rating_100=rating_100,
            created_at=opened_at,
        )

    def annotate(
        self,
        *,
        tasting_notes: str | None = None,
        rating_100: int | None = None,
    ) -> None:
        """Update notes and/or rating; ``None`` leaves the current value in place."""

        if rating_100 is not None:
            self.rating_100 = _check_rating(rating_100)
        if tasting_notes is not None:
            self.tasting_notes = tasting_notes.strip() or None
