"""Pydantic model validating alias-resolved import items."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from datetime import UTC, date, datetime
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from vinboard.domain.model import ImportValidationError

UNKNOWN_KEY = "unknown"


def _is_container(value: object) -> bool:
    return isinstance(value, (Mapping, list, tuple, set))


def nullish_string(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool) or _is_container(value):
        raise ValueError(f"expected text, got {type(value).__name__}")
    if isinstance(value, float) and not math.isfinite(value):
        return None
    text = str(value).strip()
    if not text or text.lower() == "nan":
        return None
    return text


def parse_number(text: str) -> float | None:
    """Parse ``"14,5 %"``-style text; returns ``None`` for anything unparseable."""

    cleaned = text.replace("%", "").replace(",", ".", 1).strip()
    try:
        parsed = float(cleaned)
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def nullish_number(value: object) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or _is_container(value):
        raise ValueError(f"expected a number, got {type(value).__name__}")
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        return parse_number(value)
    return None


def nullish_int(value: object) -> int | None:
    number = nullish_number(value)
    if number is None:
        return None
    return math.trunc(number)


def _string_entries(entries: list[object] | tuple[object, ...]) -> list[str]:
    return [str(entry) for entry in entries if entry is not None and str(entry)]


def nullish_string_list(value: object) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return _string_entries(cast(list[object] | tuple[object, ...], value))
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            parsed = json.loads(stripped)
        except ValueError:
            return None
        if isinstance(parsed, list):
            return _string_entries(cast(list[object], parsed))
        return None
    return None


def parse_timestamp(value: object) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day, tzinfo=UTC)
    else:
        text = nullish_string(value)
        if text is None:
            return None
        normalized = text[:-1] + "+00:00" if text.endswith("Z") else text
        try:
            moment = datetime.fromisoformat(normalized)
        except ValueError as exc:
            raise ValueError(f"invalid timestamp {text!r}") from exc
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    try:
        return moment.astimezone(UTC)
    except OverflowError as exc:
        raise ValueError(f"timestamp {value!r} is out of range") from exc


def parse_external_key(value: object) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        raise ValueError("external_key is required")  # noqa: TRY004
    key = value.strip()
    if not key:
        raise ValueError("external_key is required")
    return key


_STRING_FIELDS = (
    "producer",
    "wine",
    "vintage",
    "country",
    "region",
    "appellation",
    "color",
    "type",
    "grapes",
    "barcode",
    "window_source",
    "confidence",
    "decanting",
    "notes",
    "location",
    "bin",
)
_NUMBER_FIELDS = (
    "abv",
    "serving_temp_c",
    "price_min",
    "price_typical",
    "price_max",
)
_INT_FIELDS = (
    "size_ml",
    "window_start_year",
    "window_end_year",
    "peak_start_year",
    "peak_end_year",
    "quantity",
)


class ImportBottlePayload(BaseModel):
    """One validated import item, keyed by canonical field names."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    external_key: str
    producer: str | None = None
    wine: str | None = None
    vintage: str | None = None
    country: str | None = None
    region: str | None = None
    appellation: str | None = None
    color: str | None = None
    type: str | None = None
    size_ml: int | None = None
    grapes: str | None = None
    abv: float | None = None
    barcode: str | None = None
    window_start_year: int | None = None
    window_end_year: int | None = None
    peak_start_year: int | None = None
    peak_end_year: int | None = None
    window_source: str | None = None
    confidence: str | None = None
    serving_temp_c: float | None = None
    decanting: str | None = None
    price_min: float | None = None
    price_typical: float | None = None
    price_max: float | None = None
    price_updated_at: datetime | None = None
    price_sources: list[str] | None = None
    sources: list[str] | None = None
    notes: str | None = None
    quantity: int | None = None
    location: str | None = None
    bin: str | None = None

    _external_key = field_validator("external_key", mode="before")(parse_external_key)
    _strings = field_validator(*_STRING_FIELDS, mode="before")(nullish_string)
    _numbers = field_validator(*_NUMBER_FIELDS, mode="before")(nullish_number)
    _ints = field_validator(*_INT_FIELDS, mode="before")(nullish_int)
    _lists = field_validator("sources", "price_sources", mode="before")(nullish_string_list)
    _timestamps = field_validator("price_updated_at", mode="before")(parse_timestamp)

    def present_fields(self) -> dict[str, Any]:
        """Return the non-null fields other than the natural key and quantity."""

        return {
            name: value
            for name, value in self.model_dump(exclude={"external_key", "quantity"}).items()
            if value is not None
        }


def raw_external_key(item: Mapping[str, object]) -> str:
    """Best-effort key for error reports, ``"unknown"`` when none can be read."""

    value = item.get("external_key")
    if isinstance(value, str) and value.strip():
        return value.strip()
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return UNKNOWN_KEY


def _describe(error: ValidationError) -> str:
    parts: list[str] = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "item"
        message = detail["msg"].removeprefix("Value error, ")
        parts.append(f"{location}: {message}")
    return "; ".join(parts)


def validate_import_item(fields: Mapping[str, Any]) -> ImportBottlePayload:
    """Validate an alias-resolved item, raising ``ImportValidationError`` on failure."""

    try:
        return ImportBottlePayload.model_validate(dict(fields))
    except ValidationError as exc:
        raise ImportValidationError(_describe(exc), external_key=raw_external_key(fields)) from exc


__all__ = [
    "UNKNOWN_KEY",
    "ImportBottlePayload",
    "nullish_int",
    "nullish_number",
    "nullish_string",
    "nullish_string_list",
    "parse_number",
    "parse_timestamp",
    "raw_external_key",
    "validate_import_item",
]
