"""Canonical tokens for free-text enum-like bottle fields.

Tokens are trimmed, stripped of diacritics, lowercased and whitespace-collapsed, then
looked up in a per-field synonym table. Unknown tokens pass through in their
normalized form. Every table value is also its own table entry (or absent from the
keys), which keeps ``normalize`` idempotent.
"""

from __future__ import annotations

import unicodedata
from types import MappingProxyType
from typing import TYPE_CHECKING

from vinboard.domain.model import NormalizedField

if TYPE_CHECKING:
    from collections.abc import Mapping

_COLOR_SYNONYMS: Mapping[str, str] = MappingProxyType(
    {
        "red": "red",
        "rouge": "red",
        "rojo": "red",
        "tinto": "red",
        "rosso": "red",
        "rot": "red",
        "white": "white",
        "blanc": "white",
        "blanco": "white",
        "bianco": "white",
        "weiss": "white",
        "rose": "rose",
        "rosado": "rose",
        "rosato": "rose",
        "orange": "orange",
        "sparkling": "sparkling",
        "effervescent": "sparkling",
        "petillant": "sparkling",
        "fortified": "fortified",
        "fortifie": "fortified",
    }
)

_TYPE_SYNONYMS: Mapping[str, str] = MappingProxyType(
    {
        "still": "still",
        "tranquille": "still",
        "sparkling": "sparkling",
        "effervescent": "sparkling",
        "petillant": "sparkling",
        "fortified": "fortified",
        "fortifie": "fortified",
        "sweet": "sweet",
        "doux": "sweet",
        "moelleux": "sweet",
        "liquoreux": "sweet",
    }
)

_CONFIDENCE_SYNONYMS: Mapping[str, str] = MappingProxyType(
    {
        "high": "high",
        "haute": "high",
        "elevee": "high",
        "medium": "medium",
        "moyenne": "medium",
        "low": "low",
        "basse": "low",
        "faible": "low",
    }
)

_SWEETNESS_SYNONYMS: Mapping[str, str] = MappingProxyType(
    {
        "dry": "dry",
        "sec": "dry",
        "off_dry": "off_dry",
        "off-dry": "off_dry",
        "demi-sec": "off_dry",
        "sweet": "sweet",
        "doux": "sweet",
        "moelleux": "sweet",
        "liquoreux": "sweet",
    }
)

_EMPTY: Mapping[str, str] = MappingProxyType({})

SYNONYMS: Mapping[NormalizedField, Mapping[str, str]] = MappingProxyType(
    {
        NormalizedField.COLOR: _COLOR_SYNONYMS,
        NormalizedField.TYPE: _TYPE_SYNONYMS,
        NormalizedField.CONFIDENCE: _CONFIDENCE_SYNONYMS,
        NormalizedField.SWEETNESS: _SWEETNESS_SYNONYMS,
        NormalizedField.WINDOW_SOURCE: _EMPTY,
        NormalizedField.LOCATION: _EMPTY,
    }
)


def strip_diacritics(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_token(value: object) -> str | None:
    """Return the diacritic-free, lowercased, whitespace-collapsed form of ``value``."""

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    # compatibility decomposition can reintroduce capitals, lowering can reintroduce marks
    text = strip_diacritics(strip_diacritics(text).lower())
    text = " ".join(text.split())
    return text or None


def normalize(field: NormalizedField | str, value: object) -> str | None:
    """Canonicalize ``value`` for ``field``; empty input yields ``None``."""

    token = normalize_token(value)
    if token is None:
        return None
    table = SYNONYMS.get(NormalizedField(field), _EMPTY)
    return table.get(token, token)


def normalize_color(value: object) -> str | None:
    return normalize(NormalizedField.COLOR, value)


def normalize_type(value: object) -> str | None:
    return normalize(NormalizedField.TYPE, value)


def normalize_confidence(value: object) -> str | None:
    return normalize(NormalizedField.CONFIDENCE, value)


def normalize_window_source(value: object) -> str | None:
    return normalize(NormalizedField.WINDOW_SOURCE, value)


def normalize_location(value: object) -> str | None:
    return normalize(NormalizedField.LOCATION, value)


def normalize_sweetness(value: object) -> str | None:
    return normalize(NormalizedField.SWEETNESS, value)


__all__ = [
    "SYNONYMS",
    "normalize",
    "normalize_color",
    "normalize_confidence",
    "normalize_location",
    "normalize_sweetness",
    "normalize_token",
    "normalize_type",
    "normalize_window_source",
    "strip_diacritics",
]
