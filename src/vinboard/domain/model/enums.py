"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class BottleStatus(StrEnum):
    TO_VERIFY = "to_verify"
    WAIT = "wait"
    PEAK = "peak"
    READY_BEFORE_PEAK = "ready_before_peak"
    READY_AFTER_PEAK = "ready_after_peak"
    READY = "ready"
    DRINK_SOON = "drink_soon"
    POSSIBLY_PAST = "possibly_past"


class CoarseStatus(StrEnum):
    """Five-bucket view used by summary screens; derived from ``BottleStatus``."""

    TO_VERIFY = "to_verify"
    WAIT = "wait"
    OPEN_NOW = "open_now"
    DRINK_SOON = "drink_soon"
    POSSIBLY_PAST = "possibly_past"


class ImportMode(StrEnum):
    MERGE = "merge"
    SYNC = "sync"


class ImportAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    REJECTED = "rejected"


class NormalizedField(StrEnum):
    COLOR = "color"
    TYPE = "type"
    CONFIDENCE = "confidence"
    WINDOW_SOURCE = "window_source"
    LOCATION = "location"
    SWEETNESS = "sweetness"
