"""Bottle import: legacy aliasing, validation and create/merge reconciliation."""

from __future__ import annotations

from .batch import ImportFailure, ImportReport, SaveBottle, import_bottles
from .legacy import LegacyImport, normalize_legacy_import, normalize_sources
from .mode import (
    create_quantity,
    detect_import_mode,
    merge_quantity,
    resolve_quantity,
    sync_quantity,
)
from .payload import classify_payload, resolve_import_items
from .reconcile import BottleLookup, ReconcileResult, reconcile_import_item
from .schema import UNKNOWN_KEY, ImportBottlePayload, validate_import_item

__all__ = [
    "UNKNOWN_KEY",
    "BottleLookup",
    "ImportBottlePayload",
    "ImportFailure",
    "ImportReport",
    "LegacyImport",
    "ReconcileResult",
    "SaveBottle",
    "classify_payload",
    "create_quantity",
    "detect_import_mode",
    "import_bottles",
    "merge_quantity",
    "normalize_legacy_import",
    "normalize_sources",
    "reconcile_import_item",
    "resolve_import_items",
    "resolve_quantity",
    "sync_quantity",
    "validate_import_item",
]
