"""Quantity rules for merge and sync imports."""

from __future__ import annotations

from collections.abc import Mapping
from typing import cast

from vinboard.domain.model import ImportMode


def _incoming_or_default(incoming: int | None) -> int:
    return incoming if incoming is not None and incoming > 0 else 1


def create_quantity(incoming: int | None) -> int:
    """Quantity for a newly created bottle: one unless a positive count is given."""

    return _incoming_or_default(incoming)


def merge_quantity(existing: int | None, incoming: int | None) -> int:
    """Merge imports add to the stock; a missing count adds one bottle."""

    return max(0, (existing or 0) + _incoming_or_default(incoming))


def sync_quantity(existing: int | None, incoming: int | None) -> int:
    """Sync imports replace the stock with the incoming count when one is given."""

    if incoming is None:
        return existing or 0
    return max(0, incoming)


def resolve_quantity(mode: ImportMode, existing: int | None, incoming: int | None) -> int:
    if mode is ImportMode.SYNC:
        return sync_quantity(existing, incoming)
    return merge_quantity(existing, incoming)


def detect_import_mode(payload: object) -> ImportMode:
    """Suggest a mode from the payload shape: full exports (envelopes) default to sync.

    Only meant as a default for interactive entry points; reconciliation itself always
    receives an explicit mode.
    """

    if isinstance(payload, Mapping):
        envelope = cast(Mapping[str, object], payload)
        if "schema_version" in envelope and isinstance(envelope.get("bottles"), list):
            return ImportMode.SYNC
    return ImportMode.MERGE


__all__ = [
    "create_quantity",
    "detect_import_mode",
    "merge_quantity",
    "resolve_quantity",
    "sync_quantity",
]
