"""Create-or-merge decisions for a single import item.

Steps, per item:
- resolve legacy field names and keep the raw item as the provenance blob
- validate and coerce the resolved fields
- canonicalize enum-like text fields
- look up an existing bottle by ``(external_key, owner_id)``
- create a new bottle, or merge into the existing one in place

Failures never escape: they come back as a ``rejected`` result with a reason.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, cast

from vinboard.domain.clock import utcnow
from vinboard.domain.importing.legacy import normalize_legacy_import
from vinboard.domain.importing.mode import create_quantity, resolve_quantity
from vinboard.domain.importing.schema import UNKNOWN_KEY, validate_import_item
from vinboard.domain.model import (
    BottleRecord,
    ImportAction,
    ImportMode,
    ImportValidationError,
    NormalizedField,
)
from vinboard.domain.normalization import normalize

if TYPE_CHECKING:
    from vinboard.domain.clock import Clock
    from vinboard.domain.importing.schema import ImportBottlePayload

type BottleLookup = Callable[[str, str], BottleRecord | None]

_CANONICAL_FIELDS: Mapping[str, NormalizedField] = {
    "color": NormalizedField.COLOR,
    "type": NormalizedField.TYPE,
    "confidence": NormalizedField.CONFIDENCE,
    "window_source": NormalizedField.WINDOW_SOURCE,
    "location": NormalizedField.LOCATION,
}

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    """Outcome for one import item; ``record`` is set unless the item was rejected."""

    action: ImportAction
    external_key: str
    record: BottleRecord | None = None
    error: str | None = None

    @property
    def rejected(self) -> bool:
        return self.action is ImportAction.REJECTED

    @classmethod
    def reject(cls, external_key: str, reason: str) -> ReconcileResult:
        return cls(action=ImportAction.REJECTED, external_key=external_key, error=reason)


def canonical_fields(payload: ImportBottlePayload) -> dict[str, Any]:
    """Non-null payload fields with enum-like text run through the normalizer."""

    fields = payload.present_fields()
    for name, field in _CANONICAL_FIELDS.items():
        if name in fields:
            token = normalize(field, fields[name])
            if token is None:
                del fields[name]
            else:
                fields[name] = token
    return fields


def reconcile_import_item(
    raw_item: object,
    owner_id: str,
    lookup: BottleLookup,
    *,
    mode: ImportMode | str = ImportMode.MERGE,
    clock: Clock = utcnow,
) -> ReconcileResult:
    """Decide whether ``raw_item`` creates a bottle, updates one, or is rejected.

    On update the existing record returned by ``lookup`` is modified in place and
    returned as the result's ``record``.
    """

    import_mode = ImportMode(mode)
    if not isinstance(raw_item, Mapping):
        return _rejected(UNKNOWN_KEY, "Import item must be an object")
    item = cast(Mapping[str, Any], raw_item)

    resolved = normalize_legacy_import(item)
    try:
        payload = validate_import_item(resolved.fields)
    except ImportValidationError as exc:
        return _rejected(exc.external_key, exc.reason)

    key = payload.external_key
    fields = canonical_fields(payload)
    legacy = dict(resolved.legacy)

    try:
        existing = lookup(key, owner_id)
    except Exception as exc:  # noqa: BLE001
        return _rejected(key, str(exc) or type(exc).__name__)

    now = clock()
    if existing is None:
        record = BottleRecord(
            owner_id=owner_id,
            external_key=key,
            quantity=create_quantity(payload.quantity),
            legacy=legacy,
            created_at=now,
            updated_at=now,
            **fields,
        )
        return ReconcileResult(action=ImportAction.CREATED, external_key=key, record=record)

    merge_into(existing, fields)
    existing.quantity = resolve_quantity(import_mode, existing.quantity, payload.quantity)
    existing.legacy = legacy
    existing.updated_at = now
    return ReconcileResult(action=ImportAction.UPDATED, external_key=key, record=existing)


def merge_into(record: BottleRecord, fields: Mapping[str, Any]) -> BottleRecord:
    """Overwrite ``record`` attributes with every non-null incoming value."""

    for name, value in fields.items():
        if value is None:
            continue
        setattr(record, name, value)
    return record


def _rejected(external_key: str, reason: str) -> ReconcileResult:
    log.warning("Rejected import item external_key=%s: %s", external_key, reason)
    return ReconcileResult.reject(external_key, reason)


__all__ = [
    "UNKNOWN_KEY",
    "BottleLookup",
    "ReconcileResult",
    "canonical_fields",
    "merge_into",
    "reconcile_import_item",
]
