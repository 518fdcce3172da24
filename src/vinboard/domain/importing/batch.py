"""Batch import: reconcile every item, persist it, and report per-item failures."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from vinboard.domain.clock import utcnow
from vinboard.domain.importing.payload import resolve_import_items
from vinboard.domain.importing.reconcile import reconcile_import_item
from vinboard.domain.model import ImportAction, ImportMode

if TYPE_CHECKING:
    from vinboard.domain.clock import Clock
    from vinboard.domain.importing.reconcile import BottleLookup
    from vinboard.domain.model import BottleRecord

type SaveBottle = Callable[[BottleRecord, ImportAction], None]

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ImportFailure:
    external_key: str
    reason: str


@dataclass(slots=True)
class ImportReport:
    """Counts of created/updated bottles and the ordered list of failed items."""

    mode: ImportMode
    created: int = 0
    updated: int = 0
    errors: list[ImportFailure] = field(default_factory=list)

    @property
    def errors_count(self) -> int:
        return len(self.errors)

    def fail(self, external_key: str, reason: str) -> None:
        self.errors.append(ImportFailure(external_key=external_key, reason=reason))

    @property
    def processed(self) -> int:
        return self.created + self.updated + self.errors_count

    def to_dict(self) -> dict[str, object]:
        return {
            "mode": str(self.mode),
            "created": self.created,
            "updated": self.updated,
            "errorsCount": self.errors_count,
            "errors": [
                {"externalKey": error.external_key, "reason": error.reason}
                for error in self.errors
            ],
        }


def import_bottles(
    payload: object,
    owner_id: str,
    *,
    mode: ImportMode | str,
    lookup: BottleLookup,
    save: SaveBottle,
    clock: Clock = utcnow,
) -> ImportReport:
    """Import every item of ``payload`` for ``owner_id``.

    Items are handled one at a time in input order. A rejected item or a failing
    ``save`` is recorded in the report and the batch moves on; nothing already saved
    is undone.
    """

    import_mode = ImportMode(mode)
    items = resolve_import_items(payload)
    report = ImportReport(mode=import_mode)
    log.info(
        "Starting bottle import: owner=%s, mode=%s, items=%s",
        owner_id,
        import_mode,
        len(items),
    )

    for raw_item in items:
        result = reconcile_import_item(raw_item, owner_id, lookup, mode=import_mode, clock=clock)
        if result.record is None:
            report.fail(result.external_key, result.error or "Invalid data")
            continue
        try:
            save(result.record, result.action)
        except Exception as exc:  # noqa: BLE001
            log.warning("Failed to save bottle external_key=%s: %s", result.external_key, exc)
            report.fail(result.external_key, str(exc) or type(exc).__name__)
            continue
        if result.action is ImportAction.CREATED:
            report.created += 1
        else:
            report.updated += 1

    log.info(
        f"Finished bottle import: created={report.created}, updated={report.updated}, "
        f"errors={report.errors_count}"
    )
    return report


__all__ = ["ImportFailure", "ImportReport", "SaveBottle", "import_bottles"]
