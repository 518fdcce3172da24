"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING, Any

from vinboard.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCellarUnitOfWork,
    is_started,
    startup,
)
from vinboard.config import get_cellar_config
from vinboard.domain import cellar
from vinboard.domain.cellar import BottleQuery, FilterOptions, filter_bottles, filter_options
from vinboard.domain.clock import current_year, utcnow
from vinboard.domain.importing import ImportReport, detect_import_mode, import_bottles
from vinboard.domain.model import (
    BottleNotFoundError,
    DuplicateBottleError,
    ImportAction,
    ImportMode,
    OpenedRecordNotFoundError,
)
from vinboard.domain.ports.unit_of_work import CellarUnitOfWork
from vinboard.domain.status import DashboardStats, compute_bottle_status, dashboard_stats

if TYPE_CHECKING:
    from collections.abc import Mapping

    from vinboard.domain.clock import Clock
    from vinboard.domain.model import BottleRecord, OpenedRecord
    from vinboard.domain.status import StatusResult

UnitOfWorkFactory = Callable[[], CellarUnitOfWork]


log = getLogger(__name__)


def _unit_of_work_factory(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyCellarUnitOfWork


def _owner(owner_id: str | None) -> str:
    return owner_id or get_cellar_config().owner_id


def _year(now_year: int | None, clock: Clock) -> int:
    if now_year is not None:
        return now_year
    configured = get_cellar_config().current_year
    return configured if configured is not None else current_year(clock)


def import_bottles_payload(
    payload: object,
    *,
    owner_id: str | None = None,
    mode: ImportMode | str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    clock: Clock = utcnow,
) -> ImportReport:
    """Import a bottle payload, committing each accepted item on its own.

    ``mode=None`` picks ``sync`` for a versioned envelope and ``merge`` otherwise.
    """

    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    owner = _owner(owner_id)
    import_mode = detect_import_mode(payload) if mode is None else ImportMode(mode)
    log.debug(f"Import mode for owner={owner} resolved to {import_mode}")

    with effective_uow() as uow:
        bottles = uow.repositories.bottles

        def save(record: BottleRecord, action: ImportAction) -> None:
            try:
                if action is ImportAction.CREATED:
                    bottles.add(record)
                uow.commit()
            except Exception:
                uow.rollback()
                raise

        report = import_bottles(
            payload,
            owner,
            mode=import_mode,
            lookup=bottles.get_by_external_key,
            save=save,
            clock=clock,
        )

    return report


def list_bottles(
    *,
    owner_id: str | None = None,
    query: BottleQuery | None = None,
    now_year: int | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    clock: Clock = utcnow,
) -> list[tuple[BottleRecord, StatusResult]]:
    """Return the owner's bottles (newest first) with their computed status."""

    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    owner = _owner(owner_id)
    with effective_uow() as uow:
        bottles = uow.repositories.bottles.list_for_owner(owner)
    return filter_bottles(bottles, query or BottleQuery(), now_year=_year(now_year, clock))


def bottle_filters(
    *,
    owner_id: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> FilterOptions:
    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    with effective_uow() as uow:
        bottles = uow.repositories.bottles.list_for_owner(_owner(owner_id))
    return filter_options(bottles)


def create_bottle(
    fields: Mapping[str, Any],
    *,
    owner_id: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    clock: Clock = utcnow,
) -> BottleRecord:
    """Add a bottle entered by hand; its ``external_key`` must be new for the owner."""

    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    owner = _owner(owner_id)
    bottle = cellar.new_bottle(fields, owner, clock=clock)
    with effective_uow() as uow:
        bottles = uow.repositories.bottles
        if bottles.get_by_external_key(bottle.external_key, owner) is not None:
            raise DuplicateBottleError(bottle.external_key)
        bottles.add(bottle)
        uow.commit()

    log.info(f"Created bottle {bottle.id} ({bottle.external_key}) for owner={owner}")
    return bottle


def get_bottle(
    bottle_id: str,
    *,
    owner_id: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> BottleRecord:
    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    with effective_uow() as uow:
        bottle = uow.repositories.bottles.get(bottle_id, _owner(owner_id))
    if bottle is None:
        raise BottleNotFoundError(bottle_id)
    return bottle


def bottle_status(
    bottle: BottleRecord,
    *,
    now_year: int | None = None,
    clock: Clock = utcnow,
) -> StatusResult:
    return compute_bottle_status(bottle, now_year=_year(now_year, clock))


def update_bottle(
    bottle_id: str,
    fields: Mapping[str, Any] | None = None,
    *,
    owner_id: str | None = None,
    quantity_delta: int = 0,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    clock: Clock = utcnow,
) -> BottleRecord:
    """Edit a bottle's fields and adjust its stock in one commit."""

    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    owner = _owner(owner_id)
    with effective_uow() as uow:
        bottle = uow.repositories.bottles.get(bottle_id, owner)
        if bottle is None:
            raise BottleNotFoundError(bottle_id)
        cellar.edit_bottle(bottle, fields or {}, quantity_delta=quantity_delta, clock=clock)
        uow.commit()

    log.info("Updated bottle %s for owner=%s (quantity now %s)", bottle_id, owner, bottle.quantity)
    return bottle


def get_dashboard(
    *,
    owner_id: str | None = None,
    now_year: int | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    clock: Clock = utcnow,
) -> DashboardStats:
    """Count in-stock bottles per dashboard bucket."""

    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    with effective_uow() as uow:
        bottles = uow.repositories.bottles.list_for_owner(_owner(owner_id))
    return dashboard_stats(bottles, now_year=_year(now_year, clock))


def open_bottle(
    bottle_id: str,
    *,
    owner_id: str | None = None,
    quantity: int = 1,
    tasting_notes: str | None = None,
    rating_100: int | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    clock: Clock = utcnow,
) -> OpenedRecord:
    """Take bottles out of stock and record them in the opened history."""

    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    owner = _owner(owner_id)
    with effective_uow() as uow:
        bottle = uow.repositories.bottles.get(bottle_id, owner)
        if bottle is None:
            raise BottleNotFoundError(bottle_id)
        opened = cellar.open_bottle(
            bottle,
            quantity=quantity,
            tasting_notes=tasting_notes,
            rating_100=rating_100,
            clock=clock,
        )
        uow.repositories.opened.add(opened)
        uow.commit()

    log.info(f"Opened {quantity} x bottle {bottle_id} for owner={owner}")
    return opened


def annotate_opened(
    opened_id: str,
    *,
    owner_id: str | None = None,
    tasting_notes: str | None = None,
    rating_100: int | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> OpenedRecord:
    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    with effective_uow() as uow:
        opened = uow.repositories.opened.get(opened_id, _owner(owner_id))
        if opened is None:
            raise OpenedRecordNotFoundError(opened_id)
        opened.annotate(tasting_notes=tasting_notes, rating_100=rating_100)
        uow.commit()
    return opened


def delete_bottle(
    bottle_id: str,
    *,
    owner_id: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    """Delete a bottle and its opened history; returns the number of history rows removed."""

    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    owner = _owner(owner_id)
    with effective_uow() as uow:
        bottle = uow.repositories.bottles.get(bottle_id, owner)
        if bottle is None:
            raise BottleNotFoundError(bottle_id)
        removed = uow.repositories.opened.delete_for_bottle(bottle_id, owner)
        uow.repositories.bottles.delete(bottle)
        uow.commit()

    log.info("Deleted bottle %s (history rows removed: %s)", bottle_id, removed)
    return removed


def opened_history(
    *,
    owner_id: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[OpenedRecord]:
    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    with effective_uow() as uow:
        return uow.repositories.opened.list_for_owner(_owner(owner_id))


def seed_demo(
    *,
    owner_id: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    clock: Clock = utcnow,
) -> int:
    """Insert the demo bottles into an empty cellar; returns how many were added."""

    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    owner = _owner(owner_id)
    with effective_uow() as uow:
        if uow.repositories.bottles.list_for_owner(owner):
            log.info(f"Cellar for owner={owner} is not empty, skipping demo seed")
            return 0
        samples = cellar.demo_bottles(owner, clock=clock)
        for bottle in samples:
            uow.repositories.bottles.add(bottle)
        uow.commit()

    log.info(f"Seeded {len(samples)} demo bottles for owner={owner}")
    return len(samples)


__all__ = [
    "UnitOfWorkFactory",
    "annotate_opened",
    "bottle_filters",
    "bottle_status",
    "create_bottle",
    "delete_bottle",
    "get_bottle",
    "get_dashboard",
    "import_bottles_payload",
    "list_bottles",
    "open_bottle",
    "opened_history",
    "seed_demo",
    "update_bottle",
]
