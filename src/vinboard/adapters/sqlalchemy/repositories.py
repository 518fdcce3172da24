"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import select

from vinboard.adapters.sqlalchemy.mappings import bottle_table, opened_bottle_table
from vinboard.domain.model import BottleRecord, OpenedRecord

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


class SqlAlchemyBottleRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: BottleRecord) -> None:
        self.session.add(entity)

    def get(self, bottle_id: str, owner_id: str) -> BottleRecord | None:
        stmt = (
            select(BottleRecord)
            .where(bottle_table.c.id == bottle_id)
            .where(bottle_table.c.owner_id == owner_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_external_key(self, external_key: str, owner_id: str) -> BottleRecord | None:
        stmt = (
            select(BottleRecord)
            .where(bottle_table.c.external_key == external_key)
            .where(bottle_table.c.owner_id == owner_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_owner(self, owner_id: str) -> list[BottleRecord]:
        stmt = (
            select(BottleRecord)
            .where(bottle_table.c.owner_id == owner_id)
            .order_by(bottle_table.c.created_at.desc(), bottle_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())

    def delete(self, bottle: BottleRecord) -> None:
        self.session.delete(bottle)


class SqlAlchemyOpenedBottleRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: OpenedRecord) -> None:
        self.session.add(entity)

    def get(self, opened_id: str, owner_id: str) -> OpenedRecord | None:
        stmt = (
            select(OpenedRecord)
            .where(opened_bottle_table.c.id == opened_id)
            .where(opened_bottle_table.c.owner_id == owner_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_owner(self, owner_id: str) -> list[OpenedRecord]:
        stmt = (
            select(OpenedRecord)
            .where(opened_bottle_table.c.owner_id == owner_id)
            .order_by(opened_bottle_table.c.opened_at.desc(), opened_bottle_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())

    def delete_for_bottle(self, bottle_id: str, owner_id: str) -> int:
        stmt = (
            select(OpenedRecord)
            .where(opened_bottle_table.c.bottle_id == bottle_id)
            .where(opened_bottle_table.c.owner_id == owner_id)
        )
        records = list(self.session.execute(stmt).scalars())
        for record in records:
            self.session.delete(record)
        return len(records)


if TYPE_CHECKING:
    from vinboard.domain.ports.persistence import BottleRepository, OpenedBottleRepository

    _session_stub = cast("Session", object())
    _bottle_repo: BottleRepository = SqlAlchemyBottleRepository(_session_stub)
    _opened_repo: OpenedBottleRepository = SqlAlchemyOpenedBottleRepository(_session_stub)
