"""Tests for SQLAlchemy repositories."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session  # noqa: TC002

from tests.helpers.bottles import OWNER, make_bottle
from vinboard.adapters.sqlalchemy.repositories import (
    SqlAlchemyBottleRepository,
    SqlAlchemyOpenedBottleRepository,
)
from vinboard.domain.model import OpenedRecord


def test_bottle_repository_round_trips_fields(sqlite_session: Session) -> None:
    repository = SqlAlchemyBottleRepository(sqlite_session)
    bottle = make_bottle(
        "k-1",
        producer="Domaine X",
        abv=13.5,
        size_ml=750,
        sources=["https://a.example"],
        legacy={"external_key": "k-1", "price_min_eur": 12},
        price_updated_at=datetime(2024, 5, 1, tzinfo=UTC),
    )
    repository.add(bottle)
    sqlite_session.commit()
    sqlite_session.expunge_all()

    loaded = repository.get(bottle.id, OWNER)

    assert loaded is not None
    assert loaded is not bottle
    assert loaded.producer == "Domaine X"
    assert loaded.abv == 13.5
    assert loaded.sources == ["https://a.example"]
    assert loaded.legacy == {"external_key": "k-1", "price_min_eur": 12}
    assert loaded.price_updated_at == datetime(2024, 5, 1, tzinfo=UTC)
    assert loaded.created_at.tzinfo is not None


def test_bottle_lookups_are_scoped_to_owner(sqlite_session: Session) -> None:
    repository = SqlAlchemyBottleRepository(sqlite_session)
    mine = make_bottle("shared")
    theirs = make_bottle("shared", owner_id="other")
    repository.add(mine)
    repository.add(theirs)
    sqlite_session.commit()

    assert repository.get_by_external_key("shared", OWNER) is mine
    assert repository.get_by_external_key("shared", "other") is theirs
    assert repository.get(mine.id, "other") is None
    assert repository.get_by_external_key("missing", OWNER) is None


def test_external_key_is_unique_per_owner(sqlite_session: Session) -> None:
    repository = SqlAlchemyBottleRepository(sqlite_session)
    repository.add(make_bottle("dup"))
    repository.add(make_bottle("dup"))

    with pytest.raises(IntegrityError):
        sqlite_session.commit()


def test_list_for_owner_is_newest_first(sqlite_session: Session) -> None:
    repository = SqlAlchemyBottleRepository(sqlite_session)
    base = datetime(2026, 1, 1, tzinfo=UTC)
    repository.add(make_bottle("old", created_at=base))
    repository.add(make_bottle("new", created_at=base + timedelta(days=1)))
    repository.add(make_bottle("foreign", owner_id="other"))
    sqlite_session.commit()

    keys = [bottle.external_key for bottle in repository.list_for_owner(OWNER)]

    assert keys == ["new", "old"]


def test_delete_bottle(sqlite_session: Session) -> None:
    repository = SqlAlchemyBottleRepository(sqlite_session)
    bottle = make_bottle()
    repository.add(bottle)
    sqlite_session.commit()

    repository.delete(bottle)
    sqlite_session.commit()

    assert repository.list_for_owner(OWNER) == []


def test_opened_repository_history_and_cascade(sqlite_session: Session) -> None:
    bottles = SqlAlchemyBottleRepository(sqlite_session)
    opened = SqlAlchemyOpenedBottleRepository(sqlite_session)
    first = make_bottle("a", quantity=3)
    second = make_bottle("b")
    bottles.add(first)
    bottles.add(second)
    base = datetime(2027, 1, 1, tzinfo=UTC)
    early = OpenedRecord.snapshot(first, opened_at=base)
    late = OpenedRecord.snapshot(first, opened_at=base + timedelta(days=3))
    other = OpenedRecord.snapshot(second, opened_at=base + timedelta(days=1))
    for record in (early, late, other):
        opened.add(record)
    sqlite_session.commit()

    assert [record.id for record in opened.list_for_owner(OWNER)] == [late.id, other.id, early.id]
    assert opened.get(early.id, OWNER) is early
    assert opened.get(early.id, "other") is None

    removed = opened.delete_for_bottle(first.id, OWNER)
    sqlite_session.commit()

    assert removed == 2
    assert [record.id for record in opened.list_for_owner(OWNER)] == [other.id]
