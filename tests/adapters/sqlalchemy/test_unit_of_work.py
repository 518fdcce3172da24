from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from tests.helpers.bottles import OWNER, make_bottle
from vinboard.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCellarUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyCellarUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_startup_uses_configured_database_uri(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    database = tmp_path / "cellar.db"
    monkeypatch.setenv("DATABASE_URI", f"sqlite+pysqlite:///{database}")

    startup(force=True)

    engine = configured_engine()
    assert engine is not None
    assert engine.url.database == str(database)
    assert database.exists()


def test_unit_of_work_persists_bottles(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyCellarUnitOfWork() as uow:
        bottle = make_bottle("persisted")
        uow.repositories.bottles.add(bottle)
        uow.commit()
        bottle_id = bottle.id

    with SqlAlchemyCellarUnitOfWork() as uow:
        loaded = uow.repositories.bottles.get(bottle_id, OWNER)
        assert loaded is not None
        assert loaded.external_key == "persisted"


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError), SqlAlchemyCellarUnitOfWork() as uow:
        uow.repositories.bottles.add(make_bottle("discarded"))
        raise RuntimeError("boom")

    with SqlAlchemyCellarUnitOfWork() as uow:
        assert uow.repositories.bottles.list_for_owner(OWNER) == []


def test_repositories_require_an_open_session(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyCellarUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories
