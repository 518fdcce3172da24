"""SQLAlchemy adapter package for VinBoard."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import SqlAlchemyBottleRepository, SqlAlchemyOpenedBottleRepository
from .unit_of_work import (
    SqlAlchemyCellarUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyBottleRepository",
    "SqlAlchemyCellarUnitOfWork",
    "SqlAlchemyOpenedBottleRepository",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
