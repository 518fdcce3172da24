"""SQLAlchemy mapping metadata for the VinBoard domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Float,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import configure_mappers

from vinboard.domain.model import BottleRecord, OpenedRecord

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

bottle_table = Table(
    "bottle",
    mapper_registry.metadata,
    Column("id", String(36), primary_key=True),
    Column("owner_id", String, nullable=False),
    Column("external_key", String, nullable=False),
    Column("producer", String, nullable=True),
    Column("wine", String, nullable=True),
    Column("vintage", String, nullable=True),
    Column("country", String, nullable=True),
    Column("region", String, nullable=True),
    Column("appellation", String, nullable=True),
    Column("color", String, nullable=True),
    Column("type", String, nullable=True),
    Column("grapes", String, nullable=True),
    Column("abv", Float, nullable=True),
    Column("size_ml", Integer, nullable=True),
    Column("barcode", String, nullable=True),
    Column("window_start_year", Integer, nullable=True),
    Column("window_end_year", Integer, nullable=True),
    Column("peak_start_year", Integer, nullable=True),
    Column("peak_end_year", Integer, nullable=True),
    Column("window_source", String, nullable=True),
    Column("confidence", String, nullable=True),
    Column("serving_temp_c", Float, nullable=True),
    Column("decanting", String, nullable=True),
    Column("price_min", Float, nullable=True),
    Column("price_typical", Float, nullable=True),
    Column("price_max", Float, nullable=True),
    Column("price_updated_at", UTCDateTime(), nullable=True),
    Column("price_sources", JSON, nullable=True),
    Column("sources", JSON, nullable=True),
    Column("legacy", JSON, nullable=True),
    Column("notes", Text, nullable=True),
    Column("quantity", Integer, nullable=False, default=1),
    Column("location", String, nullable=True),
    Column("bin", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    UniqueConstraint("owner_id", "external_key"),
    Index("ix_bottle_owner_created", "owner_id", "created_at"),
)

# bottle_id is a weak reference: history rows outlive the bottle they came from
opened_bottle_table = Table(
    "opened_bottle",
    mapper_registry.metadata,
    Column("id", String(36), primary_key=True),
    Column("owner_id", String, nullable=False),
    Column("bottle_id", String(36), nullable=True),
    Column("external_key", String, nullable=False),
    Column("producer", String, nullable=True),
    Column("wine", String, nullable=True),
    Column("vintage", String, nullable=True),
    Column("opened_at", UTCDateTime(), nullable=False),
    Column("quantity_opened", Integer, nullable=False, default=1),
    Column("tasting_notes", Text, nullable=True),
    Column("rating_100", Integer, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_opened_bottle_owner_opened", "owner_id", "opened_at"),
    Index("ix_opened_bottle_bottle", "bottle_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Map the domain dataclasses onto their tables (idempotent)."""

    mapper_registry.map_imperatively(BottleRecord, bottle_table)
    mapper_registry.map_imperatively(OpenedRecord, opened_bottle_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
