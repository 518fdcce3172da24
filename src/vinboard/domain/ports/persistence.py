"""Ports for persisting cellar records."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from vinboard.domain.model import BottleRecord, OpenedRecord


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class BottleRepository(Repository[BottleRecord], Protocol):
    """Persistence contract for bottles; every query is scoped to one owner."""

    def get(self, bottle_id: str, owner_id: str) -> BottleRecord | None: ...

    def get_by_external_key(self, external_key: str, owner_id: str) -> BottleRecord | None: ...

    def list_for_owner(self, owner_id: str) -> list[BottleRecord]: ...

    def delete(self, bottle: BottleRecord) -> None: ...


@runtime_checkable
class OpenedBottleRepository(Repository[OpenedRecord], Protocol):
    """Persistence contract for the opened-bottle history."""

    def get(self, opened_id: str, owner_id: str) -> OpenedRecord | None: ...

    def list_for_owner(self, owner_id: str) -> list[OpenedRecord]: ...

    def delete_for_bottle(self, bottle_id: str, owner_id: str) -> int: ...
