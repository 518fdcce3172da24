"""Ports implemented by storage adapters."""

from __future__ import annotations

from .persistence import BottleRepository, OpenedBottleRepository, Repository
from .unit_of_work import CellarRepositories, CellarUnitOfWork, RepositoryCollection, UnitOfWork

__all__ = [
    "BottleRepository",
    "CellarRepositories",
    "CellarUnitOfWork",
    "OpenedBottleRepository",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
]
