"""Injectable time sources."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def current_year(clock: Clock = utcnow) -> int:
    """Return the calendar year according to ``clock``."""

    return clock().year


__all__ = ["Clock", "current_year", "utcnow"]
