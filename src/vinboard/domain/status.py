"""Drinking-window status engine.

Classification is a pure function of the window/peak years and the current year:
- the current year is always passed in, never read from a clock here
- every input combination yields a status; ``to_verify`` signals missing data
- quantity does not influence a bottle's status, only dashboard counts
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from vinboard.domain.model import BottleStatus, CoarseStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

    from vinboard.domain.model import BottleRecord, DrinkingWindow

_DRINK_SOON_YEARS = 1
_RANGE_SEPARATOR = "–"


@dataclass(frozen=True, slots=True)
class StatusResult:
    status: BottleStatus
    reason: str
    window_label: str
    peak_label: str


def range_label(start: int | None, end: int | None) -> str:
    """Render ``start–end`` with ``?`` for a missing bound, or ``""`` when both are missing."""

    if start is None and end is None:
        return ""
    left = "?" if start is None else str(start)
    right = "?" if end is None else str(end)
    return f"{left}{_RANGE_SEPARATOR}{right}"


def compute_status(window: DrinkingWindow, *, now_year: int) -> StatusResult:
    """Classify a drinking window against ``now_year``; first matching rule wins."""

    start = window.window_start_year
    end = window.window_end_year
    peak_start = window.peak_start_year
    peak_end = window.peak_end_year

    window_label = range_label(start, end)
    peak_label = range_label(peak_start, peak_end)

    def result(status: BottleStatus, reason: str) -> StatusResult:
        return StatusResult(
            status=status,
            reason=reason,
            window_label=window_label,
            peak_label=peak_label,
        )

    if start is None or end is None:
        return result(BottleStatus.TO_VERIFY, "Missing window")

    if now_year < start:
        return result(BottleStatus.WAIT, "Before window")

    # peak wins over the closing-window check below
    if peak_start is not None and peak_end is not None and peak_start <= now_year <= peak_end:
        return result(BottleStatus.PEAK, "Within peak")

    if now_year <= end:
        if end - now_year <= _DRINK_SOON_YEARS:
            return result(BottleStatus.DRINK_SOON, "Window ending")
        if peak_start is not None and now_year < peak_start:
            return result(BottleStatus.READY_BEFORE_PEAK, "Before peak")
        if peak_end is not None and now_year > peak_end:
            return result(BottleStatus.READY_AFTER_PEAK, "After peak")
        return result(BottleStatus.READY, "Within window")

    return result(BottleStatus.POSSIBLY_PAST, "After window")


def compute_bottle_status(bottle: BottleRecord, *, now_year: int) -> StatusResult:
    return compute_status(bottle.window(), now_year=now_year)


_COARSE_BY_STATUS: MappingProxyType[BottleStatus, CoarseStatus] = MappingProxyType(
    {
        BottleStatus.TO_VERIFY: CoarseStatus.TO_VERIFY,
        BottleStatus.WAIT: CoarseStatus.WAIT,
        BottleStatus.PEAK: CoarseStatus.OPEN_NOW,
        BottleStatus.READY_BEFORE_PEAK: CoarseStatus.OPEN_NOW,
        BottleStatus.READY_AFTER_PEAK: CoarseStatus.OPEN_NOW,
        BottleStatus.READY: CoarseStatus.OPEN_NOW,
        BottleStatus.DRINK_SOON: CoarseStatus.DRINK_SOON,
        BottleStatus.POSSIBLY_PAST: CoarseStatus.POSSIBLY_PAST,
    }
)


def coarsen(status: BottleStatus) -> CoarseStatus:
    """Collapse a detailed status into the five-bucket summary view."""

    return _COARSE_BY_STATUS[status]


@dataclass(slots=True)
class DashboardStats:
    """Bottle counts per status bucket; ``peak`` bottles also count as ``open_now``."""

    open_now: int = 0
    peak: int = 0
    drink_soon: int = 0
    wait: int = 0
    possibly_past: int = 0
    to_verify: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "openNow": self.open_now,
            "peak": self.peak,
            "drinkSoon": self.drink_soon,
            "wait": self.wait,
            "possiblyPast": self.possibly_past,
            "toVerify": self.to_verify,
        }


def dashboard_stats(bottles: Iterable[BottleRecord], *, now_year: int) -> DashboardStats:
    """Count in-stock bottles per status; bottles with no quantity left are ignored."""

    stats = DashboardStats()
    for bottle in bottles:
        if not bottle.in_stock:
            continue
        status = compute_bottle_status(bottle, now_year=now_year).status
        if status is BottleStatus.PEAK:
            stats.peak += 1
        coarse = coarsen(status)
        match coarse:
            case CoarseStatus.OPEN_NOW:
                stats.open_now += 1
            case CoarseStatus.DRINK_SOON:
                stats.drink_soon += 1
            case CoarseStatus.WAIT:
                stats.wait += 1
            case CoarseStatus.POSSIBLY_PAST:
                stats.possibly_past += 1
            case CoarseStatus.TO_VERIFY:
                stats.to_verify += 1
    return stats


__all__ = [
    "DashboardStats",
    "StatusResult",
    "coarsen",
    "compute_bottle_status",
    "compute_status",
    "dashboard_stats",
    "range_label",
]
