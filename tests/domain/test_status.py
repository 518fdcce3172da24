from __future__ import annotations

import pytest

from tests.helpers.bottles import make_bottle
from vinboard.domain.model import BottleStatus, CoarseStatus, DrinkingWindow
from vinboard.domain.status import (
    coarsen,
    compute_bottle_status,
    compute_status,
    dashboard_stats,
    range_label,
)


def _window(
    start: int | None = 2024,
    end: int | None = 2030,
    peak_start: int | None = 2026,
    peak_end: int | None = 2028,
) -> DrinkingWindow:
    return DrinkingWindow(
        window_start_year=start,
        window_end_year=end,
        peak_start_year=peak_start,
        peak_end_year=peak_end,
    )


@pytest.mark.parametrize(
    ("start", "end"),
    [(None, 2030), (2024, None), (None, None)],
)
def test_missing_window_bound_needs_verification(start: int | None, end: int | None) -> None:
    result = compute_status(_window(start, end), now_year=2027)

    assert result.status is BottleStatus.TO_VERIFY
    assert result.reason == "Missing window"


def test_missing_window_ignores_peak_in_range() -> None:
    result = compute_status(_window(None, None, 2026, 2028), now_year=2027)

    assert result.status is BottleStatus.TO_VERIFY


@pytest.mark.parametrize("now_year", [1990, 2020, 2023])
def test_before_window_is_wait(now_year: int) -> None:
    result = compute_status(_window(), now_year=now_year)

    assert result.status is BottleStatus.WAIT
    assert result.reason == "Before window"


def test_within_peak() -> None:
    result = compute_status(_window(), now_year=2027)

    assert result.status is BottleStatus.PEAK
    assert result.window_label == "2024–2030"
    assert result.peak_label == "2026–2028"


def test_peak_beats_drink_soon() -> None:
    result = compute_status(_window(2024, 2030, 2028, 2030), now_year=2029)

    assert result.status is BottleStatus.PEAK


def test_closing_window_beats_after_peak() -> None:
    result = compute_status(_window(), now_year=2029)

    assert result.status is BottleStatus.DRINK_SOON


def test_after_peak_is_ready_after_peak() -> None:
    result = compute_status(_window(2024, 2035), now_year=2029)

    assert result.status is BottleStatus.READY_AFTER_PEAK
    assert result.reason == "After peak"


def test_before_peak_is_ready_before_peak() -> None:
    result = compute_status(_window(), now_year=2025)

    assert result.status is BottleStatus.READY_BEFORE_PEAK
    assert result.reason == "Before peak"


@pytest.mark.parametrize(("end", "now_year"), [(2025, 2025), (2026, 2025)])
def test_window_ending_is_drink_soon(end: int, now_year: int) -> None:
    result = compute_status(_window(2020, end, None, None), now_year=now_year)

    assert result.status is BottleStatus.DRINK_SOON
    assert result.reason == "Window ending"


def test_drink_soon_scenario_without_peak() -> None:
    result = compute_status(_window(2024, 2025, None, None), now_year=2025)

    assert result.status is BottleStatus.DRINK_SOON
    assert result.peak_label == ""


def test_within_window_without_peak_is_ready() -> None:
    result = compute_status(_window(2020, 2030, None, None), now_year=2024)

    assert result.status is BottleStatus.READY
    assert result.reason == "Within window"


@pytest.mark.parametrize("now_year", [2031, 2050])
def test_after_window_is_possibly_past(now_year: int) -> None:
    result = compute_status(_window(), now_year=now_year)

    assert result.status is BottleStatus.POSSIBLY_PAST
    assert result.reason == "After window"


def test_partial_peak_only_uses_known_bound() -> None:
    before = compute_status(_window(2020, 2035, 2030, None), now_year=2025)
    after = compute_status(_window(2020, 2035, None, 2022), now_year=2025)

    assert before.status is BottleStatus.READY_BEFORE_PEAK
    assert after.status is BottleStatus.READY_AFTER_PEAK
    assert before.peak_label == "2030–?"
    assert after.peak_label == "?–2022"


def test_range_label() -> None:
    assert range_label(None, None) == ""
    assert range_label(2024, None) == "2024–?"
    assert range_label(2024, 2030) == "2024–2030"


def test_quantity_does_not_change_status() -> None:
    empty = make_bottle(quantity=0, window_start_year=2024, window_end_year=2030)
    stocked = make_bottle(quantity=12, window_start_year=2024, window_end_year=2030)

    assert (
        compute_bottle_status(empty, now_year=2027).status
        is compute_bottle_status(stocked, now_year=2027).status
    )


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (BottleStatus.PEAK, CoarseStatus.OPEN_NOW),
        (BottleStatus.READY, CoarseStatus.OPEN_NOW),
        (BottleStatus.READY_BEFORE_PEAK, CoarseStatus.OPEN_NOW),
        (BottleStatus.READY_AFTER_PEAK, CoarseStatus.OPEN_NOW),
        (BottleStatus.DRINK_SOON, CoarseStatus.DRINK_SOON),
        (BottleStatus.WAIT, CoarseStatus.WAIT),
        (BottleStatus.POSSIBLY_PAST, CoarseStatus.POSSIBLY_PAST),
        (BottleStatus.TO_VERIFY, CoarseStatus.TO_VERIFY),
    ],
)
def test_coarsen(status: BottleStatus, expected: CoarseStatus) -> None:
    assert coarsen(status) is expected


def test_dashboard_counts_in_stock_bottles_only() -> None:
    bottles = [
        make_bottle(
            "peak",
            window_start_year=2024,
            window_end_year=2030,
            peak_start_year=2026,
            peak_end_year=2028,
        ),
        make_bottle("ready", window_start_year=2020, window_end_year=2035),
        make_bottle("soon", window_start_year=2020, window_end_year=2027),
        make_bottle("wait", window_start_year=2030, window_end_year=2040),
        make_bottle("past", window_start_year=2000, window_end_year=2010),
        make_bottle("verify"),
        make_bottle("gone", quantity=0, window_start_year=2020, window_end_year=2035),
    ]

    stats = dashboard_stats(bottles, now_year=2027)

    assert stats.to_dict() == {
        "openNow": 2,
        "peak": 1,
        "drinkSoon": 1,
        "wait": 1,
        "possiblyPast": 1,
        "toVerify": 1,
    }
