"""Tests for roadmap timeline projection"""
from datetime import date, datetime

import pytest

from models import VersionRecord
from timeline import (
    DisplayWindow, ROADMAP_ROW_LIMIT, parse_date, project_bar, project_versions,
)

EPS = 1e-9


def _version(vid, start, end):
    return VersionRecord(id=vid, product_name="P", version=vid, start_date=start, end_date=end)


# ── parse_date ───────────────────────────────────────────────

def test_parse_date_accepts_common_forms():
    assert parse_date("2024-10-01") == date(2024, 10, 1)
    assert parse_date("2023-10-26T08:30:00Z") == date(2023, 10, 26)
    assert parse_date(datetime(2024, 1, 2, 3, 4)) == date(2024, 1, 2)
    assert parse_date(date(2024, 1, 2)) == date(2024, 1, 2)


@pytest.mark.parametrize("value", ["", None, "not-a-date", "2024-13-40"])
def test_parse_date_rejects_garbage(value):
    assert parse_date(value) is None


# ── Windows ──────────────────────────────────────────────────

def test_rolling_window_spans_month_before_to_three_months_after():
    window = DisplayWindow.rolling(date(2024, 11, 15))
    assert window.start == date(2024, 10, 1)
    assert window.end == date(2025, 2, 28)
    assert [m.month for m in window.months()] == [10, 11, 12, 1, 2]


def test_rolling_window_crosses_year_backwards():
    window = DisplayWindow.rolling(date(2024, 1, 10))
    assert window.start == date(2023, 12, 1)
    assert window.end == date(2024, 4, 30)


def test_dashboard_window_is_fixed_four_months():
    window = DisplayWindow.dashboard()
    assert window.start == date(2023, 10, 1)
    assert window.end == date(2024, 1, 31)
    assert len(window.months()) == 4


def test_fixed_window_rejects_bad_dates():
    with pytest.raises(ValueError):
        DisplayWindow.fixed("2024-01-01", "garbage")


# ── project_bar ──────────────────────────────────────────────

def test_interval_clipped_at_window_end():
    window = DisplayWindow.fixed("2024-10-01", "2025-01-31")
    bar = project_bar(window, "2024-10-01", "2025-01-23")
    assert bar is not None
    assert bar.left_percent == 0
    assert abs(bar.width_percent - 114 / 122 * 100) < EPS


def test_interval_entirely_before_window_is_suppressed():
    window = DisplayWindow.fixed("2024-10-01", "2025-01-31")
    assert project_bar(window, "2023-01-01", "2023-06-30") is None


def test_interval_entirely_after_window_is_suppressed():
    window = DisplayWindow.fixed("2024-10-01", "2025-01-31")
    assert project_bar(window, "2025-03-01", "2025-04-01") is None


def test_interval_starting_before_window_is_clamped_left():
    window = DisplayWindow.fixed("2024-10-01", "2025-01-31")
    bar = project_bar(window, "2024-09-01", "2024-11-01")
    assert bar.left_percent == 0
    assert abs(bar.width_percent - 31 / 122 * 100) < EPS


def test_interval_covering_whole_window_is_full_width():
    window = DisplayWindow.fixed("2024-10-01", "2025-01-31")
    bar = project_bar(window, "2020-01-01", "2030-01-01")
    assert bar.left_percent == 0
    assert abs(bar.width_percent - 100) < EPS


@pytest.mark.parametrize("start,end", [
    ("2024-11-01", "2024-11-01"),
    ("2024-12-01", "2024-11-01"),
    ("", "2024-11-01"),
    ("2024-11-01", "TBD"),
])
def test_degenerate_or_unreadable_intervals_are_suppressed(start, end):
    window = DisplayWindow.fixed("2024-10-01", "2025-01-31")
    assert project_bar(window, start, end) is None


def test_zero_length_window_projects_nothing():
    window = DisplayWindow.fixed("2024-10-01", "2024-10-01")
    assert project_bar(window, "2024-09-01", "2024-11-01") is None


@pytest.mark.parametrize("start,end", [
    ("2024-09-15", "2024-10-10"),
    ("2024-10-05", "2024-10-20"),
    ("2024-12-20", "2025-03-01"),
    ("2024-01-01", "2026-01-01"),
    ("2025-01-30", "2025-01-31"),
])
def test_visible_bars_stay_inside_window(start, end):
    window = DisplayWindow.fixed("2024-10-01", "2025-01-31")
    bar = project_bar(window, start, end)
    assert bar is not None
    assert bar.left_percent >= 0
    assert bar.width_percent >= 0
    assert bar.left_percent + bar.width_percent <= 100 + EPS


def test_bar_to_dict_carries_css_strings():
    bar = project_bar(DisplayWindow.fixed("2024-01-01", "2024-01-11"), "2024-01-01", "2024-01-06")
    data = bar.to_dict()
    assert data["left"] == "0.0%"
    assert data["width"] == "50.0%"


# ── project_versions ─────────────────────────────────────────

def test_project_versions_limits_rows_and_keeps_barless_rows():
    window = DisplayWindow.fixed("2024-10-01", "2025-01-31")
    versions = [_version(f"v{n}", "2024-10-01", "2024-12-01") for n in range(20)]
    versions[0] = _version("old", "2020-01-01", "2020-02-01")

    rows = project_versions(versions, window)
    assert len(rows) == ROADMAP_ROW_LIMIT
    assert rows[0][0].id == "old" and rows[0][1] is None
    assert all(bar is not None for _, bar in rows[1:])


def test_project_versions_without_limit():
    window = DisplayWindow.dashboard()
    versions = [_version(f"v{n}", "2023-10-01", "2023-11-01") for n in range(20)]
    assert len(project_versions(versions, window, limit=None)) == 20
