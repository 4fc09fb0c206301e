"""
Product Workbench - Roadmap Timeline Projection
Maps version date ranges onto a display window as percentage offsets for
Gantt bars. Everything here is a pure function of its inputs.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from models import VersionRecord

# Fixed window used by the dashboard overview (four months)
DASHBOARD_WINDOW_START = date(2023, 10, 1)
DASHBOARD_WINDOW_END = date(2024, 1, 31)

# Rows drawn on the roadmap chart
ROADMAP_ROW_LIMIT = 15


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO date or datetime string to a date.

    Returns None for empty/invalid input. Accepts date and datetime objects,
    ``YYYY-MM-DD`` and ISO datetimes (a trailing ``Z`` is read as UTC).
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _shift_month(day: date, offset: int) -> date:
    """First day of the month ``offset`` months away from ``day``'s month."""
    index = day.year * 12 + (day.month - 1) + offset
    return date(index // 12, index % 12 + 1, 1)


def _month_end(day: date) -> date:
    return date(day.year, day.month, calendar.monthrange(day.year, day.month)[1])


@dataclass(frozen=True)
class DisplayWindow:
    """Date range the timeline maps onto [0, 100] percent."""
    start: date
    end: date

    @classmethod
    def fixed(cls, start: Any, end: Any) -> "DisplayWindow":
        start_d, end_d = parse_date(start), parse_date(end)
        if start_d is None or end_d is None:
            raise ValueError(f"Invalid display window: {start!r} → {end!r}")
        return cls(start_d, end_d)

    @classmethod
    def rolling(cls, today: Optional[date] = None, months_before: int = 1, months_after: int = 3) -> "DisplayWindow":
        """From the 1st of ``months_before`` months ago to the last day ``months_after`` months ahead."""
        today = today or date.today()
        start = _shift_month(today, -months_before)
        end = _month_end(_shift_month(today, months_after))
        return cls(start, end)

    @classmethod
    def dashboard(cls) -> "DisplayWindow":
        return cls(DASHBOARD_WINDOW_START, DASHBOARD_WINDOW_END)

    @property
    def days(self) -> int:
        return (self.end - self.start).days

    def months(self) -> List[date]:
        """First day of every calendar month the window touches, in order."""
        months = []
        current = date(self.start.year, self.start.month, 1)
        while current <= self.end:
            months.append(current)
            current = _shift_month(current, 1)
        return months

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "days": self.days,
            "months": [m.isoformat() for m in self.months()],
        }


@dataclass(frozen=True)
class BarPosition:
    left_percent: float
    width_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "left_percent": self.left_percent,
            "width_percent": self.width_percent,
            "left": f"{self.left_percent}%",
            "width": f"{self.width_percent}%",
        }


def project_bar(window: DisplayWindow, start: Any, end: Any) -> Optional[BarPosition]:
    """Clip [start, end] to the window and express it in percent.

    Returns None when the interval misses the window, when it is empty or
    inverted (end <= start), when either date is unreadable, or when the
    window itself has no length.
    """
    start_d, end_d = parse_date(start), parse_date(end)
    if start_d is None or end_d is None:
        return None

    total = window.days
    if total <= 0:
        return None
    if end_d < window.start or start_d > window.end:
        return None
    if end_d <= start_d:
        return None

    left = (start_d - window.start).days / total * 100
    width = (end_d - start_d).days / total * 100

    if left < 0:
        width += left
        left = 0.0
    if left + width > 100:
        width = 100 - left

    return BarPosition(left_percent=left, width_percent=width)


def project_version(window: DisplayWindow, version: VersionRecord) -> Optional[BarPosition]:
    return project_bar(window, version.start_date, version.end_date)


def project_versions(
    versions: Iterable[VersionRecord],
    window: DisplayWindow,
    limit: Optional[int] = ROADMAP_ROW_LIMIT,
) -> List[Tuple[VersionRecord, Optional[BarPosition]]]:
    """Pair each of the first ``limit`` versions with its bar (None = row without a bar)."""
    rows = list(versions)
    if limit is not None:
        rows = rows[:limit]
    return [(v, project_version(window, v)) for v in rows]
