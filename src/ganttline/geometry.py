"""Date-to-pixel geometry for the timeline.

Maps a viewport onto month/week column headers and maps task intervals onto
percentage offsets within that viewport. All day arithmetic is calendar-day
based (midnight to midnight) so daylight-saving shifts never produce
fractional days.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .logger import debug_enabled, get_logger
from .models import ZERO_BAR, BarGeometry, GridLine, MonthBucket, TodayMarker

# Width of one week column in pixels
DEFAULT_COLUMN_WIDTH = 80

DAYS_PER_WEEK = 7

_MONTH_ABBR = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

logger = get_logger()


def as_date(value: date) -> date:
    """Drop the time of day from a datetime; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: date, end: date) -> int:
    """Calendar days from ``start`` to ``end`` (negative when end is earlier)."""
    return (as_date(end) - as_date(start)).days


def round_half_up(value: float) -> int:
    """Round to the nearest integer, sending exact halves towards +infinity.

    Unlike the built-in ``round`` this never rounds halves to even: 2.5
    becomes 3 and -2.5 becomes -2.
    """
    return math.floor(value + 0.5)


def _first_of_next_month(day: date) -> date:
    if day.month == 12:  # noqa: PLR2004
        return date(day.year + 1, 1, 1)
    return date(day.year, day.month + 1, 1)


def last_day_of_month(day: date) -> date:
    return _first_of_next_month(day) - timedelta(days=1)


def month_label(day: date) -> str:
    """Header label such as ``"Jan 2025"`` (locale independent)."""
    return f"{_MONTH_ABBR[day.month - 1]} {day.year}"


def week_label(day: date) -> str:
    """Week column label such as ``"1/8"``."""
    return f"{day.month}/{day.day}"


def timeline_headers(start: date | None, end: date | None) -> list[MonthBucket]:
    """Build month buckets with their week-boundary dates.

    Each month starts at its 1st and steps forward 7 days at a time, stopping
    at the end of the month or at the viewport end, whichever comes first.
    The first month always starts at the 1st, even when the viewport starts
    mid-month.

    Args:
        start: Viewport start, or None when no viewport is set
        end: Viewport end, or None when no viewport is set

    Returns:
        Month buckets in calendar order; empty when the viewport is absent
    """
    if start is None or end is None:
        return []

    end_day = as_date(end)
    headers: list[MonthBucket] = []
    current = as_date(start).replace(day=1)

    while current <= end_day:
        month_end = last_day_of_month(current)
        weeks: list[date] = []
        week = current
        while week <= month_end and week <= end_day:
            weeks.append(week)
            week += timedelta(days=DAYS_PER_WEEK)
        headers.append(MonthBucket(label=month_label(current), weeks=tuple(weeks)))
        current = _first_of_next_month(current)

    return headers


def total_weeks(headers: list[MonthBucket]) -> int:
    return sum(len(bucket.weeks) for bucket in headers)


def timeline_width(headers: list[MonthBucket], column_width: int = DEFAULT_COLUMN_WIDTH) -> int:
    """Pixel width of the scrollable timeline: one column per week."""
    return total_weeks(headers) * column_width


def grid_lines(
    headers: list[MonthBucket], column_width: int = DEFAULT_COLUMN_WIDTH
) -> list[GridLine]:
    """One vertical guide per week column, numbered across all months."""
    count = total_weeks(headers)
    return [GridLine(index=i, offset_px=float(i * column_width)) for i in range(count)]


def bar_geometry(
    task_start: date | None,
    task_end: date | None,
    viewport_start: date | None,
    viewport_end: date | None,
) -> BarGeometry:
    """Place a task bar within the viewport.

    ``left = offsetDays / totalDays * 100`` and
    ``width = spanDays / totalDays * 100``. A missing date or an empty
    viewport yields a zero-size bar. Tasks outside the viewport are not
    clipped, so either value may fall outside [0, 100].
    """
    if task_start is None or task_end is None or viewport_start is None or viewport_end is None:
        return ZERO_BAR

    total = days_between(viewport_start, viewport_end)
    if total <= 0:
        return ZERO_BAR

    offset = days_between(viewport_start, task_start)
    span = days_between(task_start, task_end)
    geometry = BarGeometry(
        left_percent=offset / total * 100,
        width_percent=span / total * 100,
    )
    if debug_enabled():
        logger.debug(
            "bar %s..%s: offset=%d span=%d total=%d -> left=%.3f%% width=%.3f%%",
            task_start,
            task_end,
            offset,
            span,
            total,
            geometry.left_percent,
            geometry.width_percent,
        )
    return geometry


def today_marker(
    viewport_start: date | None,
    viewport_end: date | None,
    today: date,
    width_px: int,
) -> TodayMarker | None:
    """Position the "today" line, or None when today is outside the viewport."""
    if viewport_start is None or viewport_end is None:
        return None

    day = as_date(today)
    if day < as_date(viewport_start) or day > as_date(viewport_end):
        return None

    percent = bar_geometry(day, day, viewport_start, viewport_end).left_percent
    return TodayMarker(percent=percent, offset_px=percent * width_px / 100)


@dataclass(slots=True, frozen=True)
class TimeScale:
    """Conversion between horizontal pixels and calendar days."""

    total_days: int
    pixel_width: float

    def days_for_pixels(self, pixel_delta: float) -> int:
        """Whole-day delta for a pointer movement; zero for an empty scale."""
        if self.total_days <= 0 or self.pixel_width <= 0:
            return 0
        return round_half_up(pixel_delta * self.total_days / self.pixel_width)

    @property
    def pixels_per_day(self) -> float:
        if self.total_days <= 0:
            return 0.0
        return self.pixel_width / self.total_days


def format_percent(value: float) -> str:
    """CSS-style percentage string used by the renderers."""
    return f"{value:.2f}%"
