"""
=============================================================================
CALENDAR GRID
=============================================================================

Pure date arithmetic behind the staff shift calendar:

- Day sequences for the week (7 days) and month (42 days) grids
- Canonical YYYY-MM-DD keys used to match assignments to cells
- Navigation between periods (previous / next / today / view toggle)
- Deterministic shift colors

Weeks start on Monday (date.weekday() == 0). Nothing in this module does
I/O or reads the clock; "today" is always passed in by the caller.
=============================================================================
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Any

from django.db import models


class ViewMode(models.TextChoices):
    WEEK = "week", "Week"
    MONTH = "month", "Month"


GRID_LENGTH = {ViewMode.WEEK: 7, ViewMode.MONTH: 42}

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

# Fixed palette, indexed by shift id. Collisions past 7 shifts are expected.
SHIFT_PALETTE = (
    "shift-blue",
    "shift-green",
    "shift-yellow",
    "shift-purple",
    "shift-pink",
    "shift-indigo",
    "shift-red",
)

# Supported anchor range. Every grid and every navigation step from an
# anchor inside it stays within date.min..date.max.
MIN_ANCHOR = date(1, 1, 1)
MAX_ANCHOR = date(9999, 11, 30)


# =============================================================================
# DATE KEYS
# =============================================================================


def date_key(day: date) -> str:
    """Canonical zero-padded YYYY-MM-DD key of a calendar date."""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def clamp_anchor(day: date) -> date:
    return max(MIN_ANCHOR, min(day, MAX_ANCHOR))


def is_same_day(a: date, b: date) -> bool:
    return date_key(a) == date_key(b)


# =============================================================================
# DAY SEQUENCES
# =============================================================================


def week_start(anchor: date) -> date:
    """Monday of the week containing anchor."""
    return anchor - timedelta(days=anchor.weekday())


def month_grid_start(anchor: date) -> date:
    """
    First date shown in the month grid: the Monday on or before the 1st
    of anchor's month. A month starting on Sunday backs up 6 days.
    """
    return week_start(anchor.replace(day=1))


def grid_days(anchor: date, mode: str) -> list[date]:
    """
    Ordered dates to render for (anchor, mode).

    Month grids always have 6 rows x 7 days so the calendar keeps the same
    height; days of the neighbouring months fill the gaps.
    """
    mode = ViewMode(mode)
    anchor = clamp_anchor(anchor)
    start = month_grid_start(anchor) if mode == ViewMode.MONTH else week_start(anchor)
    return [start + timedelta(days=offset) for offset in range(GRID_LENGTH[mode])]


# =============================================================================
# DAY CELLS
# =============================================================================


@dataclass
class DayCell:
    date: date
    key: str
    is_today: bool
    is_current_month: bool
    entries: list = field(default_factory=list)

    @property
    def day_number(self) -> int:
        return self.date.day


def build_cells(anchor: date, mode: str, today: date) -> list[DayCell]:
    """
    Day cells for the grid. is_current_month compares against anchor's
    month, so in week view days of an adjacent month are flagged too.
    """
    today_key = date_key(today)
    return [
        DayCell(
            date=day,
            key=date_key(day),
            is_today=date_key(day) == today_key,
            is_current_month=day.month == anchor.month and day.year == anchor.year,
        )
        for day in grid_days(anchor, mode)
    ]


# =============================================================================
# NAVIGATION
# =============================================================================


def add_months(day: date, months: int) -> date:
    """
    Moves day by a number of calendar months, keeping the day of month
    and clamping it to the length of the target month (Jan 31 -> Feb 29).
    Saturates at MIN_ANCHOR / MAX_ANCHOR.
    """
    lowest = MIN_ANCHOR.year * 12 + (MIN_ANCHOR.month - 1)
    highest = MAX_ANCHOR.year * 12 + (MAX_ANCHOR.month - 1)
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(max(lowest, min(index, highest)), 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return clamp_anchor(day.replace(year=year, month=month, day=min(day.day, last_day)))


def add_weeks(day: date, weeks: int) -> date:
    """Moves day by whole weeks, saturating at MIN_ANCHOR / MAX_ANCHOR."""
    ordinal = day.toordinal() + 7 * weeks
    ordinal = max(MIN_ANCHOR.toordinal(), min(ordinal, MAX_ANCHOR.toordinal()))
    return date.fromordinal(ordinal)


@dataclass(frozen=True)
class CalendarState:
    """
    The only persistent state of the calendar: anchor date + view mode.
    Transitions return a new state and never fail.
    """
    anchor: date
    mode: str = ViewMode.MONTH

    def __post_init__(self) -> None:
        object.__setattr__(self, "anchor", clamp_anchor(self.anchor))

    def _step(self, direction: int) -> CalendarState:
        if self.mode == ViewMode.MONTH:
            return replace(self, anchor=add_months(self.anchor, direction))
        return replace(self, anchor=add_weeks(self.anchor, direction))

    def previous(self) -> CalendarState:
        return self._step(-1)

    def next(self) -> CalendarState:
        return self._step(1)

    def today(self, today: date) -> CalendarState:
        return replace(self, anchor=today)

    def toggle_view_mode(self) -> CalendarState:
        mode = ViewMode.WEEK if self.mode == ViewMode.MONTH else ViewMode.MONTH
        return replace(self, mode=mode)

    def days(self) -> list[date]:
        return grid_days(self.anchor, self.mode)


# =============================================================================
# PRESENTATION HELPERS
# =============================================================================


def shift_color(shift_id: Any) -> str:
    """
    Palette entry for a shift id; the same id always gets the same color.
    Ids that are not integers share the first color.
    """
    if isinstance(shift_id, bool) or not isinstance(shift_id, int):
        return SHIFT_PALETTE[0]
    return SHIFT_PALETTE[shift_id % len(SHIFT_PALETTE)]


def period_label(anchor: date, mode: str, days: list[date] | None = None) -> str:
    """
    "March 2024" for month view, "Feb 26 - Mar 3" for week view.
    """
    if mode == ViewMode.MONTH:
        return anchor.strftime("%B %Y")
    days = days or grid_days(anchor, mode)
    first, last = days[0], days[-1]
    return f"{first.strftime('%b')} {first.day} - {last.strftime('%b')} {last.day}"
