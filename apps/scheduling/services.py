"""
Calendar services: projecting fetched assignments onto grid cells and
loading the datasets for a request (with per-session caching).
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from django.conf import settings
from django.core.cache import cache
from django.http import HttpRequest

from apps.accounts.session import session_credentials
from apps.restapi import RestaurantApiClient

from .calendar_grid import CalendarState, DayCell, build_cells, shift_color
from .loader import CalendarData, LoadState, ShiftCalendarLoader
from .records import ShiftDefinition, Staff, StaffShiftAssignment

logger = logging.getLogger(__name__)

CALENDAR_CACHE_PREFIX = "staff-calendar"


@dataclass(frozen=True)
class ShiftEntry:
    """One assignment as shown inside a day cell."""
    assignment_id: Any
    staff_id: Any
    shift_id: Any
    staff_name: str
    shift_name: str
    start_time: str
    end_time: str
    color: str

    @property
    def title(self) -> str:
        return f"{self.staff_name}: {self.shift_name} ({self.start_time} - {self.end_time})"

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.assignment_id,
            "staff_id": self.staff_id,
            "shift_id": self.shift_id,
            "staff_name": self.staff_name,
            "shift_name": self.shift_name,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "color": self.color,
            "title": self.title,
        }


# =============================================================================
# LOOKUP & PROJECTION
# =============================================================================


def index_assignments(assignments: Iterable[StaffShiftAssignment]) -> dict[str, list[StaffShiftAssignment]]:
    by_date: dict[str, list[StaffShiftAssignment]] = defaultdict(list)
    for assignment in assignments:
        by_date[assignment.date].append(assignment)
    return by_date


def project_assignment(
    assignment: StaffShiftAssignment,
    staff_by_id: dict[Any, Staff],
    shifts_by_id: dict[Any, ShiftDefinition],
) -> ShiftEntry:
    """
    Resolves staff and shift by id. Unknown ids fall back to placeholder
    records ("Staff" / "Shift", blank times) instead of failing.
    """
    staff = staff_by_id.get(assignment.staff_id) or Staff.placeholder(assignment.staff_id)
    shift = shifts_by_id.get(assignment.shift_id) or ShiftDefinition.placeholder(assignment.shift_id)
    return ShiftEntry(
        assignment_id=assignment.id,
        staff_id=assignment.staff_id,
        shift_id=assignment.shift_id,
        staff_name=staff.display_name,
        shift_name=shift.display_name,
        start_time=assignment.effective_start(shift),
        end_time=assignment.effective_end(shift),
        color=shift_color(assignment.shift_id),
    )


def calendar_cells(state: CalendarState, data: CalendarData, today: date) -> list[DayCell]:
    """Day cells for state with every matching assignment attached."""
    staff_by_id = {s.id: s for s in data.staff}
    shifts_by_id = {s.id: s for s in data.shifts}
    by_date = index_assignments(data.assignments)

    cells = build_cells(state.anchor, state.mode, today)
    for cell in cells:
        cell.entries = [
            project_assignment(assignment, staff_by_id, shifts_by_id)
            for assignment in by_date.get(cell.key, ())
        ]
    return cells


def shift_legend(shifts: Iterable[ShiftDefinition]) -> list[dict[str, Any]]:
    return [
        {
            "id": shift.id,
            "name": shift.name,
            "start_time": shift.start_time,
            "end_time": shift.end_time,
            "color": shift_color(shift.id),
        }
        for shift in shifts
    ]


# =============================================================================
# LOADING
# =============================================================================


@dataclass(frozen=True)
class CalendarLoad:
    """What a page render gets back from load_calendar()."""
    state: str
    data: CalendarData = field(default_factory=CalendarData)
    errors: dict[str, str] = field(default_factory=dict)
    unauthorized: bool = False


def api_client_for(request: HttpRequest) -> RestaurantApiClient:
    return RestaurantApiClient.from_settings(credentials=session_credentials(request))


def _calendar_cache_key(request: HttpRequest, reload_key: str) -> str:
    return f"{CALENDAR_CACHE_PREFIX}:{request.session.session_key or 'anonymous'}:{reload_key}"


def load_calendar(request: HttpRequest, reload_key: str) -> CalendarLoad:
    """
    Returns the calendar datasets for this session and reload key.

    Successful loads are cached per (session, reload key), so moving
    between weeks/months does not refetch; a new reload key does.
    Failed loads are never cached.
    """
    cache_key = _calendar_cache_key(request, reload_key)
    data = cache.get(cache_key)
    if data is not None:
        logger.debug("Calendar data for reload key %r served from cache", reload_key)
        return CalendarLoad(state=LoadState.READY, data=data)

    loader = ShiftCalendarLoader(api_client_for(request))
    state = loader.refresh(reload_key)
    if state == LoadState.READY:
        cache.set(cache_key, loader.data, settings.RESTOPANEL_CALENDAR_CACHE_TIMEOUT)
        return CalendarLoad(state=state, data=loader.data)

    return CalendarLoad(
        state=state,
        errors={name: result.reason for name, result in loader.errors.items()},
        unauthorized=loader.unauthorized,
    )
