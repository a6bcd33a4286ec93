"""
=============================================================================
HELPER FUNCTIONS
=============================================================================

Private helper functions used by scheduling views.
These functions handle:
- Reading the calendar state (date + view) from the query string
- Building navigation URLs for every state transition
- Serializing the grid for the JSON endpoint

Note: These functions are prefixed with underscore (_) to indicate
they are private/internal. They should not be imported outside this package.
=============================================================================
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any
from urllib.parse import urlencode

from django.http import HttpRequest
from django.urls import reverse

from ..calendar_grid import CalendarState, DayCell, ViewMode, date_key

DEFAULT_RELOAD_KEY = "0"


# =============================================================================
# QUERY STRING PARSING
# =============================================================================


def _parse_date(value: str | None, default: date) -> date:
    """
    Parses a date string in YYYY-MM-DD format.
    Returns default if value is empty or invalid.
    Used for the optional ?date= anchor parameter.
    """
    if not value:
        return default
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return default


def _parse_view_mode(value: str | None) -> ViewMode:
    """Returns the requested view mode; anything unknown means month view."""
    raw = (value or "").strip().lower()
    if raw in ViewMode.values:
        return ViewMode(raw)
    return ViewMode.MONTH


def _calendar_state(request: HttpRequest, today: date) -> CalendarState:
    return CalendarState(
        anchor=_parse_date(request.GET.get("date"), today),
        mode=_parse_view_mode(request.GET.get("view")),
    )


def _reload_key(request: HttpRequest) -> str:
    return (request.GET.get("reload") or "").strip() or DEFAULT_RELOAD_KEY


def _next_reload_key(reload_key: str) -> str:
    """The key a "refresh" link uses: numeric keys count up, others restart."""
    if reload_key.isdigit():
        return str(int(reload_key) + 1)
    return "1"


# =============================================================================
# NAVIGATION URLS
# =============================================================================


def _state_params(state: CalendarState) -> dict[str, str]:
    return {"view": str(state.mode), "date": date_key(state.anchor)}


def _calendar_url(url_name: str, state: CalendarState, reload_key: str) -> str:
    params = _state_params(state)
    if reload_key != DEFAULT_RELOAD_KEY:
        params["reload"] = reload_key
    return f"{reverse(url_name)}?{urlencode(params)}"


def _navigation_urls(
    url_name: str,
    state: CalendarState,
    today: date,
    reload_key: str,
) -> dict[str, str]:
    """
    One URL per transition of the calendar state machine.
    "refresh" keeps the state but bumps the reload key so data is refetched.
    """
    return {
        "previous": _calendar_url(url_name, state.previous(), reload_key),
        "next": _calendar_url(url_name, state.next(), reload_key),
        "today": _calendar_url(url_name, state.today(today), reload_key),
        "toggle": _calendar_url(url_name, state.toggle_view_mode(), reload_key),
        "refresh": _calendar_url(url_name, state, _next_reload_key(reload_key)),
    }


def _navigation_targets(state: CalendarState, today: date) -> dict[str, dict[str, str]]:
    """Same transitions as _navigation_urls, as plain query parameters."""
    return {
        "previous": _state_params(state.previous()),
        "next": _state_params(state.next()),
        "today": _state_params(state.today(today)),
        "toggle": _state_params(state.toggle_view_mode()),
    }


# =============================================================================
# SERIALIZATION
# =============================================================================


def _weeks(cells: list[DayCell]) -> list[list[DayCell]]:
    return [cells[i:i + 7] for i in range(0, len(cells), 7)]


def _cell_payload(cell: DayCell) -> dict[str, Any]:
    return {
        "date": cell.key,
        "day": cell.day_number,
        "is_today": cell.is_today,
        "is_current_month": cell.is_current_month,
        "shifts": [entry.as_dict() for entry in cell.entries],
    }
