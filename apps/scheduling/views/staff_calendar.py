"""
=============================================================================
STAFF CALENDAR VIEWS
=============================================================================

Views for the staff shift calendar:
- staff_calendar() - Calendar page (week or month grid + legend)
- staff_calendar_json() - Same grid as JSON for scripts and widgets

Both read the calendar state from the query string:
- view: 'week' or 'month' (default: month)
- date: Anchor date in YYYY-MM-DD format (default: today)
- reload: Opaque reload key; a new value refetches the API data

=============================================================================
"""
from __future__ import annotations

from django.contrib import messages
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.utils import timezone
from django.views.decorators.http import require_http_methods

from apps.accounts.decorators import token_required
from apps.accounts.session import clear_login

from ..calendar_grid import DAY_NAMES, ViewMode, date_key, period_label
from ..loader import LoadState
from ..services import calendar_cells, load_calendar, shift_legend
from .helpers import (
    _calendar_state,
    _cell_payload,
    _navigation_targets,
    _navigation_urls,
    _reload_key,
    _weeks,
)

SESSION_EXPIRED = "Your session has expired. Please log in again."


# =============================================================================
# CALENDAR PAGE
# =============================================================================


@token_required
@require_http_methods(["GET"])
def staff_calendar(request: HttpRequest) -> HttpResponse:
    """
    Staff shift calendar page.

    Renders one of three states:
    - ready: the grid with every assignment projected onto its day
    - error: an explanation plus a "Try again" link with a new reload key
    - loading: only a loading indicator (no partial grid). load_calendar
      joins every fetch before returning, so a page request normally
      sees ready or error.

    A 401 from the API means the stored token is no longer valid: the
    session is cleared and the user is sent back to the login page.
    """
    today = timezone.localdate()
    state = _calendar_state(request, today)
    reload_key = _reload_key(request)

    load = load_calendar(request, reload_key)
    if load.unauthorized:
        clear_login(request)
        messages.error(request, SESSION_EXPIRED)
        return redirect("login")

    days = state.days()
    cells = calendar_cells(state, load.data, today) if load.state == LoadState.READY else []

    return render(
        request,
        "scheduling/staff-calendar.html",
        {
            "view": state.mode,
            "is_month_view": state.mode == ViewMode.MONTH,
            "anchor": state.anchor,
            "today": today,
            "period_label": period_label(state.anchor, state.mode, days),
            "toggle_label": "Week View" if state.mode == ViewMode.MONTH else "Month View",
            "day_names": DAY_NAMES,
            "weeks": _weeks(cells),
            "legend": shift_legend(load.data.shifts),
            "load_state": load.state,
            "load_errors": load.errors,
            "nav": _navigation_urls("staff_calendar", state, today, reload_key),
            "reload_key": reload_key,
        },
    )


# =============================================================================
# JSON ENDPOINT
# =============================================================================


@token_required
@require_http_methods(["GET"])
def staff_calendar_json(request: HttpRequest) -> JsonResponse:
    """
    JSON version of the calendar grid.

    Returns {ok: true, state: 'ready', days: [...], legend: [...], ...}
    on success; {ok: false, state: 'error', errors: {...}} with status 502
    when any of the three fetches failed, or 401 when the token was rejected.
    """
    today = timezone.localdate()
    state = _calendar_state(request, today)
    reload_key = _reload_key(request)

    load = load_calendar(request, reload_key)
    if load.unauthorized:
        clear_login(request)
        return JsonResponse({"ok": False, "state": load.state, "error": SESSION_EXPIRED}, status=401)
    if load.state != LoadState.READY:
        return JsonResponse({"ok": False, "state": load.state, "errors": load.errors}, status=502)

    cells = calendar_cells(state, load.data, today)
    return JsonResponse({
        "ok": True,
        "state": load.state,
        "view": str(state.mode),
        "date": date_key(state.anchor),
        "today": date_key(today),
        "period_label": period_label(state.anchor, state.mode, [c.date for c in cells]),
        "days": [_cell_payload(cell) for cell in cells],
        "legend": shift_legend(load.data.shifts),
        "navigation": _navigation_targets(state, today),
    })
