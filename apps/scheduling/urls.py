"""
=============================================================================
SCHEDULING URL CONFIGURATION
=============================================================================

URL routing for the scheduling app.

- /staff/calendar/       → Staff shift calendar page (week/month grid)
- /staff/calendar/json/  → Same grid as JSON

Both accept ?view=week|month&date=YYYY-MM-DD&reload=<key>.
=============================================================================
"""
from django.urls import path

from . import views


urlpatterns = [
    path("staff/calendar/", views.staff_calendar, name="staff_calendar"),
    path("staff/calendar/json/", views.staff_calendar_json, name="staff_calendar_json"),
]
