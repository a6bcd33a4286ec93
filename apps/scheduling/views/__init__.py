"""
=============================================================================
SCHEDULING VIEWS - MODULAR STRUCTURE
=============================================================================

This package contains all HTTP view functions for the scheduling app,
organized into logical modules:

├── __init__.py          - This file (exports all public views)
├── helpers.py           - Private helper functions (query parsing, nav URLs)
├── staff_calendar.py    - Staff shift calendar page and JSON endpoint

Import Pattern:
    from apps.scheduling.views import staff_calendar, staff_calendar_json

=============================================================================
"""

from .staff_calendar import (
    staff_calendar,
    staff_calendar_json,
)

__all__ = [
    "staff_calendar",
    "staff_calendar_json",
]
