"""
=============================================================================
SCHEDULING RECORDS
=============================================================================

Read-only records decoded from the remote API:

1. Staff - A staff member ({id, name, ...})
2. ShiftDefinition - A named shift with default start/end times
3. StaffShiftAssignment - Puts a staff member on a shift for one date,
   optionally overriding the shift's times

Nothing here is persisted; records are rebuilt from every fetch.

Key patterns used:
- Frozen dataclasses (records are never mutated after decoding)
- from_payload() classmethods that tolerate missing optional fields
- Placeholder records for ids that do not resolve
=============================================================================
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

STAFF_PLACEHOLDER_NAME = "Staff"
SHIFT_PLACEHOLDER_NAME = "Shift"


def _coerce_id(value: Any) -> Any:
    """
    Normalizes ids so 7 and "7" refer to the same record.
    Non-numeric ids are returned unchanged.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return value
    return value


def _text(value: Any) -> str:
    return "" if value is None else str(value)


# =============================================================================
# STAFF
# =============================================================================


@dataclass(frozen=True)
class Staff:
    id: Any
    name: str = ""
    # Remaining API fields, kept for templates that want them.
    extra: dict = field(default_factory=dict, compare=False)

    @classmethod
    def from_payload(cls, data: dict) -> Staff:
        extra = {k: v for k, v in data.items() if k not in ("id", "name")}
        return cls(id=_coerce_id(data.get("id")), name=_text(data.get("name")), extra=extra)

    @classmethod
    def placeholder(cls, staff_id: Any = None) -> Staff:
        return cls(id=staff_id, name="")

    @property
    def display_name(self) -> str:
        return self.name or STAFF_PLACEHOLDER_NAME


# =============================================================================
# SHIFT DEFINITION
# =============================================================================


@dataclass(frozen=True)
class ShiftDefinition:
    """
    A reusable shift such as "Morning" 09:00-17:00.
    start_time/end_time are time-of-day strings exactly as the API sends them.
    """
    id: Any
    name: str = ""
    start_time: str = ""
    end_time: str = ""

    @classmethod
    def from_payload(cls, data: dict) -> ShiftDefinition:
        return cls(
            id=_coerce_id(data.get("id")),
            name=_text(data.get("name")),
            start_time=_text(data.get("start_time")),
            end_time=_text(data.get("end_time")),
        )

    @classmethod
    def placeholder(cls, shift_id: Any = None) -> ShiftDefinition:
        return cls(id=shift_id)

    @property
    def display_name(self) -> str:
        return self.name or SHIFT_PLACEHOLDER_NAME


# =============================================================================
# STAFF-SHIFT ASSIGNMENT
# =============================================================================


@dataclass(frozen=True)
class StaffShiftAssignment:
    """
    One staff member working one shift on one date.

    date is the canonical YYYY-MM-DD string from the API and is compared
    as a string against grid cell keys. start_time/end_time, when set,
    override the shift definition's defaults.
    """
    id: Any
    staff_id: Any
    shift_id: Any
    date: str
    start_time: str | None = None
    end_time: str | None = None

    @classmethod
    def from_payload(cls, data: dict) -> StaffShiftAssignment:
        return cls(
            id=_coerce_id(data.get("id")),
            staff_id=_coerce_id(data.get("staff_id")),
            shift_id=_coerce_id(data.get("shift_id")),
            date=_text(data.get("date")),
            start_time=data.get("start_time") or None,
            end_time=data.get("end_time") or None,
        )

    def effective_start(self, shift: ShiftDefinition) -> str:
        return self.start_time or shift.start_time

    def effective_end(self, shift: ShiftDefinition) -> str:
        return self.end_time or shift.end_time


def decode_records(cls, payload: list) -> list:
    """Decodes a list of API objects, skipping entries that are not objects."""
    return [cls.from_payload(item) for item in payload if isinstance(item, dict)]
