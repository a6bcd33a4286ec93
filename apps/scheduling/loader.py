"""
=============================================================================
CALENDAR DATA LOADER
=============================================================================

Fetches the three datasets the shift calendar needs (staff, shift
definitions, staff-shift assignments) and tracks the load state:

    LOADING --(all three fetches ok)--------> READY
    LOADING --(any fetch failed)------------> ERROR

The fetches run in parallel on a thread pool and are joined before the
state changes. Every reload is tagged with a generation number; results
of a reload that has been superseded by a newer one are discarded, so a
slow, older response can never overwrite fresher data.

A reload key (opaque, supplied by the caller) decides when to fetch:
refresh(key) only reloads when the key differs from the one the current
data was loaded with, or when the previous load did not succeed.
=============================================================================
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from django.db import models

from apps.restapi import FetchResult, RestaurantApiClient

from .records import ShiftDefinition, Staff, StaffShiftAssignment, decode_records

logger = logging.getLogger(__name__)


class LoadState(models.TextChoices):
    LOADING = "loading", "Loading"
    READY = "ready", "Ready"
    ERROR = "error", "Error"


# =============================================================================
# CALENDAR DATA
# =============================================================================


@dataclass(frozen=True)
class CalendarData:
    """The three fetched datasets, decoded. Empty until a load succeeds."""
    staff: tuple[Staff, ...] = ()
    shifts: tuple[ShiftDefinition, ...] = ()
    assignments: tuple[StaffShiftAssignment, ...] = ()

    @classmethod
    def from_results(cls, staff: FetchResult, shifts: FetchResult, assignments: FetchResult) -> CalendarData:
        return cls(
            staff=tuple(decode_records(Staff, staff.data)),
            shifts=tuple(decode_records(ShiftDefinition, shifts.data)),
            assignments=tuple(decode_records(StaffShiftAssignment, assignments.data)),
        )


@dataclass(frozen=True)
class PendingLoad:
    """Handle for an in-flight reload."""
    generation: int
    reload_key: Any
    futures: dict[str, Future] = field(default_factory=dict)


# =============================================================================
# LOADER
# =============================================================================


class ShiftCalendarLoader:
    def __init__(self, client: RestaurantApiClient, *, executor: ThreadPoolExecutor | None = None) -> None:
        self.client = client
        self._executor = executor
        self._lock = threading.Lock()
        self._generation = 0
        self._reload_key: Any = None
        self.state = LoadState.LOADING
        self.data = CalendarData()
        self.errors: dict[str, FetchResult] = {}

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def reload_key(self) -> Any:
        return self._reload_key

    @property
    def unauthorized(self) -> bool:
        return any(result.is_unauthorized for result in self.errors.values())

    def begin_reload(self, reload_key: Any = None) -> PendingLoad:
        """
        Issues the three fetches in parallel and puts the loader in LOADING.
        Returns a PendingLoad to hand to complete().
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            self.state = LoadState.LOADING

        executor = self._executor or ThreadPoolExecutor(max_workers=3, thread_name_prefix="calendar-fetch")
        try:
            futures = {
                "staff": executor.submit(self.client.staff),
                "shifts": executor.submit(self.client.shifts),
                "assignments": executor.submit(self.client.staff_shifts),
            }
        finally:
            if self._executor is None:
                # Lets the submitted fetches finish, then frees the threads.
                executor.shutdown(wait=False)
        return PendingLoad(generation=generation, reload_key=reload_key, futures=futures)

    def complete(self, pending: PendingLoad) -> bool:
        """
        Waits for all fetches of pending and applies them if pending is
        still the latest reload. Returns False when the results were stale.
        """
        results = {name: self._result_of(name, future) for name, future in pending.futures.items()}

        with self._lock:
            if pending.generation != self._generation:
                logger.debug(
                    "Discarding calendar load %s, generation %s is current",
                    pending.generation,
                    self._generation,
                )
                return False

            failed = {name: result for name, result in results.items() if not result.ok}
            self._reload_key = pending.reload_key
            self.errors = failed
            if failed:
                self.state = LoadState.ERROR
                self.data = CalendarData()
                logger.warning(
                    "Calendar load failed: %s",
                    "; ".join(f"{name}: {result.reason}" for name, result in failed.items()),
                )
            else:
                self.state = LoadState.READY
                self.data = CalendarData.from_results(
                    results["staff"], results["shifts"], results["assignments"]
                )
            return True

    def reload(self, reload_key: Any = None) -> LoadState:
        self.complete(self.begin_reload(reload_key))
        return self.state

    def refresh(self, reload_key: Any) -> LoadState:
        """Reloads unless data for this reload key is already loaded."""
        if self.state == LoadState.READY and reload_key == self._reload_key:
            return self.state
        return self.reload(reload_key)

    @staticmethod
    def _result_of(name: str, future: Future) -> FetchResult:
        try:
            return future.result()
        except Exception as exc:
            logger.exception("Fetching %s raised", name)
            return FetchResult.failure(f"{name}: {exc}")
