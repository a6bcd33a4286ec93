from __future__ import annotations

from concurrent.futures import Future

import pytest
from django.core.cache import cache

from apps.accounts.session import SESSION_TOKEN_KEY, SESSION_USER_KEY
from apps.restapi import FetchResult

STAFF = [{"id": 9, "name": "Alice Kebede"}, {"id": 4, "name": "Dawit"}]
SHIFTS = [
    {"id": 3, "name": "Morning", "start_time": "09:00", "end_time": "17:00"},
    {"id": 5, "name": "Evening", "start_time": "17:00", "end_time": "23:00"},
]
ASSIGNMENTS = [
    {"id": 1, "staff_id": 9, "shift_id": 3, "date": "2024-03-01"},
    {"id": 2, "staff_id": 4, "shift_id": 5, "date": "2024-03-02", "start_time": "18:00", "end_time": None},
]


class FakeApiClient:
    """Stands in for RestaurantApiClient; counts calls per endpoint."""

    def __init__(self, staff=None, shifts=None, staff_shifts=None):
        self.results = {
            "staff": staff or FetchResult.success(STAFF),
            "shifts": shifts or FetchResult.success(SHIFTS),
            "staff_shifts": staff_shifts or FetchResult.success(ASSIGNMENTS),
        }
        self.calls = {"staff": 0, "shifts": 0, "staff_shifts": 0}

    def _get(self, name):
        self.calls[name] += 1
        result = self.results[name]
        if isinstance(result, Exception):
            raise result
        return result

    def staff(self):
        return self._get("staff")

    def shifts(self):
        return self._get("shifts")

    def staff_shifts(self):
        return self._get("staff_shifts")


class ImmediateExecutor:
    """Runs submitted callables inline so tests control completion order."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def fake_api():
    return FakeApiClient()


@pytest.fixture
def signed_in_client(client):
    session = client.session
    session[SESSION_TOKEN_KEY] = "test-token"
    session[SESSION_USER_KEY] = {"name": "Naod Tesfaye"}
    session.save()
    return client
