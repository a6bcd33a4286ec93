from datetime import date
from unittest import mock

import pytest
from django.template.loader import render_to_string
from django.urls import reverse

from apps.accounts.session import SESSION_TOKEN_KEY
from apps.restapi import FetchResult

from .conftest import FakeApiClient

CALENDAR_URL = reverse("staff_calendar")
CALENDAR_JSON_URL = reverse("staff_calendar_json")


@pytest.fixture
def api(fake_api):
    with mock.patch("apps.scheduling.services.api_client_for", return_value=fake_api):
        yield fake_api


@pytest.fixture
def today():
    with mock.patch("django.utils.timezone.localdate", return_value=date(2024, 3, 14)):
        yield date(2024, 3, 14)


def test_calendar_requires_login(client):
    response = client.get(CALENDAR_URL)

    assert response.status_code == 302
    assert response.url == reverse("login")


def test_month_view_renders_assignments(signed_in_client, api, today):
    response = signed_in_client.get(CALENDAR_URL, {"view": "month", "date": "2024-03-01"})

    assert response.status_code == 200
    assert response.context["period_label"] == "March 2024"
    weeks = response.context["weeks"]
    assert len(weeks) == 6
    assert all(len(week) == 7 for week in weeks)
    assert weeks[0][0].key == "2024-02-26"

    content = response.content.decode()
    assert "Alice Kebede: Morning (09:00 - 17:00)" in content
    assert "Week View" in content
    assert "Legend" in content
    assert "Hello, <strong>Naod Tesfaye</strong>" in content


def test_defaults_to_month_view_of_today(signed_in_client, api, today):
    response = signed_in_client.get(CALENDAR_URL)

    assert response.context["view"] == "month"
    cells = [cell for week in response.context["weeks"] for cell in week]
    assert [c.key for c in cells if c.is_today] == ["2024-03-14"]


def test_week_view(signed_in_client, api, today):
    response = signed_in_client.get(CALENDAR_URL, {"view": "week", "date": "2024-03-01"})

    weeks = response.context["weeks"]
    assert len(weeks) == 1
    assert [c.key for c in weeks[0]] == [
        "2024-02-26", "2024-02-27", "2024-02-28", "2024-02-29",
        "2024-03-01", "2024-03-02", "2024-03-03",
    ]
    assert response.context["period_label"] == "Feb 26 - Mar 3"
    assert response.context["toggle_label"] == "Month View"


def test_invalid_query_values_fall_back(signed_in_client, api, today):
    response = signed_in_client.get(CALENDAR_URL, {"view": "year", "date": "not-a-date"})

    assert response.context["view"] == "month"
    assert response.context["anchor"] == today


def test_navigation_links(signed_in_client, api, today):
    response = signed_in_client.get(CALENDAR_URL, {"view": "month", "date": "2024-01-31"})

    nav = response.context["nav"]
    assert nav["next"] == f"{CALENDAR_URL}?view=month&date=2024-02-29"
    assert nav["previous"] == f"{CALENDAR_URL}?view=month&date=2023-12-31"
    assert nav["today"] == f"{CALENDAR_URL}?view=month&date=2024-03-14"
    assert nav["toggle"] == f"{CALENDAR_URL}?view=week&date=2024-01-31"
    assert nav["refresh"] == f"{CALENDAR_URL}?view=month&date=2024-01-31&reload=1"


def test_navigation_reuses_loaded_data(signed_in_client, api, today):
    signed_in_client.get(CALENDAR_URL, {"date": "2024-03-01"})
    signed_in_client.get(CALENDAR_URL, {"date": "2024-04-01"})
    signed_in_client.get(CALENDAR_URL, {"date": "2024-04-01", "view": "week"})
    assert api.calls["staff"] == 1

    signed_in_client.get(CALENDAR_URL, {"date": "2024-04-01", "reload": "1"})
    assert api.calls == {"staff": 2, "shifts": 2, "staff_shifts": 2}


def test_failed_load_shows_error_and_retry(signed_in_client, today):
    failing = FakeApiClient(staff_shifts=FetchResult.failure("GET /staff-shifts returned HTTP 500", status_code=500))
    with mock.patch("apps.scheduling.services.api_client_for", return_value=failing):
        response = signed_in_client.get(CALENDAR_URL, {"date": "2024-03-01", "reload": "4"})

    assert response.status_code == 200
    assert response.context["load_state"] == "error"
    assert response.context["weeks"] == []
    content = response.content.decode()
    assert "The calendar could not be loaded" in content
    assert "GET /staff-shifts returned HTTP 500" in content
    assert "reload=5" in content


def test_failed_load_is_not_cached(signed_in_client, today):
    failing = FakeApiClient(staff=FetchResult.failure("down"))
    with mock.patch("apps.scheduling.services.api_client_for", return_value=failing):
        signed_in_client.get(CALENDAR_URL)
        signed_in_client.get(CALENDAR_URL)

    assert failing.calls["staff"] == 2


def test_rejected_token_logs_out(signed_in_client, today):
    rejected = FakeApiClient(staff=FetchResult.failure("GET /staff returned HTTP 401", status_code=401))
    with mock.patch("apps.scheduling.services.api_client_for", return_value=rejected):
        response = signed_in_client.get(CALENDAR_URL)

    assert response.status_code == 302
    assert response.url == reverse("login")
    assert SESSION_TOKEN_KEY not in signed_in_client.session


def test_json_grid(signed_in_client, api, today):
    response = signed_in_client.get(CALENDAR_JSON_URL, {"view": "month", "date": "2024-03-01"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["state"] == "ready"
    assert payload["today"] == "2024-03-14"
    assert len(payload["days"]) == 42
    assert payload["days"][0]["date"] == "2024-02-26"
    assert payload["days"][-1]["date"] == "2024-04-07"

    march_first = next(day for day in payload["days"] if day["date"] == "2024-03-01")
    assert [s["staff_name"] for s in march_first["shifts"]] == ["Alice Kebede"]
    assert march_first["is_current_month"] is True

    assert [entry["name"] for entry in payload["legend"]] == ["Morning", "Evening"]
    assert payload["navigation"]["next"] == {"view": "month", "date": "2024-04-01"}
    assert payload["navigation"]["toggle"] == {"view": "week", "date": "2024-03-01"}


def test_json_error(signed_in_client, today):
    failing = FakeApiClient(shifts=FetchResult.failure("GET /shifts failed: timed out"))
    with mock.patch("apps.scheduling.services.api_client_for", return_value=failing):
        response = signed_in_client.get(CALENDAR_JSON_URL)

    assert response.status_code == 502
    assert response.json() == {
        "ok": False,
        "state": "error",
        "errors": {"shifts": "GET /shifts failed: timed out"},
    }


def test_json_unauthorized(signed_in_client, today):
    rejected = FakeApiClient(staff=FetchResult.failure("GET /staff returned HTTP 401", status_code=401))
    with mock.patch("apps.scheduling.services.api_client_for", return_value=rejected):
        response = signed_in_client.get(CALENDAR_JSON_URL)

    assert response.status_code == 401
    assert response.json()["ok"] is False


@pytest.mark.parametrize("view", ["month", "week"])
@pytest.mark.parametrize(
    "requested, anchor",
    [("9999-12-15", date(9999, 11, 30)), ("0001-01-15", date(1, 1, 15))],
)
def test_dates_at_the_calendar_limits_render(signed_in_client, api, today, view, requested, anchor):
    response = signed_in_client.get(CALENDAR_URL, {"view": view, "date": requested})

    assert response.status_code == 200
    assert response.context["anchor"] == anchor
    nav = response.context["nav"]
    assert nav["previous"].startswith(f"{CALENDAR_URL}?view={view}&date=")
    assert nav["next"].startswith(f"{CALENDAR_URL}?view={view}&date=")

    json_response = signed_in_client.get(CALENDAR_JSON_URL, {"view": view, "date": requested})
    assert json_response.status_code == 200


def test_reload_keys_are_cached_separately(signed_in_client, api, today):
    signed_in_client.get(CALENDAR_URL, {"date": "2024-03-01"})

    api.results["staff"] = FetchResult.success([{"id": 9, "name": "Alice Renamed"}])
    refreshed = signed_in_client.get(CALENDAR_URL, {"date": "2024-03-01", "reload": "1"})
    assert "Alice Renamed: Morning" in refreshed.content.decode()

    # An older reload key still maps to the data it was loaded with.
    older = signed_in_client.get(CALENDAR_URL, {"date": "2024-03-01"})
    assert "Alice Kebede: Morning" in older.content.decode()
    assert api.calls["staff"] == 2


def test_loading_state_renders_placeholder(rf):
    request = rf.get(CALENDAR_URL)
    request.session = {}

    content = render_to_string(
        "scheduling/staff-calendar.html",
        {"load_state": "loading", "nav": {}, "weeks": []},
        request=request,
    )

    assert "Loading calendar..." in content
    assert "The calendar could not be loaded" not in content
