import json
from unittest import mock

import pytest
import requests

from apps.restapi import ApiPayloadError, ApiStatusError, ApiTransportError, RestaurantApiClient

BASE_URL = "http://api.test/api"


def _response(status=200, body=None, raw=None):
    response = mock.Mock()
    response.status_code = status
    response.ok = status < 400
    if raw is not None:
        response.content = raw
        response.json.side_effect = ValueError("not json")
    elif body is None:
        response.content = b""
        response.json.side_effect = ValueError("empty")
    else:
        response.content = json.dumps(body).encode()
        response.json.return_value = body
    return response


@pytest.fixture
def http():
    with mock.patch("apps.restapi.client.requests.request") as request:
        yield request


def _client(token="secret-token"):
    return RestaurantApiClient(BASE_URL + "/", credentials=lambda: token, timeout=5)


def test_fetch_sends_bearer_token(http):
    http.return_value = _response(body=[{"id": 1, "name": "Ana"}])

    result = _client().staff()

    assert result.ok
    assert result.data == [{"id": 1, "name": "Ana"}]
    method, url = http.call_args.args
    assert (method, url) == ("GET", "http://api.test/api/staff")
    assert http.call_args.kwargs["headers"]["Authorization"] == "Bearer secret-token"
    assert http.call_args.kwargs["timeout"] == 5


def test_endpoints(http):
    http.return_value = _response(body=[])
    client = _client()

    client.shifts()
    client.staff_shifts()

    urls = [c.args[1] for c in http.call_args_list]
    assert urls == ["http://api.test/api/shifts", "http://api.test/api/staff-shifts"]


def test_no_authorization_header_without_token(http):
    http.return_value = _response(body=[])

    _client(token=None).shifts()

    assert "Authorization" not in http.call_args.kwargs["headers"]


def test_wrapped_collections_are_unwrapped(http):
    http.return_value = _response(body={"data": [{"id": 2}], "meta": {"total": 1}})

    assert _client().shifts().data == [{"id": 2}]


def test_non_success_status_is_a_failure(http):
    http.return_value = _response(status=500, body={"message": "boom"})

    result = _client().staff_shifts()

    assert not result.ok
    assert result.status_code == 500
    assert "HTTP 500" in result.reason
    assert result.data == []


def test_unauthorized_failure_is_flagged(http):
    http.return_value = _response(status=401, body={"message": "Unauthenticated."})

    result = _client().staff()

    assert result.is_unauthorized


def test_transport_error_is_a_failure(http):
    http.side_effect = requests.ConnectionError("connection refused")

    result = _client().staff()

    assert not result.ok
    assert result.status_code is None
    assert "connection refused" in result.reason


def test_invalid_json_is_a_failure(http):
    http.return_value = _response(raw=b"<html>")

    result = _client().shifts()

    assert not result.ok
    assert "not JSON" in result.reason


def test_non_list_body_raises_from_get_list(http):
    http.return_value = _response(body={"id": 1})

    with pytest.raises(ApiPayloadError):
        _client().get_list("/staff")


def test_transport_error_raises_from_get_list(http):
    http.side_effect = requests.Timeout("read timed out")

    with pytest.raises(ApiTransportError):
        _client().get_list("/staff")


def test_login_returns_token_and_name(http):
    http.return_value = _response(body={"token": "abc", "user": {"name": "Naod"}})

    login = RestaurantApiClient(BASE_URL).login("naod@example.com", "pw")

    assert login == {"token": "abc", "name": "Naod"}
    assert http.call_args.args == ("POST", "http://api.test/api/login")
    assert http.call_args.kwargs["json"] == {"email": "naod@example.com", "password": "pw"}
    assert http.call_args.kwargs["headers"]["Content-Type"] == "application/json"


def test_login_accepts_access_token_and_falls_back_to_email(http):
    http.return_value = _response(body={"access_token": "xyz"})

    login = RestaurantApiClient(BASE_URL).login("naod@example.com", "pw")

    assert login == {"token": "xyz", "name": "naod@example.com"}


def test_login_without_token_raises(http):
    http.return_value = _response(body={"user": {}})

    with pytest.raises(ApiPayloadError):
        RestaurantApiClient(BASE_URL).login("naod@example.com", "pw")


def test_rejected_login_carries_server_message(http):
    http.return_value = _response(status=422, body={"message": "Invalid credentials"})

    with pytest.raises(ApiStatusError) as excinfo:
        RestaurantApiClient(BASE_URL).login("naod@example.com", "wrong")

    assert excinfo.value.status_code == 422
    assert excinfo.value.message == "Invalid credentials"


def test_logout_posts_with_token(http):
    http.return_value = _response(body=None)

    _client().logout()

    assert http.call_args.args == ("POST", "http://api.test/api/logout")
    assert http.call_args.kwargs["headers"]["Authorization"] == "Bearer secret-token"


def test_from_settings(settings):
    settings.RESTOPANEL_API = {"BASE_URL": "http://example.test/v1/", "TIMEOUT": 3.5}

    client = RestaurantApiClient.from_settings()

    assert client.base_url == "http://example.test/v1"
    assert client.timeout == 3.5
