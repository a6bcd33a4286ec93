"""
=============================================================================
RESTAURANT API CLIENT
=============================================================================

Thin HTTP client for the remote restaurant REST API.

The admin panel owns no data: staff, shift definitions and staff-shift
assignments all come from this API. Every authenticated call sends
"Authorization: Bearer <token>", where the token is obtained from a
credential provider passed in by the caller (usually built from the
request session, see apps.accounts.session). The client never reads
ambient storage itself.

Two calling styles:
- get_list()/login()/logout()/forgot_password() raise ApiError subclasses
- fetch() and the staff()/shifts()/staff_shifts() shortcuts return a
  FetchResult, so a failure is a value the caller has to look at
=============================================================================
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

import requests
from django.conf import settings
from requests.exceptions import RequestException

from .errors import ApiError, ApiPayloadError, ApiStatusError, ApiTransportError

logger = logging.getLogger(__name__)

CredentialProvider = Callable[[], "str | None"]


# =============================================================================
# FETCH RESULT
# =============================================================================


@dataclass(frozen=True)
class FetchResult:
    """
    Outcome of one read-only fetch.

    ok=True  -> data holds the decoded records
    ok=False -> reason explains the failure, status_code is set when the
                API answered with a non-success status
    """
    ok: bool
    data: list = field(default_factory=list)
    reason: str = ""
    status_code: int | None = None

    @classmethod
    def success(cls, data: list) -> FetchResult:
        return cls(ok=True, data=list(data))

    @classmethod
    def failure(cls, reason: str, *, status_code: int | None = None) -> FetchResult:
        return cls(ok=False, reason=reason, status_code=status_code)

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return ""
    if isinstance(body, dict):
        return str(body.get("message") or "")
    return ""


# =============================================================================
# CLIENT
# =============================================================================


class RestaurantApiClient:
    STAFF_PATH = "/staff"
    SHIFTS_PATH = "/shifts"
    STAFF_SHIFTS_PATH = "/staff-shifts"
    LOGIN_PATH = "/login"
    LOGOUT_PATH = "/logout"
    FORGOT_PASSWORD_PATH = "/forgot-password"

    def __init__(
        self,
        base_url: str,
        *,
        credentials: CredentialProvider | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._credentials = credentials

    @classmethod
    def from_settings(cls, *, credentials: CredentialProvider | None = None) -> RestaurantApiClient:
        """Builds a client from settings.RESTOPANEL_API."""
        conf = settings.RESTOPANEL_API
        return cls(conf["BASE_URL"], credentials=credentials, timeout=conf.get("TIMEOUT"))

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self, *, json_body: bool = False) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if json_body:
            headers["Content-Type"] = "application/json"
        token = self._credentials() if self._credentials is not None else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(self, method: str, path: str, *, payload: dict | None = None) -> Any:
        """
        Performs one HTTP call and returns the decoded JSON body (None when
        the body is empty).

        Raises:
        - ApiTransportError if the request never got an answer
        - ApiStatusError for any non-2xx status
        - ApiPayloadError if the body is not valid JSON
        """
        try:
            response = requests.request(
                method,
                self._url(path),
                headers=self._headers(json_body=payload is not None),
                json=payload,
                timeout=self.timeout,
            )
        except RequestException as exc:
            raise ApiTransportError(f"{method} {path} failed: {exc}") from exc

        if not response.ok:
            raise ApiStatusError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
                message=_error_message(response),
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiPayloadError(f"{method} {path} returned a body that is not JSON") from exc

    # -------------------------------------------------------------------------
    # Read-only collections
    # -------------------------------------------------------------------------

    def get_list(self, path: str) -> list:
        """
        GETs a collection. Accepts a bare JSON list or an object wrapping
        the list under "data" (paginated/resource style responses).
        """
        body = self._request("GET", path)
        if isinstance(body, dict) and "data" in body:
            body = body["data"]
        if not isinstance(body, list):
            raise ApiPayloadError(f"GET {path} did not return a list")
        return body

    def fetch(self, path: str) -> FetchResult:
        try:
            return FetchResult.success(self.get_list(path))
        except ApiStatusError as exc:
            logger.warning("Fetch %s failed: %s", path, exc.reason)
            return FetchResult.failure(exc.reason, status_code=exc.status_code)
        except ApiError as exc:
            logger.warning("Fetch %s failed: %s", path, exc.reason)
            return FetchResult.failure(exc.reason)

    def staff(self) -> FetchResult:
        return self.fetch(self.STAFF_PATH)

    def shifts(self) -> FetchResult:
        return self.fetch(self.SHIFTS_PATH)

    def staff_shifts(self) -> FetchResult:
        return self.fetch(self.STAFF_SHIFTS_PATH)

    # -------------------------------------------------------------------------
    # Session endpoints
    # -------------------------------------------------------------------------

    def login(self, email: str, password: str) -> dict[str, str]:
        """
        Exchanges credentials for an API token.
        Returns {"token": ..., "name": ...}; name falls back to the email.
        """
        body = self._request("POST", self.LOGIN_PATH, payload={"email": email, "password": password})
        if not isinstance(body, dict):
            raise ApiPayloadError("Login response was not an object")
        token = body.get("token") or body.get("access_token")
        if not token:
            raise ApiPayloadError("Login response did not include a token")
        user = body.get("user") if isinstance(body.get("user"), dict) else {}
        return {"token": str(token), "name": str(user.get("name") or email)}

    def logout(self) -> None:
        self._request("POST", self.LOGOUT_PATH, payload={})

    def forgot_password(self, email: str) -> None:
        self._request("POST", self.FORGOT_PASSWORD_PATH, payload={"email": email})
