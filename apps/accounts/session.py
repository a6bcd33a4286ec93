"""
Session storage for the remote API token.

The token returned by the API's /login endpoint lives in the Django session
under SESSION_TOKEN_KEY. Code that talks to the API receives a credential
provider (see session_credentials) instead of reading the session itself.
"""
from __future__ import annotations

from typing import Callable

from django.http import HttpRequest

SESSION_TOKEN_KEY = "auth_token"
SESSION_USER_KEY = "auth_user"


def get_token(request: HttpRequest) -> str | None:
    return request.session.get(SESSION_TOKEN_KEY) or None


def store_login(request: HttpRequest, *, token: str, name: str) -> None:
    # New session id on login, same as django.contrib.auth.login does.
    request.session.cycle_key()
    request.session[SESSION_TOKEN_KEY] = token
    request.session[SESSION_USER_KEY] = {"name": name}


def clear_login(request: HttpRequest) -> None:
    request.session.flush()


def session_credentials(request: HttpRequest) -> Callable[[], str | None]:
    return lambda: get_token(request)
