from __future__ import annotations

import logging

from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods

from apps.restapi import ApiError, ApiStatusError, RestaurantApiClient

from .decorators import anonymous_only
from .forms import ForgotPasswordForm, LoginForm
from .session import clear_login, session_credentials, store_login

logger = logging.getLogger(__name__)

RESET_LINK_SENT = "If the email is registered, we have sent you a reset link!"


def home(request: HttpRequest) -> HttpResponse:
    return redirect("staff_calendar")


@anonymous_only("home")
@require_http_methods(["GET", "POST"])
def login_view(request: HttpRequest) -> HttpResponse:
    form = LoginForm(data=request.POST or None)
    if request.method == "POST" and form.is_valid():
        client = RestaurantApiClient.from_settings()
        try:
            login = client.login(form.cleaned_data["email"], form.cleaned_data["password"])
        except ApiStatusError as exc:
            logger.warning("Login rejected for %s: %s", form.cleaned_data["email"], exc.reason)
            form.add_error(None, exc.message or "Invalid email or password.")
        except ApiError as exc:
            logger.warning("Login failed: %s", exc.reason)
            form.add_error(None, "Could not reach the server. Please try again.")
        else:
            store_login(request, token=login["token"], name=login["name"])
            return redirect("home")

    return render(request, "auth/login.html", {"form": form})


@require_http_methods(["POST"])
def logout_view(request: HttpRequest) -> HttpResponse:
    """
    Revokes the token on the API, then clears the local session.
    The local session is cleared even when the remote call fails.
    """
    client = RestaurantApiClient.from_settings(credentials=session_credentials(request))
    try:
        client.logout()
    except ApiError as exc:
        logger.warning("Remote logout failed: %s", exc.reason)
    clear_login(request)
    return redirect("login")


@anonymous_only("home")
@require_http_methods(["GET", "POST"])
def forgot_password_view(request: HttpRequest) -> HttpResponse:
    form = ForgotPasswordForm(data=request.POST or None)
    if request.method == "POST" and form.is_valid():
        client = RestaurantApiClient.from_settings()
        try:
            client.forgot_password(form.cleaned_data["email"])
        except ApiStatusError as exc:
            logger.warning("Password reset request rejected: %s", exc.reason)
            form.add_error(None, exc.message or "Password reset request failed")
        except ApiError as exc:
            logger.warning("Password reset request failed: %s", exc.reason)
            form.add_error(None, "Something went wrong")
        else:
            messages.success(request, RESET_LINK_SENT)
            return redirect("forgot_password")

    return render(request, "auth/forgot-password.html", {"form": form})
