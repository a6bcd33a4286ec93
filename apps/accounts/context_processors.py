from __future__ import annotations

from typing import Any

from .session import SESSION_USER_KEY, get_token


def user_ui_context(request) -> dict[str, Any]:
    session = getattr(request, "session", None)
    if session is None or not get_token(request):
        return {}

    user = session.get(SESSION_USER_KEY) or {}
    display_name = str(user.get("name") or "").strip() or "Staff"
    initials = "".join([p[0] for p in display_name.split()[:2] if p]) or display_name[:1]

    return {
        "user_display_name": display_name,
        "user_initials": initials.upper(),
        "is_signed_in": True,
    }
