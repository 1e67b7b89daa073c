# portal_core/patient_auth/cookies.py
from __future__ import annotations

from datetime import timedelta
from typing import Any

from django.http import HttpResponse

from portal_core.patient_auth.tokens import SessionTokens, jwt_config


def _seconds(value: Any) -> int:
    """
    Convert a JWT lifetime setting into seconds.
    Supports timedelta OR int/float (already seconds).
    """
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    return int(value)


def set_patient_cookies(response: HttpResponse, *, tokens: SessionTokens) -> None:
    cfg = jwt_config()

    for name, value, lifetime in (
        (cfg["AUTH_COOKIE"], tokens.access, cfg["ACCESS_TOKEN_LIFETIME"]),
        (cfg["AUTH_COOKIE_REFRESH"], tokens.refresh, cfg["REFRESH_TOKEN_LIFETIME"]),
    ):
        response.set_cookie(
            name,
            value,
            max_age=_seconds(lifetime),
            httponly=True,
            secure=cfg["AUTH_COOKIE_SECURE"],
            samesite=cfg["AUTH_COOKIE_SAMESITE"],
            path="/",
        )


def clear_patient_cookies(response: HttpResponse) -> None:
    cfg = jwt_config()
    response.delete_cookie(cfg["AUTH_COOKIE"], path="/", samesite=cfg["AUTH_COOKIE_SAMESITE"])
    response.delete_cookie(cfg["AUTH_COOKIE_REFRESH"], path="/", samesite=cfg["AUTH_COOKIE_SAMESITE"])
