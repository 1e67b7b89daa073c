# portal_core/patient_auth/tokens.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional
from uuid import UUID

from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import Token

from portal_core.identity.models import PatientUser

ACCESS_TOKEN_TYPE = "patient_access"
REFRESH_TOKEN_TYPE = "patient_refresh"


def jwt_config() -> dict:
    cfg = getattr(settings, "PATIENT_JWT", {}) or {}
    return {
        "ACCESS_TOKEN_LIFETIME": cfg.get("ACCESS_TOKEN_LIFETIME", timedelta(minutes=15)),
        "REFRESH_TOKEN_LIFETIME": cfg.get("REFRESH_TOKEN_LIFETIME", timedelta(days=30)),
        "AUTH_COOKIE": cfg.get("AUTH_COOKIE", "patient_access_token"),
        "AUTH_COOKIE_REFRESH": cfg.get("AUTH_COOKIE_REFRESH", "patient_refresh_token"),
        "AUTH_COOKIE_SECURE": bool(cfg.get("AUTH_COOKIE_SECURE", True)),
        "AUTH_COOKIE_SAMESITE": cfg.get("AUTH_COOKIE_SAMESITE", "Strict"),
    }


class PatientAccessToken(Token):
    token_type = ACCESS_TOKEN_TYPE

    @property
    def lifetime(self) -> timedelta:
        return jwt_config()["ACCESS_TOKEN_LIFETIME"]


class PatientRefreshToken(Token):
    token_type = REFRESH_TOKEN_TYPE

    @property
    def lifetime(self) -> timedelta:
        return jwt_config()["REFRESH_TOKEN_LIFETIME"]


@dataclass(frozen=True)
class PatientPrincipal:
    """
    request.user for portal endpoints. Built from token claims only.
    """
    id: UUID
    global_patient_id: UUID
    login_phone: Optional[str] = None
    login_email: Optional[str] = None

    is_authenticated = True
    is_anonymous = False

    @property
    def pk(self) -> UUID:
        return self.id


@dataclass(frozen=True)
class SessionTokens:
    access: str
    refresh: str


def _stamp(token: Token, *, sub, global_patient_id, login_phone, login_email) -> Token:
    token["sub"] = str(sub)
    token["global_patient_id"] = str(global_patient_id)
    token["login_phone"] = login_phone
    token["login_email"] = login_email
    return token


def _mint(*, sub, global_patient_id, login_phone, login_email) -> SessionTokens:
    claims = {
        "sub": sub,
        "global_patient_id": global_patient_id,
        "login_phone": login_phone,
        "login_email": login_email,
    }
    access = _stamp(PatientAccessToken(), **claims)
    refresh = _stamp(PatientRefreshToken(), **claims)
    return SessionTokens(access=str(access), refresh=str(refresh))


def issue_session(patient_user: PatientUser) -> SessionTokens:
    return _mint(
        sub=patient_user.id,
        global_patient_id=patient_user.global_patient_id,
        login_phone=patient_user.login_phone,
        login_email=patient_user.login_email,
    )


def _principal_from(token: Token) -> PatientPrincipal:
    sub = token.get("sub")
    gp_id = token.get("global_patient_id")
    if not sub or not gp_id:
        raise AuthenticationFailed("Token is missing identity claims.")
    try:
        return PatientPrincipal(
            id=UUID(str(sub)),
            global_patient_id=UUID(str(gp_id)),
            login_phone=token.get("login_phone"),
            login_email=token.get("login_email"),
        )
    except ValueError:
        raise AuthenticationFailed("Token is missing identity claims.")


def verify_access_token(raw) -> PatientPrincipal:
    """
    Signature, expiry and token type are checked by simplejwt;
    identity claims are checked here.
    """
    try:
        token = PatientAccessToken(raw)
    except TokenError as e:
        raise AuthenticationFailed(str(e))
    return _principal_from(token)


def refresh_session(raw_refresh) -> SessionTokens:
    """
    Stateless rotation: a valid refresh token buys a fresh pair with the same claims.
    """
    if not raw_refresh:
        raise AuthenticationFailed("Refresh token missing.")
    try:
        token = PatientRefreshToken(raw_refresh)
    except TokenError as e:
        raise AuthenticationFailed(str(e))
    principal = _principal_from(token)
    return _mint(
        sub=principal.id,
        global_patient_id=principal.global_patient_id,
        login_phone=principal.login_phone,
        login_email=principal.login_email,
    )
