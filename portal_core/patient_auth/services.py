# portal_core/patient_auth/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.db import transaction
from django.db.models import F
from django.utils import timezone
from django.utils.crypto import get_random_string
from rest_framework.exceptions import ValidationError

from portal_core.common.api.exceptions import (
    InvalidPasscode,
    PasscodeExpired,
    PasscodeNotFound,
    RateLimited,
)
from portal_core.common.contacts import is_email_contact, normalize_contact
from portal_core.common.events import PASSCODE_ISSUED, publish
from portal_core.identity.models import GlobalPatient, PatientUser
from portal_core.identity.services import IdentityResolver, ResolutionResult
from portal_core.patient_auth.models import PasscodeRequest
from portal_core.patient_auth.tokens import SessionTokens, issue_session

logger = logging.getLogger(__name__)

PASSCODE_LENGTH = 6


def passcode_config() -> Dict[str, Any]:
    cfg = getattr(settings, "PATIENT_PASSCODE", {}) or {}
    return {
        "TTL": cfg.get("TTL", timedelta(minutes=5)),
        "RATE_LIMIT": int(cfg.get("RATE_LIMIT", 5)),
        "RATE_WINDOW": cfg.get("RATE_WINDOW", timedelta(minutes=60)),
        "BYPASS_ENABLED": bool(cfg.get("BYPASS_ENABLED", False)),
        "BYPASS_CODE": str(cfg.get("BYPASS_CODE", "") or ""),
    }


def generate_passcode() -> str:
    return get_random_string(PASSCODE_LENGTH, "0123456789")


MIN_PHONE_DIGITS = 3


def login_key(contact: str) -> str:
    """
    Normalized login identifier, or ValidationError when nothing usable is left.
    Junk such as "abc" or "---" normalizes to "" and must never become an account key.
    """
    normalized = normalize_contact(contact)
    if is_email_contact(normalized):
        local, _, domain = normalized.partition("@")
        valid = bool(local and domain)
    else:
        valid = sum(ch.isdigit() for ch in normalized) >= MIN_PHONE_DIGITS
    if not valid:
        raise ValidationError({"phone_or_email": ["Enter a valid phone number or email."]})
    return normalized


@dataclass(frozen=True)
class VerifiedLogin:
    patient_user: PatientUser
    global_patient: GlobalPatient
    resolution: ResolutionResult
    tokens: SessionTokens


class PasscodeService:
    # ---------------------------------------------------------------------
    # Start
    # ---------------------------------------------------------------------
    @staticmethod
    def start(*, contact: str, request_ip: Optional[str] = None, device_id: Optional[str] = None) -> PasscodeRequest:
        cfg = passcode_config()
        normalized = login_key(contact)
        now = timezone.now()

        # Best-effort: concurrent starts may admit one request over the limit.
        recent = PasscodeRequest.objects.filter(
            contact=normalized,
            created_at__gte=now - cfg["RATE_WINDOW"],
        )
        if device_id:
            recent = recent.filter(device_id=device_id)
        elif request_ip:
            recent = recent.filter(request_ip=request_ip)

        if recent.count() >= cfg["RATE_LIMIT"]:
            logger.info("passcode rate limited contact=%s device=%s ip=%s", normalized, device_id, request_ip)
            raise RateLimited()

        code = generate_passcode()
        req = PasscodeRequest.objects.create(
            contact=normalized,
            code_hash=make_password(code),
            request_ip=request_ip or None,
            device_id=device_id or None,
            expires_at=now + cfg["TTL"],
        )

        # Delivery (SMS / email) subscribes here.
        publish(
            PASSCODE_ISSUED,
            {
                "passcode_request_id": str(req.id),
                "contact": normalized,
                "channel": "email" if is_email_contact(normalized) else "sms",
                "code": code,
                "expires_at": req.expires_at.isoformat(),
            },
        )
        logger.info("passcode issued request=%s", req.id)
        return req

    # ---------------------------------------------------------------------
    # Verify
    # ---------------------------------------------------------------------
    @staticmethod
    def _is_bypass(code: str, cfg: Dict[str, Any]) -> bool:
        return bool(cfg["BYPASS_ENABLED"] and cfg["BYPASS_CODE"] and code == cfg["BYPASS_CODE"])

    @classmethod
    def verify(cls, *, contact: str, code: str) -> VerifiedLogin:
        cfg = passcode_config()
        normalized = login_key(contact)

        pending = (
            PasscodeRequest.objects.filter(contact=normalized, verified_at__isnull=True)
            .order_by("-created_at")
            .first()
        )

        if cls._is_bypass(code, cfg):
            logger.warning("passcode bypass used contact=%s", normalized)
            return cls._complete_login(contact=normalized, passcode=None)

        if pending is None:
            raise PasscodeNotFound()

        if timezone.now() > pending.expires_at:
            raise PasscodeExpired()

        if not check_password(code, pending.code_hash):
            # committed on its own; the failure below must not undo it
            PasscodeRequest.objects.filter(pk=pending.pk).update(attempts=F("attempts") + 1)
            raise InvalidPasscode()

        return cls._complete_login(contact=normalized, passcode=pending)

    @staticmethod
    def _find_or_create_account(contact: str) -> Tuple[PatientUser, GlobalPatient]:
        if is_email_contact(contact):
            user = PatientUser.objects.select_related("global_patient").filter(login_email=contact).first()
            if user is not None:
                return user, user.global_patient
            gp = GlobalPatient.objects.create()
            user = PatientUser.objects.create(global_patient=gp, login_email=contact)
            return user, gp

        user = PatientUser.objects.select_related("global_patient").filter(login_phone=contact).first()
        if user is not None:
            return user, user.global_patient
        gp, _ = GlobalPatient.objects.get_or_create(primary_phone=contact)
        user = PatientUser.objects.create(global_patient=gp, login_phone=contact)
        return user, gp

    @classmethod
    @transaction.atomic
    def _complete_login(cls, *, contact: str, passcode: Optional[PasscodeRequest]) -> VerifiedLogin:
        now = timezone.now()

        if passcode is not None:
            # consume once; a concurrent verify that already won leaves 0 rows
            consumed = PasscodeRequest.objects.filter(pk=passcode.pk, verified_at__isnull=True).update(
                verified_at=now
            )
            if not consumed:
                raise PasscodeNotFound()

        user, gp = cls._find_or_create_account(contact)

        resolution = IdentityResolver.resolve(contact=contact, global_patient=gp)
        gp.refresh_from_db()

        user.last_login_at = now
        user.save(update_fields=["last_login_at"])

        tokens = issue_session(user)

        logger.info(
            "patient login patient_user=%s global_patient=%s links=%d",
            user.id,
            gp.id,
            len(resolution.linked),
        )
        return VerifiedLogin(patient_user=user, global_patient=gp, resolution=resolution, tokens=tokens)
