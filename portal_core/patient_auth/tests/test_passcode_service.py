# portal_core/patient_auth/tests/test_passcode_service.py
from datetime import timedelta

import pytest
from django.contrib.auth.hashers import check_password
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from portal_core.common.api.exceptions import (
    InvalidPasscode,
    PasscodeExpired,
    PasscodeNotFound,
    RateLimited,
)
from portal_core.common.events import PASSCODE_ISSUED, subscribe, unsubscribe
from portal_core.identity.models import GlobalPatient, PatientLink, PatientUser
from portal_core.patient_auth import services
from portal_core.patient_auth.models import PasscodeRequest
from portal_core.patient_auth.services import PasscodeService
from portal_core.patient_auth.tokens import PatientAccessToken

pytestmark = pytest.mark.django_db

PHONE = "+95912345678"


@pytest.fixture
def fixed_code(monkeypatch):
    monkeypatch.setattr(services, "generate_passcode", lambda: "482913")
    return "482913"


def test_start_stores_only_hash(fixed_code):
    req = PasscodeService.start(contact="+959 1234 5678", request_ip="10.0.0.1")

    assert req.contact == PHONE
    assert req.code_hash != fixed_code
    assert check_password(fixed_code, req.code_hash)
    assert req.expires_at - req.created_at <= timedelta(minutes=5, seconds=1)
    assert req.attempts == 0
    assert req.verified_at is None


def test_start_publishes_code_for_delivery(fixed_code):
    delivered = []

    def deliver(payload):
        delivered.append(payload)

    subscribe(PASSCODE_ISSUED)(deliver)
    try:
        PasscodeService.start(contact=PHONE, device_id="dev-1")
    finally:
        unsubscribe(PASSCODE_ISSUED, deliver)

    assert len(delivered) == 1
    assert delivered[0]["code"] == fixed_code
    assert delivered[0]["contact"] == PHONE
    assert delivered[0]["channel"] == "sms"


def test_rate_limit_sixth_start_in_window_is_rejected():
    for _ in range(5):
        PasscodeService.start(contact=PHONE, device_id="dev-1")

    with pytest.raises(RateLimited):
        PasscodeService.start(contact=PHONE, device_id="dev-1")

    assert PasscodeRequest.objects.filter(contact=PHONE).count() == 5


def test_rate_limit_rolls_over_after_window():
    for _ in range(5):
        PasscodeService.start(contact=PHONE, device_id="dev-1")

    PasscodeRequest.objects.filter(contact=PHONE).update(created_at=timezone.now() - timedelta(minutes=61))

    PasscodeService.start(contact=PHONE, device_id="dev-1")
    assert PasscodeRequest.objects.filter(contact=PHONE).count() == 6


def test_rate_limit_is_scoped_by_device_then_ip():
    for _ in range(5):
        PasscodeService.start(contact=PHONE, device_id="dev-1", request_ip="10.0.0.1")

    # other device: separate bucket
    PasscodeService.start(contact=PHONE, device_id="dev-2", request_ip="10.0.0.1")

    for _ in range(5):
        PasscodeService.start(contact="+95999999999", request_ip="10.0.0.9")
    with pytest.raises(RateLimited):
        PasscodeService.start(contact="+95999999999", request_ip="10.0.0.9")


def test_verify_without_pending_request():
    with pytest.raises(PasscodeNotFound):
        PasscodeService.verify(contact=PHONE, code="123456")


def test_verify_expired_even_with_correct_code(fixed_code):
    req = PasscodeService.start(contact=PHONE)
    PasscodeRequest.objects.filter(pk=req.pk).update(expires_at=timezone.now() - timedelta(seconds=1))

    with pytest.raises(PasscodeExpired):
        PasscodeService.verify(contact=PHONE, code=fixed_code)

    req.refresh_from_db()
    assert req.attempts == 0
    assert req.verified_at is None


def test_verify_wrong_code_increments_attempts(fixed_code):
    req = PasscodeService.start(contact=PHONE)

    with pytest.raises(InvalidPasscode):
        PasscodeService.verify(contact=PHONE, code="000000")
    with pytest.raises(InvalidPasscode):
        PasscodeService.verify(contact=PHONE, code="000001")

    req.refresh_from_db()
    assert req.attempts == 2
    assert req.verified_at is None


def test_verify_uses_most_recent_pending_request(monkeypatch):
    monkeypatch.setattr(services, "generate_passcode", lambda: "111222")
    older = PasscodeService.start(contact=PHONE)
    PasscodeRequest.objects.filter(pk=older.pk).update(created_at=timezone.now() - timedelta(minutes=2))
    monkeypatch.setattr(services, "generate_passcode", lambda: "333444")
    PasscodeService.start(contact=PHONE)

    with pytest.raises(InvalidPasscode):
        PasscodeService.verify(contact=PHONE, code="111222")

    login = PasscodeService.verify(contact=PHONE, code="333444")
    assert login.patient_user.login_phone == PHONE


def test_verify_success_creates_account_and_tokens(fixed_code):
    req = PasscodeService.start(contact="+959-1234-5678")

    login = PasscodeService.verify(contact="+959 1234 5678", code=fixed_code)

    req.refresh_from_db()
    assert req.verified_at is not None

    user = PatientUser.objects.get(login_phone=PHONE)
    assert login.patient_user == user
    assert user.last_login_at is not None
    assert login.global_patient.primary_phone == PHONE

    access = PatientAccessToken(login.tokens.access)
    assert access["sub"] == str(user.id)
    assert access["global_patient_id"] == str(login.global_patient.id)


def test_code_is_consumed_once(fixed_code):
    PasscodeService.start(contact=PHONE)
    PasscodeService.verify(contact=PHONE, code=fixed_code)

    with pytest.raises(PasscodeNotFound):
        PasscodeService.verify(contact=PHONE, code=fixed_code)


def test_returning_phone_user_keeps_identity(fixed_code):
    PasscodeService.start(contact=PHONE)
    first = PasscodeService.verify(contact=PHONE, code=fixed_code)
    PasscodeService.start(contact=PHONE)
    second = PasscodeService.verify(contact=PHONE, code=fixed_code)

    assert first.patient_user.id == second.patient_user.id
    assert GlobalPatient.objects.count() == 1


def test_email_login_creates_separate_identity(fixed_code):
    PasscodeService.start(contact="Jane@Example.com")
    login = PasscodeService.verify(contact="jane@example.com", code=fixed_code)

    assert login.patient_user.login_email == "jane@example.com"
    assert login.patient_user.login_phone is None
    assert login.global_patient.primary_phone is None
    assert login.resolution.linked == ()


def test_resolution_failure_rolls_back_verification(fixed_code, monkeypatch, clinic, make_patient):
    make_patient(clinic)
    req = PasscodeService.start(contact=PHONE)

    def broken(**kwargs):
        raise RuntimeError("resolver failed")

    monkeypatch.setattr(services.IdentityResolver, "resolve", staticmethod(broken))

    with pytest.raises(RuntimeError):
        PasscodeService.verify(contact=PHONE, code=fixed_code)

    req.refresh_from_db()
    assert req.verified_at is None
    assert not PatientUser.objects.exists()
    assert not PatientLink.objects.exists()


def test_bypass_code_when_enabled(settings):
    settings.PATIENT_PASSCODE = {**settings.PATIENT_PASSCODE, "BYPASS_ENABLED": True, "BYPASS_CODE": "111111"}

    login = PasscodeService.verify(contact=PHONE, code="111111")

    assert login.patient_user.login_phone == PHONE
    assert not PasscodeRequest.objects.exists()


def test_bypass_code_ignored_when_disabled(settings):
    settings.PATIENT_PASSCODE = {**settings.PATIENT_PASSCODE, "BYPASS_ENABLED": False, "BYPASS_CODE": "111111"}

    with pytest.raises(PasscodeNotFound):
        PasscodeService.verify(contact=PHONE, code="111111")


@pytest.mark.parametrize("contact", ["abc", "---", "+", "12", "@example.com", "jane@"])
def test_start_rejects_contacts_without_a_usable_key(contact):
    with pytest.raises(ValidationError):
        PasscodeService.start(contact=contact)

    assert not PasscodeRequest.objects.exists()


def test_bypass_cannot_log_in_junk_contacts(settings):
    settings.PATIENT_PASSCODE = {**settings.PATIENT_PASSCODE, "BYPASS_ENABLED": True, "BYPASS_CODE": "111111"}

    for junk in ("abc", "---"):
        with pytest.raises(ValidationError):
            PasscodeService.verify(contact=junk, code="111111")

    assert not PatientUser.objects.exists()
    assert not GlobalPatient.objects.exists()
