# portal_core/patient_auth/tests/test_bypass_guard.py
import pytest
from django.core.exceptions import ImproperlyConfigured

from portal_core.patient_auth.apps import check_bypass_settings


def test_bypass_off_is_always_fine(settings):
    settings.PATIENT_PASSCODE = {**settings.PATIENT_PASSCODE, "BYPASS_ENABLED": False}
    check_bypass_settings(env="prod")


def test_bypass_refused_in_prod(settings):
    settings.PATIENT_PASSCODE = {**settings.PATIENT_PASSCODE, "BYPASS_ENABLED": True, "BYPASS_CODE": "111111"}

    with pytest.raises(ImproperlyConfigured):
        check_bypass_settings(env="prod")


def test_bypass_allowed_outside_prod(settings):
    settings.PATIENT_PASSCODE = {**settings.PATIENT_PASSCODE, "BYPASS_ENABLED": True, "BYPASS_CODE": "111111"}
    check_bypass_settings(env="staging")


@pytest.mark.parametrize("code", ["", "11111", "abcdef", "1234567"])
def test_bypass_code_must_be_six_digits(settings, code):
    settings.PATIENT_PASSCODE = {**settings.PATIENT_PASSCODE, "BYPASS_ENABLED": True, "BYPASS_CODE": code}

    with pytest.raises(ImproperlyConfigured):
        check_bypass_settings(env="local")
