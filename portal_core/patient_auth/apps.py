import os

from django.apps import AppConfig
from django.core.exceptions import ImproperlyConfigured


class PatientAuthConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "portal_core.patient_auth"

    def ready(self) -> None:
        # import here so app loading doesn’t break tooling
        from portal_core.patient_auth import openapi  # noqa: F401

        check_bypass_settings()


def check_bypass_settings(env: str | None = None) -> None:
    """
    The fixed bypass passcode exists for controlled test environments only.
    Refuse to start when it is switched on in production.
    """
    from portal_core.patient_auth.services import PASSCODE_LENGTH, passcode_config

    cfg = passcode_config()
    if not cfg["BYPASS_ENABLED"]:
        return

    env = (env or os.getenv("DJANGO_ENV", "local")).lower()
    if env == "prod":
        raise ImproperlyConfigured("PATIENT_PASSCODE['BYPASS_ENABLED'] must be False when DJANGO_ENV=prod.")

    code = cfg["BYPASS_CODE"]
    if len(code) != PASSCODE_LENGTH or not code.isdigit():
        raise ImproperlyConfigured("PATIENT_PASSCODE['BYPASS_CODE'] must be exactly 6 digits.")
