# config/settings/test.py
from .base import *  # noqa

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

MEDIA_ROOT = BASE_DIR / ".test-media"

PATIENT_JWT["AUTH_COOKIE_SECURE"] = False

PATIENT_PASSCODE["BYPASS_ENABLED"] = False
PATIENT_PASSCODE["BYPASS_CODE"] = ""

# Threads get their own connection; in-memory SQLite would not see the rows.
PATIENT_ACCESS_LOG["ASYNC"] = False
