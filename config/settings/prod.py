# config/settings/prod.py
import os

from .base import *  # noqa

DEBUG = False

CORS_ALLOW_ALL_ORIGINS = False
CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOWED_ORIGINS", "https://portal.yourdomain.com").split(",")
    if origin.strip()
]
CORS_ALLOW_CREDENTIALS = True

PATIENT_JWT["AUTH_COOKIE_SECURE"] = True
PATIENT_JWT["AUTH_COOKIE_SAMESITE"] = "Strict"

# Never in production, whatever the environment says
PATIENT_PASSCODE["BYPASS_ENABLED"] = False
PATIENT_PASSCODE["BYPASS_CODE"] = ""
