# config/settings/local.py
from .base import *  # noqa

DEBUG = True

# Plain HTTP on localhost
PATIENT_JWT["AUTH_COOKIE_SECURE"] = False
