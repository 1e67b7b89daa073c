# portal_core/common/contacts.py
from __future__ import annotations

import re

_NON_PHONE_CHARS = re.compile(r"[^0-9+]")


def is_email_contact(value: str) -> bool:
    return "@" in (value or "")


def normalize_contact(raw: str) -> str:
    """
    Canonical join key for a login identifier.

    - email (anything containing "@"): trimmed + lower-cased
    - phone: every character that is not a digit or "+" is stripped

    normalize_contact(normalize_contact(x)) == normalize_contact(x).
    Length checks belong to the caller.
    """
    value = (raw or "").strip()
    if is_email_contact(value):
        return value.lower()
    return _NON_PHONE_CHARS.sub("", value)
