# portal_core/history/cursor.py
from __future__ import annotations

import base64
import binascii
import json
from uuid import UUID

from portal_core.common.api.exceptions import InvalidCursor


def encode_cursor(*, visit_id: UUID) -> str:
    payload = json.dumps({"visit_id": str(visit_id)}, separators=(",", ":"))
    return base64.urlsafe_b64encode(payload.encode()).decode().rstrip("=")


def decode_cursor(token: str | None) -> UUID | None:
    """
    Opaque cursor -> last-seen visit id. Anything malformed raises InvalidCursor.
    """
    if not token:
        return None
    try:
        padded = token + "=" * (-len(token) % 4)
        obj = json.loads(base64.urlsafe_b64decode(padded.encode()).decode())
        return UUID(str(obj["visit_id"]))
    except (binascii.Error, UnicodeError, ValueError, TypeError, KeyError):
        raise InvalidCursor()
