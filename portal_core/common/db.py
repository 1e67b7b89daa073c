# portal_core/common/db.py
from __future__ import annotations

import re


def _regexp_replace(value, pattern, replacement, flags):
    if value is None:
        return None
    count = 0 if "g" in (flags or "") else 1
    return re.sub(pattern, replacement, value, count=count)


def register_sqlite_functions(sender, connection, **kwargs) -> None:
    """
    PostgreSQL ships REGEXP_REPLACE; SQLite (tests, local) does not.
    Registered on every new SQLite connection.
    """
    if connection.vendor != "sqlite":
        return
    connection.connection.create_function("REGEXP_REPLACE", 4, _regexp_replace, deterministic=True)
