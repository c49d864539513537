"""Timezone-aware clock utilities.

All timestamps in fowlrot are UTC.  This module is the single source of
"now" so tests can monkey-patch it trivially.  Callers sample it once per
run and pass the value down; nothing else reads the wall clock.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def utc_timestamp() -> int:
    """Return the current UTC time as whole seconds since the epoch."""
    return int(utc_now().timestamp())
