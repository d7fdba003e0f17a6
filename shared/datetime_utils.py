"""
Date/time helpers — framework-agnostic.

MongoDB stores datetimes with millisecond precision and returns naive
values unless the client is created with ``tz_aware=True``. Every stored
timestamp in this service is UTC, so naive values are interpreted as UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return the current UTC time, truncated to millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def as_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime (naive values are assumed UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_expired(expires_at: datetime, now: Optional[datetime] = None) -> bool:
    """Return True once *now* is past *expires_at*; the expiry instant itself is still valid."""
    now = now or utcnow()
    return as_utc(expires_at) < as_utc(now)
