"""
Date/time helpers — framework-agnostic.

MongoDB hands back naive datetimes unless the client is tz-aware, so every
comparison against "now" goes through ``as_utc``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return *value* as a timezone-aware UTC datetime.

    Naive datetimes (no ``tzinfo``) are assumed to be UTC. ``None`` passes
    through unchanged.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
