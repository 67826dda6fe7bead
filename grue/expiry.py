"""Expiry policy for short links.

Three policies are supported:

- ``none``: links never expire and the sweeper never removes them.
- ``fixed``: links expire a fixed retention window after creation.
- ``sliding``: every visit pushes the expiry forward by the retention window.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional


DEFAULT_RETENTION_DAYS = 30


class ExpiryPolicy(str, Enum):
    NONE = "none"
    FIXED = "fixed"
    SLIDING = "sliding"


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def initial_expiry(
    policy: ExpiryPolicy,
    created_at: datetime,
    retention: timedelta,
) -> Optional[datetime]:
    if policy is ExpiryPolicy.NONE:
        return None
    return ensure_utc(created_at) + retention


def refreshed_expiry(
    policy: ExpiryPolicy,
    current: Optional[datetime],
    visited_at: datetime,
    retention: timedelta,
) -> Optional[datetime]:
    """Expiry to store after a visit; only the sliding policy moves it."""
    if policy is ExpiryPolicy.SLIDING:
        return ensure_utc(visited_at) + retention
    return current


def is_expired(expires_at: Optional[datetime], now: datetime) -> bool:
    return expires_at is not None and ensure_utc(expires_at) < ensure_utc(now)
