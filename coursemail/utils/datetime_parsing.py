"""Datetime helpers for form defaults and stored timestamps."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"


def resolve_timezone(name: str | None) -> ZoneInfo:
    """Return the named zone, falling back to UTC for blank or unknown names."""
    if not name:
        return ZoneInfo(DEFAULT_TIMEZONE)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, falling back to %s", name, DEFAULT_TIMEZONE)
        return ZoneInfo(DEFAULT_TIMEZONE)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive values (SQLite drops tzinfo) and convert aware ones."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def rebuild_from_components(value: datetime, tz: ZoneInfo) -> datetime:
    """
    Rebuild a timestamp from its wall-clock components in ``tz``.

    Reading year/month/day/hour/minute/second back out and constructing a new
    value drops sub-second precision and any foreign offset, so the result
    compares equal to what a date/time selector would submit.
    """
    local = ensure_utc(value).astimezone(tz)
    return datetime(
        local.year,
        local.month,
        local.day,
        local.hour,
        local.minute,
        local.second,
        tzinfo=tz,
    )
