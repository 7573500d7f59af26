from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

from journeyscope.core.config import get_settings


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


@lru_cache(maxsize=8)
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def reporting_zone() -> ZoneInfo:
    return _zone(get_settings().reporting_timezone)


def to_reporting_time(dt: datetime) -> datetime:
    return ensure_aware(dt).astimezone(reporting_zone())
