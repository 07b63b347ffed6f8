"""
Time helpers: UTC normalization and the calendar windows used by analytics.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class TimeWindow:
    """Half-open interval [start, end) in UTC."""

    start: datetime
    end: datetime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime to aware UTC. Naive values are taken as UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def reference_zone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def day_window(day: date, zone: tzinfo) -> TimeWindow:
    """[midnight(day), midnight(day + 1)) in `zone`, expressed in UTC."""
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    return TimeWindow(start=as_utc(start), end=as_utc(end))


def month_window(year: int, month: int, zone: tzinfo) -> TimeWindow:
    """[first day of month 00:00, first day of next month 00:00) in `zone`, in UTC."""
    start = datetime(year, month, 1, tzinfo=zone)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=zone)
    else:
        end = datetime(year, month + 1, 1, tzinfo=zone)
    return TimeWindow(start=as_utc(start), end=as_utc(end))
