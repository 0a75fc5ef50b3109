"""
Clock and host timezone.

Every elapsed-time computation uses aware UTC datetimes from Clock.now();
every display string is rendered in the host's configured IANA timezone.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Protocol
from zoneinfo import ZoneInfo

from shared.config import Settings, get_settings


class Clock(Protocol):
    @property
    def zone(self) -> ZoneInfo: ...

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock bound to the host timezone from settings."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._zone = (settings or get_settings()).zone

    @property
    def zone(self) -> ZoneInfo:
        return self._zone

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def to_local(clock: Clock, dt: datetime) -> datetime:
    """Convert an aware datetime to the host timezone."""
    if dt.tzinfo is None:
        raise ValueError("Cannot convert naive datetime - must be timezone-aware")
    return dt.astimezone(clock.zone)


def local_today(clock: Clock) -> date:
    return clock.now().astimezone(clock.zone).date()


def minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600
