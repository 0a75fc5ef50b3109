"""Domain enumerations for the Matchday flow service."""
from __future__ import annotations

from enum import Enum


class MatchStatus(str, Enum):
    """Statuses reported by the match-state provider (football-data.org vocabulary)."""
    SCHEDULED = "SCHEDULED"
    TIMED = "TIMED"
    LIVE = "LIVE"
    IN_PLAY = "IN_PLAY"
    PAUSED = "PAUSED"
    HALFTIME = "HALFTIME"
    FINISHED = "FINISHED"
    POSTPONED = "POSTPONED"
    SUSPENDED = "SUSPENDED"
    CANCELLED = "CANCELLED"
    AWARDED = "AWARDED"

    @property
    def is_live(self) -> bool:
        return self in (
            MatchStatus.LIVE,
            MatchStatus.IN_PLAY,
            MatchStatus.PAUSED,
            MatchStatus.HALFTIME,
        )

    @property
    def is_break(self) -> bool:
        return self in (MatchStatus.PAUSED, MatchStatus.HALFTIME)

    @classmethod
    def parse(cls, raw: str | None) -> "MatchStatus | None":
        """Known status for a provider string, or None for provider extras."""
        try:
            return cls((raw or "").strip().upper())
        except ValueError:
            return None


class DeviceMatchStatus(str, Enum):
    """Liveness classification persisted per team as a capability value."""
    LIVE = "LIVE"
    HALFTIME = "HALFTIME"
    OTHER = "OTHER"

    @property
    def is_playing(self) -> bool:
        return self in (DeviceMatchStatus.LIVE, DeviceMatchStatus.HALFTIME)

    @classmethod
    def from_match_status(cls, raw: str | None) -> "DeviceMatchStatus":
        status = MatchStatus.parse(raw)
        if status is None:
            return cls.OTHER
        if status.is_break:
            return cls.HALFTIME
        if status.is_live:
            return cls.LIVE
        return cls.OTHER


class TeamSide(str, Enum):
    HOME = "home"
    AWAY = "away"


class Outcome(str, Enum):
    WINNING = "winning"
    LOSING = "losing"
    DRAWING = "drawing"
