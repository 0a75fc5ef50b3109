"""Shared fakes for flow and ingest tests: a fixed clock and an in-memory provider."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

import pytest

from shared.models.domain import CompetitionRef, LiveScore, Match, TeamRef
from ingest.providers.base import MatchStateProvider

NOW = datetime(2026, 10, 16, 18, 0, tzinfo=timezone.utc)
HOME_ID = 65
AWAY_ID = 57


class FixedClock:
    def __init__(self, now: datetime = NOW, zone: str = "UTC") -> None:
        self._now = now
        self._zone = ZoneInfo(zone)

    @property
    def zone(self) -> ZoneInfo:
        return self._zone

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs: float) -> None:
        self._now += timedelta(**kwargs)


class FakeProvider(MatchStateProvider):
    """Returns preset matches; raises `error` from every lookup when set."""

    def __init__(
        self,
        live: Optional[Match] = None,
        today: Optional[Match] = None,
        next_match: Optional[Match] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.live = live
        self.today = today
        self.next_match = next_match
        self.error = error
        self.calls: list[tuple[str, int]] = []

    def get_live_match(self, team_id: int) -> Optional[Match]:
        self.calls.append(("live", team_id))
        if self.error:
            raise self.error
        return self.live

    def get_match_today(self, team_id: int) -> Optional[Match]:
        self.calls.append(("today", team_id))
        if self.error:
            raise self.error
        return self.today

    async def get_next_match(self, team_id: int) -> Optional[Match]:
        self.calls.append(("next", team_id))
        if self.error:
            raise self.error
        return self.next_match


def make_match(
    kickoff: datetime = NOW,
    status: Optional[str] = "TIMED",
    home_id: int = HOME_ID,
    away_id: int = AWAY_ID,
    home_name: Optional[str] = "Manchester City FC",
    away_name: Optional[str] = "Arsenal FC",
    home_short: Optional[str] = "Man City",
    away_short: Optional[str] = "Arsenal",
    competition: Optional[str] = "Premier League",
    home_score: Optional[int] = None,
    away_score: Optional[int] = None,
    minute: Optional[int] = None,
    live: bool = False,
) -> Match:
    return Match(
        id=498000,
        kickoff_time=kickoff,
        home_team=TeamRef(id=home_id, name=home_name, short_name=home_short),
        away_team=TeamRef(id=away_id, name=away_name, short_name=away_short),
        competition=CompetitionRef(name=competition) if competition else None,
        status=status,
        live=LiveScore(home_score=home_score, away_score=away_score, minute=minute) if live else None,
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()
