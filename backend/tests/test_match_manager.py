"""
Unit tests for the in-memory match-state provider and its capability updates.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest

from conftest import AWAY_ID, HOME_ID, NOW, FixedClock, make_match
from flow.dispatcher import FlowDispatcher
from ingest.capability_cache import CapabilityCache
from ingest.match_manager import MatchManager
from ingest.providers.base import FixtureSource
from shared.config import Settings
from shared.errors import ProviderUnavailableError
from shared.models.domain import Match
from shared.models.enums import DeviceMatchStatus


class StubSource(FixtureSource):
    name = "stub"

    def __init__(self, matches: Optional[list[Match]] = None, error: Optional[Exception] = None) -> None:
        self.matches = matches or []
        self.error = error
        self.requests: list[tuple[int, date, date, Optional[list[str]]]] = []

    async def fetch_team_matches(self, team_id, date_from, date_to, statuses=None) -> list[Match]:
        self.requests.append((team_id, date_from, date_to, statuses))
        if self.error:
            raise self.error
        return list(self.matches)


def _manager(source: StubSource, clock: FixedClock | None = None) -> tuple[MatchManager, CapabilityCache]:
    capabilities = CapabilityCache()
    manager = MatchManager(source, capabilities, clock or FixedClock(), Settings(next_match_lookahead_days=30))
    return manager, capabilities


# ── refresh_team ────────────────────────────────────────────────────────

@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,expected",
    [
        ("IN_PLAY", DeviceMatchStatus.LIVE),
        ("LIVE", DeviceMatchStatus.LIVE),
        ("PAUSED", DeviceMatchStatus.HALFTIME),
        ("TIMED", DeviceMatchStatus.OTHER),
        ("FINISHED", DeviceMatchStatus.OTHER),
    ],
)
async def test_refresh_sets_capability_status(status: str, expected: DeviceMatchStatus) -> None:
    source = StubSource([make_match(kickoff=NOW - timedelta(minutes=40), status=status)])
    manager, capabilities = _manager(source)
    assert await manager.refresh_team(HOME_ID) == expected
    assert capabilities.get_cached_status(HOME_ID) == expected


@pytest.mark.asyncio
async def test_refresh_requests_window_around_local_day() -> None:
    source = StubSource()
    manager, _ = _manager(source)
    await manager.refresh_team(HOME_ID)
    assert source.requests == [(HOME_ID, date(2026, 10, 15), date(2026, 10, 17), None)]


@pytest.mark.asyncio
async def test_refresh_failure_propagates_and_keeps_status() -> None:
    manager, capabilities = _manager(StubSource(error=ProviderUnavailableError("down")))
    capabilities.set_status(HOME_ID, DeviceMatchStatus.LIVE)
    with pytest.raises(ProviderUnavailableError):
        await manager.refresh_team(HOME_ID)
    assert capabilities.get_cached_status(HOME_ID) == DeviceMatchStatus.LIVE


@pytest.mark.asyncio
async def test_refresh_all_counts_failures() -> None:
    manager, _ = _manager(StubSource(error=ProviderUnavailableError("down")))
    assert await manager.refresh_all([HOME_ID, AWAY_ID]) == 2


# ── cached reads ────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_live_and_today_lookups() -> None:
    live = make_match(kickoff=NOW - timedelta(minutes=50), status="IN_PLAY", home_score=1, away_score=0, live=True)
    manager, _ = _manager(StubSource([live]))
    await manager.refresh_team(HOME_ID)
    assert manager.get_live_match(HOME_ID) == live
    assert manager.get_match_today(HOME_ID) == live
    assert manager.get_live_match(999) is None


@pytest.mark.asyncio
async def test_match_today_uses_host_timezone() -> None:
    # 22:30 UTC on the 16th is already the 17th in Amsterdam
    late = make_match(kickoff=datetime(2026, 10, 16, 22, 30, tzinfo=timezone.utc))
    utc_manager, _ = _manager(StubSource([late]))
    await utc_manager.refresh_team(HOME_ID)
    assert utc_manager.get_match_today(HOME_ID) == late

    ams_manager, _ = _manager(StubSource([late]), FixedClock(zone="Europe/Amsterdam"))
    await ams_manager.refresh_team(HOME_ID)
    assert ams_manager.get_match_today(HOME_ID) is None


@pytest.mark.asyncio
async def test_live_match_survives_local_midnight() -> None:
    # 23:30 kickoff in Amsterdam, still in play at 00:30 the next local day
    clock = FixedClock(now=datetime(2026, 10, 16, 22, 30, tzinfo=timezone.utc), zone="Europe/Amsterdam")
    live = make_match(
        kickoff=datetime(2026, 10, 16, 21, 30, tzinfo=timezone.utc),
        status="IN_PLAY",
        home_score=1,
        away_score=0,
        minute=60,
        live=True,
    )
    manager, capabilities = _manager(StubSource([live]), clock)

    assert await manager.refresh_team(HOME_ID) == DeviceMatchStatus.LIVE
    assert capabilities.get_cached_status(HOME_ID) == DeviceMatchStatus.LIVE
    assert manager.get_live_match(HOME_ID) == live
    assert manager.get_match_today(HOME_ID) is None

    dispatcher = FlowDispatcher(manager, capabilities, clock, Settings())
    assert await dispatcher.run_condition("is_playing", HOME_ID) is True
    assert await dispatcher.run_condition("is_winning", HOME_ID) is True
    tokens = await dispatcher.run_action("get_current_score", HOME_ID)
    assert tokens["score"] == "1-0"
    assert tokens["is_live"] is True


@pytest.mark.asyncio
async def test_cache_expires_at_local_midnight() -> None:
    clock = FixedClock()
    manager, _ = _manager(StubSource([make_match(kickoff=NOW - timedelta(hours=2))]), clock)
    await manager.refresh_team(HOME_ID)
    assert manager.get_match_today(HOME_ID) is not None
    clock.advance(hours=7)
    assert manager.get_match_today(HOME_ID) is None


@pytest.mark.asyncio
async def test_matches_for_other_teams_are_ignored() -> None:
    other = make_match(home_id=1, away_id=2)
    manager, _ = _manager(StubSource([other]))
    await manager.refresh_team(HOME_ID)
    assert manager.get_match_today(HOME_ID) is None


# ── get_next_match ──────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_next_match_skips_kicked_off() -> None:
    started = make_match(kickoff=NOW - timedelta(minutes=5))
    upcoming = make_match(kickoff=NOW + timedelta(days=3))
    source = StubSource([started, upcoming])
    manager, _ = _manager(source)

    assert await manager.get_next_match(HOME_ID) == upcoming
    assert source.requests == [
        (HOME_ID, date(2026, 10, 16), date(2026, 11, 15), ["SCHEDULED", "TIMED"])
    ]


@pytest.mark.asyncio
async def test_next_match_none() -> None:
    manager, _ = _manager(StubSource())
    assert await manager.get_next_match(HOME_ID) is None


@pytest.mark.asyncio
async def test_next_match_propagates_failure() -> None:
    manager, _ = _manager(StubSource(error=ProviderUnavailableError("down")))
    with pytest.raises(ProviderUnavailableError):
        await manager.get_next_match(HOME_ID)
