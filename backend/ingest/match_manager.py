"""
In-memory match-state provider.

Keeps each tracked team's matches for the current host day, refreshed from a
FixtureSource by a background loop, and mirrors the liveness of those matches
into the CapabilityCache. Live and today lookups are served from memory; the
next-match lookup always goes to the source.
"""
from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import Iterable, Optional

from shared.config import Settings, get_settings
from shared.models.domain import Match
from shared.models.enums import DeviceMatchStatus, MatchStatus
from shared.utils.clock import Clock, local_today, to_local
from shared.utils.logging import get_logger
from shared.utils.metrics import LIVE_TEAMS, REFRESH_ERRORS

from ingest.capability_cache import CapabilityCache
from ingest.providers.base import FixtureSource, MatchStateProvider

logger = get_logger(__name__)

UPCOMING_STATUSES = [MatchStatus.SCHEDULED.value, MatchStatus.TIMED.value]


def _is_live(match: Match) -> bool:
    status = MatchStatus.parse(match.status)
    return status is not None and status.is_live


class MatchManager(MatchStateProvider):

    def __init__(
        self,
        source: FixtureSource,
        capabilities: CapabilityCache,
        clock: Clock,
        settings: Settings | None = None,
    ) -> None:
        self._source = source
        self._capabilities = capabilities
        self._clock = clock
        self._settings = settings or get_settings()
        self._matches: dict[int, list[Match]] = {}

    # ── Cached reads ────────────────────────────────────────────────────
    def _todays_matches(self, team_id: int) -> list[Match]:
        today = local_today(self._clock)
        return [
            m for m in self._matches.get(team_id, [])
            if to_local(self._clock, m.kickoff_time).date() == today
        ]

    def get_live_match(self, team_id: int) -> Optional[Match]:
        # Any live match counts, including one that kicked off before local midnight.
        for match in self._matches.get(team_id, []):
            if _is_live(match):
                return match
        return None

    def get_match_today(self, team_id: int) -> Optional[Match]:
        matches = self._todays_matches(team_id)
        return matches[0] if matches else None

    # ── Remote reads ────────────────────────────────────────────────────
    async def get_next_match(self, team_id: int) -> Optional[Match]:
        now = self._clock.now()
        today = now.date()
        matches = await self._source.fetch_team_matches(
            team_id,
            today,
            today + timedelta(days=self._settings.next_match_lookahead_days),
            statuses=UPCOMING_STATUSES,
        )
        for match in matches:
            if match.kickoff_time > now and match.involves(team_id):
                return match
        return None

    # ── Refresh ─────────────────────────────────────────────────────────
    async def refresh_team(self, team_id: int) -> DeviceMatchStatus:
        """Reload today's matches for a team and update its capability status."""
        today = local_today(self._clock)
        # UTC dates around the local day; the local-date filter runs on read.
        matches = await self._source.fetch_team_matches(
            team_id, today - timedelta(days=1), today + timedelta(days=1)
        )
        self._matches[team_id] = [m for m in matches if m.involves(team_id)]

        live = self.get_live_match(team_id)
        status = DeviceMatchStatus.from_match_status(live.status) if live else DeviceMatchStatus.OTHER
        self._capabilities.set_status(team_id, status)
        logger.debug(
            "team_refreshed",
            team_id=team_id,
            matches_today=len(self._todays_matches(team_id)),
            status=status.value,
        )
        return status

    async def refresh_all(self, team_ids: Iterable[int]) -> int:
        """Refresh every team concurrently. Returns the number of failures."""
        ids = list(team_ids)
        results = await asyncio.gather(*(self.refresh_team(t) for t in ids), return_exceptions=True)
        failures = 0
        for team_id, result in zip(ids, results):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                failures += 1
                REFRESH_ERRORS.inc()
                logger.warning("team_refresh_failed", team_id=team_id, error=str(result))
        LIVE_TEAMS.set(self._capabilities.playing_count())
        return failures


async def run_refresh_loop(manager: MatchManager, team_ids: list[int], interval_s: float) -> None:
    """Refresh tracked teams forever, one cycle per interval."""
    while True:
        try:
            await manager.refresh_all(team_ids)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception("refresh_loop_error", error=str(e))
        await asyncio.sleep(interval_s)
