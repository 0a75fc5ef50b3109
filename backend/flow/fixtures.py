"""
Next-fixture projection.

Selects a team's next scheduled match and renders it for the get_next_match
action: opponent label, host-local date and time, venue and a day count that
rounds up, so a kickoff 25 hours away is two days out.
"""
from __future__ import annotations

import math
from typing import Any, Optional

from shared.models.domain import FixtureSummary, Match, normalize_team_id
from shared.utils.clock import Clock, hours_between, to_local
from shared.utils.logging import get_logger

from ingest.providers.base import MatchStateProvider

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400


class FixtureProjector:

    def __init__(self, provider: MatchStateProvider, clock: Clock) -> None:
        self._provider = provider
        self._clock = clock

    async def next_fixture(self, team_id: Any) -> Optional[FixtureSummary]:
        """
        Summary of the team's next match, or None when nothing is scheduled.

        Raises:
            InvalidTeamIdError: team_id is missing or not numeric.
            ProviderUnavailableError: the provider lookup failed.
        """
        tid = normalize_team_id(team_id)
        match = await self._provider.get_next_match(tid)
        if match is None:
            logger.debug("no_next_fixture", team_id=tid)
            return None
        return self.summarize(match, tid)

    def summarize(self, match: Match, team_id: int) -> FixtureSummary:
        is_home = match.home_team.id == team_id
        opponent = match.away_team if is_home else match.home_team
        # date and time come from a single conversion so they agree across midnight
        local_kickoff = to_local(self._clock, match.kickoff_time)
        seconds_until = (match.kickoff_time - self._clock.now()).total_seconds()
        return FixtureSummary(
            opponent=opponent.label,
            date=local_kickoff.strftime("%Y-%m-%d"),
            time=local_kickoff.strftime("%H:%M"),
            competition=(match.competition.name if match.competition else None) or "",
            venue="Home" if is_home else "Away",
            is_home=is_home,
            days_until=math.ceil(seconds_until / SECONDS_PER_DAY),
        )

    async def is_within_hours(self, team_id: Any, hours: float) -> bool:
        """True iff the next kickoff is in the future and at most `hours` away."""
        tid = normalize_team_id(team_id)
        match = await self._provider.get_next_match(tid)
        if match is None:
            return False
        hours_until = hours_between(self._clock.now(), match.kickoff_time)
        return 0 < hours_until <= hours

    def has_match_today(self, team_id: Any) -> bool:
        return self._provider.get_match_today(normalize_team_id(team_id)) is not None
