"""
Contracts for the match-state provider and the team fixture source behind it.
"""
from __future__ import annotations

import abc
from datetime import date
from typing import Optional

from shared.models.domain import Match


class MatchStateProvider(abc.ABC):
    """
    Source of truth for a team's live and scheduled matches.

    get_live_match and get_match_today read local state and return quickly;
    get_next_match may perform network I/O and raise ProviderUnavailableError.
    """

    @abc.abstractmethod
    def get_live_match(self, team_id: int) -> Optional[Match]:
        """The team's match currently in progress, if any."""
        ...

    @abc.abstractmethod
    def get_match_today(self, team_id: int) -> Optional[Match]:
        """The team's match kicking off today in the host timezone, if any."""
        ...

    @abc.abstractmethod
    async def get_next_match(self, team_id: int) -> Optional[Match]:
        """The team's next match that has not kicked off yet, if any."""
        ...


class FixtureSource(abc.ABC):
    """Remote API returning a team's matches."""

    name: str = "unknown"

    async def start(self) -> None:
        """Open network resources."""

    async def close(self) -> None:
        """Release network resources."""

    @abc.abstractmethod
    async def fetch_team_matches(
        self,
        team_id: int,
        date_from: date,
        date_to: date,
        statuses: Optional[list[str]] = None,
    ) -> list[Match]:
        """
        Matches for a team with a UTC kickoff date in [date_from, date_to].

        Raises:
            ProviderUnavailableError: the source is unconfigured or unreachable.
        """
        ...
