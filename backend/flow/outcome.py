"""
Winning / losing / drawing predicates over a team's live match.
All three are safe to evaluate unconditionally: absent data reads as False.
"""
from __future__ import annotations

from typing import Any, Optional

from shared.models.domain import Match, normalize_team_id
from shared.models.enums import Outcome, TeamSide
from shared.utils.logging import get_logger
from shared.utils.metrics import PROVIDER_DEGRADED

from ingest.providers.base import MatchStateProvider

logger = get_logger(__name__)


def compare_scores(match: Match, side: TeamSide) -> Optional[Outcome]:
    """Outcome for one side of a live match, None while either score is unknown."""
    if match.live is None:
        return None
    home, away = match.live.home_score, match.live.away_score
    if home is None or away is None:
        return None
    ours, theirs = (home, away) if side == TeamSide.HOME else (away, home)
    if ours > theirs:
        return Outcome.WINNING
    if ours < theirs:
        return Outcome.LOSING
    return Outcome.DRAWING


class OutcomeClassifier:

    def __init__(self, provider: MatchStateProvider) -> None:
        self._provider = provider

    def classify(self, team_id: Any) -> Optional[Outcome]:
        tid = normalize_team_id(team_id)
        try:
            match = self._provider.get_live_match(tid)
        except Exception as exc:
            logger.warning("outcome_provider_failed", team_id=tid, error=str(exc))
            PROVIDER_DEGRADED.labels(operation="outcome").inc()
            return None
        if match is None:
            return None
        side = match.side_of(tid)
        if side is None:
            return None
        return compare_scores(match, side)

    def is_winning(self, team_id: Any) -> bool:
        return self.classify(team_id) == Outcome.WINNING

    def is_losing(self, team_id: Any) -> bool:
        return self.classify(team_id) == Outcome.LOSING

    def is_drawing(self, team_id: Any) -> bool:
        return self.classify(team_id) == Outcome.DRAWING
