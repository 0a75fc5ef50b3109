"""
Score snapshot for the get_current_score action.

The result is always fully populated. Unknown scores read as 0, so a match
with no reported score is indistinguishable from 0-0.
"""
from __future__ import annotations

from typing import Any

from shared.models.domain import UNKNOWN_STATUS, Match, ScoreSnapshot, normalize_team_id

from ingest.providers.base import MatchStateProvider


def format_snapshot(match: Match) -> ScoreSnapshot:
    live = match.live
    home_score = (live.home_score if live else None) or 0
    away_score = (live.away_score if live else None) or 0
    return ScoreSnapshot(
        home_team=match.home_team.name or "",
        away_team=match.away_team.name or "",
        home_score=home_score,
        away_score=away_score,
        score=f"{home_score}-{away_score}",
        minute=(live.minute if live else None) or 0,
        status=match.status or UNKNOWN_STATUS,
        is_live=True,
    )


class ScoreSnapshotFormatter:

    def __init__(self, provider: MatchStateProvider) -> None:
        self._provider = provider

    def snapshot(self, team_id: Any) -> ScoreSnapshot:
        """Provider errors propagate; a missing live match gives the idle snapshot."""
        match = self._provider.get_live_match(normalize_team_id(team_id))
        if match is None:
            return ScoreSnapshot.idle()
        return format_snapshot(match)
