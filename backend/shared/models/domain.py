"""
Pydantic v2 domain models for the Matchday flow service.
Match objects are read-only snapshots owned by the match-state provider.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.errors import InvalidTeamIdError
from shared.models.enums import DeviceMatchStatus, TeamSide

IDLE_STATUS = "IDLE"
UNKNOWN_STATUS = "UNKNOWN"
NO_LIVE_MATCH = "No live match"


def normalize_team_id(value: Any) -> int:
    """Numeric form of a team id as stored on devices ("65" -> 65)."""
    if value is None or isinstance(value, bool):
        raise InvalidTeamIdError(value)
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        raise InvalidTeamIdError(value)
    try:
        return int(text)
    except ValueError:
        raise InvalidTeamIdError(value) from None


# ── Base ────────────────────────────────────────────────────────────────
class DomainModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, frozen=True)


# ── Reference entities ──────────────────────────────────────────────────
class TeamRef(DomainModel):
    id: int
    name: Optional[str] = None
    short_name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.short_name or self.name or ""


class CompetitionRef(DomainModel):
    name: Optional[str] = None
    code: Optional[str] = None


# ── Match ───────────────────────────────────────────────────────────────
class LiveScore(DomainModel):
    """Live part of a match; None means the provider has not reported it."""
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    minute: Optional[int] = None


class Match(DomainModel):
    id: Union[int, str]
    kickoff_time: datetime
    home_team: TeamRef
    away_team: TeamRef
    competition: Optional[CompetitionRef] = None
    status: Optional[str] = None
    live: Optional[LiveScore] = None

    @field_validator("kickoff_time")
    @classmethod
    def kickoff_is_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def side_of(self, team_id: int) -> Optional[TeamSide]:
        if self.home_team.id == team_id:
            return TeamSide.HOME
        if self.away_team.id == team_id:
            return TeamSide.AWAY
        return None

    def involves(self, team_id: int) -> bool:
        return self.side_of(team_id) is not None


# ── Flow inputs / outputs ───────────────────────────────────────────────
class TeamContext(DomainModel):
    """Per-team input to liveness evaluation."""
    team_id: int
    capability_status: DeviceMatchStatus = DeviceMatchStatus.OTHER


class FixtureSummary(DomainModel):
    """Tokens returned by the get_next_match action."""
    opponent: str
    date: str
    time: str
    competition: str = ""
    venue: str
    is_home: bool
    days_until: int


class ScoreSnapshot(DomainModel):
    """Tokens returned by the get_current_score action. Always fully populated."""
    home_team: str = ""
    away_team: str = ""
    home_score: int = 0
    away_score: int = 0
    score: str = NO_LIVE_MATCH
    minute: int = 0
    status: str = IDLE_STATUS
    is_live: bool = False

    @classmethod
    def idle(cls) -> "ScoreSnapshot":
        return cls()


class ConditionResult(DomainModel):
    result: bool


class ConditionRequest(BaseModel):
    args: dict[str, Any] = Field(default_factory=dict)
