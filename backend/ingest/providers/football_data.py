"""
Football-Data.org (football-data.org) fixture source.
Uses the v4 team matches endpoint with X-Auth-Token. Free tier: 10 requests/min.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from shared.config import Settings, get_settings
from shared.errors import ProviderUnavailableError
from shared.models.domain import CompetitionRef, LiveScore, Match, TeamRef
from shared.models.enums import MatchStatus
from shared.utils.http_client import ProviderHTTPClient
from shared.utils.logging import get_logger

from ingest.providers.base import FixtureSource

logger = get_logger(__name__)

PROVIDER_NAME = "football_data"


def _safe_int(val: Any) -> int | None:
    if val is None or isinstance(val, bool):
        return None
    try:
        return int(val)
    except (ValueError, TypeError):
        return None


def _parse_kickoff(raw: Any) -> Optional[datetime]:
    if not isinstance(raw, str) or not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None


def _parse_team(raw: Any) -> Optional[TeamRef]:
    if not isinstance(raw, dict):
        return None
    team_id = _safe_int(raw.get("id"))
    if team_id is None:
        return None
    return TeamRef(id=team_id, name=raw.get("name"), short_name=raw.get("shortName"))


def parse_match(data: dict[str, Any]) -> Optional[Match]:
    """
    Build a Match from football-data match JSON.

    Returns None for entries that cannot identify both teams or the kickoff
    (undrawn knockout slots).
    """
    kickoff = _parse_kickoff(data.get("utcDate"))
    home = _parse_team(data.get("homeTeam"))
    away = _parse_team(data.get("awayTeam"))
    if kickoff is None or home is None or away is None:
        return None

    status = (data.get("status") or "").strip().upper() or None
    known = MatchStatus.parse(status)

    live: Optional[LiveScore] = None
    if known is not None and known.is_live:
        full_time = (data.get("score") or {}).get("fullTime") or {}
        live = LiveScore(
            home_score=_safe_int(full_time.get("home")),
            away_score=_safe_int(full_time.get("away")),
            minute=_safe_int(data.get("minute")),
        )

    comp = data.get("competition") or {}
    return Match(
        id=data.get("id", ""),
        kickoff_time=kickoff,
        home_team=home,
        away_team=away,
        competition=CompetitionRef(name=comp.get("name"), code=comp.get("code")) if comp else None,
        status=status,
        live=live,
    )


class FootballDataSource(FixtureSource):
    """Football-Data.org v4 API (soccer only)."""

    name = PROVIDER_NAME

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: ProviderHTTPClient | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._api_key = self._settings.football_data_api_key
        headers: dict[str, str] = {}
        if self._api_key:
            headers["X-Auth-Token"] = self._api_key
        self._http = http_client or ProviderHTTPClient(
            provider_name=PROVIDER_NAME,
            base_url=self._settings.football_data_base_url,
            headers=headers,
            timeout_s=self._settings.provider_request_timeout_s,
            max_retries=self._settings.provider_max_retries,
        )

    async def start(self) -> None:
        await self._http.start()

    async def close(self) -> None:
        await self._http.close()

    async def fetch_team_matches(
        self,
        team_id: int,
        date_from: date,
        date_to: date,
        statuses: Optional[list[str]] = None,
    ) -> list[Match]:
        """GET /teams/{id}/matches for a date window, sorted by kickoff."""
        if not self._api_key:
            raise ProviderUnavailableError("football-data API key not configured", provider=PROVIDER_NAME)

        params: dict[str, Any] = {
            "dateFrom": date_from.isoformat(),
            "dateTo": date_to.isoformat(),
        }
        if statuses:
            params["status"] = ",".join(statuses)

        data = await self._http.get_json(
            f"/teams/{team_id}/matches", params=params, endpoint="team_matches"
        )
        raw_matches = data.get("matches", []) if isinstance(data, dict) else []

        matches: list[Match] = []
        for raw in raw_matches:
            match = parse_match(raw) if isinstance(raw, dict) else None
            if match is None:
                match_id = raw.get("id") if isinstance(raw, dict) else None
                logger.debug("football_data_match_skipped", team_id=team_id, match_id=match_id)
                continue
            matches.append(match)
        matches.sort(key=lambda m: m.kickoff_time)
        logger.debug(
            "football_data_team_matches",
            team_id=team_id,
            date_from=params["dateFrom"],
            date_to=params["dateTo"],
            count=len(matches),
        )
        return matches
