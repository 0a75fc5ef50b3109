"""
Liveness evaluation: is this team playing right now?

An ordered list of stages, each answering True, False or None (no opinion).
The first stage with an opinion decides. The default order reflects trust:
the cached capability value first, the provider's live feed second, and a
kickoff-time heuristic last to cover provider lag around kickoff.
"""
from __future__ import annotations

import abc
from typing import Optional, Sequence

from shared.config import Settings, get_settings
from shared.models.domain import TeamContext
from shared.utils.clock import Clock, minutes_between
from shared.utils.logging import get_logger
from shared.utils.metrics import LIVENESS_DECISIONS, PROVIDER_DEGRADED

from ingest.providers.base import MatchStateProvider

logger = get_logger(__name__)


class LivenessStage(abc.ABC):
    name: str = "stage"

    @abc.abstractmethod
    def decide(self, context: TeamContext) -> Optional[bool]:
        ...


class CachedStatusStage(LivenessStage):
    """Capability value says LIVE or HALFTIME."""

    name = "cached_status"

    def decide(self, context: TeamContext) -> Optional[bool]:
        return True if context.capability_status.is_playing else None


class ProviderLiveStage(LivenessStage):
    """Provider reports a live match for the team."""

    name = "provider_live"

    def __init__(self, provider: MatchStateProvider) -> None:
        self._provider = provider

    def decide(self, context: TeamContext) -> Optional[bool]:
        return True if self._provider.get_live_match(context.team_id) is not None else None


class KickoffWindowStage(LivenessStage):
    """
    A match today whose kickoff passed less than window_minutes ago.

    Both bounds are exclusive: not live at kickoff itself, and no longer
    live once the window has fully elapsed.
    """

    name = "kickoff_window"

    def __init__(self, provider: MatchStateProvider, clock: Clock, window_minutes: float) -> None:
        self._provider = provider
        self._clock = clock
        self._window_minutes = window_minutes

    def decide(self, context: TeamContext) -> Optional[bool]:
        match = self._provider.get_match_today(context.team_id)
        if match is None:
            return None
        elapsed = minutes_between(match.kickoff_time, self._clock.now())
        probably_live = 0 < elapsed < self._window_minutes
        if probably_live:
            logger.info(
                "match_probably_live",
                team_id=context.team_id,
                match_id=str(match.id),
                minutes_since_kickoff=round(elapsed),
            )
        return probably_live


class LivenessEvaluator:

    def __init__(self, stages: Sequence[LivenessStage]) -> None:
        self._stages = list(stages)

    @classmethod
    def default(
        cls,
        provider: MatchStateProvider,
        clock: Clock,
        settings: Settings | None = None,
    ) -> "LivenessEvaluator":
        settings = settings or get_settings()
        return cls([
            CachedStatusStage(),
            ProviderLiveStage(provider),
            KickoffWindowStage(provider, clock, settings.live_window_minutes),
        ])

    @property
    def stages(self) -> list[LivenessStage]:
        return list(self._stages)

    def is_live(self, context: TeamContext) -> bool:
        """Never raises for provider failures; they degrade to False."""
        for stage in self._stages:
            try:
                decision = stage.decide(context)
            except Exception as exc:
                logger.warning(
                    "liveness_stage_failed",
                    stage=stage.name,
                    team_id=context.team_id,
                    error=str(exc),
                )
                LIVENESS_DECISIONS.labels(stage=stage.name, result="error").inc()
                PROVIDER_DEGRADED.labels(operation="is_live").inc()
                return False
            if decision is None:
                continue
            LIVENESS_DECISIONS.labels(stage=stage.name, result=str(decision).lower()).inc()
            return decision
        LIVENESS_DECISIONS.labels(stage="none", result="false").inc()
        return False
