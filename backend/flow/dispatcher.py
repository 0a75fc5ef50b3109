"""
Flow card dispatcher.

Maps the automation host's condition, action and trigger card ids onto the
liveness, outcome, fixture and score components. Conditions always answer a
boolean: provider outages read as False so automations keep running. Actions
surface provider failures and "no upcoming match" as errors, because the host
gives action cards an explicit failure path.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

from shared.config import Settings, get_settings
from shared.errors import (
    InvalidFlowArgumentError,
    NoUpcomingMatchError,
    ProviderUnavailableError,
    UnknownFlowCardError,
)
from shared.models.domain import TeamContext, normalize_team_id
from shared.utils.clock import Clock
from shared.utils.logging import get_logger
from shared.utils.metrics import FLOW_EVALUATIONS, PROVIDER_DEGRADED

from flow.fixtures import FixtureProjector
from flow.liveness import LivenessEvaluator
from flow.outcome import OutcomeClassifier
from flow.scores import ScoreSnapshotFormatter
from ingest.capability_cache import CapabilityCache
from ingest.providers.base import MatchStateProvider

logger = get_logger(__name__)

ConditionHandler = Callable[[int, dict[str, Any]], Awaitable[bool]]
ActionHandler = Callable[[int, dict[str, Any]], Awaitable[dict[str, Any]]]


def _positive_number(card_id: str, args: dict[str, Any], name: str) -> float:
    raw = args.get(name)
    if raw is None or isinstance(raw, bool):
        raise InvalidFlowArgumentError(card_id, name, raw)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidFlowArgumentError(card_id, name, raw) from None
    if value <= 0:
        raise InvalidFlowArgumentError(card_id, name, raw)
    return value


class FlowDispatcher:

    def __init__(
        self,
        provider: MatchStateProvider,
        capabilities: CapabilityCache,
        clock: Clock,
        settings: Settings | None = None,
        liveness: LivenessEvaluator | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._capabilities = capabilities
        self.liveness = liveness or LivenessEvaluator.default(provider, clock, settings)
        self.outcome = OutcomeClassifier(provider)
        self.fixtures = FixtureProjector(provider, clock)
        self.scores = ScoreSnapshotFormatter(provider)

        self._conditions: dict[str, ConditionHandler] = {
            "is_playing": self._is_playing,
            "is_winning": self._is_winning,
            "is_losing": self._is_losing,
            "is_drawing": self._is_drawing,
            "has_match_today": self._has_match_today,
            "match_within_hours": self._match_within_hours,
        }
        self._actions: dict[str, ActionHandler] = {
            "get_next_match": self._get_next_match,
            "get_current_score": self._get_current_score,
        }

    @property
    def condition_ids(self) -> list[str]:
        return sorted(self._conditions)

    @property
    def action_ids(self) -> list[str]:
        return sorted(self._actions)

    def team_context(self, team_id: Any) -> TeamContext:
        tid = normalize_team_id(team_id)
        return TeamContext(team_id=tid, capability_status=self._capabilities.get_cached_status(tid))

    # ── Entry points ────────────────────────────────────────────────────
    async def run_condition(self, card_id: str, team_id: Any, args: Optional[dict[str, Any]] = None) -> bool:
        handler = self._conditions.get(card_id)
        if handler is None:
            raise UnknownFlowCardError("condition", card_id)
        tid = normalize_team_id(team_id)
        try:
            result = await handler(tid, args or {})
        except Exception:
            FLOW_EVALUATIONS.labels(kind="condition", card=card_id, outcome="error").inc()
            raise
        FLOW_EVALUATIONS.labels(kind="condition", card=card_id, outcome=str(result).lower()).inc()
        logger.debug("condition_evaluated", card=card_id, team_id=tid, result=result)
        return result

    async def run_action(self, card_id: str, team_id: Any, args: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        handler = self._actions.get(card_id)
        if handler is None:
            raise UnknownFlowCardError("action", card_id)
        tid = normalize_team_id(team_id)
        try:
            tokens = await handler(tid, args or {})
        except Exception as exc:
            FLOW_EVALUATIONS.labels(kind="action", card=card_id, outcome="error").inc()
            logger.warning("action_failed", card=card_id, team_id=tid, error=str(exc))
            raise
        FLOW_EVALUATIONS.labels(kind="action", card=card_id, outcome="ok").inc()
        logger.debug("action_completed", card=card_id, team_id=tid)
        return tokens

    def trigger_matches(self, card_id: str, args: dict[str, Any], state: dict[str, Any]) -> bool:
        """Run-listener filter for device trigger cards."""
        if card_id != "match_starts_soon":
            raise UnknownFlowCardError("trigger", card_id)
        return args.get("minutes") == state.get("minutes")

    # ── Conditions ──────────────────────────────────────────────────────
    async def _is_playing(self, team_id: int, args: dict[str, Any]) -> bool:
        return self.liveness.is_live(self.team_context(team_id))

    async def _is_winning(self, team_id: int, args: dict[str, Any]) -> bool:
        return self.outcome.is_winning(team_id)

    async def _is_losing(self, team_id: int, args: dict[str, Any]) -> bool:
        return self.outcome.is_losing(team_id)

    async def _is_drawing(self, team_id: int, args: dict[str, Any]) -> bool:
        return self.outcome.is_drawing(team_id)

    async def _has_match_today(self, team_id: int, args: dict[str, Any]) -> bool:
        try:
            return self.fixtures.has_match_today(team_id)
        except ProviderUnavailableError as exc:
            return self._degraded("has_match_today", team_id, exc)

    async def _match_within_hours(self, team_id: int, args: dict[str, Any]) -> bool:
        hours = _positive_number("match_within_hours", args, "hours")
        try:
            return await self.fixtures.is_within_hours(team_id, hours)
        except ProviderUnavailableError as exc:
            return self._degraded("match_within_hours", team_id, exc)

    def _degraded(self, operation: str, team_id: int, exc: Exception) -> bool:
        logger.warning("condition_degraded", operation=operation, team_id=team_id, error=str(exc))
        PROVIDER_DEGRADED.labels(operation=operation).inc()
        return False

    # ── Actions ─────────────────────────────────────────────────────────
    async def _get_next_match(self, team_id: int, args: dict[str, Any]) -> dict[str, Any]:
        fixture = await self.fixtures.next_fixture(team_id)
        if fixture is None:
            raise NoUpcomingMatchError(team_id)
        return fixture.model_dump()

    async def _get_current_score(self, team_id: int, args: dict[str, Any]) -> dict[str, Any]:
        return self.scores.snapshot(team_id).model_dump()
