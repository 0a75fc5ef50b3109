"""
Unit tests for liveness evaluation: stage order, the kickoff window and
degradation on provider failure.
"""
from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from conftest import NOW, FakeProvider, FixedClock, make_match
from flow.liveness import (
    CachedStatusStage,
    KickoffWindowStage,
    LivenessEvaluator,
    ProviderLiveStage,
)
from shared.config import Settings
from shared.errors import ProviderUnavailableError
from shared.models.domain import TeamContext
from shared.models.enums import DeviceMatchStatus

TEAM = 65


def _evaluator(provider: FakeProvider, clock: FixedClock, window: float = 120.0) -> LivenessEvaluator:
    return LivenessEvaluator.default(provider, clock, Settings(live_window_minutes=window))


def _ctx(status: DeviceMatchStatus = DeviceMatchStatus.OTHER) -> TeamContext:
    return TeamContext(team_id=TEAM, capability_status=status)


# ── Cached fast path ────────────────────────────────────────────────────

class TestCachedStatus:

    @pytest.mark.parametrize("status", [DeviceMatchStatus.LIVE, DeviceMatchStatus.HALFTIME])
    def test_playing_status_short_circuits_provider(self, clock: FixedClock, status: DeviceMatchStatus) -> None:
        provider = FakeProvider(error=ProviderUnavailableError("down"))
        assert _evaluator(provider, clock).is_live(_ctx(status)) is True
        assert provider.calls == []

    def test_other_status_has_no_opinion(self) -> None:
        assert CachedStatusStage().decide(_ctx()) is None


# ── Provider live feed ──────────────────────────────────────────────────

def test_provider_live_match_is_live(clock: FixedClock) -> None:
    provider = FakeProvider(live=make_match(status="IN_PLAY", live=True))
    assert _evaluator(provider, clock).is_live(_ctx()) is True
    assert provider.calls == [("live", TEAM)]


def test_provider_live_stage_without_match() -> None:
    assert ProviderLiveStage(FakeProvider()).decide(_ctx()) is None


def test_no_live_and_no_match_today_is_not_live(clock: FixedClock) -> None:
    provider = FakeProvider()
    assert _evaluator(provider, clock).is_live(_ctx()) is False
    assert provider.calls == [("live", TEAM), ("today", TEAM)]


# ── Kickoff window heuristic ────────────────────────────────────────────

class TestKickoffWindow:

    @pytest.mark.parametrize(
        "minutes_ago,expected",
        [
            (61, True),
            (1, True),
            (119.9, True),
            (121, False),
            (0, False),
            (120, False),
            (-30, False),
        ],
    )
    def test_window_bounds(self, clock: FixedClock, minutes_ago: float, expected: bool) -> None:
        today = make_match(kickoff=NOW - timedelta(minutes=minutes_ago))
        provider = FakeProvider(today=today)
        assert _evaluator(provider, clock).is_live(_ctx()) is expected

    def test_window_is_tunable(self, clock: FixedClock) -> None:
        today = make_match(kickoff=NOW - timedelta(minutes=130))
        provider = FakeProvider(today=today)
        assert _evaluator(provider, clock, window=120).is_live(_ctx()) is False
        assert _evaluator(provider, clock, window=150).is_live(_ctx()) is True

    def test_stage_concludes_false_outside_window(self, clock: FixedClock) -> None:
        today = make_match(kickoff=NOW + timedelta(hours=3))
        stage = KickoffWindowStage(FakeProvider(today=today), clock, 120)
        assert stage.decide(_ctx()) is False

    def test_stage_without_match_today(self, clock: FixedClock) -> None:
        assert KickoffWindowStage(FakeProvider(), clock, 120).decide(_ctx()) is None


# ── Degradation and ordering ────────────────────────────────────────────

def test_provider_failure_degrades_to_false(clock: FixedClock) -> None:
    provider = FakeProvider(error=ProviderUnavailableError("unreachable"))
    assert _evaluator(provider, clock).is_live(_ctx()) is False


def test_failure_in_later_stage_degrades_to_false(clock: FixedClock) -> None:
    provider = MagicMock()
    provider.get_live_match.return_value = None
    provider.get_match_today.side_effect = RuntimeError("cache corrupted")
    assert _evaluator(provider, clock).is_live(_ctx()) is False


def test_first_conclusive_stage_wins() -> None:
    first = MagicMock(name="first")
    first.name = "first"
    first.decide.return_value = None
    second = MagicMock(name="second")
    second.name = "second"
    second.decide.return_value = False
    third = MagicMock(name="third")
    third.name = "third"
    third.decide.return_value = True

    evaluator = LivenessEvaluator([first, second, third])
    assert evaluator.is_live(_ctx()) is False
    third.decide.assert_not_called()


def test_default_stage_order(clock: FixedClock) -> None:
    names = [s.name for s in _evaluator(FakeProvider(), clock).stages]
    assert names == ["cached_status", "provider_live", "kickoff_window"]
