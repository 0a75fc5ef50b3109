"""
Error taxonomy for the Matchday flow service.

Absent data (no live match, no fixture) is never an error; it is expressed as
None, False or the idle score snapshot. The classes below cover the failures
that callers must be able to tell apart.
"""
from __future__ import annotations

from typing import Any


class MatchdayError(Exception):
    """Base class for all service errors."""


class ProviderUnavailableError(MatchdayError):
    """The match-state source cannot be reached or is not configured."""

    def __init__(self, message: str, provider: str = "unknown") -> None:
        super().__init__(message)
        self.provider = provider


class InvalidTeamIdError(MatchdayError, ValueError):
    """A team identifier is missing or not numeric."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"invalid team id: {value!r}")
        self.value = value


class UnknownFlowCardError(MatchdayError, LookupError):
    """No condition, action or trigger is registered under this card id."""

    def __init__(self, kind: str, card_id: str) -> None:
        super().__init__(f"unknown {kind} card: {card_id}")
        self.kind = kind
        self.card_id = card_id


class InvalidFlowArgumentError(MatchdayError, ValueError):
    """A flow card was invoked without a required argument, or with a malformed one."""

    def __init__(self, card_id: str, argument: str, value: Any = None) -> None:
        super().__init__(f"{card_id}: invalid argument {argument}={value!r}")
        self.card_id = card_id
        self.argument = argument


class NoUpcomingMatchError(MatchdayError):
    """The get_next_match action found no scheduled fixture."""

    def __init__(self, team_id: int) -> None:
        super().__init__("No upcoming match found")
        self.team_id = team_id
