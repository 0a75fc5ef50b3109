"""
Per-team capability store.

Holds the last liveness classification written for each team. Reads are
synchronous and never fail; an unknown team reads as OTHER. Values may lag
the provider by up to one refresh interval.
"""
from __future__ import annotations

from shared.models.enums import DeviceMatchStatus
from shared.utils.logging import get_logger

logger = get_logger(__name__)


class CapabilityCache:

    def __init__(self) -> None:
        self._status: dict[int, DeviceMatchStatus] = {}

    def get_cached_status(self, team_id: int) -> DeviceMatchStatus:
        return self._status.get(team_id, DeviceMatchStatus.OTHER)

    def set_status(self, team_id: int, status: DeviceMatchStatus) -> bool:
        """Store a status; True if it changed."""
        previous = self._status.get(team_id, DeviceMatchStatus.OTHER)
        self._status[team_id] = status
        if previous != status:
            logger.info(
                "capability_status_changed",
                team_id=team_id,
                previous=previous.value,
                current=status.value,
            )
            return True
        return False

    def playing_count(self) -> int:
        return sum(1 for s in self._status.values() if s.is_playing)
