"""Settlement lifecycle and reward rule.

    OPEN --announce--> CLOSED

OPEN accepts teams. CLOSED has final points/ranks and accepts claims.
CLOSED is terminal.

Reward Rule (Frozen): FLAT_TOP10_REWARD for rank 1..REWARD_RANK_CUTOFF, else 0.
"""

from __future__ import annotations

from enum import Enum

from goalline.config import FLAT_TOP10_REWARD, REWARD_RANK_CUTOFF
from goalline.errors import ResultAlreadyAnnounced, ResultNotAnnounced


class SettlementState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class Settlement:
    """Holds the lifecycle state and guards transitions."""

    def __init__(self, state: SettlementState = SettlementState.OPEN):
        self._state = SettlementState(state)

    @property
    def state(self) -> SettlementState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is SettlementState.OPEN

    def require_open(self) -> None:
        if not self.is_open:
            raise ResultAlreadyAnnounced()

    def require_closed(self) -> None:
        if self.is_open:
            raise ResultNotAnnounced()

    def close(self) -> None:
        self.require_open()
        self._state = SettlementState.CLOSED


def reward_for_rank(rank: int) -> int:
    """Payout for a final rank. Rank 0 (unranked) earns nothing."""
    if 1 <= rank <= REWARD_RANK_CUTOFF:
        return FLAT_TOP10_REWARD
    return 0


__all__ = ["Settlement", "SettlementState", "reward_for_rank"]
