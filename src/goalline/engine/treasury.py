"""Treasury collaborator.

The ledger only needs two things from whatever holds the reward funds:
how much is in the reserve, and a way to pay an identity out of it.

The reserve has its own identity (GOALLINE_RESERVE, default "reserve").
Its balance is answered by balance_of like any other identity, and it
can never be the destination of a payout.

Key Classes:
    Treasury - Protocol consumed by the ledger
    InMemoryTreasury - Balance table kept in memory (persisted by db_manager)
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol

from goalline.config import RESERVE_IDENTITY
from goalline.errors import InsufficientFunds

logger = logging.getLogger(__name__)


class Treasury(Protocol):
    def balance(self) -> int:
        """Funds available in the reserve."""
        ...

    def transfer(self, to: str, amount: int) -> None:
        """Move amount from the reserve to an identity."""
        ...


class InMemoryTreasury:
    """Reserve plus per-identity balances."""

    def __init__(
        self,
        reserve_balance: int = 0,
        balances: Optional[Dict[str, int]] = None,
        reserve_identity: str = RESERVE_IDENTITY,
    ):
        if reserve_balance < 0:
            raise ValueError("Reserve balance cannot be negative")
        if not reserve_identity:
            raise ValueError("Reserve identity cannot be empty")
        self.reserve_identity = reserve_identity
        self._reserve = reserve_balance
        self._balances: Dict[str, int] = dict(balances or {})
        if reserve_identity in self._balances:
            raise ValueError(f"{reserve_identity!r} is the reserve and cannot hold a payout balance")

    def balance(self) -> int:
        return self._reserve

    def balance_of(self, identity: str) -> int:
        if identity == self.reserve_identity:
            return self._reserve
        return self._balances.get(identity, 0)

    @property
    def balances(self) -> Dict[str, int]:
        """Payout balances by identity, reserve excluded."""
        return dict(self._balances)

    def deposit(self, amount: int) -> None:
        if amount <= 0:
            raise ValueError(f"Deposit must be positive, got {amount}")
        self._reserve += amount
        logger.info(f"Reserve {self.reserve_identity} funded with {amount}, balance now {self._reserve}")

    def transfer(self, to: str, amount: int) -> None:
        if amount <= 0:
            raise ValueError(f"Transfer must be positive, got {amount}")
        if to == self.reserve_identity:
            raise ValueError(f"Cannot pay the reserve {to!r} from itself")
        if amount > self._reserve:
            raise InsufficientFunds(f"Reserve holds {self._reserve}, needs {amount}")
        self._reserve -= amount
        self._balances[to] = self._balances.get(to, 0) + amount


__all__ = ["Treasury", "InMemoryTreasury"]
