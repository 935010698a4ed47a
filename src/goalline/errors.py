"""Error taxonomy for ledger operations.

Every failure is a validation failure raised before any mutation. Nothing
here is retried by the engine; retries are the caller's business.

Each error carries a stable ``code`` so scripts and storage can report it
without depending on the class hierarchy.
"""

from __future__ import annotations

from typing import Optional


class LedgerError(RuntimeError):
    """Base class for all ledger operation failures."""

    code = "LEDGER_ERROR"
    default_message = "Ledger operation failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class NotAdmin(LedgerError):
    code = "NOT_ADMIN"
    default_message = "Caller is not the admin"


class NotInitialized(LedgerError):
    code = "NOT_INITIALIZED"
    default_message = "Ledger has not been initialized"


class AlreadyInitialized(LedgerError):
    code = "ALREADY_INITIALIZED"
    default_message = "Ledger is already initialized"


class LengthMismatch(LedgerError):
    code = "LENGTH_MISMATCH"
    default_message = "Goals and assists must have the same length"


class PlayerNotFound(LedgerError):
    code = "PLAYER_NOT_FOUND"
    default_message = "Player does not exist in the roster"


class DuplicatePlayer(LedgerError):
    code = "DUPLICATE_PLAYER"
    default_message = "A team cannot contain the same player twice"


class ResultAlreadyAnnounced(LedgerError):
    code = "RESULT_ALREADY_ANNOUNCED"
    default_message = "Result has already been announced"


class ResultNotAnnounced(LedgerError):
    code = "RESULT_NOT_ANNOUNCED"
    default_message = "Result has not been announced yet"


class RewardAlreadyClaimed(LedgerError):
    code = "REWARD_ALREADY_CLAIMED"
    default_message = "Reward has already been claimed for this team"


class InsufficientFunds(LedgerError):
    code = "INSUFFICIENT_FUNDS"
    default_message = "Treasury balance is too low to pay the reward"


class TeamNotFound(LedgerError):
    code = "TEAM_NOT_FOUND"
    default_message = "Team does not exist"


class PlayerStatsMissing(LedgerError):
    code = "PLAYER_STATS_MISSING"
    default_message = "No goals/assists supplied for a player on a team"


class NotTeamOwner(LedgerError):
    code = "NOT_TEAM_OWNER"
    default_message = "Only the team owner can claim its reward"


__all__ = [
    "LedgerError",
    "NotAdmin",
    "NotInitialized",
    "AlreadyInitialized",
    "LengthMismatch",
    "PlayerNotFound",
    "DuplicatePlayer",
    "ResultAlreadyAnnounced",
    "ResultNotAnnounced",
    "RewardAlreadyClaimed",
    "InsufficientFunds",
    "TeamNotFound",
    "PlayerStatsMissing",
    "NotTeamOwner",
]
