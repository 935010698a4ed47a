"""Data module - storage, read access, schemas and live stats.

Public API:
    LedgerDatabaseManager - SQLite snapshot store
    LedgerReader - Read-only SQLite access
    StatsApiClient - Live goals/assists from the FPL API
    TeamSchema, PlayerSchema, etc. - Pydantic models
"""

from goalline.data.reader import LedgerReader
from goalline.data.api_client import StatsApiClient
from goalline.data.db_manager import LedgerDatabaseManager
from goalline.data.schemas import (
    BalanceSchema,
    EventRowSchema,
    MetaSchema,
    PlayerSchema,
    TeamSchema,
    parse_event,
)

__all__ = [
    "LedgerReader",
    "StatsApiClient",
    "LedgerDatabaseManager",
    "BalanceSchema",
    "EventRowSchema",
    "MetaSchema",
    "PlayerSchema",
    "TeamSchema",
    "parse_event",
]
