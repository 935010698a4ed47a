"""Pydantic schemas for ledger storage and events.

Defines Pydantic models for database rows and emitted events.
Used for validation on load and for SQLite DDL generation.

Models:
    MetaSchema - Key/value ledger settings
    PlayerSchema - Roster player row
    TeamSchema - Team row (player ids flattened to three columns)
    BalanceSchema - Treasury balance row
    EventRowSchema - Stored event envelope

Event payload models live in goalline.engine.events and are re-exported here.

Usage:
    from goalline.data.schemas import TeamSchema, parse_event

    team = TeamSchema.model_validate(row)
    event = parse_event(row["payload"])
    print(event.kind, event.timestamp)
"""

from __future__ import annotations

from typing import Any, Dict, Type, Union, get_args, get_origin

from pydantic import BaseModel, Field

from goalline.engine.events import (
    LedgerEvent,
    ResultAnnouncedEvent,
    RewardClaimedEvent,
    TeamCreatedEvent,
    parse_event,
)


# Type mapping from Python types to SQLite types
PYTHON_TO_SQLITE: Dict[Type, str] = {
    int: "INTEGER",
    float: "REAL",
    str: "TEXT",
    bool: "INTEGER",
}


def pydantic_to_sqlite_column(field_name: str, field_info: Any, primary_key: str = "id") -> str:
    """Convert a Pydantic field to SQLite column definition.

    Args:
        field_name: Name of the field
        field_info: Pydantic FieldInfo object
        primary_key: Field that becomes the PRIMARY KEY

    Returns:
        SQLite column definition string
    """
    annotation = field_info.annotation

    # Optional is Union[X, None]
    if get_origin(annotation) is Union:
        args = get_args(annotation)
        if type(None) in args:
            annotation = next(a for a in args if a is not type(None))

    sqlite_type = PYTHON_TO_SQLITE.get(annotation, "TEXT")

    if field_name == primary_key:
        return f"{field_name} {sqlite_type} PRIMARY KEY"

    return f"{field_name} {sqlite_type}"


def schema_to_create_table(
    table_name: str,
    schema: Type[BaseModel],
    primary_key: str = "id",
) -> str:
    """Generate CREATE TABLE SQL from Pydantic schema.

    Args:
        table_name: Name of the SQL table
        schema: Pydantic model class
        primary_key: Field that becomes the PRIMARY KEY

    Returns:
        CREATE TABLE IF NOT EXISTS SQL statement
    """
    columns = [
        pydantic_to_sqlite_column(name, info, primary_key)
        for name, info in schema.model_fields.items()
    ]

    columns_sql = ",\n                ".join(columns)
    return f"""
            CREATE TABLE IF NOT EXISTS {table_name} (
                {columns_sql}
            )
        """


# -----------------------------------------------------------------------------
# Storage rows
# -----------------------------------------------------------------------------

class MetaSchema(BaseModel):
    """Single ledger setting (admin, state, reserve_balance)."""

    key: str
    value: str


class PlayerSchema(BaseModel):
    """Roster player."""

    id: int = Field(ge=0)
    name: str


class TeamSchema(BaseModel):
    """Team row. Player ids are stored as three columns."""

    id: int = Field(ge=0)
    owner: str
    player1: int = Field(ge=0)
    player2: int = Field(ge=0)
    player3: int = Field(ge=0)
    points: int = Field(0, ge=0)
    rank: int = Field(0, ge=0)
    reward_claimed: bool = False

    @property
    def player_ids(self) -> tuple:
        return (self.player1, self.player2, self.player3)


class BalanceSchema(BaseModel):
    """Treasury balance for one identity."""

    identity: str
    amount: int = Field(ge=0)


class EventRowSchema(BaseModel):
    """Stored event envelope. payload is the event's JSON."""

    id: int
    kind: str
    timestamp: int
    payload: str


__all__ = [
    "MetaSchema",
    "PlayerSchema",
    "TeamSchema",
    "BalanceSchema",
    "EventRowSchema",
    "TeamCreatedEvent",
    "ResultAnnouncedEvent",
    "RewardClaimedEvent",
    "LedgerEvent",
    "parse_event",
    "schema_to_create_table",
]
