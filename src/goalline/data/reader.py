"""Read-only access layer for the ledger SQLite database.

Provides LedgerReader for querying a ledger written by LedgerDatabaseManager.
All methods are read-only; nothing here can change settlement state.

Key Methods:
    query() - Execute raw SQL and return list of dicts
    get_teams() - All teams in id order
    get_events() - Event log, optionally filtered by kind
    get_standings() - Teams ordered by rank as a DataFrame

Usage:
    from goalline.data import LedgerReader

    reader = LedgerReader()
    df = reader.get_standings()
"""

from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import pandas as pd

from goalline.config import DEFAULT_DB_PATH
from goalline.data import queries as Q
from goalline.data.schemas import TeamSchema, parse_event
from goalline.engine.ranking import standings_frame
from goalline.engine.registry import Team


def _dict_factory(cursor, row):
    mapping = {}
    for idx, col in enumerate(cursor.description):
        mapping[col[0]] = row[idx]
    return mapping


class LedgerReader:
    """Lightweight SQLite client for ledger data access."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path or DEFAULT_DB_PATH
        if not os.path.exists(self.db_path):
            raise FileNotFoundError(f"Database not found: {self.db_path}")

    @contextmanager
    def _conn(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = _dict_factory
        try:
            yield conn
        finally:
            conn.close()

    def query(self, sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
        """Execute raw SQL and return list of dicts."""
        with self._conn() as conn:
            cur = conn.execute(sql, params)
            return cur.fetchall()

    # -------------------------------------------------------------------------
    # Meta
    # -------------------------------------------------------------------------

    def get_meta(self) -> Dict[str, str]:
        """Admin, settlement state and reserve balance."""
        return {row["key"]: row["value"] for row in self.query(Q.META_ALL)}

    def get_state(self) -> Optional[str]:
        return self.get_meta().get("state")

    # -------------------------------------------------------------------------
    # Players and teams
    # -------------------------------------------------------------------------

    def get_players(self) -> List[Dict]:
        return self.query(Q.PLAYERS_ALL)

    def get_team(self, team_id: int) -> Optional[Dict]:
        rows = self.query(Q.TEAM_BY_ID, (team_id,))
        return rows[0] if rows else None

    def get_teams(self, owner: Optional[str] = None) -> List[Dict]:
        if owner is not None:
            return self.query(Q.TEAMS_BY_OWNER, (owner,))
        return self.query(Q.TEAMS_ALL)

    def get_standings(self) -> pd.DataFrame:
        """Teams ordered by rank (unranked teams last) with player names."""
        names = [p["name"] for p in self.get_players()]
        teams = []
        for row in self.get_teams():
            schema = TeamSchema.model_validate(row)
            teams.append(Team(
                id=schema.id,
                owner=schema.owner,
                player_ids=schema.player_ids,
                points=schema.points,
                rank=schema.rank,
                reward_claimed=schema.reward_claimed,
            ))
        return standings_frame(teams, names)

    # -------------------------------------------------------------------------
    # Balances and events
    # -------------------------------------------------------------------------

    def get_balances(self) -> Dict[str, int]:
        return {row["identity"]: row["amount"] for row in self.query(Q.BALANCES_ALL)}

    def get_events(self, kind: Optional[str] = None) -> List[Dict]:
        """Event log in emission order, payload parsed to a dict."""
        if kind:
            rows = self.query(Q.EVENTS_BY_KIND, (kind,))
        else:
            rows = self.query(Q.EVENTS_ALL)
        for row in rows:
            row["payload"] = parse_event(row["payload"]).model_dump()
        return rows
