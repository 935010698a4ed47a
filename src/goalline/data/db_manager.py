"""Database manager for ledger storage.

Handles all SQLite database operations including:
- Schema initialization
- Saving a ledger snapshot (meta, players, teams, balances) with its new events
- Loading a ledger back with its treasury

Each save runs in one transaction, so a snapshot and the events emitted
while producing it land together or not at all.

Key Classes:
    LedgerDatabaseManager - Database operations for ledger state

Usage:
    from goalline.data.db_manager import LedgerDatabaseManager

    db = LedgerDatabaseManager()
    ledger, treasury = db.load_ledger(sink=sink)
    ledger.create_team("alice", 0, 1, 2)
    db.save_ledger(ledger, treasury, sink.events)
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from goalline.config import DEFAULT_DB_PATH, RESERVE_IDENTITY
from goalline.data import queries as Q
from goalline.data.schemas import (
    BalanceSchema,
    EventRowSchema,
    MetaSchema,
    PlayerSchema,
    TeamSchema,
    schema_to_create_table,
)
from goalline.engine.events import EventSink, LedgerEvent, MonotonicClock
from goalline.engine.ledger import Ledger
from goalline.engine.registry import Team
from goalline.engine.roster import Player, Roster
from goalline.engine.settlement import SettlementState
from goalline.engine.treasury import InMemoryTreasury

logger = logging.getLogger(__name__)


class LedgerDatabaseManager:
    """Manages SQLite database for ledger storage."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = Path(db_path or DEFAULT_DB_PATH)
        self._init_database()

    def _init_database(self) -> None:
        """Create database schema if it doesn't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute(schema_to_create_table("meta", MetaSchema, primary_key="key"))
        cursor.execute(schema_to_create_table("players", PlayerSchema))
        cursor.execute(schema_to_create_table("teams", TeamSchema))
        cursor.execute(schema_to_create_table("balances", BalanceSchema, primary_key="identity"))
        cursor.execute(schema_to_create_table("events", EventRowSchema))
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_teams_owner ON teams(owner)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_events_kind ON events(kind)")

        conn.commit()
        conn.close()
        logger.info(f"Database initialized: {self.db_path}")

    def get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        return sqlite3.connect(self.db_path)

    def _bulk_upsert(
        self,
        cursor: sqlite3.Cursor,
        table: str,
        columns: List[str],
        rows: List[tuple],
    ) -> None:
        """Bulk insert/replace rows efficiently."""
        if not rows:
            return
        placeholders = ", ".join("?" * len(columns))
        cols = ", ".join(columns)
        cursor.executemany(
            f"INSERT OR REPLACE INTO {table} ({cols}) VALUES ({placeholders})",
            rows,
        )

    # -------------------------------------------------------------------------
    # Save
    # -------------------------------------------------------------------------

    def save_ledger(
        self,
        ledger: Ledger,
        treasury: Optional[InMemoryTreasury] = None,
        events: Iterable[LedgerEvent] = (),
    ) -> None:
        """Write a full snapshot and append new events in one transaction.

        Args:
            ledger: Ledger to persist (initialized or not)
            treasury: Treasury whose balances to persist. Defaults to the ledger's.
            events: Events emitted since the last save, in emission order
        """
        treasury = treasury if treasury is not None else ledger.treasury
        conn = self.get_connection()
        try:
            cursor = conn.cursor()
            self._write_meta(cursor, ledger, treasury)
            if ledger.is_initialized:
                self._write_players(cursor, ledger.roster)
                self._write_teams(cursor, ledger.teams())
            self._write_balances(cursor, treasury)
            written = self.append_events(cursor, events)
            conn.commit()
            logger.info(
                f"Saved ledger ({ledger.state.value}, {len(ledger.teams())} teams, "
                f"{written} new events) to {self.db_path}"
            )
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _write_meta(self, cursor: sqlite3.Cursor, ledger: Ledger, treasury) -> None:
        meta = {
            "state": ledger.state.value,
            "reserve_balance": str(treasury.balance()),
        }
        if isinstance(treasury, InMemoryTreasury):
            meta["reserve_identity"] = treasury.reserve_identity
        if ledger.admin is not None:
            meta["admin"] = ledger.admin
        cursor.executemany(Q.META_UPSERT, list(meta.items()))

    def _write_players(self, cursor: sqlite3.Cursor, roster: Roster) -> None:
        rows = [(p.id, p.name) for p in roster]
        self._bulk_upsert(cursor, "players", ["id", "name"], rows)

    def _write_teams(self, cursor: sqlite3.Cursor, teams: List[Team]) -> None:
        columns = [
            "id", "owner", "player1", "player2", "player3",
            "points", "rank", "reward_claimed",
        ]
        rows = [
            (
                t.id, t.owner, *t.player_ids,
                t.points, t.rank, 1 if t.reward_claimed else 0,
            )
            for t in teams
        ]
        self._bulk_upsert(cursor, "teams", columns, rows)

    def _write_balances(self, cursor: sqlite3.Cursor, treasury) -> None:
        if not isinstance(treasury, InMemoryTreasury):
            return
        cursor.execute(Q.BALANCES_CLEAR)
        rows = [(identity, amount) for identity, amount in treasury.balances.items()]
        self._bulk_upsert(cursor, "balances", ["identity", "amount"], rows)

    def append_events(self, cursor: sqlite3.Cursor, events: Iterable[LedgerEvent]) -> int:
        """Append events to the log. Returns how many were written."""
        rows = [(e.kind, e.timestamp, e.model_dump_json()) for e in events]
        if rows:
            cursor.executemany(Q.EVENT_INSERT, rows)
        return len(rows)

    # -------------------------------------------------------------------------
    # Load
    # -------------------------------------------------------------------------

    def _read_meta(self, conn: sqlite3.Connection) -> Dict[str, str]:
        rows = conn.execute(Q.META_ALL).fetchall()
        return {m.key: m.value for m in (MetaSchema(key=k, value=v) for k, v in rows)}

    def load_ledger(
        self,
        sink: Optional[EventSink] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> Tuple[Ledger, InMemoryTreasury]:
        """Rebuild the stored ledger and its treasury.

        An empty database gives an uninitialized ledger with an empty reserve.
        The reserve keeps the identity it was saved with; databases saved
        without one fall back to config.RESERVE_IDENTITY.
        Rows that fail schema validation raise pydantic.ValidationError;
        a ledger is never rebuilt from partial state.

        Args:
            sink: Event sink for the rebuilt ledger
            clock: Clock for the rebuilt ledger. Defaults to a MonotonicClock
                that never goes below the last stored event timestamp.

        Returns:
            Tuple of (ledger, treasury)
        """
        conn = self.get_connection()
        try:
            meta = self._read_meta(conn)
            balances = [
                BalanceSchema(identity=identity, amount=amount)
                for identity, amount in conn.execute(Q.BALANCES_ALL).fetchall()
            ]
            treasury = InMemoryTreasury(
                reserve_balance=int(meta.get("reserve_balance", 0)),
                balances={b.identity: b.amount for b in balances},
                reserve_identity=meta.get("reserve_identity", RESERVE_IDENTITY),
            )

            if clock is None:
                last_ts = conn.execute(Q.EVENTS_LAST_TIMESTAMP).fetchone()[0]
                clock = MonotonicClock(floor=last_ts or 0)

            admin = meta.get("admin")
            if admin is None:
                logger.info(f"No ledger stored in {self.db_path}, starting uninitialized")
                return Ledger(treasury=treasury, sink=sink, clock=clock), treasury

            players = [
                PlayerSchema(id=pid, name=name)
                for pid, name in conn.execute(Q.PLAYERS_ALL).fetchall()
            ]
            roster = Roster(tuple(Player(id=p.id, name=p.name) for p in players))

            cursor = conn.execute(Q.TEAMS_ALL)
            columns = [c[0] for c in cursor.description]
            teams = []
            for row in cursor.fetchall():
                schema = TeamSchema.model_validate(dict(zip(columns, row)))
                teams.append(Team(
                    id=schema.id,
                    owner=schema.owner,
                    player_ids=schema.player_ids,
                    points=schema.points,
                    rank=schema.rank,
                    reward_claimed=schema.reward_claimed,
                ))
        finally:
            conn.close()

        ledger = Ledger.restore(
            admin=admin,
            roster=roster,
            teams=teams,
            state=SettlementState(meta.get("state", SettlementState.OPEN.value)),
            treasury=treasury,
            sink=sink,
            clock=clock,
        )
        logger.info(f"Loaded ledger ({ledger.state.value}, {len(teams)} teams) from {self.db_path}")
        return ledger, treasury

