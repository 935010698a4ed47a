"""Centralized SQL queries for ledger database access.

All SQL statements used by LedgerDatabaseManager and LedgerReader live here.
"""

# -----------------------------------------------------------------------------
# Meta (admin, settlement state, reserve balance)
# -----------------------------------------------------------------------------

META_ALL = "SELECT key, value FROM meta"

META_UPSERT = "INSERT OR REPLACE INTO meta (key, value) VALUES (?, ?)"

# -----------------------------------------------------------------------------
# Players
# -----------------------------------------------------------------------------

PLAYERS_ALL = "SELECT id, name FROM players ORDER BY id"


# -----------------------------------------------------------------------------
# Teams
# -----------------------------------------------------------------------------

TEAMS_ALL = "SELECT * FROM teams ORDER BY id"

TEAM_BY_ID = "SELECT * FROM teams WHERE id = ?"

TEAMS_BY_OWNER = "SELECT * FROM teams WHERE owner = ? ORDER BY id"

# -----------------------------------------------------------------------------
# Balances
# -----------------------------------------------------------------------------

BALANCES_ALL = "SELECT identity, amount FROM balances ORDER BY identity"

BALANCES_CLEAR = "DELETE FROM balances"

# -----------------------------------------------------------------------------
# Events
# -----------------------------------------------------------------------------

EVENTS_ALL = "SELECT id, kind, timestamp, payload FROM events ORDER BY id"

EVENTS_BY_KIND = "SELECT id, kind, timestamp, payload FROM events WHERE kind = ? ORDER BY id"

EVENT_INSERT = "INSERT INTO events (kind, timestamp, payload) VALUES (?, ?, ?)"

EVENTS_LAST_TIMESTAMP = "SELECT MAX(timestamp) AS ts FROM events"
