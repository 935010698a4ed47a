"""Centralized configuration for Goalline.

All paths, competition constants, and settings in one place.
Environment variables can override defaults.

Path Constants:
    PROJECT_ROOT - Root directory of the project
    STORAGE_DIR - Storage for the ledger database
    DEFAULT_DB_PATH - SQLite ledger database (overridable via GOALLINE_DB_PATH)

Competition Constants:
    ROSTER_NAMES - Fixed player catalog, ids assigned in this order
    POINT_PER_GOAL / POINT_PER_ASSIST - Scoring weights
    FLAT_TOP10_REWARD - Payout in minor units for ranks 1..REWARD_RANK_CUTOFF

Environment Variables:
    GOALLINE_DB_PATH - Override default database path
    GOALLINE_RESERVE - Override the treasury reserve identity
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root (src/goalline/config.py -> goalline -> src -> project_root)
PROJECT_ROOT = Path(__file__).parent.parent.parent
STORAGE_DIR = PROJECT_ROOT / "storage"

DEFAULT_DB_PATH = os.environ.get(
    "GOALLINE_DB_PATH",
    str(STORAGE_DIR / "goalline.sqlite")
)

# Roster (ids 0..5)
ROSTER_NAMES = [
    "Salah",
    "Rashford",
    "Bruno Fernandes",
    "De Bruyne",
    "Trent",
    "Maquire",
]

# Scoring
POINT_PER_GOAL = 6
POINT_PER_ASSIST = 3

# Team constraints
TEAM_SIZE = 3

# Rewards (native currency minor units)
FLAT_TOP10_REWARD = 2_000_000
REWARD_RANK_CUTOFF = 10

# Treasury account that holds and disburses rewards
RESERVE_IDENTITY = os.environ.get("GOALLINE_RESERVE", "reserve")

# Stats API (used to source goals/assists for an announcement)
FPL_BASE_URL = "https://fantasy.premierleague.com/api"
REQUEST_DELAY = 1.0
MAX_RETRIES = 5
