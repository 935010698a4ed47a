#!/usr/bin/env python3
"""Ledger CLI - one command per ledger operation.

Each command loads the ledger from SQLite, runs one operation, and saves
the snapshot together with any events it emitted. A failed operation
saves nothing.

Usage:
    PYTHONPATH=src python scripts/ledger_cli.py init --admin admin
    PYTHONPATH=src python scripts/ledger_cli.py fund --amount 20000000
    PYTHONPATH=src python scripts/ledger_cli.py create-team --caller alice 0 1 2
    PYTHONPATH=src python scripts/ledger_cli.py announce --caller admin --goals 0,1,1,0,0,1 --assists 1,1,0,0,1,1
    PYTHONPATH=src python scripts/ledger_cli.py announce --caller admin --gw 20 --element-ids 328,351,366,349,311,290
    PYTHONPATH=src python scripts/ledger_cli.py claim --caller alice --team 0
    PYTHONPATH=src python scripts/ledger_cli.py standings
    PYTHONPATH=src python scripts/ledger_cli.py events --kind reward_claimed

Environment:
    GOALLINE_DB_PATH: Path to SQLite database (default: storage/goalline.sqlite)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from goalline.config import DEFAULT_DB_PATH
from goalline.data import LedgerDatabaseManager, LedgerReader, StatsApiClient
from goalline.engine.events import InMemoryEventSink
from goalline.errors import LedgerError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def _int_list(value: str) -> List[int]:
    """Parse '0,1,1' into [0, 1, 1]."""
    if not value.strip():
        return []
    try:
        return [int(v) for v in value.split(",")]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated integers, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fantasy competition ledger")
    parser.add_argument("--db", default=None, help="Database path (default: from config)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init", help="Initialize the ledger and name its admin")
    p.add_argument("--admin", required=True)

    p = sub.add_parser("fund", help="Deposit reward funds into the reserve")
    p.add_argument("--amount", type=int, required=True)

    p = sub.add_parser("create-team", help="Register a three-player team")
    p.add_argument("--caller", required=True)
    p.add_argument("players", type=int, nargs=3, metavar="PLAYER_ID")

    p = sub.add_parser("announce", help="Announce goals/assists and close the competition")
    p.add_argument("--caller", required=True)
    p.add_argument("--goals", type=_int_list, help="Goals per player id, comma-separated")
    p.add_argument("--assists", type=_int_list, help="Assists per player id, comma-separated")
    p.add_argument("--gw", type=int, help="Pull goals/assists from this FPL gameweek instead")
    p.add_argument("--element-ids", type=_int_list, help="FPL element id per roster player (with --gw)")

    p = sub.add_parser("claim", help="Claim a team's reward")
    p.add_argument("--caller", required=True)
    p.add_argument("--team", type=int, required=True)

    sub.add_parser("standings", help="Print teams ordered by rank")

    p = sub.add_parser("events", help="Print the event log")
    p.add_argument("--kind", default=None, choices=["team_created", "result_announced", "reward_claimed"])

    return parser


def _announce_vectors(args: argparse.Namespace):
    if args.gw is not None:
        if not args.element_ids:
            raise ValueError("--gw requires --element-ids")
        return StatsApiClient().get_roster_stats(args.gw, args.element_ids)
    if args.goals is None or args.assists is None:
        raise ValueError("announce needs --goals and --assists, or --gw with --element-ids")
    return args.goals, args.assists


def run_operation(args: argparse.Namespace, db_path: str) -> None:
    """Load, apply one mutating command, save."""
    db = LedgerDatabaseManager(db_path)
    sink = InMemoryEventSink()
    ledger, treasury = db.load_ledger(sink=sink)

    if args.command == "init":
        ledger.initialize(args.admin)
        print(f"Initialized. Admin: {args.admin}")
        for player in ledger.roster:
            print(f"  {player.id}: {player.name}")
    elif args.command == "fund":
        treasury.deposit(args.amount)
        print(f"Reserve {treasury.reserve_identity} balance: {treasury.balance()}")
    elif args.command == "create-team":
        team_id = ledger.create_team(args.caller, *args.players)
        print(f"Created team {team_id} for {args.caller}")
    elif args.command == "announce":
        goals, assists = _announce_vectors(args)
        ledger.announce_result(args.caller, goals, assists)
        print(f"Result announced. {len(ledger.teams())} teams ranked.")
    elif args.command == "claim":
        amount = ledger.claim_reward(args.caller, args.team)
        print(f"Team {args.team} claimed {amount}")

    db.save_ledger(ledger, treasury, sink.events)


def show(args: argparse.Namespace, db_path: str) -> None:
    """Read-only commands."""
    reader = LedgerReader(db_path)
    if args.command == "standings":
        df = reader.get_standings()
        print(f"State: {reader.get_state()}")
        if df.empty:
            print("No teams registered.")
        else:
            print(df.to_string(index=False))
    elif args.command == "events":
        for row in reader.get_events(kind=args.kind):
            print(f"#{row['id']} {row['kind']} @ {row['timestamp']}: {row['payload']}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    db_path = args.db or DEFAULT_DB_PATH

    try:
        if args.command in ("standings", "events"):
            show(args, db_path)
        else:
            run_operation(args, db_path)
    except (LedgerError, ValueError, OverflowError, FileNotFoundError, RuntimeError) as e:
        print(f"ERROR: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
