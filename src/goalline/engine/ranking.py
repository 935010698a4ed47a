"""Ranking engine.

Ranking Rule (Frozen): order by points descending, then team id ascending.
Every team gets a distinct position, so ranks are a permutation of 1..N.
Equal points never share a rank; the earlier-created team wins the tie.

Functions:
    compute_ranks  - Sort-based ranks, O(N log N)
    pairwise_ranks - Direct definition, O(N^2), kept as the reference
    standings_frame - DataFrame view of teams ordered by rank
"""

from __future__ import annotations

from typing import Dict, List, Sequence

import pandas as pd

from goalline.engine.registry import Team


def _beats(a: Team, b: Team) -> bool:
    """True if team a is ordered ahead of team b."""
    return a.points > b.points or (a.points == b.points and a.id < b.id)


def pairwise_ranks(teams: Sequence[Team]) -> Dict[int, int]:
    """Rank = 1 + number of teams ordered ahead. Returns {team_id: rank}."""
    return {
        t.id: 1 + sum(1 for other in teams if other.id != t.id and _beats(other, t))
        for t in teams
    }


def compute_ranks(teams: Sequence[Team]) -> Dict[int, int]:
    """Rank teams by (-points, id). Returns {team_id: rank}.

    Equivalent to pairwise_ranks for any input with unique team ids.
    """
    ordered = sorted(teams, key=lambda t: (-t.points, t.id))
    return {t.id: position for position, t in enumerate(ordered, 1)}


def rank_teams(teams: Sequence[Team]) -> Sequence[Team]:
    """Assign rank in place on every team and return the same sequence."""
    ranks = compute_ranks(teams)
    for t in teams:
        t.rank = ranks[t.id]
    return teams


STANDINGS_COLUMNS = ["rank", "team_id", "owner", "players", "points", "reward_claimed"]


def standings_frame(teams: Sequence[Team], player_names: Sequence[str] = ()) -> pd.DataFrame:
    """Tabulate teams for display.

    Unranked teams (rank 0, before announcement) sort after ranked ones,
    in id order.

    Args:
        teams: Teams to tabulate
        player_names: Optional roster names, indexed by player id

    Returns:
        DataFrame with STANDINGS_COLUMNS
    """
    rows: List[Dict] = []
    for t in teams:
        if player_names:
            players = ", ".join(player_names[pid] for pid in t.player_ids)
        else:
            players = ", ".join(str(pid) for pid in t.player_ids)
        rows.append({
            "rank": t.rank,
            "team_id": t.id,
            "owner": t.owner,
            "players": players,
            "points": t.points,
            "reward_claimed": t.reward_claimed,
        })

    df = pd.DataFrame(rows, columns=STANDINGS_COLUMNS)
    if df.empty:
        return df

    df["_unranked"] = df["rank"] == 0
    df = df.sort_values(["_unranked", "rank", "team_id"]).drop(columns="_unranked")
    return df.reset_index(drop=True)


__all__ = [
    "compute_ranks",
    "pairwise_ranks",
    "rank_teams",
    "standings_frame",
    "STANDINGS_COLUMNS",
]
