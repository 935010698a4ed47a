"""Scoring engine.

Scoring Rule (Frozen): points = goals * POINT_PER_GOAL + assists * POINT_PER_ASSIST
No per-position weighting, no bonus points.

Counts are unbounded: arithmetic runs on Python ints (object arrays), so
no count is ever too large to score.

Functions:
    score_players - Per-player points for full goal/assist vectors
    sum_points    - Team total from precomputed per-player points
    team_points   - Team total straight from goal/assist vectors
"""

from __future__ import annotations

import operator
from typing import List, Sequence

import numpy as np

from goalline.config import POINT_PER_ASSIST, POINT_PER_GOAL
from goalline.errors import LengthMismatch, PlayerStatsMissing


def _as_counts(values: Sequence[int], label: str) -> np.ndarray:
    """Object array of Python ints, rejecting negatives and non-integers."""
    counts = []
    for v in values:
        try:
            count = operator.index(v)
        except TypeError:
            raise ValueError(f"{label} must be integers, got {v!r}")
        if count < 0:
            raise ValueError(f"{label} must be non-negative, got {count}")
        counts.append(count)
    arr = np.empty(len(counts), dtype=object)
    arr[:] = counts
    return arr


def score_players(goals: Sequence[int], assists: Sequence[int]) -> List[int]:
    """Points per player: goals[i] * 6 + assists[i] * 3.

    Args:
        goals: Goals scored, indexed by player id
        assists: Assists made, indexed by player id

    Returns:
        List of per-player points, same length as the inputs

    Raises:
        LengthMismatch: If the two sequences differ in length
        ValueError: If any count is negative or not an integer
    """
    if len(goals) != len(assists):
        raise LengthMismatch(
            f"Got {len(goals)} goal counts but {len(assists)} assist counts"
        )
    if len(goals) == 0:
        return []

    g = _as_counts(goals, "goals")
    a = _as_counts(assists, "assists")
    points = g * POINT_PER_GOAL + a * POINT_PER_ASSIST
    return [int(p) for p in points]


def sum_points(player_ids: Sequence[int], per_player: Sequence[int]) -> int:
    """Total of per_player[pid] over a team's players.

    Raises:
        PlayerStatsMissing: If a player id is past the end of per_player
    """
    missing = [pid for pid in player_ids if pid >= len(per_player)]
    if missing:
        raise PlayerStatsMissing(
            f"No stats for players {missing} (stats cover {len(per_player)} players)"
        )
    return sum(per_player[pid] for pid in player_ids)


def team_points(
    player_ids: Sequence[int],
    goals: Sequence[int],
    assists: Sequence[int],
) -> int:
    """Total points for a team, looking each player up by id.

    Only the team's own entries are read, so the two vectors may differ in
    length as long as both cover every player on the team.

    Raises:
        PlayerStatsMissing: If a player id is past the end of either sequence
    """
    for pid in player_ids:
        if pid >= len(goals) or pid >= len(assists):
            raise PlayerStatsMissing(
                f"No stats for player {pid} "
                f"(goals has {len(goals)}, assists has {len(assists)})"
            )
    return sum(score_players(
        [goals[pid] for pid in player_ids],
        [assists[pid] for pid in player_ids],
    ))


__all__ = ["score_players", "sum_points", "team_points"]
