"""Settlement core - roster, scoring, registry, ranking, lifecycle.

These are the frozen competition rules. Scripts and the dashboard go
through Ledger; nothing outside this package mutates teams.

Rules (Frozen):
- Scoring: goals * 6 + assists * 3
- Ranking: points descending, then team id ascending (unique ranks)
- Reward: flat payout for ranks 1..10, claimed once per team
"""

from .ledger import Ledger
from .roster import Player, Roster
from .registry import Team, TeamRegistry
from .scoring import score_players, sum_points, team_points
from .ranking import compute_ranks, pairwise_ranks, rank_teams, standings_frame
from .settlement import Settlement, SettlementState, reward_for_rank
from .treasury import InMemoryTreasury, Treasury
from .events import EventSink, InMemoryEventSink, MonotonicClock

__all__ = [
    "Ledger",
    "Player",
    "Roster",
    "Team",
    "TeamRegistry",
    "score_players",
    "sum_points",
    "team_points",
    "compute_ranks",
    "pairwise_ranks",
    "rank_teams",
    "standings_frame",
    "Settlement",
    "SettlementState",
    "reward_for_rank",
    "InMemoryTreasury",
    "Treasury",
    "EventSink",
    "InMemoryEventSink",
    "MonotonicClock",
]
