"""Team registry.

Holds every submitted team in creation order. A team's id is the registry
length at the moment it was created, so ids are always 0..N-1.

Teams are never edited or removed. Only the announcement writes
points/rank, and only a successful claim writes reward_claimed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple

from goalline.config import TEAM_SIZE
from goalline.engine.roster import Roster
from goalline.errors import DuplicatePlayer, PlayerNotFound, TeamNotFound

logger = logging.getLogger(__name__)


@dataclass
class Team:
    """A user's three-player selection and its settlement status.

    Attributes:
        id: Registry position, assigned at creation.
        owner: Identity that created the team.
        player_ids: Three distinct roster ids.
        points: Total points, 0 until announcement.
        rank: 1..N after announcement, 0 means unranked.
        reward_claimed: True once the owner has claimed.
    """

    id: int
    owner: str
    player_ids: Tuple[int, int, int]
    points: int = 0
    rank: int = 0
    reward_claimed: bool = False

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "owner": self.owner,
            "player_ids": list(self.player_ids),
            "points": self.points,
            "rank": self.rank,
            "reward_claimed": self.reward_claimed,
        }


def validate_selection(roster: Roster, player_ids: Sequence[int]) -> Tuple[int, int, int]:
    """Check a selection against the roster.

    Existence is checked before distinctness, so a selection that is both
    unknown and duplicated fails with PlayerNotFound.

    Raises:
        PlayerNotFound: If any id is not in the roster
        DuplicatePlayer: If any two ids are equal
    """
    if len(player_ids) != TEAM_SIZE:
        raise ValueError(f"A team needs exactly {TEAM_SIZE} players, got {len(player_ids)}")

    for pid in player_ids:
        if not roster.exists(pid):
            raise PlayerNotFound(f"Player {pid} not in roster of {len(roster)}")

    if len(set(player_ids)) != len(player_ids):
        raise DuplicatePlayer(f"Selection {list(player_ids)} repeats a player")

    return tuple(player_ids)  # type: ignore[return-value]


class TeamRegistry:
    """Append-only collection of teams."""

    def __init__(self, teams: Sequence[Team] = ()):
        self._teams: List[Team] = list(teams)
        for expected, team in enumerate(self._teams):
            if team.id != expected:
                raise ValueError(f"Team ids must be 0..N-1 in order, found {team.id} at {expected}")

    def create(self, roster: Roster, owner: str, player_ids: Sequence[int]) -> Team:
        """Validate a selection and append it as a new team."""
        selection = validate_selection(roster, player_ids)
        team = Team(id=len(self._teams), owner=owner, player_ids=selection)
        self._teams.append(team)
        logger.info(f"Registered team {team.id} for {owner}: {list(selection)}")
        return team

    def get(self, team_id: int) -> Team:
        if not 0 <= team_id < len(self._teams):
            raise TeamNotFound(f"Team {team_id} does not exist ({len(self._teams)} teams)")
        return self._teams[team_id]

    def by_owner(self, owner: str) -> List[Team]:
        return [t for t in self._teams if t.owner == owner]

    def __len__(self) -> int:
        return len(self._teams)

    def __iter__(self) -> Iterator[Team]:
        return iter(self._teams)


__all__ = ["Team", "TeamRegistry", "validate_selection"]
