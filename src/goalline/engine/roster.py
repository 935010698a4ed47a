"""Fixed player catalog.

Players are assigned dense ids starting at 0 in declaration order and
never change after initialization.

Usage:
    from goalline.engine.roster import Roster

    roster = Roster.initialize(["Salah", "Rashford"])
    roster.get(1).name  # "Rashford"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

from goalline.errors import PlayerNotFound


@dataclass(frozen=True)
class Player:
    id: int
    name: str


class Roster:
    """Read-only, id-ordered collection of players."""

    def __init__(self, players: Tuple[Player, ...]):
        self._players = players

    @classmethod
    def initialize(cls, names: Sequence[str]) -> "Roster":
        """Build a roster, giving each name its position as id."""
        return cls(tuple(Player(id=i, name=name) for i, name in enumerate(names)))

    def exists(self, player_id: int) -> bool:
        return 0 <= player_id < len(self._players)

    def get(self, player_id: int) -> Player:
        if not self.exists(player_id):
            raise PlayerNotFound(f"Player {player_id} not in roster of {len(self)}")
        return self._players[player_id]

    @property
    def names(self) -> List[str]:
        return [p.name for p in self._players]

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self) -> Iterator[Player]:
        return iter(self._players)


__all__ = ["Player", "Roster"]
