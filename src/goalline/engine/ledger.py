"""Competition ledger - the aggregate every operation goes through.

Owns the roster, the team registry and the settlement state, plus the
collaborators it reports to (treasury, event sink, clock). There is no
module-level state: build a Ledger, initialize it, and pass it around.

Operations:
    initialize(admin)                          - once, loads the roster
    create_team(caller, p1, p2, p3) -> id      - while OPEN
    announce_result(admin, goals, assists)     - OPEN -> CLOSED, scores and ranks
    claim_reward(caller, team_id) -> amount    - once per team, while CLOSED

Every mutating operation holds one re-entrant lock for its whole duration
and checks everything before it writes anything. Events go to the sink
before state is written, so a sink that raises leaves the ledger as it
was. A raised LedgerError means nothing changed.

Usage:
    from goalline import Ledger
    from goalline.engine.treasury import InMemoryTreasury

    ledger = Ledger(treasury=InMemoryTreasury(reserve_balance=20_000_000))
    ledger.initialize("admin")
    team_id = ledger.create_team("alice", 0, 1, 2)
    ledger.announce_result("admin", [0, 1, 1, 0, 0, 1], [1, 1, 0, 0, 1, 1])
    ledger.claim_reward("alice", team_id)  # 2_000_000
"""

from __future__ import annotations

import logging
from dataclasses import replace
from threading import RLock
from typing import Callable, List, Optional, Sequence

from goalline.config import ROSTER_NAMES
from goalline.engine.events import (
    EventSink,
    InMemoryEventSink,
    LedgerEvent,
    MonotonicClock,
    ResultAnnouncedEvent,
    RewardClaimedEvent,
    TeamCreatedEvent,
)
from goalline.engine.ranking import compute_ranks
from goalline.engine.registry import Team, TeamRegistry, validate_selection
from goalline.engine.roster import Roster
from goalline.engine.scoring import score_players, sum_points
from goalline.engine.settlement import Settlement, SettlementState, reward_for_rank
from goalline.engine.treasury import InMemoryTreasury, Treasury
from goalline.errors import (
    AlreadyInitialized,
    InsufficientFunds,
    NotAdmin,
    NotInitialized,
    NotTeamOwner,
    RewardAlreadyClaimed,
)

logger = logging.getLogger(__name__)


class Ledger:
    """Single owned state for one competition."""

    def __init__(
        self,
        treasury: Optional[Treasury] = None,
        sink: Optional[EventSink] = None,
        clock: Optional[Callable[[], int]] = None,
        roster_names: Optional[Sequence[str]] = None,
    ) -> None:
        """Create an uninitialized ledger.

        Args:
            treasury: Holds and pays out rewards. Empty in-memory reserve if omitted.
            sink: Receives events. In-memory list if omitted.
            clock: Zero-argument callable returning integer seconds.
            roster_names: Player names loaded by initialize(). Defaults to config.
        """
        self._lock = RLock()
        self._treasury = treasury if treasury is not None else InMemoryTreasury()
        self._sink = sink if sink is not None else InMemoryEventSink()
        self._clock = clock or MonotonicClock()
        self._roster_names = list(roster_names if roster_names is not None else ROSTER_NAMES)

        self._admin: Optional[str] = None
        self._roster: Optional[Roster] = None
        self._registry = TeamRegistry()
        self._settlement = Settlement()

    @classmethod
    def restore(
        cls,
        admin: str,
        roster: Roster,
        teams: Sequence[Team],
        state: SettlementState,
        treasury: Optional[Treasury] = None,
        sink: Optional[EventSink] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> "Ledger":
        """Rebuild an initialized ledger from stored state."""
        ledger = cls(treasury=treasury, sink=sink, clock=clock, roster_names=roster.names)
        ledger._admin = admin
        ledger._roster = roster
        ledger._registry = TeamRegistry(teams)
        ledger._settlement = Settlement(state)
        return ledger

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return self._roster is not None

    @property
    def admin(self) -> Optional[str]:
        return self._admin

    @property
    def roster(self) -> Roster:
        self._require_initialized()
        return self._roster

    @property
    def state(self) -> SettlementState:
        return self._settlement.state

    @property
    def treasury(self) -> Treasury:
        return self._treasury

    @property
    def sink(self) -> EventSink:
        return self._sink

    def teams(self) -> List[Team]:
        """Copies of all teams in id order."""
        with self._lock:
            return [replace(t) for t in self._registry]

    def get_team(self, team_id: int) -> Team:
        with self._lock:
            return replace(self._registry.get(team_id))

    def teams_of(self, owner: str) -> List[Team]:
        with self._lock:
            return [replace(t) for t in self._registry.by_owner(owner)]

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def initialize(self, admin: str) -> None:
        """Load the roster and open the competition, naming its admin.

        Raises:
            AlreadyInitialized: On any call after the first
        """
        with self._lock:
            if self.is_initialized:
                raise AlreadyInitialized(f"Ledger already administered by {self._admin}")
            self._roster = Roster.initialize(self._roster_names)
            self._admin = admin
            logger.info(f"Ledger initialized by {admin} with {len(self._roster)} players")

    def create_team(self, caller: str, player1: int, player2: int, player3: int) -> int:
        """Register a team of three distinct roster players for caller.

        Returns:
            The new team's id

        Raises:
            NotInitialized: Before initialize()
            ResultAlreadyAnnounced: After the announcement
            PlayerNotFound: If any id is outside the roster
            DuplicatePlayer: If any two ids are equal
        """
        with self._lock:
            self._require_initialized()
            self._settlement.require_open()

            selection = validate_selection(self._roster, [player1, player2, player3])
            self._emit(TeamCreatedEvent(
                owner=caller,
                team_id=len(self._registry),
                player_ids=list(selection),
                timestamp=self._clock(),
            ))
            team = self._registry.create(self._roster, caller, selection)
            return team.id

    def announce_result(
        self,
        caller: str,
        player_goals: Sequence[int],
        player_assists: Sequence[int],
    ) -> None:
        """Score and rank every team, then close the competition.

        Args:
            caller: Must be the admin
            player_goals: Goals per player, indexed by player id
            player_assists: Assists per player, indexed by player id

        Raises:
            NotInitialized: Before initialize()
            NotAdmin: If caller is not the admin
            ResultAlreadyAnnounced: On a second announcement
            LengthMismatch: If the two vectors differ in length
            PlayerStatsMissing: If a team's player has no entry in the vectors
        """
        with self._lock:
            self._require_initialized()
            if caller != self._admin:
                raise NotAdmin(f"{caller} is not the admin")
            self._settlement.require_open()

            goals = list(player_goals)
            assists = list(player_assists)
            per_player = score_players(goals, assists)

            points = {
                t.id: sum_points(t.player_ids, per_player)
                for t in self._registry
            }
            ranks = compute_ranks([replace(t, points=points[t.id]) for t in self._registry])

            self._emit(ResultAnnouncedEvent(
                player_goals=goals,
                player_assists=assists,
                timestamp=self._clock(),
            ))

            for team in self._registry:
                team.points = points[team.id]
                team.rank = ranks[team.id]
            self._settlement.close()
            logger.info(f"Result announced: {len(self._registry)} teams ranked, competition closed")

    def claim_reward(self, caller: str, team_id: int) -> int:
        """Claim a team's reward. Each team can claim once.

        Teams outside the top ten claim successfully for 0 with no transfer
        and no event. The claimed flag is only set once any payout has
        gone through, so a claim that fails for lack of funds can be retried.

        Returns:
            Amount paid to caller

        Raises:
            NotInitialized: Before initialize()
            ResultNotAnnounced: Before the announcement
            TeamNotFound: If team_id does not exist
            NotTeamOwner: If caller did not create the team
            RewardAlreadyClaimed: On a second claim
            InsufficientFunds: If the treasury cannot cover the reward
        """
        with self._lock:
            self._require_initialized()
            self._settlement.require_closed()

            team = self._registry.get(team_id)
            if team.owner != caller:
                raise NotTeamOwner(f"Team {team_id} belongs to {team.owner}, not {caller}")
            if team.reward_claimed:
                raise RewardAlreadyClaimed(f"Team {team_id} already claimed")

            reward = reward_for_rank(team.rank)
            if reward > 0:
                available = self._treasury.balance()
                if available < reward:
                    logger.warning(
                        f"Claim for team {team_id} rejected: reserve {available} < reward {reward}"
                    )
                    raise InsufficientFunds(f"Reserve holds {available}, reward is {reward}")
                self._emit(RewardClaimedEvent(
                    owner=caller,
                    team_id=team_id,
                    amount=reward,
                    timestamp=self._clock(),
                ))
                # Commit point: nothing below can fail once the transfer is through
                self._treasury.transfer(caller, reward)

            team.reward_claimed = True
            logger.info(f"Team {team_id} (rank {team.rank}) claimed {reward} for {caller}")
            return reward

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require_initialized(self) -> None:
        if self._roster is None:
            raise NotInitialized()

    def _emit(self, event: LedgerEvent) -> None:
        self._sink.notify(event)


__all__ = ["Ledger"]
