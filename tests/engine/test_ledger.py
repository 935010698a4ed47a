"""Tests for ledger operations end to end.

CONTRACT:
    - initialize once; everything else requires it
    - create_team only while OPEN, ids 0..N-1
    - announce_result: admin only, once, scores and ranks every team
    - claim_reward: once per team, owner only, top ten paid
    - A failed operation changes nothing
"""

import threading

import pytest

from goalline.config import FLAT_TOP10_REWARD
from goalline.engine.events import (
    InMemoryEventSink,
    ResultAnnouncedEvent,
    RewardClaimedEvent,
    TeamCreatedEvent,
)
from goalline.engine.ledger import Ledger
from goalline.engine.settlement import SettlementState
from goalline.engine.treasury import InMemoryTreasury
from goalline.errors import (
    AlreadyInitialized,
    DuplicatePlayer,
    InsufficientFunds,
    LengthMismatch,
    NotAdmin,
    NotInitialized,
    NotTeamOwner,
    PlayerNotFound,
    PlayerStatsMissing,
    ResultAlreadyAnnounced,
    ResultNotAnnounced,
    RewardAlreadyClaimed,
    TeamNotFound,
)


def register_reference_teams(ledger):
    """Teams scoring [18, 9, 12, 12] under the shared goals/assists."""
    ledger.create_team("alice", 0, 1, 2)
    ledger.create_team("bob", 0, 2, 3)
    ledger.create_team("carol", 3, 4, 5)
    ledger.create_team("dave", 5, 4, 3)


class TestInitialize:
    """One-shot setup and the NotInitialized gate."""

    def test_loads_default_roster(self):
        ledger = Ledger()
        ledger.initialize("admin")

        assert ledger.is_initialized
        assert ledger.admin == "admin"
        assert ledger.state is SettlementState.OPEN
        assert [p.name for p in ledger.roster] == [
            "Salah", "Rashford", "Bruno Fernandes", "De Bruyne", "Trent", "Maquire",
        ]

    def test_second_initialize_fails(self, ledger):
        with pytest.raises(AlreadyInitialized):
            ledger.initialize("someone_else")
        assert ledger.admin == "admin"

    def test_operations_require_initialize(self, goals, assists):
        ledger = Ledger()

        with pytest.raises(NotInitialized):
            ledger.create_team("alice", 0, 1, 2)
        with pytest.raises(NotInitialized):
            ledger.announce_result("admin", goals, assists)
        with pytest.raises(NotInitialized):
            ledger.claim_reward("alice", 0)
        with pytest.raises(NotInitialized):
            ledger.roster


class TestCreateTeam:
    """Team registration while the competition is open."""

    def test_ids_follow_call_order(self, ledger):
        ids = [ledger.create_team(f"user{i}", 0, 1, 2) for i in range(7)]

        assert ids == list(range(7))
        assert [t.id for t in ledger.teams()] == list(range(7))

    def test_emits_team_created(self, ledger, sink):
        ledger.create_team("alice", 4, 0, 2)

        assert sink.events == [
            TeamCreatedEvent(owner="alice", team_id=0, player_ids=[4, 0, 2], timestamp=1000)
        ]

    def test_duplicate_player(self, ledger, sink):
        with pytest.raises(DuplicatePlayer):
            ledger.create_team("alice", 1, 2, 1)
        assert ledger.teams() == []
        assert sink.events == []

    def test_unknown_player(self, ledger):
        with pytest.raises(PlayerNotFound):
            ledger.create_team("alice", 0, 1, 6)
        assert ledger.teams() == []

    def test_closed_check_comes_first(self, ledger, goals, assists):
        """After announcement even an invalid selection reports ResultAlreadyAnnounced."""
        ledger.announce_result("admin", goals, assists)

        with pytest.raises(ResultAlreadyAnnounced):
            ledger.create_team("alice", 9, 9, 9)

    def test_returned_teams_are_copies(self, ledger):
        ledger.create_team("alice", 0, 1, 2)
        ledger.get_team(0).points = 999

        assert ledger.get_team(0).points == 0

    def test_concurrent_creates_get_unique_ids(self, ledger):
        results = []

        def worker(n):
            for _ in range(25):
                results.append(ledger.create_team(f"user{n}", 0, 1, 2))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(results) == list(range(100))
        assert [t.id for t in ledger.teams()] == list(range(100))


class TestAnnounceResult:
    """Scoring, ranking and closing in one step."""

    def test_scores_and_ranks(self, ledger, goals, assists):
        register_reference_teams(ledger)

        ledger.announce_result("admin", goals, assists)

        teams = ledger.teams()
        assert [t.points for t in teams] == [18, 9, 12, 12]
        assert [t.rank for t in teams] == [1, 4, 2, 3]
        assert ledger.state is SettlementState.CLOSED

    def test_ranks_zero_while_open(self, ledger):
        register_reference_teams(ledger)

        assert all(t.rank == 0 for t in ledger.teams())

    def test_emits_result_announced(self, ledger, sink, goals, assists):
        ledger.announce_result("admin", goals, assists)

        assert sink.events == [
            ResultAnnouncedEvent(player_goals=goals, player_assists=assists, timestamp=1000)
        ]

    def test_empty_registry(self, ledger, goals, assists):
        ledger.announce_result("admin", goals, assists)

        assert ledger.state is SettlementState.CLOSED
        assert ledger.teams() == []

    def test_non_admin_rejected(self, ledger, goals, assists):
        with pytest.raises(NotAdmin):
            ledger.announce_result("alice", goals, assists)
        assert ledger.state is SettlementState.OPEN

    def test_second_announce_rejected(self, ledger, goals, assists):
        ledger.announce_result("admin", goals, assists)

        with pytest.raises(ResultAlreadyAnnounced):
            ledger.announce_result("admin", goals, assists)

    def test_length_mismatch(self, ledger, goals):
        with pytest.raises(LengthMismatch):
            ledger.announce_result("admin", goals, [0, 0])
        assert ledger.state is SettlementState.OPEN

    def test_missing_stats_leaves_state_untouched(self, ledger, sink):
        """Team (3, 4, 5) has no entries in 3-long vectors; nothing changes."""
        ledger.create_team("alice", 0, 1, 2)
        ledger.create_team("bob", 3, 4, 5)
        sink.clear()

        with pytest.raises(PlayerStatsMissing):
            ledger.announce_result("admin", [1, 1, 1], [0, 0, 0])

        assert ledger.state is SettlementState.OPEN
        assert [(t.points, t.rank) for t in ledger.teams()] == [(0, 0), (0, 0)]
        assert sink.events == []

    def test_short_vectors_ok_if_unreferenced(self, ledger):
        """Vectors only need to cover the players teams actually use."""
        ledger.create_team("alice", 0, 1, 2)

        ledger.announce_result("admin", [1, 0, 0], [0, 0, 1])

        assert ledger.get_team(0).points == 9


class TestClaimReward:
    """Payouts after the announcement."""

    def test_before_announce(self, ledger):
        ledger.create_team("alice", 0, 1, 2)

        with pytest.raises(ResultNotAnnounced):
            ledger.claim_reward("alice", 0)

    def test_top_ten_paid_once(self, ledger, treasury, sink, goals, assists):
        register_reference_teams(ledger)
        ledger.announce_result("admin", goals, assists)
        sink.clear()
        reserve = treasury.balance()

        amount = ledger.claim_reward("alice", 0)

        assert amount == FLAT_TOP10_REWARD
        assert treasury.balance_of("alice") == FLAT_TOP10_REWARD
        assert treasury.balance() == reserve - FLAT_TOP10_REWARD
        assert ledger.get_team(0).reward_claimed is True
        assert sink.events == [
            RewardClaimedEvent(owner="alice", team_id=0, amount=FLAT_TOP10_REWARD, timestamp=1000)
        ]

        with pytest.raises(RewardAlreadyClaimed):
            ledger.claim_reward("alice", 0)
        assert treasury.balance_of("alice") == FLAT_TOP10_REWARD

    def test_outside_top_ten_claims_zero(self, ledger, treasury, sink, goals, assists):
        for i in range(12):
            ledger.create_team(f"user{i}", 0, 1, 2)
        ledger.announce_result("admin", goals, assists)
        sink.clear()
        reserve = treasury.balance()

        assert ledger.get_team(10).rank == 11
        assert ledger.claim_reward("user10", 10) == 0
        assert ledger.get_team(10).reward_claimed is True
        assert treasury.balance() == reserve
        assert sink.events == []

        with pytest.raises(RewardAlreadyClaimed):
            ledger.claim_reward("user10", 10)

    def test_rank_ten_is_paid(self, ledger, goals, assists):
        for i in range(12):
            ledger.create_team(f"user{i}", 0, 1, 2)
        ledger.announce_result("admin", goals, assists)

        assert ledger.get_team(9).rank == 10
        assert ledger.claim_reward("user9", 9) == FLAT_TOP10_REWARD

    def test_unknown_team(self, ledger, goals, assists):
        ledger.announce_result("admin", goals, assists)

        with pytest.raises(TeamNotFound):
            ledger.claim_reward("alice", 0)

    def test_only_owner_can_claim(self, ledger, treasury, goals, assists):
        register_reference_teams(ledger)
        ledger.announce_result("admin", goals, assists)

        with pytest.raises(NotTeamOwner):
            ledger.claim_reward("mallory", 0)
        assert ledger.get_team(0).reward_claimed is False
        assert treasury.balance_of("mallory") == 0

    def test_insufficient_funds_can_retry(self, sink, goals, assists):
        """A claim the reserve cannot cover leaves the team claimable."""
        treasury = InMemoryTreasury(reserve_balance=FLAT_TOP10_REWARD - 1)
        ledger = Ledger(treasury=treasury, sink=sink, clock=lambda: 1000)
        ledger.initialize("admin")
        ledger.create_team("alice", 0, 1, 2)
        ledger.announce_result("admin", goals, assists)
        sink.clear()

        with pytest.raises(InsufficientFunds):
            ledger.claim_reward("alice", 0)
        assert ledger.get_team(0).reward_claimed is False
        assert sink.events == []

        treasury.deposit(1)
        assert ledger.claim_reward("alice", 0) == FLAT_TOP10_REWARD
        assert treasury.balance() == 0


class FailingSink(InMemoryEventSink):
    """Records events but refuses delivery of one kind."""

    def __init__(self, fail_kind):
        super().__init__()
        self.fail_kind = fail_kind
        self.refused = 0

    def notify(self, event):
        if event.kind == self.fail_kind:
            self.refused += 1
            raise RuntimeError("sink unavailable")
        super().notify(event)


def ledger_with_failing(kind, treasury):
    sink = FailingSink(kind)
    ledger = Ledger(treasury=treasury, sink=sink, clock=lambda: 1000)
    ledger.initialize("admin")
    return ledger, sink


class TestSinkFailure:
    """An event that cannot be delivered leaves the ledger unchanged."""

    def test_create_team_not_registered(self, treasury):
        ledger, sink = ledger_with_failing("team_created", treasury)

        with pytest.raises(RuntimeError, match="sink unavailable"):
            ledger.create_team("alice", 0, 1, 2)

        assert sink.refused == 1
        assert ledger.teams() == []

    def test_announce_leaves_competition_open(self, treasury, goals, assists):
        ledger, sink = ledger_with_failing("result_announced", treasury)
        register_reference_teams(ledger)

        with pytest.raises(RuntimeError):
            ledger.announce_result("admin", goals, assists)

        assert ledger.state is SettlementState.OPEN
        assert [(t.points, t.rank) for t in ledger.teams()] == [(0, 0)] * 4
        assert ledger.create_team("erin", 0, 1, 2) == 4

    def test_claim_pays_nothing(self, treasury, goals, assists):
        ledger, sink = ledger_with_failing("reward_claimed", treasury)
        register_reference_teams(ledger)
        ledger.announce_result("admin", goals, assists)
        reserve = treasury.balance()

        with pytest.raises(RuntimeError):
            ledger.claim_reward("alice", 0)

        assert ledger.get_team(0).reward_claimed is False
        assert treasury.balance() == reserve
        assert treasury.balance_of("alice") == 0

    def test_zero_reward_claim_emits_nothing(self, treasury, goals, assists):
        ledger, sink = ledger_with_failing("reward_claimed", treasury)
        for i in range(11):
            ledger.create_team(f"user{i}", 0, 1, 2)
        ledger.announce_result("admin", goals, assists)

        assert ledger.claim_reward("user10", 10) == 0
        assert ledger.get_team(10).reward_claimed is True
        assert sink.refused == 0


class TestLargeCounts:
    """Announcements with counts beyond 64 bits score exactly."""

    def test_points_exact(self, ledger):
        ledger.create_team("alice", 0, 1, 2)
        ledger.create_team("bob", 3, 4, 5)
        goals = [2**62, 0, 0, 2**64, 0, 0]
        assists = [0] * 6

        ledger.announce_result("admin", goals, assists)

        assert [t.points for t in ledger.teams()] == [6 * 2**62, 6 * 2**64]
        assert [t.rank for t in ledger.teams()] == [2, 1]
