"""Tests for the scoring rule.

CONTRACT:
    - points = goals * 6 + assists * 3, exact for any non-negative count
    - Length mismatch fails before any computation
    - Team total is the sum of its three players, looked up by id
"""

import pytest

from goalline.engine.scoring import score_players, sum_points, team_points
from goalline.errors import LengthMismatch, PlayerStatsMissing


class TestScorePlayers:
    """Per-player points over whole vectors."""

    def test_reference_vectors(self, goals, assists):
        """goals/assists from the reference scenario give [3, 9, 6, 0, 3, 9]."""
        assert score_players(goals, assists) == [3, 9, 6, 0, 3, 9]

    def test_returns_plain_ints(self, goals, assists):
        assert all(type(p) is int for p in score_players(goals, assists))

    def test_empty(self):
        assert score_players([], []) == []

    def test_large_counts(self):
        assert score_players([10**12], [10**12]) == [9 * 10**12]

    @pytest.mark.parametrize("goals,assists,expected", [
        ([2**62], [0], [27670116110564327424]),
        ([2**64], [0], [6 * 2**64]),
        ([0], [2**64 - 1], [3 * (2**64 - 1)]),
        ([2**63], [2**63], [9 * 2**63]),
    ])
    def test_counts_past_64_bits_stay_exact(self, goals, assists, expected):
        """Totals that do not fit in 64 bits are not wrapped or truncated."""
        assert score_players(goals, assists) == expected

    def test_length_mismatch(self):
        with pytest.raises(LengthMismatch):
            score_players([1, 2], [1])

    def test_negative_counts_rejected(self):
        with pytest.raises(ValueError):
            score_players([1, -1], [0, 0])

    def test_non_integer_counts_rejected(self):
        with pytest.raises(ValueError, match="integers"):
            score_players([1.5], [0])


class TestSumPoints:
    """Team totals from precomputed per-player points."""

    def test_sums_selected_players(self):
        assert sum_points((0, 2, 5), [3, 9, 6, 0, 3, 9]) == 18

    def test_player_past_end(self):
        with pytest.raises(PlayerStatsMissing):
            sum_points((0, 1, 6), [3, 9, 6, 0, 3, 9])


class TestTeamPoints:
    """Team totals looked up straight from goal/assist vectors."""

    @pytest.mark.parametrize("player_ids,expected", [
        ((0, 1, 2), 18),
        ((0, 2, 3), 9),
        ((3, 4, 5), 12),
    ])
    def test_reference_teams(self, goals, assists, player_ids, expected):
        assert team_points(player_ids, goals, assists) == expected

    def test_agrees_with_sum_points(self, goals, assists):
        per_player = score_players(goals, assists)
        for ids in [(0, 1, 2), (1, 3, 5), (2, 4, 5)]:
            assert team_points(ids, goals, assists) == sum_points(ids, per_player)

    def test_missing_stats(self, goals, assists):
        """A player id past the end of the vectors fails."""
        with pytest.raises(PlayerStatsMissing):
            team_points((0, 1, 6), goals, assists)

    def test_missing_in_assists_only(self):
        with pytest.raises(PlayerStatsMissing):
            team_points((0, 1, 2), [1, 1, 1], [1, 1])
