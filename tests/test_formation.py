"""
Unit tests for match formation (grouping players into fours).
"""
import pytest
import random
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from rotation.formation import eligible_players, form_groups
from rotation.signatures import SignatureTracker


def all_members(result):
    return [name for group in result.groups for name in group] + result.carry_over


class TestEligiblePlayers:
    """Tests for rest filtering and priority/generic split."""

    def test_rest_once_excluded_from_both_inputs(self):
        priority, generic = eligible_players(["A", "X"], ["A", "B", "C", "X"], ["A"])
        assert priority == ["X"]
        assert generic == ["B", "C"]

    def test_priority_players_not_counted_twice(self):
        priority, generic = eligible_players(["X"], ["X", "Y", "Z"], [])
        assert priority == ["X"]
        assert generic == ["Y", "Z"]


class TestFormGroupsBasics:
    """Tests for group sizes, remainders and failure."""

    def test_fewer_than_four_returns_none(self, rng):
        assert form_groups(["X"], ["Y", "Z"], SignatureTracker(), {}, rng) is None

    def test_every_player_used_once(self, rng):
        generic = [f"P{i}" for i in range(11)]
        result = form_groups([], generic, SignatureTracker(), {}, rng)
        assert len(result.generic_groups) == 2
        assert all(len(group) == 4 for group in result.groups)
        assert len(result.carry_over) == 3
        assert sorted(all_members(result)) == sorted(generic)

    def test_exact_multiple_leaves_no_carry_over(self, rng):
        result = form_groups([], list("ABCDEFGH"), SignatureTracker(), {}, rng)
        assert result.carry_over == []
        assert len(result.groups) == 2


class TestPriorityGroups:
    """Tests for carry-over players being grouped first."""

    def test_first_four_priority_players_grouped_together(self, rng):
        result = form_groups(["A", "B", "C", "D", "E"], ["F", "G", "H"],
                             SignatureTracker(), {}, rng)
        assert result.priority_groups[0] == ["A", "B", "C", "D"]
        assert result.groups[0] == ["A", "B", "C", "D"]

    def test_remainder_topped_up_from_generic_pool(self, rng):
        result = form_groups(["X", "Y"], ["P", "Q"], SignatureTracker(), {}, rng)
        assert len(result.priority_groups) == 1
        group = result.priority_groups[0]
        assert group[:2] == ["X", "Y"]
        assert sorted(group[2:]) == ["P", "Q"]
        assert result.carry_over == []

    def test_top_up_takes_only_what_is_needed(self, rng):
        result = form_groups(["X", "Y", "Z"], ["P", "Q"], SignatureTracker(), {}, rng)
        assert result.priority_groups[0][:3] == ["X", "Y", "Z"]
        assert len(result.carry_over) == 1
        assert result.carry_over[0] in ("P", "Q")

    def test_remainder_kept_when_pool_too_small(self, rng):
        """Leftover priority players are not forced into a short group."""
        result = form_groups(["A", "B", "C", "D", "E", "F"], ["G"],
                             SignatureTracker(), {}, rng)
        assert result.groups == [["A", "B", "C", "D"]]
        assert result.carry_over == ["E", "F", "G"]

    def test_priority_repeat_broken_with_generic_player(self, rng):
        tracker = SignatureTracker()
        tracker.record_seated(["A", "B", "C", "D"])
        result = form_groups(["A", "B", "C", "D"], ["E"], tracker, {}, rng)
        assert result.priority_groups == [["E", "B", "C", "D"]]
        assert result.carry_over == ["A"]

    def test_topped_up_repeat_broken(self):
        """A remainder plus its top-up that re-forms last group gets a swap."""
        tracker = SignatureTracker()
        tracker.record_seated(["X", "Y", "P", "Q"])
        counts = {"R": 1000}
        swaps = 0
        for seed in range(20):
            result = form_groups(["X", "Y"], ["P", "Q", "R"], tracker, counts, random.Random(seed))
            group = result.priority_groups[0]
            assert not tracker.is_immediate_repeat(group)
            assert sorted(all_members(result)) == ["P", "Q", "R", "X", "Y"]
            if "X" not in group:
                assert group == ["R", "Y", "P", "Q"] or group == ["R", "Y", "Q", "P"]
                assert result.carry_over == ["X"]
                swaps += 1
        assert swaps > 0

    def test_unavoidable_priority_repeat_accepted(self, rng):
        tracker = SignatureTracker()
        tracker.record_seated(["A", "B", "C", "D"])
        result = form_groups(["A", "B", "C", "D"], [], tracker, {}, rng)
        assert result.groups == [["A", "B", "C", "D"]]


class TestGenericGroups:
    """Tests for weighted generic grouping."""

    def test_repeat_avoided_when_pool_allows(self):
        tracker = SignatureTracker()
        tracker.record_seated(["A", "B", "C", "D"])
        for seed in range(30):
            result = form_groups([], ["A", "B", "C", "D", "E"], tracker, {}, random.Random(seed))
            assert not tracker.is_immediate_repeat(result.groups[0])

    def test_last_four_repeat_accepted(self, rng):
        tracker = SignatureTracker()
        tracker.record_seated(["A", "B", "C", "D"])
        result = form_groups([], ["A", "B", "C", "D"], tracker, {}, rng)
        assert sorted(result.groups[0]) == ["A", "B", "C", "D"]

    def test_generic_groups_sorted_by_average_matches(self):
        counts = {"A": 5, "B": 5, "C": 5, "D": 5, "E": 0, "F": 1, "G": 0, "H": 2, "I": 3, "J": 0, "K": 4, "L": 1}
        for seed in range(10):
            result = form_groups([], sorted(counts), SignatureTracker(), counts, random.Random(seed))
            averages = [sum(counts[n] for n in g) / 4 for g in result.generic_groups]
            assert averages == sorted(averages)

    def test_priority_groups_seat_before_generic(self, rng):
        counts = {"X": 9, "Y": 9, "Z": 9, "W": 9}
        result = form_groups(["X", "Y", "Z", "W"], list("ABCD"), SignatureTracker(), counts, rng)
        assert result.groups[0] == ["X", "Y", "Z", "W"]
        assert sorted(result.groups[1]) == ["A", "B", "C", "D"]
