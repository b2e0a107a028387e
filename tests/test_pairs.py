"""
Tests for pair enumeration and balanced subset selection.
"""

from __future__ import annotations

import unittest

import pytest

from helpers import make_participants
from pickleharness.errors import InvalidConfigError
from pickleharness.rotation import (
    Pair,
    SPECIAL_MODE_TARGETS,
    appearance_counts,
    generate_pairs,
    select_balanced_pairs,
    special_mode_options,
)
from pickleharness.rotation.pairs import special_mode_target


class TestPair(unittest.TestCase):
    def setUp(self):
        self.a, self.b, self.c = make_participants(3)

    def test_equality_ignores_order(self):
        self.assertEqual(Pair(self.a, self.b), Pair(self.b, self.a))
        self.assertEqual(hash(Pair(self.a, self.b)), hash(Pair(self.b, self.a)))

    def test_name_keeps_generation_order(self):
        self.assertEqual(Pair(self.a, self.b).name, "Alpha/Bravo")
        self.assertEqual(Pair(self.b, self.a).name, "Bravo/Alpha")

    def test_same_participant_twice_rejected(self):
        with self.assertRaises(ValueError):
            Pair(self.a, self.a)

    def test_overlaps(self):
        self.assertTrue(Pair(self.a, self.b).overlaps(Pair(self.b, self.c)))
        d = make_participants(4)[3]
        self.assertFalse(Pair(self.a, self.b).overlaps(Pair(self.c, d)))

    def test_contains(self):
        self.assertIn(self.a, Pair(self.a, self.b))
        self.assertNotIn(self.c, Pair(self.a, self.b))


class TestGeneratePairs:
    @pytest.mark.parametrize("n", [4, 6, 7, 13])
    def test_count_is_n_choose_2(self, n):
        pairs = generate_pairs(make_participants(n))
        assert len(pairs) == n * (n - 1) // 2
        assert len(set(pairs)) == len(pairs)

    def test_generation_order(self):
        names = [p.name for p in generate_pairs(make_participants(4))]
        assert names == [
            "Alpha/Bravo", "Alpha/Charlie", "Alpha/Delta",
            "Bravo/Charlie", "Bravo/Delta", "Charlie/Delta",
        ]


class TestSelectBalancedPairs:
    def test_six_standard_selection(self):
        roster = make_participants(6)
        selected = select_balanced_pairs(roster, generate_pairs(roster), 6)
        assert [p.name for p in selected] == [
            "Alpha/Bravo", "Charlie/Delta", "Echo/Foxtrot",
            "Alpha/Charlie", "Bravo/Echo", "Delta/Foxtrot",
        ]
        assert set(appearance_counts(roster, selected).values()) == {2}

    @pytest.mark.parametrize(
        "n, target",
        [(n, t) for n, targets in SPECIAL_MODE_TARGETS.items() for t in targets.values()]
        + [(6, 4), (7, 10)],
    )
    def test_selection_is_balanced(self, n, target):
        roster = make_participants(n)
        pairs = generate_pairs(roster)
        selected = select_balanced_pairs(roster, pairs, target)
        assert len(selected) == target
        assert len(set(selected)) == target
        counts = appearance_counts(roster, selected).values()
        assert max(counts) - min(counts) <= 1

    def test_target_above_available_returns_all(self):
        roster = make_participants(5)
        pairs = generate_pairs(roster)
        assert select_balanced_pairs(roster, pairs, 50) == pairs

    def test_non_positive_target_returns_nothing(self):
        roster = make_participants(5)
        assert select_balanced_pairs(roster, generate_pairs(roster), 0) == []

    def test_input_is_not_modified(self):
        roster = make_participants(7)
        pairs = generate_pairs(roster)
        snapshot = list(pairs)
        select_balanced_pairs(roster, pairs, 14)
        assert pairs == snapshot


class TestSpecialModeTargets(unittest.TestCase):
    def test_known_targets(self):
        self.assertEqual(special_mode_target(6, "standard"), 6)
        self.assertEqual(special_mode_target(6, "full"), 9)
        self.assertEqual(special_mode_target(6, "super"), 15)
        self.assertEqual(special_mode_target(7, "standard"), 14)
        self.assertEqual(special_mode_target(7, "full"), 21)

    def test_wrong_roster_size(self):
        with self.assertRaises(InvalidConfigError):
            special_mode_target(8, "standard")

    def test_wrong_mode(self):
        with self.assertRaises(InvalidConfigError):
            special_mode_target(7, "super")

    def test_options_describe_each_mode(self):
        options = special_mode_options(7)
        self.assertEqual([o["mode"] for o in options], list(SPECIAL_MODE_TARGETS[7]))
        standard = options[0]
        self.assertEqual(standard["pairs"], 14)
        self.assertEqual(standard["partnershipsPerParticipant"], 4)
        self.assertEqual(standard["matches"], 7)

    def test_no_options_for_other_sizes(self):
        self.assertEqual(special_mode_options(8), [])
