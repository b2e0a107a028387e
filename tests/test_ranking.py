"""
Tests for standings aggregation and both sort orderings.
"""

from __future__ import annotations

import unittest

import pytest

from helpers import make_match, make_participants, played
from pickleharness.errors import InsufficientDataError
from pickleharness.rotation import (
    Participant,
    compute_standings,
    record_rally_score,
    standings_summary,
    start_match,
)


class TestSingleMatch(unittest.TestCase):
    def setUp(self):
        self.roster = make_participants(4)
        a, b, c, d = self.roster
        self.match = played((a, b), (c, d), "2:0")

    def test_winners_ahead_of_losers(self):
        table = compute_standings([self.match], self.roster)
        self.assertEqual([e.participant.name for e in table], ["Alpha", "Bravo", "Charlie", "Delta"])
        self.assertEqual([e.rank for e in table], [1, 2, 3, 4])

    def test_aggregates(self):
        alpha, _, charlie, _ = compute_standings([self.match], self.roster)
        self.assertEqual((alpha.wins, alpha.losses, alpha.total_points), (1, 0, 2))
        self.assertEqual(alpha.net_games, 2)
        self.assertEqual(alpha.win_rate, 100.0)
        self.assertEqual((charlie.wins, charlie.losses, charlie.total_points), (0, 1, 0))
        self.assertEqual(charlie.net_games, -2)
        self.assertEqual(charlie.win_rate, 0)

    def test_to_dict(self):
        record = compute_standings([self.match], self.roster)[0].to_dict()
        self.assertEqual(record["userId"], "p1")
        self.assertEqual(record["rank"], 1)
        self.assertEqual(record["totalPoints"], 2)
        self.assertEqual(record["netGames"], 2)
        self.assertEqual(record["winRate"], 100.0)


class TestRotationOrdering:
    def test_tie_breaks(self):
        roster = make_participants(8)
        a, b, c, d, e, f, g, h = roster
        matches = [
            played((a, b), (c, d), "2:0", 1, 1),
            played((e, f), (g, h), "2:1", 1, 2),
            played((e, g), (f, h), "2:1", 2, 1),
            played((f, g), (c, d), "2:1", 3, 1),
        ]
        table = compute_standings(matches, roster)
        assert [x.participant.name for x in table] == [
            "Echo", "Alpha", "Bravo", "Foxtrot", "Golf", "Hotel", "Charlie", "Delta",
        ]

    def test_full_tie_keeps_roster_order(self):
        roster = make_participants(6)
        table = compute_standings([], roster)
        assert [x.participant.id for x in table] == [p.id for p in roster]
        assert all(x.total_matches == 0 for x in table)
        assert all(x.win_rate == 0.0 and isinstance(x.win_rate, float) for x in table)
        assert table[0].to_dict()["winRate"] == 0.0

    def test_unfinished_matches_ignored(self):
        roster = make_participants(4)
        a, b, c, d = roster
        pending = make_match((a, b), (c, d))
        ongoing = start_match(make_match((a, c), (b, d), 2, 1))
        table = compute_standings([pending, ongoing], roster)
        assert all(x.total_matches == 0 for x in table)

    def test_off_roster_participants_skipped(self):
        roster = make_participants(4)
        a, b, c, d = roster
        stranger = Participant(id="x9", name="Stranger")
        match = played((a, stranger), (c, d), "2:1")
        table = compute_standings([match], roster)
        assert [x.participant.id for x in table] == ["p1", "p2", "p3", "p4"]
        assert table[0].wins == 1
        assert table[1].total_matches == 0

    def test_empty_roster_rejected(self):
        with pytest.raises(InsufficientDataError):
            compute_standings([], [])

    def test_unknown_ordering_rejected(self):
        with pytest.raises(ValueError):
            compute_standings([], make_participants(4), ordering="elo")


class TestTraditionalOrdering(unittest.TestCase):
    def test_wins_then_net_score(self):
        roster = make_participants(4)
        a, b, c, d = roster
        matches = [
            record_rally_score(make_match((a, b), (c, d), 1, 1), 11, 5),
            record_rally_score(make_match((a, c), (b, d), 2, 1), 11, 9),
        ]
        table = compute_standings(matches, roster, ordering="traditional")
        self.assertEqual([x.participant.name for x in table], ["Alpha", "Bravo", "Charlie", "Delta"])
        alpha = table[0]
        self.assertEqual((alpha.wins, alpha.total_score, alpha.against_score), (2, 22, 14))
        self.assertEqual(alpha.net_score, 8)
        self.assertEqual(table[2].net_score, -4)


class TestSummary(unittest.TestCase):
    def test_counts(self):
        roster = make_participants(4)
        a, b, c, d = roster
        matches = [
            played((a, b), (c, d), "2:0"),
            start_match(make_match((a, c), (b, d), 2, 1)),
            make_match((a, d), (b, c), 3, 1),
        ]
        self.assertEqual(
            standings_summary(matches, roster),
            {
                "totalMatches": 3,
                "completedMatches": 1,
                "inProgressMatches": 1,
                "totalParticipants": 4,
            },
        )
