"""
Tests for the rich-based CLI: rendering of rounds and standings, and the
score prompt loop.
"""

from __future__ import annotations

import unittest
from unittest.mock import patch

from rich.console import Console

from helpers import make_match, make_participants, played
from pickleharness.cli import display, prompts
from pickleharness.rotation import compute_standings, generate_schedule, record_rally_score


def _recording_console() -> Console:
    return Console(record=True, width=120, color_system=None, legacy_windows=False)


class TestDisplay(unittest.TestCase):
    def setUp(self):
        self.console = _recording_console()
        patcher = patch.object(display, "console", self.console)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_round_lists_matches_and_sitters(self):
        schedule = generate_schedule(make_participants(5), randomize=False)
        display.display_round(schedule.rounds[0], schedule.total_rounds)
        out = self.console.export_text()
        self.assertIn("Round 1 of 5", out)
        self.assertIn("R1-M1", out)
        self.assertIn("Sitting out", out)

    def test_lineup_and_schedule(self):
        roster = make_participants(6)
        schedule = generate_schedule(roster, mode="full", randomize=False)
        display.display_lineup("Club Night", roster, schedule)
        display.display_schedule(schedule)
        out = self.console.export_text()
        self.assertIn("Club Night", out)
        self.assertIn("full mode", out)
        self.assertIn("Not scheduled", out)

    def test_standings_table(self):
        roster = make_participants(4)
        a, b, c, d = roster
        table = compute_standings([played((a, b), (c, d), "2:1")], roster)
        display.display_standings(table, title="After Round 1")
        out = self.console.export_text()
        self.assertIn("After Round 1", out)
        self.assertIn("Alpha", out)
        self.assertIn("+1", out)

    def test_match_result(self):
        a, b, c, d = make_participants(4)
        display.display_match_result(played((a, b), (c, d), "0:2"))
        out = self.console.export_text()
        self.assertIn("Charlie/Delta", out)
        self.assertIn("2:0", out)

    def test_traditional_standings_table(self):
        roster = make_participants(4)
        a, b, c, d = roster
        match = record_rally_score(make_match((a, b), (c, d)), 11, 7)
        table = compute_standings([match], roster, ordering="traditional")
        display.display_standings(table, ordering="traditional")
        out = self.console.export_text()
        self.assertIn("Score", out)
        self.assertIn("11-7", out)
        self.assertIn("+4", out)

    def test_rally_match_result(self):
        a, b, c, d = make_participants(4)
        display.display_match_result(record_rally_score(make_match((a, b), (c, d)), 9, 11))
        out = self.console.export_text()
        self.assertIn("Charlie/Delta", out)
        self.assertIn("11:9", out)


class TestPrompts(unittest.TestCase):
    def setUp(self):
        patcher = patch.object(prompts, "console", _recording_console())
        patcher.start()
        self.addCleanup(patcher.stop)
        schedule = generate_schedule(make_participants(8), randomize=False)
        self.round = schedule.rounds[0]

    def test_scores_every_match(self):
        with patch.object(prompts.Prompt, "ask", side_effect=["2:0", "1:2"]):
            scored = prompts.prompt_round_scores(self.round)
        self.assertEqual(len(scored), 2)
        self.assertTrue(scored[0].team_a.winner)
        self.assertTrue(scored[1].team_b.winner)

    def test_blank_skips(self):
        with patch.object(prompts.Prompt, "ask", side_effect=["", "2:1"]):
            scored = prompts.prompt_round_scores(self.round)
        self.assertEqual([m.match_id for m in scored], ["R1-M2"])

    def test_invalid_input_asks_again(self):
        with patch.object(prompts.Prompt, "ask", side_effect=["two", "1:1", "2:1"]) as ask:
            match = prompts.prompt_match_score(self.round.matches[0])
        self.assertEqual(ask.call_count, 3)
        self.assertEqual(match.team_a.points, 1)

    def test_rally_scores_every_match(self):
        with patch.object(prompts.Prompt, "ask", side_effect=["11:7", "x", "-1:3", "9:11"]) as ask:
            scored = prompts.prompt_round_rally_scores(self.round)
        self.assertEqual(ask.call_count, 4)
        self.assertEqual([(s_a, s_b) for _, s_a, s_b in scored], [(11, 7), (9, 11)])
        self.assertEqual(scored[0][0].match_id, "R1-M1")

    def test_rally_blank_skips(self):
        with patch.object(prompts.Prompt, "ask", side_effect=[""]):
            self.assertIsNone(prompts.prompt_rally_score(self.round.matches[0]))
