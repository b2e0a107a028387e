"""
Tests for config.yaml parsing and validation.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

import yaml

from pickleharness.config import Config, load_config, parse_config
from pickleharness.rotation import HandicapRules


class TestParseConfig(unittest.TestCase):
    def test_defaults_from_empty_mapping(self):
        cfg = parse_config({})
        self.assertEqual(cfg, Config())
        self.assertEqual(cfg.scoring.rally_target, 11)
        self.assertEqual(cfg.scoring.ordering, "rotation")
        self.assertEqual(cfg.server.port, 8000)

    def test_participants_as_names_and_mappings(self):
        cfg = parse_config({
            "event": {
                "participants": ["Ann", {"id": "u2", "name": "Ben"}, "Cat", {"name": "Dov"}],
            }
        })
        ids = [p.id for p in cfg.event.participants]
        self.assertEqual(ids, ["p1", "u2", "p3", "p4"])
        self.assertEqual(cfg.event.participants[1].name, "Ben")

    def test_log_level_is_uppercased(self):
        cfg = parse_config({"server": {"log_level": "debug"}})
        self.assertEqual(cfg.server.log_level, "DEBUG")
        self.assertEqual(cfg.log_path, Path("./logs/pickleharness.log"))

    def test_unknown_mode_rejected(self):
        with self.assertRaises(ValueError):
            parse_config({"event": {"mode": "marathon"}})

    def test_roster_size_checked(self):
        with self.assertRaises(ValueError):
            parse_config({"event": {"participants": ["A", "B", "C"]}})

    def test_duplicate_ids_rejected(self):
        players = [{"id": "same", "name": n} for n in "ABCD"]
        with self.assertRaises(ValueError):
            parse_config({"event": {"participants": players}})

    def test_bad_ordering_rejected(self):
        with self.assertRaises(ValueError):
            parse_config({"scoring": {"ordering": "elo"}})

    def test_bad_rally_target_rejected(self):
        with self.assertRaises(ValueError):
            parse_config({"scoring": {"rally_target": 0}})

    def test_bad_port_rejected(self):
        with self.assertRaises(ValueError):
            parse_config({"server": {"port": 70000}})

    def test_malformed_participant_rejected(self):
        with self.assertRaises(ValueError):
            parse_config({"event": {"participants": [{"id": "x"}, "B", "C", "D"]}})

    def test_participant_gender(self):
        cfg = parse_config({
            "event": {
                "participants": [
                    {"id": "u1", "name": "Ann", "gender": "female"},
                    {"name": "Ben", "gender": "male"},
                    "Cat",
                    {"name": "Dov"},
                ],
            }
        })
        self.assertEqual([p.gender for p in cfg.event.participants], ["female", "male", None, None])

    def test_bad_gender_rejected(self):
        with self.assertRaises(ValueError):
            parse_config({"event": {"participants": [{"name": "A", "gender": "x"}, "B", "C", "D"]}})

    def test_handicap(self):
        cfg = parse_config({"scoring": {"handicap": {"enabled": True, "type": "male_penalty", "points": 2}}})
        self.assertEqual(cfg.scoring.handicap, HandicapRules(enabled=True, type="male_penalty", points=2))
        self.assertEqual(parse_config({}).scoring.handicap, HandicapRules())

    def test_bad_handicap_rejected(self):
        with self.assertRaises(ValueError):
            parse_config({"scoring": {"handicap": {"enabled": True, "type": "level_based"}}})
        with self.assertRaises(ValueError):
            parse_config({"scoring": {"handicap": {"enabled": True, "type": "male_penalty", "points": -1}}})


class TestLoadConfig(unittest.TestCase):
    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/config.yaml")

    def test_round_trip_example_layout(self):
        raw = {
            "event": {
                "name": "Saturday Rotation",
                "mode": "standard",
                "randomize": False,
                "participants": [f"Player {i}" for i in range(1, 7)],
            },
            "scoring": {"ordering": "traditional", "rally_target": 15},
        }
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.yaml"
            path.write_text(yaml.safe_dump(raw), encoding="utf-8")
            cfg = load_config(path)
        self.assertEqual(cfg.event.name, "Saturday Rotation")
        self.assertEqual(cfg.event.mode, "standard")
        self.assertFalse(cfg.event.randomize)
        self.assertEqual(len(cfg.event.participants), 6)
        self.assertEqual(cfg.scoring.ordering, "traditional")
        self.assertEqual(cfg.scoring.rally_target, 15)

    def test_example_config_parses(self):
        example = Path(__file__).resolve().parent.parent / "config.example.yaml"
        cfg = load_config(example)
        self.assertEqual(len(cfg.event.participants), 8)
        self.assertIsNone(cfg.event.mode)
        self.assertEqual(cfg.event.participants[0].gender, "female")
        self.assertFalse(cfg.scoring.handicap.enabled)
        self.assertEqual(cfg.scoring.handicap.type, "female_advantage")
