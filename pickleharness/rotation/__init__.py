"""
Rotation package.

generate_schedule(), record_score() and compute_standings() are the three
entry points the rest of the app (store, web, CLI) calls into.  Everything
here is pure: no I/O, no shared state.
"""

from __future__ import annotations

from pickleharness.rotation.base import (
    Bye,
    Gender,
    HandicapRules,
    Match,
    MatchStatus,
    Pair,
    Participant,
    Round,
    Schedule,
    SpecialMode,
    StandingEntry,
    StandingsOrdering,
    Team,
    TeamSide,
)
from pickleharness.rotation.pairs import (
    SPECIAL_MODE_TARGETS,
    appearance_counts,
    generate_pairs,
    select_balanced_pairs,
    special_mode_options,
)
from pickleharness.rotation.ranking import compute_standings, standings_summary
from pickleharness.rotation.scheduler import (
    calculate_matches_per_round,
    calculate_rounds,
    calculate_total_matches,
    describe_rotation,
    generate_schedule,
    is_valid_rotation_count,
)
from pickleharness.rotation.scoring import (
    HANDICAP_TEMPLATES,
    apply_handicap,
    calculate_points,
    complete_match,
    is_valid_game_score,
    parse_game_score,
    record_rally_score,
    record_score,
    start_match,
)

__all__ = [
    # Types
    "Bye",
    "Gender",
    "HandicapRules",
    "Match",
    "MatchStatus",
    "Pair",
    "Participant",
    "Round",
    "Schedule",
    "SpecialMode",
    "StandingEntry",
    "StandingsOrdering",
    "Team",
    "TeamSide",
    # Pairs
    "SPECIAL_MODE_TARGETS",
    "appearance_counts",
    "generate_pairs",
    "select_balanced_pairs",
    "special_mode_options",
    # Scheduling
    "calculate_matches_per_round",
    "calculate_rounds",
    "calculate_total_matches",
    "describe_rotation",
    "generate_schedule",
    "is_valid_rotation_count",
    # Scoring
    "HANDICAP_TEMPLATES",
    "apply_handicap",
    "calculate_points",
    "complete_match",
    "is_valid_game_score",
    "parse_game_score",
    "record_rally_score",
    "record_score",
    "start_match",
    # Standings
    "compute_standings",
    "standings_summary",
]
