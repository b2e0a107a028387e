"""
Match scoring.

Rotation events score each match as best-of-3 games.  A side's game score is
written "won:lost" from its own point of view, so the two sides of a 2-1
match report "2:1" and "1:2".  Points per match:

    2:0 or 1:0  ->  2 points
    2:1         ->  1 point
    losing side ->  0 points

Traditional events instead record rally points; a side wins on reaching the
target (11 by default) with a two-point lead.  Events may enable a gender
handicap that shifts a mixed team's rally score before the result is decided.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Sequence

from pickleharness.errors import InvalidScoreError
from pickleharness.rotation.base import HandicapRules, Match, Participant, TeamSide

logger = logging.getLogger(__name__)

MAX_GAMES = 3
GAMES_TO_WIN = 2
DEFAULT_RALLY_TARGET = 11

# Preset handicap rules offered to organisers.
HANDICAP_TEMPLATES: list[dict[str, object]] = [
    {
        "id": "gender_female_advantage",
        "name": "Female advantage",
        "description": "A mixed team gets 1 extra point on its rally score",
        "type": "female_advantage",
        "points": 1,
    },
    {
        "id": "gender_male_penalty",
        "name": "Male penalty",
        "description": "A mixed team gives up 1 point of its rally score",
        "type": "male_penalty",
        "points": 1,
    },
]


def parse_game_score(token: str) -> tuple[int, int]:
    """
    Parse "won:lost" into integers.

    Raises:
        InvalidScoreError: not two colon-separated integers, negative, or
                           more than three games on either side.
    """
    parts = str(token).strip().split(":")
    if len(parts) != 2:
        raise InvalidScoreError(f'Game score must look like "2:0" or "2:1", got {token!r}')
    try:
        won, lost = (int(part.strip()) for part in parts)
    except ValueError as exc:
        raise InvalidScoreError(f"Game score must be numeric, got {token!r}") from exc
    if won < 0 or lost < 0:
        raise InvalidScoreError(f"Game score cannot be negative, got {token!r}")
    if won > MAX_GAMES or lost > MAX_GAMES:
        raise InvalidScoreError(f"A side cannot take more than {MAX_GAMES} games, got {token!r}")
    return won, lost


def is_valid_game_score(games_won: int, games_lost: int) -> bool:
    """True when the score is a finished match: distinct counts, one side on 2+ games."""
    if games_won == games_lost:
        return False
    if not (0 <= games_won <= MAX_GAMES and 0 <= games_lost <= MAX_GAMES):
        return False
    return max(games_won, games_lost) >= GAMES_TO_WIN


def calculate_points(games_won: int, games_lost: int) -> int:
    """
    Points earned by a side with this game score.

    Winning scores outside the fixed table (3:0, 3:1, 3:2) follow its
    pattern: 2 when the loser took no game, 1 otherwise.
    """
    if games_won <= games_lost:
        return 0
    if (games_won, games_lost) in ((2, 0), (1, 0)):
        return 2
    if (games_won, games_lost) == (2, 1):
        return 1
    return 2 if games_lost == 0 else 1


def record_score(match: Match, team_a_score: str, team_b_score: str) -> Match:
    """
    Apply a best-of-3 result to a match and return the completed match.

    Both sides are validated before anything is built, and the returned Match
    carries both sides' games, points and winner flags.  `match` itself is
    left untouched.

    Raises:
        InvalidScoreError: a token is malformed, has no winner, or the two
                           tokens disagree (A's "won" must be B's "lost").
    """
    won_a, lost_a = parse_game_score(team_a_score)
    won_b, lost_b = parse_game_score(team_b_score)

    if not is_valid_game_score(won_a, lost_a) or not is_valid_game_score(won_b, lost_b):
        logger.warning(
            "Rejected score %s / %s for match %s: no winner",
            team_a_score, team_b_score, match.match_id,
        )
        raise InvalidScoreError(
            f"Score {team_a_score} / {team_b_score} has no winner; "
            f'use a finished result such as "2:0" or "2:1".'
        )
    if (won_a, lost_a) != (lost_b, won_b):
        logger.warning(
            "Rejected score %s / %s for match %s: sides disagree",
            team_a_score, team_b_score, match.match_id,
        )
        raise InvalidScoreError(
            f"Team scores disagree: team A {won_a}:{lost_a} requires team B {lost_a}:{won_a}, "
            f"got {won_b}:{lost_b}."
        )

    points_a = calculate_points(won_a, lost_a)
    points_b = calculate_points(won_b, lost_b)

    side_a = TeamSide(
        pair=match.team_a.pair,
        games_won=won_a,
        games_lost=lost_a,
        points=points_a,
        winner=points_a > points_b,
        score=match.team_a.score,
    )
    side_b = TeamSide(
        pair=match.team_b.pair,
        games_won=won_b,
        games_lost=lost_b,
        points=points_b,
        winner=points_b > points_a,
        score=match.team_b.score,
    )
    return match.with_sides(
        side_a,
        side_b,
        status="completed",
        end_time=datetime.now(),
    )


def record_rally_score(
    match: Match,
    score_a: int,
    score_b: int,
    target: int = DEFAULT_RALLY_TARGET,
    handicap: HandicapRules | None = None,
) -> Match:
    """
    Apply a traditional rally score.

    The match completes once a side reaches `target` with at least a
    two-point lead; otherwise it is left in progress with the running score.
    With an enabled `handicap`, each side's score is adjusted first and the
    adjusted scores are what gets stored.
    """
    if score_a < 0 or score_b < 0:
        raise InvalidScoreError(f"Scores cannot be negative, got {score_a}:{score_b}")

    if handicap is not None and handicap.enabled:
        score_a = apply_handicap(score_a, handicap, match.team_a.participants)
        score_b = apply_handicap(score_b, handicap, match.team_b.participants)

    a_wins = score_a >= target and score_a - score_b >= 2
    b_wins = score_b >= target and score_b - score_a >= 2
    done = a_wins or b_wins

    side_a = TeamSide(
        pair=match.team_a.pair,
        games_won=match.team_a.games_won,
        games_lost=match.team_a.games_lost,
        points=match.team_a.points,
        winner=a_wins,
        score=score_a,
    )
    side_b = TeamSide(
        pair=match.team_b.pair,
        games_won=match.team_b.games_won,
        games_lost=match.team_b.games_lost,
        points=match.team_b.points,
        winner=b_wins,
        score=score_b,
    )
    now = datetime.now()
    return match.with_sides(
        side_a,
        side_b,
        status="completed" if done else "in_progress",
        start_time=match.start_time or now,
        end_time=now if done else None,
    )


def apply_handicap(
    score: int, rules: HandicapRules | None, players: Sequence[Participant]
) -> int:
    """
    Adjust one side's rally score for a mixed team.

    Returns `score` unchanged when the rules are disabled, have no gender
    rule, or the side is not mixed.  Never goes below zero.
    """
    if rules is None or not rules.enabled or rules.type is None:
        return score

    genders = {p.gender for p in players}
    if not {"male", "female"} <= genders:
        return score

    if rules.type == "female_advantage":
        return score + rules.points
    return max(score - rules.points, 0)


def complete_match(match: Match) -> Match:
    """
    Close a rally-scored match early; the side ahead on score wins.

    Completed matches are returned unchanged.

    Raises:
        InvalidScoreError: the rally score is level, so there is no winner.
    """
    if match.is_completed:
        return match
    score_a, score_b = match.team_a.score, match.team_b.score
    if score_a == score_b:
        raise InvalidScoreError(
            f"Match {match.match_id} is level at {score_a}:{score_b}; record a score first."
        )
    now = datetime.now()
    return match.with_sides(
        replace(match.team_a, winner=score_a > score_b),
        replace(match.team_b, winner=score_b > score_a),
        status="completed",
        start_time=match.start_time or now,
        end_time=now,
    )


def start_match(match: Match) -> Match:
    """Mark a pending match as in progress.  Other statuses are returned unchanged."""
    if match.status != "pending":
        return match
    return match.with_sides(
        match.team_a,
        match.team_b,
        status="in_progress",
        start_time=datetime.now(),
    )
