"""
Standings.

compute_standings() folds completed matches into one StandingEntry per
rostered participant and sorts them.  Two orderings exist:

    "rotation"     total points, then net games, then games won
    "traditional"  wins, then net rally score, then rally points scored

Both sort descending and are stable, so fully tied participants keep their
roster order.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Sequence

from pickleharness.errors import InsufficientDataError
from pickleharness.rotation.base import (
    Match,
    Participant,
    StandingEntry,
    StandingsOrdering,
    TeamSide,
)

logger = logging.getLogger(__name__)

_SORT_KEYS: dict[str, Callable[[StandingEntry], tuple[int, ...]]] = {
    "rotation": lambda e: (-e.total_points, -e.net_games, -e.games_won),
    "traditional": lambda e: (-e.wins, -e.net_score, -e.total_score),
}


def compute_standings(
    completed_matches: Iterable[Match],
    roster: Sequence[Participant],
    ordering: StandingsOrdering = "rotation",
) -> list[StandingEntry]:
    """
    Build the ranked standings table.

    Matches that are not completed are skipped, as are participants who are
    not on the roster.

    Raises:
        InsufficientDataError: the roster is empty.
        ValueError:            unknown ordering.
    """
    if not roster:
        raise InsufficientDataError("Standings need a roster of at least one participant.")
    if ordering not in _SORT_KEYS:
        raise ValueError(
            f"Unknown standings ordering: {ordering!r}. Valid orderings: {', '.join(_SORT_KEYS)}"
        )

    table: dict[str, StandingEntry] = {p.id: StandingEntry(participant=p) for p in roster}

    for match in completed_matches:
        if not match.is_completed:
            continue
        _apply_side(table, match.team_a, match.team_b, match.match_id)
        _apply_side(table, match.team_b, match.team_a, match.match_id)

    ranked = sorted(table.values(), key=_SORT_KEYS[ordering])
    for rank, entry in enumerate(ranked, 1):
        entry.rank = rank
    return ranked


def standings_summary(
    matches: Iterable[Match], roster: Sequence[Participant]
) -> dict[str, int]:
    """Counts shown alongside the ranking table."""
    matches = list(matches)
    return {
        "totalMatches": len(matches),
        "completedMatches": sum(1 for m in matches if m.status == "completed"),
        "inProgressMatches": sum(1 for m in matches if m.status == "in_progress"),
        "totalParticipants": len(roster),
    }


def _apply_side(
    table: dict[str, StandingEntry],
    side: TeamSide,
    opponent: TeamSide,
    match_id: str,
) -> None:
    for participant in side.participants:
        entry = table.get(participant.id)
        if entry is None:
            logger.debug("Match %s: %s is not on the roster, skipped", match_id, participant.id)
            continue
        entry.total_matches += 1
        if side.winner:
            entry.wins += 1
        else:
            entry.losses += 1
        entry.total_points += side.points
        entry.games_won += side.games_won
        entry.games_lost += side.games_lost
        entry.total_score += side.score
        entry.against_score += opponent.score
