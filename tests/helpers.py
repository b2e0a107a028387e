"""Shared builders for the rotation tests."""

from __future__ import annotations

from pickleharness.rotation import Match, Pair, Participant, TeamSide, record_score

NAMES = [
    "Alpha", "Bravo", "Charlie", "Delta",
    "Echo", "Foxtrot", "Golf", "Hotel",
    "India", "Juliet", "Kilo", "Lima",
    "Mike", "November",
]


def make_participants(n: int) -> list[Participant]:
    return [Participant(id=f"p{i + 1}", name=NAMES[i]) for i in range(n)]


def make_match(
    team_a: tuple[Participant, Participant],
    team_b: tuple[Participant, Participant],
    round_num: int = 1,
    match_number: int = 1,
) -> Match:
    return Match(
        match_id=f"R{round_num}-M{match_number}",
        round=round_num,
        match_number=match_number,
        team_a=TeamSide(pair=Pair(*team_a)),
        team_b=TeamSide(pair=Pair(*team_b)),
    )


def played(
    team_a: tuple[Participant, Participant],
    team_b: tuple[Participant, Participant],
    score_a: str,
    round_num: int = 1,
    match_number: int = 1,
) -> Match:
    """A completed match; `score_a` is team A's "won:lost"."""
    won, lost = score_a.split(":")
    return record_score(
        make_match(team_a, team_b, round_num, match_number),
        f"{won}:{lost}",
        f"{lost}:{won}",
    )
