"""
Rotation abstractions — participants, pairs, matches, rounds and standings.

Every scheduling and scoring function in the rotation package speaks in
these types.  Matches are frozen: recording a score builds a new Match with
both team sides replaced together, so a reader holding a Match never sees
one side updated and the other stale.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Literal

MatchStatus = Literal["pending", "in_progress", "completed"]
SpecialMode = Literal["standard", "full", "super"]
StandingsOrdering = Literal["rotation", "traditional"]
Gender = Literal["male", "female"]
HandicapType = Literal["female_advantage", "male_penalty"]

MATCH_STATUSES: tuple[str, ...] = ("pending", "in_progress", "completed")
GENDERS: tuple[str, ...] = ("male", "female")
HANDICAP_TYPES: tuple[str, ...] = ("female_advantage", "male_penalty")


@dataclass(frozen=True)
class Participant:
    """A registered player.  Owned by the caller; never mutated here."""

    id: str
    name: str
    gender: Gender | None = None   # only consulted by handicap rules

    def to_dict(self) -> dict[str, str]:
        data = {"id": self.id, "name": self.name}
        if self.gender is not None:
            data["gender"] = self.gender
        return data

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> Participant:
        gender = record.get("gender") or None
        if gender is not None and gender not in GENDERS:
            raise ValueError(f"Unknown gender: {gender!r}. Valid values: {', '.join(GENDERS)}")
        return cls(id=str(record["id"]), name=str(record["name"]), gender=gender)


@dataclass(frozen=True)
class HandicapRules:
    """
    Per-event rally-score handicap.

    When enabled, a mixed (male + female) team's rally score is adjusted by
    `points`: raised for "female_advantage", lowered for "male_penalty".
    Single-gender teams and players without a recorded gender are unaffected.
    """

    enabled: bool = False
    type: HandicapType | None = None
    points: int = 0

    def to_dict(self) -> dict[str, Any]:
        gender_rule = {"type": self.type, "points": self.points} if self.type else None
        return {"enabled": self.enabled, "genderHandicap": gender_rule}

    @classmethod
    def from_dict(cls, record: dict[str, Any] | None) -> HandicapRules:
        if not record:
            return cls()
        gender_rule = record.get("genderHandicap") or {}
        handicap_type = gender_rule.get("type")
        if handicap_type is not None and handicap_type not in HANDICAP_TYPES:
            raise ValueError(
                f"Unknown handicap type: {handicap_type!r}. Valid types: {', '.join(HANDICAP_TYPES)}"
            )
        points = int(gender_rule.get("points", 0))
        if points < 0:
            raise ValueError("Handicap points cannot be negative")
        return cls(enabled=bool(record.get("enabled", False)), type=handicap_type, points=points)


@dataclass(frozen=True)
class Pair:
    """
    Two partners playing on the same side.

    Equality and hashing ignore order so Pair(a, b) == Pair(b, a); the
    display name keeps the order the pair was generated in.
    """

    first: Participant
    second: Participant

    def __post_init__(self) -> None:
        if self.first.id == self.second.id:
            raise ValueError(f"A pair needs two different participants, got {self.first.id!r} twice.")

    @property
    def key(self) -> frozenset[str]:
        return frozenset((self.first.id, self.second.id))

    @property
    def name(self) -> str:
        return f"{self.first.name}/{self.second.name}"

    @property
    def participants(self) -> tuple[Participant, Participant]:
        return (self.first, self.second)

    def __contains__(self, participant: object) -> bool:
        return participant in (self.first, self.second)

    def overlaps(self, other: Pair) -> bool:
        return bool(self.key & other.key)

    def __hash__(self) -> int:
        return hash(self.key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pair):
            return NotImplemented
        return self.key == other.key

    def __repr__(self) -> str:
        return f"Pair({self.name!r})"


@dataclass(frozen=True)
class Bye:
    """A participant who sits out a round because the roster is odd."""

    participant: Participant

    @property
    def name(self) -> str:
        return f"{self.participant.name} (bye)"


# A rotation slot pairing either yields partners or a bye.
Team = Pair | Bye


@dataclass(frozen=True)
class TeamSide:
    """One side of a match plus whatever has been recorded for it."""

    pair: Pair
    games_won: int = 0
    games_lost: int = 0
    points: int = 0
    winner: bool = False
    score: int = 0   # rally points, traditional scoring only

    @property
    def name(self) -> str:
        return self.pair.name

    @property
    def participants(self) -> tuple[Participant, Participant]:
        return self.pair.participants

    def to_record(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "participants": [p.to_dict() for p in self.participants],
            "gamesWon": self.games_won,
            "gamesLost": self.games_lost,
            "points": self.points,
            "winner": self.winner,
            "score": self.score,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> TeamSide:
        first, second = (Participant.from_dict(p) for p in record["participants"])
        return cls(
            pair=Pair(first, second),
            games_won=int(record.get("gamesWon", 0)),
            games_lost=int(record.get("gamesLost", 0)),
            points=int(record.get("points", 0)),
            winner=bool(record.get("winner", False)),
            score=int(record.get("score", 0)),
        )


@dataclass(frozen=True)
class Match:
    """A doubles match: team_a vs team_b within one round."""

    match_id: str                 # e.g. "R1-M2"
    round: int
    match_number: int             # 1-based, unique within the round
    team_a: TeamSide
    team_b: TeamSide
    status: MatchStatus = "pending"
    start_time: datetime | None = None
    end_time: datetime | None = None

    @property
    def participants(self) -> tuple[Participant, ...]:
        return self.team_a.participants + self.team_b.participants

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    @property
    def winner(self) -> TeamSide | None:
        if self.team_a.winner:
            return self.team_a
        if self.team_b.winner:
            return self.team_b
        return None

    def with_sides(self, team_a: TeamSide, team_b: TeamSide, **changes: Any) -> Match:
        """Return a copy with both sides replaced in one step."""
        return replace(self, team_a=team_a, team_b=team_b, **changes)

    def to_record(self) -> dict[str, Any]:
        return {
            "matchId": self.match_id,
            "round": self.round,
            "matchNumber": self.match_number,
            "teamA": self.team_a.to_record(),
            "teamB": self.team_b.to_record(),
            "status": self.status,
            "startTime": self.start_time.isoformat() if self.start_time else None,
            "endTime": self.end_time.isoformat() if self.end_time else None,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Match:
        status = record.get("status", "pending")
        if status not in MATCH_STATUSES:
            raise ValueError(f"Unknown match status: {status!r}")
        round_num = int(record["round"])
        match_number = int(record["matchNumber"])
        return cls(
            match_id=str(record.get("matchId") or match_label(round_num, match_number)),
            round=round_num,
            match_number=match_number,
            team_a=TeamSide.from_record(record["teamA"]),
            team_b=TeamSide.from_record(record["teamB"]),
            status=status,
            start_time=_parse_time(record.get("startTime")),
            end_time=_parse_time(record.get("endTime")),
        )


@dataclass(frozen=True)
class Round:
    """Matches played concurrently, plus who is not playing this round."""

    number: int
    matches: tuple[Match, ...] = ()
    byes: tuple[Participant, ...] = ()
    idle_pairs: tuple[Pair, ...] = ()   # partners with no opposing pair this round

    @property
    def pairs(self) -> list[Pair]:
        """Every partner pair this round produced, matched or idle."""
        result: list[Pair] = []
        for m in self.matches:
            result.extend((m.team_a.pair, m.team_b.pair))
        result.extend(self.idle_pairs)
        return result

    @property
    def playing(self) -> list[Participant]:
        return [p for m in self.matches for p in m.participants]


@dataclass(frozen=True)
class Schedule:
    """The full ordered set of rounds generated for one event."""

    rounds: tuple[Round, ...]
    participants: tuple[Participant, ...]   # order the rotation actually used
    mode: SpecialMode | None = None
    randomized: bool = False
    unplaced_pairs: tuple[Pair, ...] = ()   # special modes: selected but ungroupable
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def matches(self) -> list[Match]:
        return [m for r in self.rounds for m in r.matches]

    @property
    def all_pairs(self) -> list[Pair]:
        pairs = [p for r in self.rounds for p in r.pairs]
        pairs.extend(self.unplaced_pairs)
        return pairs

    @property
    def total_rounds(self) -> int:
        return len(self.rounds)

    @property
    def total_matches(self) -> int:
        return sum(len(r.matches) for r in self.rounds)


@dataclass
class StandingEntry:
    """Aggregate for one participant across all completed matches."""

    participant: Participant
    wins: int = 0
    losses: int = 0
    total_points: int = 0
    games_won: int = 0
    games_lost: int = 0
    total_matches: int = 0
    total_score: int = 0     # rally points scored (traditional)
    against_score: int = 0   # rally points conceded (traditional)
    rank: int = 0

    @property
    def net_games(self) -> int:
        return self.games_won - self.games_lost

    @property
    def net_score(self) -> int:
        return self.total_score - self.against_score

    @property
    def win_rate(self) -> float:
        if self.total_matches == 0:
            return 0.0
        return round(self.wins / self.total_matches * 100, 1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rank": self.rank,
            "userId": self.participant.id,
            "name": self.participant.name,
            "wins": self.wins,
            "losses": self.losses,
            "totalPoints": self.total_points,
            "gamesWon": self.games_won,
            "gamesLost": self.games_lost,
            "netGames": self.net_games,
            "totalScore": self.total_score,
            "againstScore": self.against_score,
            "netScore": self.net_score,
            "totalMatches": self.total_matches,
            "winRate": self.win_rate,
        }


def match_label(round_num: int, match_number: int) -> str:
    return f"R{round_num}-M{match_number}"


def _parse_time(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
