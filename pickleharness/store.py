"""
In-memory event store.

Holds each event's roster and current schedule, keyed by event id, and is the
one place that serialises writes:

- generate/regenerate builds the whole schedule first, then swaps it in with
  a single assignment under the event's lock, so readers see either the old
  match set or the new one, never a mix;
- score writes replace a frozen Match object under the same lock;
- standings read a snapshot tuple taken under the lock and compute outside it.
"""

from __future__ import annotations

import logging
import random
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Sequence

from pickleharness.errors import EventNotFoundError, InvalidConfigError, MatchNotFoundError
from pickleharness.rotation import (
    HandicapRules,
    Match,
    Pair,
    Participant,
    Schedule,
    SpecialMode,
    StandingEntry,
    StandingsOrdering,
    complete_match,
    compute_standings,
    generate_schedule,
    record_rally_score,
    record_score,
    standings_summary,
    start_match,
)
from pickleharness.rotation.base import TeamSide, match_label
from pickleharness.rotation.scoring import DEFAULT_RALLY_TARGET

logger = logging.getLogger(__name__)


@dataclass
class EventRecord:
    """Everything the store keeps for one event."""

    event_id: str
    name: str
    rotation: bool = True                 # False = traditional rally scoring
    rally_target: int = DEFAULT_RALLY_TARGET
    roster: list[Participant] = field(default_factory=list)
    schedule: Schedule | None = None
    matches: dict[str, Match] = field(default_factory=dict)
    handicap: HandicapRules = field(default_factory=HandicapRules)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def ordering(self) -> StandingsOrdering:
        return "rotation" if self.rotation else "traditional"

    def to_dict(self) -> dict[str, object]:
        return {
            "eventId": self.event_id,
            "name": self.name,
            "rotation": self.rotation,
            "rallyTarget": self.rally_target,
            "participants": [p.to_dict() for p in self.roster],
            "totalMatches": len(self.matches),
            "handicap": self.handicap.to_dict(),
            "createdAt": self.created_at.isoformat(),
        }


class EventStore:
    """Thread-safe keyed store of events, rosters and matches."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._events: dict[str, EventRecord] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self._rng = rng

    # ------------------------------------------------------------------ #
    # Events and rosters                                                  #
    # ------------------------------------------------------------------ #

    def create_event(
        self,
        name: str,
        rotation: bool = True,
        rally_target: int = DEFAULT_RALLY_TARGET,
        event_id: str | None = None,
        handicap: HandicapRules | None = None,
    ) -> EventRecord:
        event_id = event_id or uuid.uuid4().hex[:12]
        with self._registry_lock:
            if event_id in self._events:
                raise InvalidConfigError(f"Event {event_id!r} already exists")
            record = EventRecord(
                event_id=event_id,
                name=name,
                rotation=rotation,
                rally_target=rally_target,
                handicap=handicap or HandicapRules(),
            )
            self._events[event_id] = record
            self._locks[event_id] = threading.Lock()
        logger.info("Created event %s (%s)", event_id, name)
        return record

    def get_event(self, event_id: str) -> EventRecord:
        try:
            return self._events[event_id]
        except KeyError:
            raise EventNotFoundError(event_id) from None

    def register(self, event_id: str, participant: Participant) -> EventRecord:
        """Add a participant to the roster; registering the same id twice is a no-op."""
        record = self.get_event(event_id)
        with self._lock(event_id):
            if all(p.id != participant.id for p in record.roster):
                record.roster = [*record.roster, participant]
        return record

    def set_handicap(self, event_id: str, rules: HandicapRules) -> EventRecord:
        """Replace the event's handicap rules; applies to rally scores recorded afterwards."""
        record = self.get_event(event_id)
        with self._lock(event_id):
            record.handicap = rules
        logger.info("Event %s: handicap %s", event_id, rules.to_dict())
        return record

    # ------------------------------------------------------------------ #
    # Schedule                                                            #
    # ------------------------------------------------------------------ #

    def generate(
        self,
        event_id: str,
        mode: SpecialMode | None = None,
        randomize: bool = True,
    ) -> Schedule:
        """Generate (or regenerate) the event's schedule, replacing every match."""
        record = self.get_event(event_id)
        with self._lock(event_id):
            schedule = generate_schedule(record.roster, mode=mode, randomize=randomize, rng=self._rng)
            matches = {m.match_id: m for m in schedule.matches}
            if record.matches:
                logger.info(
                    "Event %s: replacing %d existing matches", event_id, len(record.matches)
                )
            record.schedule, record.matches = schedule, matches
        return schedule

    def matches(self, event_id: str) -> tuple[Match, ...]:
        """Snapshot of the event's matches ordered by round and match number."""
        record = self.get_event(event_id)
        with self._lock(event_id):
            snapshot = tuple(record.matches.values())
        return tuple(sorted(snapshot, key=lambda m: (m.round, m.match_number)))

    def get_match(self, event_id: str, match_id: str) -> Match:
        record = self.get_event(event_id)
        try:
            return record.matches[match_id]
        except KeyError:
            raise MatchNotFoundError(event_id, match_id) from None

    def add_match(
        self,
        event_id: str,
        team_a: Sequence[str],
        team_b: Sequence[str],
        round_num: int = 1,
        match_number: int = 1,
    ) -> Match:
        """
        Add a hand-made match between two rostered pairs, outside the rotation.

        Raises:
            InvalidConfigError: a team is not two rostered participants, the
                                teams share a participant, or the round already
                                has a match with this number.
        """
        record = self.get_event(event_id)
        if round_num < 1 or match_number < 1:
            raise InvalidConfigError("round and matchNumber must be >= 1")
        with self._lock(event_id):
            roster = {p.id: p for p in record.roster}
            pair_a = _roster_pair(roster, team_a)
            pair_b = _roster_pair(roster, team_b)
            if pair_a.overlaps(pair_b):
                raise InvalidConfigError("A participant cannot play on both teams")
            match_id = match_label(round_num, match_number)
            if match_id in record.matches:
                raise InvalidConfigError(f"Match {match_id} already exists in event {event_id!r}")
            match = Match(
                match_id=match_id,
                round=round_num,
                match_number=match_number,
                team_a=TeamSide(pair=pair_a),
                team_b=TeamSide(pair=pair_b),
            )
            record.matches[match_id] = match
        logger.info("Event %s: added match %s (%s vs %s)", event_id, match_id, pair_a.name, pair_b.name)
        return match

    # ------------------------------------------------------------------ #
    # Scores                                                              #
    # ------------------------------------------------------------------ #

    def record_game_score(
        self, event_id: str, match_id: str, team_a_score: str, team_b_score: str
    ) -> Match:
        """Record a best-of-3 result.  Invalid scores leave the stored match as it was."""
        return self._update_match(
            event_id, match_id, lambda m: record_score(m, team_a_score, team_b_score)
        )

    def record_rally_score(
        self, event_id: str, match_id: str, score_a: int, score_b: int
    ) -> Match:
        record = self.get_event(event_id)
        return self._update_match(
            event_id,
            match_id,
            lambda m: record_rally_score(
                m, score_a, score_b, target=record.rally_target, handicap=record.handicap
            ),
        )

    def start_match(self, event_id: str, match_id: str) -> Match:
        return self._update_match(event_id, match_id, start_match)

    def complete_match(self, event_id: str, match_id: str) -> Match:
        """End a rally-scored match early; the side ahead wins."""
        return self._update_match(event_id, match_id, complete_match)

    # ------------------------------------------------------------------ #
    # Standings                                                           #
    # ------------------------------------------------------------------ #

    def standings(self, event_id: str) -> list[StandingEntry]:
        record = self.get_event(event_id)
        with self._lock(event_id):
            snapshot = tuple(record.matches.values())
            roster = list(record.roster)
        return compute_standings(
            [m for m in snapshot if m.is_completed], roster, ordering=record.ordering
        )

    def summary(self, event_id: str) -> dict[str, int]:
        record = self.get_event(event_id)
        with self._lock(event_id):
            snapshot = tuple(record.matches.values())
            roster = list(record.roster)
        return standings_summary(snapshot, roster)

    # ------------------------------------------------------------------ #
    # Internal helpers                                                    #
    # ------------------------------------------------------------------ #

    def _lock(self, event_id: str) -> threading.Lock:
        return self._locks[event_id]

    def _update_match(
        self, event_id: str, match_id: str, update: Callable[[Match], Match]
    ) -> Match:
        record = self.get_event(event_id)
        with self._lock(event_id):
            current = record.matches.get(match_id)
            if current is None:
                raise MatchNotFoundError(event_id, match_id)
            updated = update(current)
            record.matches[match_id] = updated
        logger.info("Event %s match %s -> %s", event_id, match_id, updated.status)
        return updated


def _roster_pair(roster: dict[str, Participant], ids: Sequence[str]) -> Pair:
    ids = list(ids)
    if len(ids) != 2:
        raise InvalidConfigError(f"A team needs exactly two participants, got {len(ids)}")
    missing = [pid for pid in ids if pid not in roster]
    if missing:
        raise InvalidConfigError(f"Not on the roster: {', '.join(missing)}")
    try:
        return Pair(roster[ids[0]], roster[ids[1]])
    except ValueError as exc:
        raise InvalidConfigError(str(exc)) from exc
