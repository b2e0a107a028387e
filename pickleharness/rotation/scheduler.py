"""
Partner-rotation scheduler.

Rules:
- 4 to 13 participants.  Every participant partners every other participant
  exactly once across the event.
- Partnerships come from the circle method: slot 0 stays fixed while the
  remaining slots rotate, giving one perfect matching of partners per round.
- Consecutive partner pairs within a round face each other (pair 1 vs pair 2,
  pair 3 vs pair 4, …).  A pair left without an opponent is idle that round.
- Odd rosters add a bye slot.  Whoever is paired with it sits out the round.
- 6 and 7 player rosters can instead play a special mode: a balanced subset
  of partnerships chosen by select_balanced_pairs().
"""

from __future__ import annotations

import logging
import random
from typing import Sequence

from pickleharness.errors import InvalidConfigError, OutOfRangeError
from pickleharness.rotation.base import (
    Bye,
    Match,
    Pair,
    Participant,
    Round,
    Schedule,
    SpecialMode,
    Team,
    TeamSide,
    match_label,
)
from pickleharness.rotation.pairs import (
    generate_pairs,
    select_balanced_pairs,
    special_mode_options,
    special_mode_target,
)

logger = logging.getLogger(__name__)

MIN_PARTICIPANTS = 4
MAX_PARTICIPANTS = 13


# ------------------------------------------------------------------ #
# Public interface                                                     #
# ------------------------------------------------------------------ #

def generate_schedule(
    participants: Sequence[Participant],
    mode: SpecialMode | None = None,
    randomize: bool = True,
    rng: random.Random | None = None,
) -> Schedule:
    """
    Build the full rotation schedule for a roster.

    Args:
        participants: registered players, 4 to 13 of them.
        mode:         "standard" | "full" | "super" for 6 or 7 players only;
                      None plays every partnership.
        randomize:    shuffle the roster before rotating so nobody is always
                      in the fixed slot.  Coverage does not depend on it.
        rng:          random source for the shuffle (tests pass a seeded one).

    Raises:
        OutOfRangeError:    fewer than 4 or more than 13 participants.
        InvalidConfigError: mode given for a roster other than 6 or 7, an
                            unknown mode, or duplicate participant ids.
    """
    count = len(participants)
    if not is_valid_rotation_count(count):
        raise OutOfRangeError(count, MIN_PARTICIPANTS, MAX_PARTICIPANTS)

    ids = [p.id for p in participants]
    if len(set(ids)) != count:
        raise InvalidConfigError("Participant ids must be unique within a roster.")

    target = special_mode_target(count, mode) if mode is not None else None

    order = list(participants)
    if randomize:
        (rng or random.Random()).shuffle(order)

    if target is None:
        schedule = _full_rotation(order, randomize)
    else:
        schedule = _special_rotation(order, mode, target, randomize)

    logger.info(
        "Generated %s rotation for %d participants: %d rounds, %d matches",
        mode or "full", count, schedule.total_rounds, schedule.total_matches,
    )
    return schedule


def is_valid_rotation_count(count: int) -> bool:
    return MIN_PARTICIPANTS <= count <= MAX_PARTICIPANTS


def calculate_rounds(count: int) -> int:
    """Rounds in a full rotation: N-1 for even N, N for odd N (the bye adds a slot)."""
    if not is_valid_rotation_count(count):
        return 0
    return _slot_count(count) - 1


def calculate_pairs_per_round(count: int) -> int:
    if not is_valid_rotation_count(count):
        return 0
    return count // 2


def calculate_matches_per_round(count: int) -> int:
    if not is_valid_rotation_count(count):
        return 0
    return calculate_pairs_per_round(count) // 2


def calculate_total_matches(count: int) -> int:
    """Matches a full rotation produces for `count` participants."""
    return calculate_rounds(count) * calculate_matches_per_round(count)


def describe_rotation(count: int) -> dict[str, object]:
    """Summarise what a full rotation looks like for a roster size."""
    if not is_valid_rotation_count(count):
        raise OutOfRangeError(count, MIN_PARTICIPANTS, MAX_PARTICIPANTS)

    rounds = calculate_rounds(count)
    per_round = calculate_matches_per_round(count)
    total = calculate_total_matches(count)
    text = (
        f"{count} participants, {rounds} rounds, {per_round} match(es) per round, "
        f"{total} matches in total. Everyone partners every other participant once."
    )
    if count % 2:
        text += " One participant sits out each round."
    return {
        "description": text,
        "participantCount": count,
        "rounds": rounds,
        "pairsPerRound": calculate_pairs_per_round(count),
        "matchesPerRound": per_round,
        "totalMatches": total,
        "totalPairs": count * (count - 1) // 2,
        "specialOptions": special_mode_options(count) or None,
    }


# ------------------------------------------------------------------ #
# Full rotation (circle method)                                       #
# ------------------------------------------------------------------ #

def _slot_count(count: int) -> int:
    return count + (count % 2)


def _circle_pairings(slots: int) -> list[list[tuple[int, int]]]:
    """
    Slot-index pairings for each round of the circle method.

    `slots` must be even.  Round r pairs slot 0 with slot r; the other slots
    pair symmetrically around r on the circle of slots 1..slots-1.
    """
    ring = slots - 1
    rounds: list[list[tuple[int, int]]] = []
    for r in range(1, slots):
        pairing = [(0, r)]
        for i in range(1, slots // 2):
            pairing.append(((r + i - 1) % ring + 1, (r - i + slots - 2) % ring + 1))
        rounds.append(pairing)
    return rounds


def _slot_teams(order: list[Participant], pairing: list[tuple[int, int]]) -> list[Team]:
    """Map slot indices to teams; the slot past the roster is the bye."""
    bye_slot = len(order)
    teams: list[Team] = []
    for a, b in pairing:
        if b == bye_slot:
            teams.append(Bye(order[a]))
        elif a == bye_slot:
            teams.append(Bye(order[b]))
        else:
            teams.append(Pair(order[a], order[b]))
    return teams


def _build_round(round_num: int, teams: list[Team]) -> Round:
    """Group a round's teams into matches: pair[2k] vs pair[2k+1]."""
    byes: list[Participant] = []
    pairs: list[Pair] = []
    for team in teams:
        match team:
            case Bye(participant=participant):
                byes.append(participant)
            case Pair():
                pairs.append(team)

    matches = [
        _new_match(round_num, k // 2 + 1, pairs[k], pairs[k + 1])
        for k in range(0, len(pairs) - 1, 2)
    ]
    idle = pairs[len(matches) * 2:]
    return Round(
        number=round_num,
        matches=tuple(matches),
        byes=tuple(byes),
        idle_pairs=tuple(idle),
    )


def _full_rotation(order: list[Participant], randomized: bool) -> Schedule:
    pairings = _circle_pairings(_slot_count(len(order)))
    rounds = [
        _build_round(round_num, _slot_teams(order, pairing))
        for round_num, pairing in enumerate(pairings, 1)
    ]
    return Schedule(
        rounds=tuple(rounds),
        participants=tuple(order),
        mode=None,
        randomized=randomized,
    )


# ------------------------------------------------------------------ #
# Special modes (6 / 7 participants)                                  #
# ------------------------------------------------------------------ #

def _special_rotation(
    order: list[Participant],
    mode: SpecialMode,
    target: int,
    randomized: bool,
) -> Schedule:
    selected = select_balanced_pairs(order, generate_pairs(order), target)
    pairings, leftovers = group_pairs_into_matches(selected)

    # First-fit packing: a match joins the first round it shares nobody with.
    packed: list[list[tuple[Pair, Pair]]] = []
    for team_a, team_b in pairings:
        members = team_a.key | team_b.key
        for slot in packed:
            taken = set().union(*(a.key | b.key for a, b in slot))
            if not members & taken:
                slot.append((team_a, team_b))
                break
        else:
            packed.append([(team_a, team_b)])

    rounds: list[Round] = []
    for round_num, slot in enumerate(packed, 1):
        matches = tuple(
            _new_match(round_num, n, team_a, team_b)
            for n, (team_a, team_b) in enumerate(slot, 1)
        )
        playing = {p.id for m in matches for p in m.participants}
        rounds.append(
            Round(
                number=round_num,
                matches=matches,
                byes=tuple(p for p in order if p.id not in playing),
            )
        )

    if leftovers:
        logger.info("%d selected pair(s) could not be placed in a match", len(leftovers))

    return Schedule(
        rounds=tuple(rounds),
        participants=tuple(order),
        mode=mode,
        randomized=randomized,
        unplaced_pairs=tuple(leftovers),
    )


def group_pairs_into_matches(
    pairs: Sequence[Pair],
) -> tuple[list[tuple[Pair, Pair]], list[Pair]]:
    """
    Pair up partner pairs into matches whose two sides share no participant.

    Returns (matches, leftovers) with as few leftovers as possible.  Pairs are
    considered in the given order; the first pair still waiting is matched
    with the earliest compatible pair after it.
    """
    pairs = list(pairs)
    for budget in range(len(pairs) % 2, len(pairs) + 1, 2):
        found = _group(pairs, budget)
        if found is not None:
            return found
    return [], pairs  # pragma: no cover


def _group(
    pairs: list[Pair], budget: int
) -> tuple[list[tuple[Pair, Pair]], list[Pair]] | None:
    if not pairs:
        return [], []
    head, rest = pairs[0], pairs[1:]
    for i, other in enumerate(rest):
        if head.overlaps(other):
            continue
        found = _group(rest[:i] + rest[i + 1:], budget)
        if found is not None:
            matches, leftovers = found
            return [(head, other)] + matches, leftovers
    if budget > 0:
        found = _group(rest, budget - 1)
        if found is not None:
            matches, leftovers = found
            return matches, [head] + leftovers
    return None


def _new_match(round_num: int, match_number: int, team_a: Pair, team_b: Pair) -> Match:
    return Match(
        match_id=match_label(round_num, match_number),
        round=round_num,
        match_number=match_number,
        team_a=TeamSide(pair=team_a),
        team_b=TeamSide(pair=team_b),
    )
