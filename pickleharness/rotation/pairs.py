"""
Partner-pair enumeration and balanced subset selection.

generate_pairs() lists every unordered partnership of a roster.
select_balanced_pairs() picks a subset for the 6- and 7-player special modes
so every participant partners (nearly) the same number of times.
"""

from __future__ import annotations

import logging
import math
from itertools import combinations
from typing import Sequence

from pickleharness.errors import InvalidConfigError
from pickleharness.rotation.base import Pair, Participant, SpecialMode

logger = logging.getLogger(__name__)

# Number of partnerships played in each special mode, keyed by roster size.
SPECIAL_MODE_TARGETS: dict[int, dict[str, int]] = {
    6: {"standard": 6, "full": 9, "super": 15},
    7: {"standard": 14, "full": 21},
}


def generate_pairs(participants: Sequence[Participant]) -> list[Pair]:
    """
    Return all C(N, 2) pairs in generation order: (0,1), (0,2), …, (1,2), …

    That order is part of the contract: subset selection and match grouping
    iterate over it to break ties.
    """
    return [Pair(a, b) for a, b in combinations(participants, 2)]


def special_mode_target(count: int, mode: str) -> int:
    """Look up how many pairs a special mode plays for a roster of `count`."""
    targets = SPECIAL_MODE_TARGETS.get(count)
    if targets is None:
        supported = ", ".join(str(n) for n in SPECIAL_MODE_TARGETS)
        raise InvalidConfigError(
            f"Special modes only apply to {supported} participants, got {count}."
        )
    if mode not in targets:
        raise InvalidConfigError(
            f"Mode {mode!r} is not available for {count} participants. "
            f"Valid modes: {', '.join(targets)}"
        )
    return targets[mode]


def select_balanced_pairs(
    participants: Sequence[Participant],
    pairs: Sequence[Pair],
    target: int,
) -> list[Pair]:
    """
    Greedily select `target` pairs keeping appearance counts balanced.

    Each step looks at the participants with the fewest appearances so far
    and takes a remaining pair containing one of them, trying pairs where
    both members are at the minimum before the rest, in generation order.
    A step that would leave the selection unbalanced (max - min > 1 at the
    end, or any count above ceil(2 * target / N)) is undone and the next
    candidate tried, so the result is the first balanced selection in that
    order.  A target at or above the number of pairs returns every pair.
    """
    if target >= len(pairs):
        return list(pairs)
    if target <= 0 or not participants:
        return []

    cap = math.ceil(2 * target / len(participants))
    counts: dict[str, int] = {p.id: 0 for p in participants}
    selected: list[Pair] = []
    used = [False] * len(pairs)

    def candidates() -> list[int]:
        low = min(counts.values())
        both: list[int] = []
        either: list[int] = []
        for idx, pair in enumerate(pairs):
            if used[idx]:
                continue
            a, b = counts[pair.first.id], counts[pair.second.id]
            if a >= cap or b >= cap:
                continue
            if a == low and b == low:
                both.append(idx)
            elif a == low or b == low:
                either.append(idx)
        return both + either

    def search() -> bool:
        if len(selected) == target:
            return max(counts.values()) - min(counts.values()) <= 1
        for idx in candidates():
            pair = pairs[idx]
            used[idx] = True
            selected.append(pair)
            counts[pair.first.id] += 1
            counts[pair.second.id] += 1
            if search():
                return True
            counts[pair.first.id] -= 1
            counts[pair.second.id] -= 1
            selected.pop()
            used[idx] = False
        return False

    if not search():
        # Unreachable for the configured special modes: a near-regular
        # selection always exists there.
        raise InvalidConfigError(
            f"Cannot select {target} balanced pairs from {len(participants)} participants."
        )

    logger.debug(
        "Selected %d of %d pairs; appearances per participant: %s",
        len(selected), len(pairs), sorted(counts.values()),
    )
    return selected


def appearance_counts(
    participants: Sequence[Participant], pairs: Sequence[Pair]
) -> dict[str, int]:
    """How many of `pairs` each participant belongs to."""
    counts = {p.id: 0 for p in participants}
    for pair in pairs:
        for member in pair.participants:
            counts[member.id] = counts.get(member.id, 0) + 1
    return counts


def special_mode_options(count: int) -> list[dict[str, object]]:
    """Describe the special modes available for a roster size (may be empty)."""
    options: list[dict[str, object]] = []
    for mode, target in SPECIAL_MODE_TARGETS.get(count, {}).items():
        options.append(
            {
                "mode": mode,
                "pairs": target,
                "partnershipsPerParticipant": 2 * target // count,
                "matches": target // 2,
                "description": _MODE_LABELS[mode],
            }
        )
    return options


_MODE_LABELS: dict[SpecialMode, str] = {
    "standard": "Standard: shortest event, balanced partnerships",
    "full": "Full: more partnerships per participant",
    "super": "Super: every possible partnership",
}
