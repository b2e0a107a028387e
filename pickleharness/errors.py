"""
Exception hierarchy for pickleharness.

Every error the rotation core raises is a local validation failure.  Nothing
here is retried internally; callers (the store, the web app, the CLI) decide
how to present them.
"""

from __future__ import annotations


class PickleHarnessError(Exception):
    """Base class for all pickleharness errors."""


# --------------------------------------------------------------------------- #
# Scheduling                                                                   #
# --------------------------------------------------------------------------- #

class RotationError(PickleHarnessError):
    """Base class for schedule-generation errors."""


class OutOfRangeError(RotationError):
    """Participant count is outside the supported 4-13 range."""

    def __init__(self, count: int, minimum: int = 4, maximum: int = 13) -> None:
        self.count = count
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Rotation needs between {minimum} and {maximum} participants, got {count}."
        )


class InvalidConfigError(RotationError):
    """A special mode was requested that does not apply to this roster."""


# --------------------------------------------------------------------------- #
# Scoring / ranking                                                            #
# --------------------------------------------------------------------------- #

class ScoringError(PickleHarnessError):
    """Base class for score-recording errors."""


class InvalidScoreError(ScoringError):
    """Malformed game score, or a score that does not produce a winner."""


class RankingError(PickleHarnessError):
    """Base class for standings errors."""


class InsufficientDataError(RankingError):
    """Standings were requested without a roster."""


# --------------------------------------------------------------------------- #
# Store                                                                        #
# --------------------------------------------------------------------------- #

class StoreError(PickleHarnessError):
    """Base class for event-store lookups."""


class EventNotFoundError(StoreError):
    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__(f"Event not found: {event_id!r}")


class MatchNotFoundError(StoreError):
    def __init__(self, event_id: str, match_id: str) -> None:
        self.event_id = event_id
        self.match_id = match_id
        super().__init__(f"Match {match_id!r} not found in event {event_id!r}")
