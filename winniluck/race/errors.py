"""Exceptions and warnings raised by the race engine."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a range, repetition count, or game mode is unusable.

    Configuration errors are detected before any sequence is generated and
    are never recovered automatically; the caller must fix its inputs.
    """


class NotStarted(RuntimeError):
    """Raised when the current draw is read before the first advance."""


class SequenceExhausted(RuntimeError):
    """Raised when ``advance()`` is called with no draws left.

    Callers should treat this as an implicit stop signal for the race.
    """


class RaceFinishedError(RuntimeError):
    """Raised when a stopped or already settled race is driven further."""


class SettlementInconsistency(ValueError):
    """A winning number has no player holding it at settlement time.

    Settlement drops such numbers by default; the exception is only raised
    when strict settlement is requested.
    """

    def __init__(self, numbers: tuple[int, ...]) -> None:
        self.numbers = numbers
        joined = ", ".join(str(n) for n in numbers)
        super().__init__(f"No player is assigned to winning number(s): {joined}")


class UnresolvedAdjacencyWarning(UserWarning):
    """Emitted when the repair pass leaves adjacent duplicate draws behind."""


__all__ = [
    "ConfigurationError",
    "NotStarted",
    "RaceFinishedError",
    "SequenceExhausted",
    "SettlementInconsistency",
    "UnresolvedAdjacencyWarning",
]
