"""Decisions about when a race is over."""

from __future__ import annotations

import enum
from typing import Optional

from .cursor import DrawCursor
from .tracker import RaceTracker


class StopReason(str, enum.Enum):
    """Why a race stopped."""

    QUOTA_REACHED = "quota_reached"
    """Enough numbers reached the repetition target."""

    SEQUENCE_EXHAUSTED = "sequence_exhausted"
    """The sequence ran out before the quota was met."""


def should_stop(tracker: RaceTracker, required_winners: int, target: int) -> bool:
    """Return ``True`` once at least ``required_winners`` numbers have finished."""
    finished = sum(
        1 for number in tracker.finisher_order() if tracker.count_of(number) >= target
    )
    return finished >= required_winners


def evaluate_stop(
    tracker: RaceTracker,
    cursor: DrawCursor,
    required_winners: int,
    target: int,
) -> Optional[StopReason]:
    """Return the reason the race must stop now, or ``None`` to keep drawing.

    The finisher quota takes precedence: a final draw that both completes the
    quota and empties the sequence reports :attr:`StopReason.QUOTA_REACHED`.
    """
    if should_stop(tracker, required_winners, target):
        return StopReason.QUOTA_REACHED
    if not cursor.has_next():
        return StopReason.SEQUENCE_EXHAUSTED
    return None


__all__ = ["StopReason", "evaluate_stop", "should_stop"]
