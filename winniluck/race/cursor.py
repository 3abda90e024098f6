"""Single-owner iteration over a planned draw sequence."""

from __future__ import annotations

from typing import Optional

from .errors import NotStarted, SequenceExhausted
from .types import DrawSequence


class DrawCursor:
    """Steps through a :class:`DrawSequence` one draw at a time.

    The cursor starts before the first draw. :meth:`advance` is its only
    mutator and knows nothing about winners; callers feed the returned value
    into a :class:`~winniluck.race.tracker.RaceTracker`. Cursors cannot be
    rewound; a new race needs a new cursor.
    """

    def __init__(self, sequence: DrawSequence) -> None:
        self._sequence = sequence
        self._position: Optional[int] = None

    @property
    def sequence(self) -> DrawSequence:
        return self._sequence

    @property
    def position(self) -> Optional[int]:
        """Index of the current draw, or ``None`` before the first advance."""
        return self._position

    @property
    def drawn(self) -> tuple[int, ...]:
        """Values emitted so far, in draw order."""
        if self._position is None:
            return ()
        return self._sequence.values[: self._position + 1]

    @property
    def remaining(self) -> int:
        return len(self._sequence) - len(self.drawn)

    def current(self) -> int:
        """Return the draw at the current position.

        Raises
        ------
        NotStarted
            If :meth:`advance` has not been called yet.
        """
        if self._position is None:
            raise NotStarted("No number has been drawn yet")
        return self._sequence[self._position]

    def has_next(self) -> bool:
        return self.remaining > 0

    def advance(self) -> int:
        """Move to the next draw and return its value.

        Raises
        ------
        SequenceExhausted
            If the last draw has already been emitted.
        """
        if not self.has_next():
            raise SequenceExhausted(
                f"All {len(self._sequence)} draws have already been emitted"
            )
        self._position = 0 if self._position is None else self._position + 1
        return self._sequence[self._position]


__all__ = ["DrawCursor"]
