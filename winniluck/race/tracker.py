"""Per-number call counting and finisher ordering."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from .errors import ConfigurationError


class RaceTracker:
    """Accumulates draws and records the order in which numbers finish.

    A number finishes the first time its call count equals the repetition
    target. The finisher order only depends on the draws fed in, so replaying
    the same sequence always yields the same order. A tracker has a single
    writer: whoever owns the race loop.
    """

    def __init__(self) -> None:
        self._counts: Counter[int] = Counter()
        self._finisher_order: list[int] = []
        self._finishers: set[int] = set()
        self._total_draws = 0

    @classmethod
    def replay(cls, draws: Iterable[int], target: int) -> "RaceTracker":
        """Return a tracker that has recorded every value of ``draws``."""
        tracker = cls()
        for number in draws:
            tracker.record_draw(number, target)
        return tracker

    def record_draw(self, number: int, target: int) -> None:
        """Count one call of ``number`` against a repetition ``target``.

        Raises
        ------
        ConfigurationError
            If ``target`` is lower than one.
        """
        if target < 1:
            raise ConfigurationError("repetition target must be at least 1")
        self._counts[number] += 1
        self._total_draws += 1
        if self._counts[number] == target and number not in self._finishers:
            self._finishers.add(number)
            self._finisher_order.append(number)

    def count_of(self, number: int) -> int:
        return self._counts[number]

    def finisher_order(self) -> tuple[int, ...]:
        return tuple(self._finisher_order)

    def counts(self) -> dict[int, int]:
        """Return a snapshot of call counts for every number drawn so far."""
        return dict(self._counts)

    @property
    def total_draws(self) -> int:
        return self._total_draws

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<RaceTracker(draws={draws}, finishers={finishers})>".format(
            draws=self._total_draws,
            finishers=self._finisher_order,
        )


__all__ = ["RaceTracker"]
