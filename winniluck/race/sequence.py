"""Planning of balanced, shuffled draw sequences."""

from __future__ import annotations

import logging
import os
import random
import warnings
from typing import MutableSequence, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError, UnresolvedAdjacencyWarning
from .types import DrawSequence

load_dotenv()
logger = logging.getLogger(__name__)

DEFAULT_MAX_REPAIR_ATTEMPTS = 100


def default_max_repair_attempts() -> int:
    """Return the repair bound, honouring ``WINNILUCK_MAX_REPAIR_ATTEMPTS``."""
    raw = os.getenv("WINNILUCK_MAX_REPAIR_ATTEMPTS")
    if not raw:
        return DEFAULT_MAX_REPAIR_ATTEMPTS
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"WINNILUCK_MAX_REPAIR_ATTEMPTS must be an integer, got {raw!r}"
        ) from exc
    if value < 0:
        raise ConfigurationError("WINNILUCK_MAX_REPAIR_ATTEMPTS must not be negative")
    return value


def validate_range(start: int, end: int, repetitions: int) -> None:
    """Raise :class:`ConfigurationError` for an unusable range or repetition count."""
    if start > end:
        raise ConfigurationError(f"start ({start}) must not exceed end ({end})")
    if repetitions <= 0:
        raise ConfigurationError("repetitions must be a positive integer")


def _clashes(values: MutableSequence[int], idx: int) -> bool:
    """Return whether ``values[idx]`` equals either neighbour."""
    value = values[idx]
    if idx > 0 and values[idx - 1] == value:
        return True
    if idx + 1 < len(values) and values[idx + 1] == value:
        return True
    return False


def _try_swap(values: MutableSequence[int], pos: int) -> bool:
    """Move the duplicate at ``pos`` away by swapping with a compatible slot.

    A partner ``j`` must not touch ``pos``, must hold a different value, and
    neither swapped slot may end up equal to its new neighbours.
    """
    dup = values[pos]
    for j in range(len(values)):
        if abs(j - pos) <= 1 or values[j] == dup:
            continue
        values[pos], values[j] = values[j], values[pos]
        if not _clashes(values, pos) and not _clashes(values, j):
            return True
        values[pos], values[j] = values[j], values[pos]
    return False


def _relocate(values: MutableSequence[int], pos: int, rng: Optional[random.Random]) -> bool:
    """Move ``values[pos]`` into a gap whose neighbours both differ from it.

    Taking the value out cannot create a new clash because its left
    neighbour holds the same value. With ``c`` copies of the value among
    ``n`` slots, the other copies block at most ``2 * (c - 1)`` of the ``n``
    gaps, so a gap exists whenever the value fills no more than half of the
    sequence.
    """
    value = values.pop(pos)
    gaps = [
        k
        for k in range(len(values) + 1)
        if (k == 0 or values[k - 1] != value) and (k == len(values) or values[k] != value)
    ]
    if not gaps:
        values.insert(pos, value)
        return False
    values.insert(rng.choice(gaps) if rng is not None else gaps[0], value)
    return True


def _first_duplicate(values: MutableSequence[int], skip: set[int]) -> Optional[int]:
    for i in range(len(values) - 1):
        if i not in skip and values[i] == values[i + 1]:
            return i
    return None


def repair_adjacent(
    values: MutableSequence[int],
    max_attempts: int,
    rng: Optional[random.Random] = None,
) -> tuple[int, int]:
    """Repair adjacent duplicates in place.

    Each attempt targets the first unresolved pair. It first tries to swap
    either member with a compatible slot; failing that, it moves the second
    member into any gap between two other values. Every successful attempt
    removes at least one adjacent pair, so a balanced sequence over two or
    more values is fully repaired within as many attempts as it had pairs.
    Pairs no move can fix are skipped by later scans.

    Returns
    -------
    tuple[int, int]
        Adjacent pairs left and attempts actually spent.
    """
    unresolvable: set[int] = set()
    attempts = 0
    while attempts < max_attempts:
        i = _first_duplicate(values, unresolvable)
        if i is None:
            break
        attempts += 1
        if _try_swap(values, i + 1) or _try_swap(values, i) or _relocate(values, i + 1, rng):
            # Positions shifted, so earlier verdicts no longer hold.
            unresolvable.clear()
            continue
        unresolvable.add(i)

    residual = sum(1 for i in range(len(values) - 1) if values[i] == values[i + 1])
    return residual, attempts


def generate_draw_sequence(
    start: int,
    end: int,
    repetitions: int,
    *,
    max_repair_attempts: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> DrawSequence:
    """Build the shuffled draw order for a race.

    Parameters
    ----------
    start, end : int
        Inclusive number range. Every value is drawn ``repetitions`` times.
    repetitions : int
        Calls a number needs to finish.
    max_repair_attempts : Optional[int], default: None
        Bound on adjacency repairs. When omitted,
        :func:`default_max_repair_attempts` decides (100 unless configured).
    rng : Optional[random.Random], default: None
        Random generator used for shuffling; pass a seeded instance for
        deterministic tests.

    Returns
    -------
    DrawSequence
        Sequence of length ``(end - start + 1) * repetitions``.

    Raises
    ------
    ConfigurationError
        If ``start > end``, ``repetitions <= 0`` or the repair bound is negative.

    Notes
    -----
    When the repair bound runs out with adjacent duplicates left (unavoidable
    for a single-number range drawn more than once), an
    :class:`UnresolvedAdjacencyWarning` is emitted and the sequence is
    returned as is.
    """
    validate_range(start, end, repetitions)
    if max_repair_attempts is None:
        max_repair_attempts = default_max_repair_attempts()
    if max_repair_attempts < 0:
        raise ConfigurationError("max_repair_attempts must not be negative")

    rng = rng or random.Random()

    pool = [number for number in range(start, end + 1) for _ in range(repetitions)]
    rng.shuffle(pool)

    residual, attempts = repair_adjacent(pool, max_repair_attempts, rng)
    if residual:
        message = (
            f"{residual} adjacent duplicate draw(s) left in range {start}-{end} "
            f"x{repetitions} after {attempts} of {max_repair_attempts} repair attempt(s)"
        )
        logger.warning(message)
        warnings.warn(message, UnresolvedAdjacencyWarning, stacklevel=2)

    logger.debug(f"Planned {len(pool)} draws for range {start}-{end} x{repetitions}")
    return DrawSequence(
        values=tuple(pool),
        start=start,
        end=end,
        repetitions=repetitions,
        residual_adjacent=residual,
    )


__all__ = [
    "DEFAULT_MAX_REPAIR_ATTEMPTS",
    "default_max_repair_attempts",
    "generate_draw_sequence",
    "repair_adjacent",
    "validate_range",
]
