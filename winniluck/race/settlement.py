"""Settlement of finished races into immutable session records."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from .errors import ConfigurationError, SettlementInconsistency
from .types import GameMode, GameSession, Player, new_id

logger = logging.getLogger(__name__)


def _players_by_number(players: Sequence[Player]) -> dict[int, Player]:
    by_number: dict[int, Player] = {}
    for player in players:
        number = player.assigned_number
        if number is None:
            continue
        if number in by_number:
            raise ConfigurationError(
                f"Number {number} is assigned to more than one player"
            )
        by_number[number] = player
    return by_number


def settle(
    finisher_order: Sequence[int],
    required_winners: int,
    players: Sequence[Player],
    game_mode: GameMode,
    *,
    session_id: Optional[str] = None,
    played_at: Optional[datetime] = None,
    start_range: Optional[int] = None,
    end_range: Optional[int] = None,
    strict: bool = False,
) -> GameSession:
    """Turn a finished race into a :class:`GameSession`.

    Parameters
    ----------
    finisher_order : Sequence[int]
        Numbers in the order they reached the repetition target.
    required_winners : int
        How many finishers are paid. Position ``n`` receives
        ``game_mode.prize_tiers[n - 1]``.
    players : Sequence[Player]
        Every participant. Each paid the entry price.
    game_mode : GameMode
        Economics and repetition target of the race.
    session_id : Optional[str], default: None
        Identity for the stored record. A random id is generated when omitted.
    played_at : Optional[datetime], default: None
        Timestamp for the record. Defaults to the current UTC time.
    start_range, end_range : Optional[int], default: None
        Number range the race covered. Defaults to ``game_mode.number_range``.
    strict : bool, default: False
        When ``True``, a winning number without a player raises
        :class:`SettlementInconsistency` instead of being dropped.

    Returns
    -------
    GameSession
        The settled result. Given the same inputs, identity and timestamp,
        the result is identical.

    Raises
    ------
    ConfigurationError
        If ``required_winners`` is not positive, exceeds the configured prize
        tiers, or two players share an assigned number.
    SettlementInconsistency
        In strict mode, if a winning number has no player.

    Notes
    -----
    Winning numbers without a matching player stay in ``winning_numbers``
    but are excluded from ``winner_ids``; fewer winners means a smaller
    payout, since only the first ``len(winner_ids)`` tiers are paid.
    """
    if required_winners <= 0:
        raise ConfigurationError("required_winners must be positive")
    if required_winners > len(game_mode.prize_tiers):
        raise ConfigurationError(
            f"required_winners ({required_winners}) exceeds the "
            f"{len(game_mode.prize_tiers)} configured prize tier(s)"
        )

    default_start, default_end = game_mode.number_range
    start = default_start if start_range is None else start_range
    end = default_end if end_range is None else end_range

    winning_numbers = tuple(finisher_order[:required_winners])
    by_number = _players_by_number(players)

    winner_ids: list[str] = []
    dropped: list[int] = []
    for number in winning_numbers:
        player = by_number.get(number)
        if player is None:
            dropped.append(number)
        else:
            winner_ids.append(player.id)

    if dropped:
        if strict:
            raise SettlementInconsistency(tuple(dropped))
        logger.warning(
            f"Excluding winning number(s) {dropped} from payout: no player holds them"
        )

    actual_winners = len(winner_ids)
    gross_income = game_mode.calculate_gross(len(players))
    payout = game_mode.calculate_payout(actual_winners)

    return GameSession(
        id=session_id or new_id(),
        mode_id=game_mode.id,
        start_range=start,
        end_range=end,
        repetitions=game_mode.repetitions,
        num_winners=actual_winners,
        player_ids=tuple(player.id for player in players),
        winning_numbers=winning_numbers,
        winner_ids=tuple(winner_ids),
        played_at=played_at or datetime.now(timezone.utc),
        gross_income=gross_income,
        payout=payout,
        profit=gross_income - payout,
        dropped_numbers=tuple(dropped),
    )


__all__ = ["settle"]
