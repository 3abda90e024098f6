"""Explicit state for one race, driven one draw at a time by its owner."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
import random
from typing import Optional, Sequence, Union

from .cursor import DrawCursor
from .errors import ConfigurationError, RaceFinishedError
from .sequence import generate_draw_sequence, validate_range
from .settlement import settle
from .termination import StopReason, evaluate_stop
from .tracker import RaceTracker
from .types import GameMode, GameSession, Player

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnnounceDraw:
    """A number was called and should be presented."""

    number: int


@dataclass(frozen=True)
class AnnounceFinisher:
    """``number`` just reached the repetition target in position ``place``."""

    number: int
    place: int


@dataclass(frozen=True)
class AnnounceRaceFinished:
    """The race stopped; ``winning_numbers`` are in finishing order."""

    winning_numbers: tuple[int, ...]
    stop_reason: StopReason


@dataclass(frozen=True)
class PersistSession:
    """The settled session should be handed to storage now."""

    session: GameSession


Effect = Union[AnnounceDraw, AnnounceFinisher, AnnounceRaceFinished, PersistSession]


@dataclass(frozen=True)
class DrawStep:
    """Outcome of a single :meth:`RaceContext.advance` call.

    Attributes
    ----------
    number : int
        The value just drawn.
    position : int
        Zero-based index of the draw in the sequence.
    count : int
        Call count of ``number`` after this draw.
    new_finisher : bool
        ``True`` when this draw made ``number`` reach the target.
    finished : bool
        ``True`` when the race must stop after this draw.
    stop_reason : Optional[StopReason]
        Why the race stopped, when ``finished``.
    effects : tuple[Effect, ...]
        Side effects the caller is expected to carry out, in order.
    """

    number: int
    position: int
    count: int
    new_finisher: bool
    finished: bool
    stop_reason: Optional[StopReason]
    effects: tuple[Effect, ...]


@dataclass(frozen=True)
class Finalization:
    """Settled session plus the side effects the caller must perform."""

    session: GameSession
    effects: tuple[Effect, ...]


class RaceContext:
    """Owns the sequence, cursor, and tracker of one race.

    The context is created by whoever paces the race (a timer, a button, a
    test) and passed around by reference. It never sleeps, never persists,
    and never calls presentation code: each command returns the effects the
    caller should perform.
    """

    def __init__(
        self,
        game_mode: GameMode,
        players: Sequence[Player],
        *,
        start: Optional[int] = None,
        end: Optional[int] = None,
        required_winners: Optional[int] = None,
        rng: Optional[random.Random] = None,
        max_repair_attempts: Optional[int] = None,
    ) -> None:
        """Validate the configuration and plan the full draw sequence.

        Parameters
        ----------
        game_mode : GameMode
            Rules and economics of the race.
        players : Sequence[Player]
            Participants; their assigned numbers decide who gets paid.
        start, end : Optional[int], default: None
            Inclusive range to draw from. Defaults to ``1..game_mode.max_players``.
        required_winners : Optional[int], default: None
            Finisher quota. Defaults to ``game_mode.max_winners``.
        rng : Optional[random.Random], default: None
            Generator used to shuffle the sequence.
        max_repair_attempts : Optional[int], default: None
            Bound on adjacency repairs, see
            :func:`~winniluck.race.sequence.generate_draw_sequence`.

        Raises
        ------
        ConfigurationError
            If the range is invalid, or the quota is not positive or exceeds
            either the number of values in the range or the prize tiers.
        """
        default_start, default_end = game_mode.number_range
        self.start = default_start if start is None else start
        self.end = default_end if end is None else end
        self.required_winners = (
            game_mode.max_winners if required_winners is None else required_winners
        )
        validate_range(self.start, self.end, game_mode.repetitions)
        range_size = self.end - self.start + 1
        if self.required_winners <= 0:
            raise ConfigurationError("required_winners must be positive")
        if self.required_winners > range_size:
            raise ConfigurationError(
                f"required_winners ({self.required_winners}) exceeds the "
                f"range size ({range_size})"
            )
        if self.required_winners > len(game_mode.prize_tiers):
            raise ConfigurationError(
                f"required_winners ({self.required_winners}) exceeds the "
                f"{len(game_mode.prize_tiers)} configured prize tier(s)"
            )

        self.game_mode = game_mode
        self.players = tuple(players)
        self.sequence = generate_draw_sequence(
            self.start,
            self.end,
            game_mode.repetitions,
            max_repair_attempts=max_repair_attempts,
            rng=rng,
        )
        self.cursor = DrawCursor(self.sequence)
        self.tracker = RaceTracker()
        self._stop_reason: Optional[StopReason] = None
        self._session: Optional[GameSession] = None

        logger.debug(
            f"Race ready: range {self.start}-{self.end} x{game_mode.repetitions}, "
            f"{self.required_winners} winner(s), {len(self.players)} player(s)"
        )

    @property
    def target(self) -> int:
        return self.game_mode.repetitions

    @property
    def current_draw(self) -> Optional[int]:
        """The last number drawn, or ``None`` before the first draw."""
        if self.cursor.position is None:
            return None
        return self.cursor.current()

    @property
    def counts(self) -> dict[int, int]:
        return self.tracker.counts()

    @property
    def finisher_order(self) -> tuple[int, ...]:
        return self.tracker.finisher_order()

    @property
    def winning_numbers(self) -> tuple[int, ...]:
        return self.finisher_order[: self.required_winners]

    @property
    def stop_reason(self) -> Optional[StopReason]:
        return self._stop_reason

    @property
    def is_finished(self) -> bool:
        return self._stop_reason is not None

    @property
    def session(self) -> Optional[GameSession]:
        """The settled session once :meth:`finalize` has run."""
        return self._session

    @property
    def progress(self) -> float:
        """Fraction of the planned sequence drawn so far."""
        if not len(self.sequence):
            return 0.0
        return len(self.cursor.drawn) / len(self.sequence)

    def advance(self) -> DrawStep:
        """Draw the next number, record it, and check whether the race is over.

        Returns
        -------
        DrawStep
            The draw and the effects to perform: always an
            :class:`AnnounceDraw`, then :class:`AnnounceFinisher` when the
            number just finished, then :class:`AnnounceRaceFinished` when the
            race stops.

        Raises
        ------
        RaceFinishedError
            If the race has already stopped or been settled.
        """
        if self._session is not None or self._stop_reason is not None:
            raise RaceFinishedError("The race is over; start a new race to keep drawing")

        finishers_before = len(self.tracker.finisher_order())
        number = self.cursor.advance()
        self.tracker.record_draw(number, self.target)
        finishers = self.tracker.finisher_order()
        new_finisher = len(finishers) > finishers_before

        effects: list[Effect] = [AnnounceDraw(number)]
        if new_finisher:
            effects.append(AnnounceFinisher(number, place=len(finishers)))
            logger.debug(f"Number {number} finished in place {len(finishers)}")

        self._stop_reason = evaluate_stop(
            self.tracker, self.cursor, self.required_winners, self.target
        )
        if self._stop_reason is not None:
            effects.append(AnnounceRaceFinished(self.winning_numbers, self._stop_reason))
            if self._stop_reason is StopReason.SEQUENCE_EXHAUSTED:
                logger.warning(
                    f"Sequence exhausted with {len(finishers)} of "
                    f"{self.required_winners} required finisher(s)"
                )
            else:
                logger.info(f"Race finished with winning numbers {list(self.winning_numbers)}")

        position = self.cursor.position
        assert position is not None
        return DrawStep(
            number=number,
            position=position,
            count=self.tracker.count_of(number),
            new_finisher=new_finisher,
            finished=self._stop_reason is not None,
            stop_reason=self._stop_reason,
            effects=tuple(effects),
        )

    def finalize(
        self,
        *,
        session_id: Optional[str] = None,
        played_at: Optional[datetime] = None,
        strict: bool = False,
    ) -> Finalization:
        """Settle the race and return the session with a :class:`PersistSession` effect.

        May be called before the race stops naturally, in which case only the
        numbers that have finished so far are settled. A context is settled
        at most once.

        Raises
        ------
        RaceFinishedError
            If the race has already been settled.
        SettlementInconsistency
            In strict mode, when a winning number has no player.
        """
        if self._session is not None:
            raise RaceFinishedError("The race has already been settled")

        session = settle(
            self.finisher_order,
            self.required_winners,
            self.players,
            self.game_mode,
            session_id=session_id,
            played_at=played_at,
            start_range=self.start,
            end_range=self.end,
            strict=strict,
        )
        self._session = session
        return Finalization(session=session, effects=(PersistSession(session),))


__all__ = [
    "AnnounceDraw",
    "AnnounceFinisher",
    "AnnounceRaceFinished",
    "DrawStep",
    "Effect",
    "Finalization",
    "PersistSession",
    "RaceContext",
]
