from dataclasses import dataclass
from datetime import datetime
import logging
import random
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from .race.context import (
    AnnounceDraw,
    AnnounceRaceFinished,
    Effect,
    PersistSession,
    RaceContext,
)
from .race.types import GameMode, GameSession, Player
from .roster import PlayerRoster

if TYPE_CHECKING:
    from .storage import SessionStore

logger = logging.getLogger(__name__)


class RaceObserver:
    """Presentation hooks for a race driven by :func:`run_race`.

    Subclasses override whichever callbacks they need; the defaults do
    nothing.
    """

    def on_draw_advanced(self, number: int) -> None:
        pass

    def on_race_finished(self, winning_numbers: Sequence[int]) -> None:
        pass


@dataclass(frozen=True)
class RaceRun:
    """Result of :func:`run_race`.

    Attributes
    ----------
    session : GameSession
        The settled session.
    saved : Optional[bool]
        What the store reported, or ``None`` when no store was given.
    draws : tuple[int, ...]
        Every number called, in order.
    """

    session: GameSession
    saved: Optional[bool]
    draws: tuple[int, ...]


def _dispatch(effect: Effect, observer: Optional[RaceObserver]) -> None:
    if observer is None:
        return
    if isinstance(effect, AnnounceDraw):
        observer.on_draw_advanced(effect.number)
    elif isinstance(effect, AnnounceRaceFinished):
        observer.on_race_finished(effect.winning_numbers)


def run_race(
    game_mode: GameMode,
    players: Sequence[Player],
    *,
    store: Optional["SessionStore"] = None,
    observer: Optional[RaceObserver] = None,
    rng: Optional[random.Random] = None,
    pace: Optional[Callable[[], None]] = None,
    session_id: Optional[str] = None,
    played_at: Optional[datetime] = None,
    required_winners: Optional[int] = None,
    strict: bool = False,
) -> RaceRun:
    """Play a race from the first draw to settlement.

    The workflow performs three coordinated tasks:

    1. Build a :class:`~winniluck.race.context.RaceContext` and advance it
       until it stops, forwarding draw and finish effects to ``observer``.
    2. Settle the race once it stops.
    3. Hand the settled session to ``store`` when one is provided.

    Parameters
    ----------
    game_mode : GameMode
        Rules and economics of the race.
    players : Sequence[Player]
        Participants with their assigned numbers.
    store : Optional[SessionStore]
        Receiver of the settled session. Storage failures are reported through
        :attr:`RaceRun.saved` and never abort the race.
    observer : Optional[RaceObserver]
        Presentation callbacks.
    rng : Optional[random.Random]
        Generator used to shuffle the draw sequence.
    pace : Optional[Callable[[], None]]
        Called between consecutive draws, e.g. to wait for a timer tick.
    session_id : Optional[str]
        Identity of the settled session; generated when omitted.
    played_at : Optional[datetime]
        Settlement timestamp; defaults to now (UTC).
    required_winners : Optional[int]
        Finisher quota; defaults to ``game_mode.max_winners``.
    strict : bool
        Raise :class:`~winniluck.race.errors.SettlementInconsistency` instead
        of dropping winning numbers that no player holds.

    Returns
    -------
    RaceRun
        The settled session, the store's answer, and the numbers called.
    """
    context = RaceContext(
        game_mode, players, required_winners=required_winners, rng=rng
    )

    draws: list[int] = []
    while not context.is_finished:
        if draws and pace is not None:
            pace()
        step = context.advance()
        draws.append(step.number)
        for effect in step.effects:
            _dispatch(effect, observer)

    finalization = context.finalize(
        session_id=session_id, played_at=played_at, strict=strict
    )
    saved: Optional[bool] = None
    for effect in finalization.effects:
        if isinstance(effect, PersistSession) and store is not None:
            saved = store.save(effect.session)
            if not saved:
                logger.warning(f"Session {effect.session.id} could not be stored")

    logger.info(
        f"Race {finalization.session.id} settled after {len(draws)} draw(s): "
        f"winners {list(finalization.session.winning_numbers)}"
    )
    return RaceRun(session=finalization.session, saved=saved, draws=tuple(draws))


def run_roster_race(
    roster: PlayerRoster,
    *,
    store: Optional["SessionStore"] = None,
    observer: Optional[RaceObserver] = None,
    rng: Optional[random.Random] = None,
    pace: Optional[Callable[[], None]] = None,
) -> RaceRun:
    """Run :func:`run_race` for a roster that is ready to start.

    Raises
    ------
    ValueError
        If the roster has too few players or some player has no number.
    """
    if not roster.can_start:
        raise ValueError("Roster needs more players before the race can start")
    if not roster.all_assigned():
        missing = ", ".join(p.display_name for p in roster.players_without_numbers())
        raise ValueError(f"Players without a number: {missing}")
    return run_race(
        roster.game_mode,
        roster.players,
        store=store,
        observer=observer,
        rng=rng,
        pace=pace,
    )


__all__ = ["RaceObserver", "RaceRun", "run_race", "run_roster_race"]
