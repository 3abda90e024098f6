"""Persistence of players, game modes, and settled sessions."""

from __future__ import annotations

from decimal import Decimal
import logging
from typing import Callable, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .db.engine import get_sessionmaker, make_engine
from .models import Base, GameModeRecord, GameSessionRecord, PlayerRecord
from .race.types import GameMode, GameSession, Player

logger = logging.getLogger(__name__)


def default_game_modes() -> list[GameMode]:
    """Modes offered when storage holds none yet."""
    return [
        GameMode(
            title="Quick Game",
            max_players=5,
            entry_price=Decimal("2.00"),
            prize_tiers=(Decimal("6.00"),),
            max_winners=1,
            repetitions=3,
            order=1,
        ),
        GameMode(
            title="Standard Game",
            max_players=10,
            entry_price=Decimal("5.00"),
            prize_tiers=(Decimal("25.00"), Decimal("15.00")),
            max_winners=2,
            repetitions=3,
            order=2,
        ),
        GameMode(
            title="Premium Game",
            max_players=20,
            entry_price=Decimal("10.00"),
            prize_tiers=(Decimal("80.00"), Decimal("60.00"), Decimal("40.00")),
            max_winners=3,
            repetitions=3,
            order=3,
        ),
    ]


class SessionStore:
    """Receiver of settled sessions.

    Implementations report success as a boolean and never raise for storage
    failures; the race engine does not retry, so queuing or dual writes are
    the store's own business.
    """

    def save(self, session: GameSession) -> bool:
        raise NotImplementedError


class SQLAlchemyStore(SessionStore):
    """:class:`SessionStore` backed by the ``winniluck.models`` tables.

    Every public method runs in its own transaction. Write methods return
    ``False`` (and log the error) when the database rejects the change.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def _write(self, action: str, fn: Callable[[Session], None]) -> bool:
        try:
            with self._session_factory.begin() as db:
                fn(db)
        except SQLAlchemyError as exc:
            logger.error(f"Failed to {action}: {exc}")
            return False
        return True

    # -------- players --------
    def fetch_players(self) -> list[Player]:
        with self._session_factory() as db:
            records = db.scalars(
                select(PlayerRecord).order_by(PlayerRecord.created_at, PlayerRecord.id)
            ).all()
            return [record.to_domain() for record in records]

    def save_player(self, player: Player) -> bool:
        def _upsert(db: Session) -> None:
            record = PlayerRecord.get_by_id(db, player.id)
            if record is None:
                db.add(PlayerRecord.from_domain(player))
            else:
                record.display_name = player.display_name
                record.assigned_number = player.assigned_number

        return self._write(f"save player {player.id}", _upsert)

    def delete_player(self, player_id: str) -> bool:
        return self._write(
            f"delete player {player_id}",
            lambda db: db.execute(delete(PlayerRecord).where(PlayerRecord.id == player_id)),
        )

    # -------- game modes --------
    def fetch_game_modes(self) -> list[GameMode]:
        """Return stored modes in display order, seeding the defaults when empty."""
        with self._session_factory() as db:
            records = db.scalars(
                select(GameModeRecord).order_by(
                    GameModeRecord.display_order, GameModeRecord.created_at
                )
            ).all()
            modes = [record.to_domain() for record in records]
        if modes:
            return modes

        defaults = default_game_modes()
        logger.info(f"No game modes stored, creating {len(defaults)} defaults")
        seeded = self._write(
            "create default game modes",
            lambda db: db.add_all([GameModeRecord.from_domain(m) for m in defaults]),
        )
        return defaults if seeded else []

    def save_game_mode(self, mode: GameMode) -> bool:
        def _upsert(db: Session) -> None:
            record = GameModeRecord.get_by_id(db, mode.id)
            if record is None:
                db.add(GameModeRecord.from_domain(mode))
            else:
                record.apply(mode)

        return self._write(f"save game mode {mode.id}", _upsert)

    update_game_mode = save_game_mode

    def delete_game_mode(self, mode_id: str) -> bool:
        return self._write(
            f"delete game mode {mode_id}",
            lambda db: db.execute(delete(GameModeRecord).where(GameModeRecord.id == mode_id)),
        )

    # -------- sessions --------
    def fetch_game_sessions(self, limit: Optional[int] = None) -> list[GameSession]:
        """Return stored sessions, newest first."""
        with self._session_factory() as db:
            return [record.to_domain() for record in GameSessionRecord.latest(db, limit)]

    def get_game_session(self, session_id: str) -> Optional[GameSession]:
        with self._session_factory() as db:
            record = GameSessionRecord.get_by_id(db, session_id)
            return record.to_domain() if record is not None else None

    def save_game_session(self, session: GameSession) -> bool:
        """Store ``session``; saving the same id twice leaves the first record."""

        def _insert(db: Session) -> None:
            if GameSessionRecord.get_by_id(db, session.id) is not None:
                logger.debug(f"Session {session.id} already stored")
                return
            db.add(GameSessionRecord.from_domain(session))

        return self._write(f"save game session {session.id}", _insert)

    def save(self, session: GameSession) -> bool:
        return self.save_game_session(session)

    def delete_game_session(self, session_id: str) -> bool:
        return self._write(
            f"delete game session {session_id}",
            lambda db: db.execute(
                delete(GameSessionRecord).where(GameSessionRecord.id == session_id)
            ),
        )

    # -------- maintenance --------
    def clear_all_data(self) -> bool:
        def _clear(db: Session) -> None:
            for model in (GameSessionRecord, PlayerRecord, GameModeRecord):
                db.execute(delete(model))

        return self._write("clear stored data", _clear)

    def storage_info(self) -> dict[str, int]:
        """Row counts per stored collection."""
        with self._session_factory() as db:
            return {
                "players": db.scalar(select(func.count()).select_from(PlayerRecord)) or 0,
                "game_modes": db.scalar(select(func.count()).select_from(GameModeRecord)) or 0,
                "game_sessions": db.scalar(select(func.count()).select_from(GameSessionRecord))
                or 0,
            }


def open_store(database_url: Optional[str] = None, *, create_schema: bool = False) -> SQLAlchemyStore:
    """Build a :class:`SQLAlchemyStore` for ``database_url`` (default: ``DB_URL``).

    With ``create_schema`` the tables are created directly from the models,
    which suits tests and throwaway databases; real databases are migrated
    with Alembic.
    """
    engine = make_engine(database_url)
    if create_schema:
        Base.metadata.create_all(engine)
    return SQLAlchemyStore(get_sessionmaker(engine))


__all__ = ["SQLAlchemyStore", "SessionStore", "default_game_modes", "open_store"]
