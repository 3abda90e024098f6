"""Database model for settled game sessions."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Index, Integer, String, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from ..db.utils import dt_iso, ensure_utc
from ..race.types import GameSession
from .base import Base
from .game_mode import MONEY


class GameSessionRecord(Base):
    """Immutable record of one settled race.

    Rows are written once per session id; a new game always produces a new
    id. ``mode_id`` is kept without a foreign key so that history survives
    the deletion of a game mode.
    """

    __tablename__ = "game_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    """Session identity supplied at settlement."""

    mode_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    """Identifier of the game mode the race was played under."""

    start_range: Mapped[int] = mapped_column(Integer, nullable=False)
    end_range: Mapped[int] = mapped_column(Integer, nullable=False)
    repetitions: Mapped[int] = mapped_column(Integer, nullable=False)
    num_winners: Mapped[int] = mapped_column(Integer, nullable=False)

    player_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    """Participant identifiers in registration order."""

    winning_numbers: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    """Winning numbers in finishing order."""

    winner_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    """Paid players in finishing order."""

    dropped_numbers: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    """Winning numbers excluded from payout because no player held them."""

    played_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    """Settlement timestamp (UTC)."""

    gross_income: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    payout: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    profit: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    __table_args__ = (Index("ix_game_sessions_played_at", "played_at"),)

    def __init__(
        self,
        *,
        id: str,
        mode_id: str,
        start_range: int,
        end_range: int,
        repetitions: int,
        num_winners: int,
        player_ids: list[str],
        winning_numbers: list[int],
        winner_ids: list[str],
        played_at: datetime,
        gross_income: Decimal,
        payout: Decimal,
        profit: Decimal,
        dropped_numbers: Optional[list[int]] = None,
    ) -> None:
        self.id = id
        self.mode_id = mode_id
        self.start_range = start_range
        self.end_range = end_range
        self.repetitions = repetitions
        self.num_winners = num_winners
        self.player_ids = player_ids
        self.winning_numbers = winning_numbers
        self.winner_ids = winner_ids
        self.dropped_numbers = dropped_numbers or []
        self.played_at = played_at
        self.gross_income = gross_income
        self.payout = payout
        self.profit = profit

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<GameSessionRecord(id={id}, mode_id={mode}, winners={winners}, profit={profit})>".format(
            id=self.id,
            mode=self.mode_id,
            winners=self.winning_numbers,
            profit=self.profit,
        )

    @classmethod
    def from_domain(cls, session: GameSession) -> "GameSessionRecord":
        return cls(
            id=session.id,
            mode_id=session.mode_id,
            start_range=session.start_range,
            end_range=session.end_range,
            repetitions=session.repetitions,
            num_winners=session.num_winners,
            player_ids=list(session.player_ids),
            winning_numbers=list(session.winning_numbers),
            winner_ids=list(session.winner_ids),
            dropped_numbers=list(session.dropped_numbers),
            played_at=ensure_utc(session.played_at),
            gross_income=session.gross_income,
            payout=session.payout,
            profit=session.profit,
        )

    def to_domain(self) -> GameSession:
        return GameSession(
            id=self.id,
            mode_id=self.mode_id,
            start_range=self.start_range,
            end_range=self.end_range,
            repetitions=self.repetitions,
            num_winners=self.num_winners,
            player_ids=tuple(self.player_ids),
            winning_numbers=tuple(self.winning_numbers),
            winner_ids=tuple(self.winner_ids),
            played_at=ensure_utc(self.played_at),
            gross_income=Decimal(self.gross_income),
            payout=Decimal(self.payout),
            profit=Decimal(self.profit),
            dropped_numbers=tuple(self.dropped_numbers or ()),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "mode_id": self.mode_id,
            "start_range": self.start_range,
            "end_range": self.end_range,
            "repetitions": self.repetitions,
            "num_winners": self.num_winners,
            "player_ids": list(self.player_ids),
            "winning_numbers": list(self.winning_numbers),
            "winner_ids": list(self.winner_ids),
            "dropped_numbers": list(self.dropped_numbers or []),
            "played_at": dt_iso(self.played_at),
            "gross_income": str(self.gross_income),
            "payout": str(self.payout),
            "profit": str(self.profit),
        }

    @classmethod
    def get_by_id(cls, session: Session, session_id: str) -> Optional["GameSessionRecord"]:
        return session.scalar(select(cls).where(cls.id == session_id))

    @classmethod
    def latest(cls, session: Session, limit: Optional[int] = None) -> list["GameSessionRecord"]:
        """Return stored sessions, newest first."""
        stmt = select(cls).order_by(cls.played_at.desc(), cls.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(session.scalars(stmt).all())


__all__ = ["GameSessionRecord"]
