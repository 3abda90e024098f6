"""Database model for stored game modes."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Integer, Numeric, String, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from ..db.utils import dt_iso
from ..race.types import GameMode
from .base import Base

MONEY = Numeric(12, 2)


class GameModeRecord(Base):
    """Persisted copy of a :class:`~winniluck.race.types.GameMode`."""

    __tablename__ = "game_modes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    """Identifier shared with the domain object."""

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    """Display name shown when picking a mode."""

    max_players: Mapped[int] = mapped_column(Integer, nullable=False)
    """Size of the number range (numbers ``1..max_players``)."""

    entry_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    """Amount paid by each player."""

    prize_tiers: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    """Prize per finishing position, stored as decimal strings."""

    max_winners: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    """Finisher quota that ends the race."""

    repetitions: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    """Calls a number needs to finish."""

    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    """Position of the mode in listings."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __init__(
        self,
        *,
        id: str,
        title: str,
        max_players: int,
        entry_price: Decimal,
        prize_tiers: list[str],
        max_winners: int = 1,
        repetitions: int = 1,
        display_order: int = 0,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        self.id = id
        self.title = title
        self.max_players = max_players
        self.entry_price = entry_price
        self.prize_tiers = prize_tiers
        self.max_winners = max_winners
        self.repetitions = repetitions
        self.display_order = display_order
        if created_at is not None:
            self.created_at = created_at
        if updated_at is not None:
            self.updated_at = updated_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<GameModeRecord(id={id}, title={title}, max_players={players})>".format(
            id=self.id,
            title=self.title,
            players=self.max_players,
        )

    @classmethod
    def from_domain(cls, mode: GameMode) -> "GameModeRecord":
        return cls(
            id=mode.id,
            title=mode.title,
            max_players=mode.max_players,
            entry_price=mode.entry_price,
            prize_tiers=[str(tier) for tier in mode.prize_tiers],
            max_winners=mode.max_winners,
            repetitions=mode.repetitions,
            display_order=mode.order,
        )

    def apply(self, mode: GameMode) -> None:
        """Overwrite the stored fields with ``mode``."""
        self.title = mode.title
        self.max_players = mode.max_players
        self.entry_price = mode.entry_price
        self.prize_tiers = [str(tier) for tier in mode.prize_tiers]
        self.max_winners = mode.max_winners
        self.repetitions = mode.repetitions
        self.display_order = mode.order

    def to_domain(self) -> GameMode:
        return GameMode(
            id=self.id,
            title=self.title,
            max_players=self.max_players,
            entry_price=Decimal(self.entry_price),
            prize_tiers=tuple(Decimal(tier) for tier in self.prize_tiers),
            max_winners=self.max_winners,
            repetitions=self.repetitions,
            order=self.display_order,
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "max_players": self.max_players,
            "entry_price": str(self.entry_price),
            "prize_tiers": list(self.prize_tiers),
            "max_winners": self.max_winners,
            "repetitions": self.repetitions,
            "order": self.display_order,
            "created_at": dt_iso(self.created_at),
            "updated_at": dt_iso(self.updated_at),
        }

    @classmethod
    def get_by_id(cls, session: Session, mode_id: str) -> Optional["GameModeRecord"]:
        return session.scalar(select(cls).where(cls.id == mode_id))


__all__ = ["GameModeRecord", "MONEY"]
