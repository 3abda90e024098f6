"""Database model for registered players."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import DateTime, Integer, String, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from ..db.utils import dt_iso
from ..race.types import Player
from .base import Base


class PlayerRecord(Base):
    """A participant kept across games for history and statistics."""

    __tablename__ = "players"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    assigned_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __init__(
        self,
        *,
        id: str,
        display_name: str,
        assigned_number: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        self.id = id
        self.display_name = display_name
        self.assigned_number = assigned_number
        if created_at is not None:
            self.created_at = created_at

    def __repr__(self) -> str:
        return (
            f"<PlayerRecord(id={self.id}, display_name='{self.display_name}', "
            f"assigned_number={self.assigned_number})>"
        )

    @classmethod
    def from_domain(cls, player: Player) -> "PlayerRecord":
        return cls(
            id=player.id,
            display_name=player.display_name,
            assigned_number=player.assigned_number,
        )

    def to_domain(self) -> Player:
        return Player(
            id=self.id,
            display_name=self.display_name,
            assigned_number=self.assigned_number,
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "assigned_number": self.assigned_number,
            "created_at": dt_iso(self.created_at),
        }

    @classmethod
    def get_by_id(cls, session: Session, player_id: str) -> Optional["PlayerRecord"]:
        return session.scalar(select(cls).where(cls.id == player_id))


__all__ = ["PlayerRecord"]
