"""Value objects shared by the race engine, settlement, and storage."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
import uuid
from typing import Iterator, Optional, Sequence, Union

from .errors import ConfigurationError

Money = Union[Decimal, int, float, str]


def new_id() -> str:
    """Return a fresh random identifier as a string."""
    return str(uuid.uuid4())


def to_decimal(value: Money) -> Decimal:
    """Convert ``value`` to :class:`Decimal` without binary float artefacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


@dataclass(frozen=True)
class GameMode:
    """Economic and rule configuration of a race.

    Attributes
    ----------
    max_players : int
        Size of the number range; players pick numbers in ``1..max_players``.
    entry_price : Decimal
        Amount each player pays to enter.
    prize_tiers : tuple[Decimal, ...]
        Prize per finishing position, first place first.
    max_winners : int
        Number of finishers that end the race and get paid.
    repetitions : int
        Times a number must be called to finish.
    title : str
        Display name. Generated from the other fields when left blank.
    id : str
        Stable identifier, generated when omitted.
    order : int
        Display order in mode listings.

    Raises
    ------
    ConfigurationError
        If the mode violates ``len(prize_tiers) >= max_winners``,
        ``0 < max_winners <= max_players`` or ``repetitions >= 1``, or carries
        negative money amounts.
    """

    max_players: int
    entry_price: Decimal
    prize_tiers: tuple[Decimal, ...]
    max_winners: int = 1
    repetitions: int = 1
    title: str = ""
    id: str = field(default_factory=new_id)
    order: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "entry_price", to_decimal(self.entry_price))
        object.__setattr__(
            self, "prize_tiers", tuple(to_decimal(t) for t in self.prize_tiers)
        )

        if self.max_players < 1:
            raise ConfigurationError("max_players must be at least 1")
        if self.repetitions < 1:
            raise ConfigurationError("repetitions must be at least 1")
        if self.max_winners <= 0:
            raise ConfigurationError("max_winners must be positive")
        if self.max_winners > self.max_players:
            raise ConfigurationError(
                f"max_winners ({self.max_winners}) exceeds max_players ({self.max_players})"
            )
        if len(self.prize_tiers) < self.max_winners:
            raise ConfigurationError(
                f"{len(self.prize_tiers)} prize tier(s) configured for "
                f"{self.max_winners} winner(s)"
            )
        if self.entry_price < 0:
            raise ConfigurationError("entry_price must not be negative")
        if any(tier < 0 for tier in self.prize_tiers):
            raise ConfigurationError("prize tiers must not be negative")

        if not self.title.strip():
            object.__setattr__(
                self,
                "title",
                self.generate_title(self.max_players, self.entry_price, self.max_winners),
            )

    @staticmethod
    def generate_title(max_players: int, entry_price: Money, max_winners: int) -> str:
        """Build a plain-text title such as ``"10 players / 5.00 entry / 2 winners"``."""
        price = to_decimal(entry_price).quantize(Decimal("0.01"))
        return (
            f"{_plural(max_players, 'player')} / {price} entry / "
            f"{_plural(max_winners, 'winner')}"
        )

    @property
    def total_prize_pool(self) -> Decimal:
        """Sum of every configured prize tier."""
        return sum(self.prize_tiers, Decimal(0))

    @property
    def number_range(self) -> tuple[int, int]:
        """Inclusive ``(start, end)`` range players pick their numbers from."""
        return 1, self.max_players

    def calculate_gross(self, player_count: int) -> Decimal:
        """Return the income collected from ``player_count`` entries."""
        return self.entry_price * player_count

    def calculate_payout(self, winners: int) -> Decimal:
        """Return the prizes owed to the first ``winners`` finishing positions."""
        if winners < 0:
            raise ValueError("winners must be non-negative")
        return sum(self.prize_tiers[:winners], Decimal(0))

    def calculate_profit(self, player_count: int, winners: int) -> Decimal:
        return self.calculate_gross(player_count) - self.calculate_payout(winners)


@dataclass(frozen=True)
class Player:
    """A registered participant, optionally holding an assigned number."""

    display_name: str
    assigned_number: Optional[int] = None
    id: str = field(default_factory=new_id)

    @property
    def is_valid(self) -> bool:
        return bool(self.display_name.strip())

    def with_number(self, number: Optional[int]) -> "Player":
        """Return a copy of the player holding ``number`` (or no number)."""
        return replace(self, assigned_number=number)


@dataclass(frozen=True)
class DrawSequence(Sequence[int]):
    """Planned order of draws for one race.

    Every value in ``start..end`` appears exactly ``repetitions`` times.
    ``residual_adjacent`` counts adjacent equal pairs that the planner could
    not repair.
    """

    values: tuple[int, ...]
    start: int
    end: int
    repetitions: int
    residual_adjacent: int = 0

    @property
    def range_size(self) -> int:
        return self.end - self.start + 1

    def adjacent_duplicates(self) -> list[int]:
        """Return indices ``i`` where ``values[i] == values[i + 1]``."""
        return [
            i for i in range(len(self.values) - 1) if self.values[i] == self.values[i + 1]
        ]

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index):  # type: ignore[override]
        return self.values[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self.values)


@dataclass(frozen=True)
class GameSession:
    """Immutable result of one settled race, ready for storage.

    Attributes
    ----------
    id : str
        Identity of the stored record; a new game always gets a new id.
    mode_id : str
        Identifier of the :class:`GameMode` the race was played under.
    start_range, end_range : int
        Inclusive number range the draw sequence covered.
    repetitions : int
        Calls needed to finish.
    num_winners : int
        Number of paid winners (``len(winner_ids)``).
    player_ids : tuple[str, ...]
        Every participant, in registration order.
    winning_numbers : tuple[int, ...]
        Finisher order truncated to the required winners.
    winner_ids : tuple[str, ...]
        Players holding the winning numbers, in finishing order.
    played_at : datetime
        When the race was settled.
    gross_income, payout, profit : Decimal
        Financial totals of the race.
    dropped_numbers : tuple[int, ...]
        Winning numbers that had no player and were excluded from payment.
    """

    id: str
    mode_id: str
    start_range: int
    end_range: int
    repetitions: int
    num_winners: int
    player_ids: tuple[str, ...]
    winning_numbers: tuple[int, ...]
    winner_ids: tuple[str, ...]
    played_at: datetime
    gross_income: Decimal
    payout: Decimal
    profit: Decimal
    dropped_numbers: tuple[int, ...] = ()

    @property
    def total_players(self) -> int:
        return len(self.player_ids)

    @property
    def range_size(self) -> int:
        return self.end_range - self.start_range + 1

    @property
    def total_numbers_generated(self) -> int:
        return self.range_size * self.repetitions

    @property
    def is_valid(self) -> bool:
        return (
            self.start_range <= self.end_range
            and self.repetitions > 0
            and 0 < self.num_winners <= len(self.winning_numbers)
            and len(self.winner_ids) <= self.num_winners
            and self.gross_income >= 0
            and self.profit >= 0
            and self.payout >= 0
        )

    @property
    def summary_description(self) -> str:
        return (
            f"R({self.start_range}-{self.end_range}) x {self.repetitions} | "
            f"{_plural(self.total_players, 'player')} | "
            f"{_plural(len(self.winning_numbers), 'winner')}"
        )


__all__ = [
    "DrawSequence",
    "GameMode",
    "GameSession",
    "Money",
    "Player",
    "new_id",
    "to_decimal",
]
