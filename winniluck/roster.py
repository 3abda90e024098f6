"""Player registration and number assignment ahead of a race."""

from __future__ import annotations

from typing import Iterable, Optional

from .race.types import GameMode, Player

MIN_PLAYERS_TO_START = 2


class RosterError(ValueError):
    """Raised when a roster change would break registration rules."""


class PlayerRoster:
    """Ordered set of players registered for one game mode.

    The roster guarantees what the engine assumes about its input: names are
    not blank, the roster never exceeds ``max_players``, and every assigned
    number is unique and within ``1..max_players``. Players are immutable, so
    assignments replace the stored :class:`Player` with an updated copy.
    """

    def __init__(self, game_mode: GameMode, players: Optional[Iterable[Player]] = None) -> None:
        self.game_mode = game_mode
        self._players: list[Player] = []
        for player in players or ():
            self.add_player(player)

    @property
    def players(self) -> tuple[Player, ...]:
        return tuple(self._players)

    @property
    def is_full(self) -> bool:
        return len(self._players) >= self.game_mode.max_players

    @property
    def remaining_slots(self) -> int:
        return self.game_mode.max_players - len(self._players)

    @property
    def can_start(self) -> bool:
        return len(self._players) >= MIN_PLAYERS_TO_START

    def _index_of(self, player_id: str) -> int:
        for idx, player in enumerate(self._players):
            if player.id == player_id:
                return idx
        raise RosterError(f"Player '{player_id}' is not on the roster")

    def _check_number(self, number: int, *, owner_id: Optional[str] = None) -> None:
        start, end = self.game_mode.number_range
        if not start <= number <= end:
            raise RosterError(f"Number {number} is outside {start}-{end}")
        holder = self.player_for_number(number)
        if holder is not None and holder.id != owner_id:
            raise RosterError(f"Number {number} is already taken by {holder.display_name}")

    def add_player(self, player: Player) -> Player:
        """Append ``player`` to the roster and return it."""
        if self.is_full:
            raise RosterError(
                f"Roster already holds the maximum of {self.game_mode.max_players} players"
            )
        if not player.is_valid:
            raise RosterError("Player name must not be blank")
        if any(existing.id == player.id for existing in self._players):
            raise RosterError(f"Player '{player.id}' is already on the roster")
        if player.assigned_number is not None:
            self._check_number(player.assigned_number)
        self._players.append(player)
        return player

    def remove_player(self, player_id: str) -> Player:
        return self._players.pop(self._index_of(player_id))

    def clear(self) -> None:
        self._players.clear()

    def assign_number(self, player_id: str, number: int) -> Player:
        """Give ``number`` to the player and return the updated record."""
        idx = self._index_of(player_id)
        self._check_number(number, owner_id=player_id)
        updated = self._players[idx].with_number(number)
        self._players[idx] = updated
        return updated

    def clear_number(self, player_id: str) -> Player:
        idx = self._index_of(player_id)
        updated = self._players[idx].with_number(None)
        self._players[idx] = updated
        return updated

    def player_for_number(self, number: int) -> Optional[Player]:
        for player in self._players:
            if player.assigned_number == number:
                return player
        return None

    def is_number_available(self, number: int) -> bool:
        return self.player_for_number(number) is None

    def available_numbers(self) -> list[int]:
        start, end = self.game_mode.number_range
        taken = {p.assigned_number for p in self._players if p.assigned_number is not None}
        return [n for n in range(start, end + 1) if n not in taken]

    def all_assigned(self) -> bool:
        return all(p.assigned_number is not None for p in self._players)

    def players_without_numbers(self) -> list[Player]:
        return [p for p in self._players if p.assigned_number is None]

    def winners_for(self, winning_numbers: Iterable[int]) -> list[Player]:
        """Return players holding ``winning_numbers``, in the same order."""
        winners = []
        for number in winning_numbers:
            player = self.player_for_number(number)
            if player is not None:
                winners.append(player)
        return winners


__all__ = ["MIN_PLAYERS_TO_START", "PlayerRoster", "RosterError"]
