"""Aggregate statistics over settled game sessions."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
import enum
from typing import Iterable, Mapping, Optional, Sequence

from .db.utils import ensure_utc
from .race.types import GameSession


class TimeFilter(str, enum.Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    CUSTOM = "custom"


@dataclass(frozen=True)
class StatsSummary:
    """Totals and averages over a window of sessions.

    Attributes
    ----------
    total_games : int
        Number of sessions in the window.
    total_profit, total_payout, total_gross_income : Decimal
        Sums of the corresponding session fields.
    unique_players : int
        Distinct player ids across the window.
    repeat_rate : float
        Share of participations made by returning players.
    average_profit : Decimal
        Mean profit per game.
    average_players_per_game : float
        Mean participant count per game.
    most_popular_mode : Optional[str]
        Title (or id when no title is known) of the most played mode.
    time_filter : TimeFilter
        Filter the window was built with.
    start, end : Optional[datetime]
        Window bounds; ``end`` is exclusive except for custom windows.
    """

    total_games: int
    total_profit: Decimal
    total_payout: Decimal
    total_gross_income: Decimal
    unique_players: int
    repeat_rate: float
    average_profit: Decimal
    average_players_per_game: float
    most_popular_mode: Optional[str]
    time_filter: TimeFilter
    start: Optional[datetime]
    end: Optional[datetime]

    @property
    def profit_margin(self) -> float:
        if self.total_gross_income <= 0:
            return 0.0
        return float(self.total_profit / self.total_gross_income)

    @property
    def average_game_value(self) -> Decimal:
        if self.total_games == 0:
            return Decimal(0)
        return self.total_gross_income / self.total_games


def _add_months(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 + months
    return moment.replace(year=moment.year + month_index // 12, month=month_index % 12 + 1)


def filter_window(
    time_filter: TimeFilter,
    *,
    now: Optional[datetime] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> tuple[Optional[datetime], Optional[datetime]]:
    """Return the ``(start, end)`` bounds covered by ``time_filter``.

    Calendar windows are computed in UTC: the current day, the ISO week
    starting on Monday, the calendar month, or the calendar year. Custom
    windows return the supplied bounds unchanged.
    """
    if time_filter is TimeFilter.CUSTOM:
        return start, end

    now = ensure_utc(now or datetime.now(timezone.utc))
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if time_filter is TimeFilter.DAY:
        return day_start, day_start + timedelta(days=1)
    if time_filter is TimeFilter.WEEK:
        week_start = day_start - timedelta(days=day_start.weekday())
        return week_start, week_start + timedelta(weeks=1)
    if time_filter is TimeFilter.MONTH:
        month_start = day_start.replace(day=1)
        return month_start, _add_months(month_start, 1)
    year_start = day_start.replace(month=1, day=1)
    return year_start, year_start.replace(year=year_start.year + 1)


def filter_sessions(
    sessions: Iterable[GameSession],
    time_filter: TimeFilter,
    *,
    now: Optional[datetime] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> list[GameSession]:
    """Keep the sessions played inside the window of ``time_filter``.

    Calendar windows are half-open (``start <= played_at < end``). A custom
    window includes both bounds and, when either bound is missing, keeps
    every session.
    """
    sessions = list(sessions)
    lower, upper = filter_window(time_filter, now=now, start=start, end=end)
    if time_filter is TimeFilter.CUSTOM:
        if lower is None or upper is None:
            return sessions
        lo, hi = ensure_utc(lower), ensure_utc(upper)
        return [s for s in sessions if lo <= ensure_utc(s.played_at) <= hi]

    assert lower is not None and upper is not None
    return [s for s in sessions if lower <= ensure_utc(s.played_at) < upper]


def summarize(
    sessions: Iterable[GameSession],
    time_filter: TimeFilter = TimeFilter.CUSTOM,
    *,
    mode_titles: Optional[Mapping[str, str]] = None,
    now: Optional[datetime] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> StatsSummary:
    """Compute a :class:`StatsSummary` for the sessions inside a time window.

    ``mode_titles`` maps mode ids to display titles for
    ``most_popular_mode``; unknown ids are reported as-is.
    """
    window = filter_sessions(sessions, time_filter, now=now, start=start, end=end)
    lower, upper = filter_window(time_filter, now=now, start=start, end=end)

    total_games = len(window)
    total_profit = sum((s.profit for s in window), Decimal(0))
    participations = [pid for s in window for pid in s.player_ids]
    unique_players = len(set(participations))
    repeat_rate = (
        (len(participations) - unique_players) / len(participations)
        if participations
        else 0.0
    )

    most_popular: Optional[str] = None
    if window:
        mode_id, _ = Counter(s.mode_id for s in window).most_common(1)[0]
        most_popular = (mode_titles or {}).get(mode_id, mode_id)

    return StatsSummary(
        total_games=total_games,
        total_profit=total_profit,
        total_payout=sum((s.payout for s in window), Decimal(0)),
        total_gross_income=sum((s.gross_income for s in window), Decimal(0)),
        unique_players=unique_players,
        repeat_rate=repeat_rate,
        average_profit=total_profit / total_games if total_games else Decimal(0),
        average_players_per_game=(
            len(participations) / total_games if total_games else 0.0
        ),
        most_popular_mode=most_popular,
        time_filter=time_filter,
        start=lower,
        end=upper,
    )


def top_winners(sessions: Iterable[GameSession], limit: int = 5) -> list[tuple[str, int]]:
    """Return ``(player_id, wins)`` pairs for the most frequent winners."""
    counts = Counter(pid for s in sessions for pid in s.winner_ids)
    return counts.most_common(limit)


def revenue_by_mode(sessions: Sequence[GameSession]) -> list[tuple[str, Decimal]]:
    """Return ``(mode_id, gross_income)`` pairs, highest revenue first."""
    totals: dict[str, Decimal] = defaultdict(Decimal)
    for session in sessions:
        totals[session.mode_id] += session.gross_income
    return sorted(totals.items(), key=lambda item: item[1], reverse=True)


def games_by_weekday(sessions: Iterable[GameSession]) -> dict[str, int]:
    """Count sessions per weekday name (UTC)."""
    counts: Counter[str] = Counter(
        ensure_utc(s.played_at).strftime("%A") for s in sessions
    )
    return dict(counts)


__all__ = [
    "StatsSummary",
    "TimeFilter",
    "filter_sessions",
    "filter_window",
    "games_by_weekday",
    "revenue_by_mode",
    "summarize",
    "top_winners",
]
