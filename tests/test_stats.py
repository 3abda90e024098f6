import unittest
from datetime import datetime, timezone
from decimal import Decimal

from winniluck.race import GameSession
from winniluck.stats import (
    TimeFilter,
    filter_sessions,
    filter_window,
    games_by_weekday,
    revenue_by_mode,
    summarize,
    top_winners,
)

# Wednesday
NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


def make_session(
    session_id: str,
    played_at: datetime,
    *,
    mode_id: str = "standard",
    players=("a", "b", "c", "d"),
    winners=("a",),
    gross: str = "20",
    payout: str = "15",
) -> GameSession:
    return GameSession(
        id=session_id,
        mode_id=mode_id,
        start_range=1,
        end_range=10,
        repetitions=3,
        num_winners=len(winners),
        player_ids=tuple(players),
        winning_numbers=tuple(range(1, len(winners) + 1)),
        winner_ids=tuple(winners),
        played_at=played_at,
        gross_income=Decimal(gross),
        payout=Decimal(payout),
        profit=Decimal(gross) - Decimal(payout),
    )


class StatsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.sessions = [
            make_session("today", datetime(2024, 5, 15, 9, 0, tzinfo=timezone.utc)),
            make_session(
                "monday",
                datetime(2024, 5, 13, 20, 0, tzinfo=timezone.utc),
                mode_id="quick",
                players=("a", "e"),
                winners=("e",),
                gross="4",
                payout="3",
            ),
            make_session(
                "early_may",
                datetime(2024, 5, 2, 20, 0, tzinfo=timezone.utc),
                winners=("b", "a"),
                gross="40",
                payout="30",
            ),
            make_session("january", datetime(2024, 1, 10, 20, 0, tzinfo=timezone.utc)),
            make_session("last_year", datetime(2023, 12, 31, 23, 0, tzinfo=timezone.utc)),
        ]

    def _ids(self, time_filter, **kwargs):
        return [s.id for s in filter_sessions(self.sessions, time_filter, now=NOW, **kwargs)]

    def test_calendar_windows(self):
        self.assertEqual(self._ids(TimeFilter.DAY), ["today"])
        self.assertEqual(self._ids(TimeFilter.WEEK), ["today", "monday"])
        self.assertEqual(self._ids(TimeFilter.MONTH), ["today", "monday", "early_may"])
        self.assertEqual(
            self._ids(TimeFilter.YEAR), ["today", "monday", "early_may", "january"]
        )

    def test_week_starts_on_monday(self):
        start, end = filter_window(TimeFilter.WEEK, now=NOW)
        self.assertEqual(start, datetime(2024, 5, 13, tzinfo=timezone.utc))
        self.assertEqual(end, datetime(2024, 5, 20, tzinfo=timezone.utc))

    def test_december_month_window(self):
        start, end = filter_window(
            TimeFilter.MONTH, now=datetime(2023, 12, 31, 23, 0, tzinfo=timezone.utc)
        )
        self.assertEqual(start, datetime(2023, 12, 1, tzinfo=timezone.utc))
        self.assertEqual(end, datetime(2024, 1, 1, tzinfo=timezone.utc))

    def test_custom_window(self):
        ids = self._ids(
            TimeFilter.CUSTOM,
            start=datetime(2024, 1, 10, 20, 0, tzinfo=timezone.utc),
            end=datetime(2024, 5, 13, 20, 0, tzinfo=timezone.utc),
        )
        self.assertEqual(ids, ["monday", "early_may", "january"])
        self.assertEqual(len(self._ids(TimeFilter.CUSTOM)), 5)

    def test_summary(self):
        summary = summarize(
            self.sessions,
            TimeFilter.MONTH,
            now=NOW,
            mode_titles={"standard": "Standard Game"},
        )
        self.assertEqual(summary.total_games, 3)
        self.assertEqual(summary.total_gross_income, Decimal("64"))
        self.assertEqual(summary.total_payout, Decimal("48"))
        self.assertEqual(summary.total_profit, Decimal("16"))
        self.assertEqual(summary.unique_players, 5)
        self.assertAlmostEqual(summary.repeat_rate, 5 / 10)
        self.assertAlmostEqual(summary.average_players_per_game, 10 / 3)
        self.assertEqual(summary.most_popular_mode, "Standard Game")
        self.assertAlmostEqual(summary.profit_margin, 0.25)
        self.assertEqual(summary.average_game_value, Decimal("64") / 3)
        self.assertEqual(summary.start, datetime(2024, 5, 1, tzinfo=timezone.utc))

    def test_empty_summary(self):
        summary = summarize([], TimeFilter.DAY, now=NOW)
        self.assertEqual(summary.total_games, 0)
        self.assertEqual(summary.average_profit, Decimal(0))
        self.assertEqual(summary.profit_margin, 0.0)
        self.assertEqual(summary.average_game_value, Decimal(0))
        self.assertIsNone(summary.most_popular_mode)

    def test_rankings(self):
        self.assertEqual(top_winners(self.sessions, limit=2), [("a", 4), ("e", 1)])
        self.assertEqual(
            revenue_by_mode(self.sessions),
            [("standard", Decimal("100")), ("quick", Decimal("4"))],
        )
        self.assertEqual(
            games_by_weekday(self.sessions[:2]), {"Wednesday": 1, "Monday": 1}
        )


if __name__ == "__main__":
    unittest.main()
