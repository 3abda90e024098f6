import unittest
from datetime import datetime, timezone
from decimal import Decimal

from winniluck.race import (
    ConfigurationError,
    GameMode,
    Player,
    SettlementInconsistency,
    settle,
)

PLAYED_AT = datetime(2024, 5, 1, 20, 30, tzinfo=timezone.utc)


class SettleTests(unittest.TestCase):
    def setUp(self) -> None:
        self.mode = GameMode(
            title="Twenty",
            max_players=20,
            entry_price=Decimal("5"),
            prize_tiers=(Decimal("25"), Decimal("15")),
            max_winners=2,
            repetitions=3,
        )
        self.players = [
            Player(display_name=f"Player {n}", assigned_number=n, id=f"p{n}")
            for n in range(1, 21)
        ]

    def _settle(self, players, **kwargs):
        return settle(
            [7, 3, 9],
            2,
            players,
            self.mode,
            session_id="session-1",
            played_at=PLAYED_AT,
            **kwargs,
        )

    def test_pays_both_winners(self):
        session = self._settle(self.players)

        self.assertEqual(session.winning_numbers, (7, 3))
        self.assertEqual(session.winner_ids, ("p7", "p3"))
        self.assertEqual(session.num_winners, 2)
        self.assertEqual(session.payout, Decimal("40"))
        self.assertEqual(session.gross_income, Decimal("100"))
        self.assertEqual(session.profit, Decimal("60"))
        self.assertEqual(session.dropped_numbers, ())
        self.assertEqual(session.total_players, 20)
        self.assertEqual((session.start_range, session.end_range), (1, 20))
        self.assertEqual(session.total_numbers_generated, 60)
        self.assertEqual(session.mode_id, self.mode.id)
        self.assertTrue(session.is_valid)

    def test_drops_number_without_player(self):
        players = [
            p.with_number(None) if p.assigned_number == 3 else p for p in self.players
        ]
        with self.assertLogs("winniluck.race.settlement", level="WARNING"):
            session = self._settle(players)

        self.assertEqual(session.winning_numbers, (7, 3))
        self.assertEqual(session.winner_ids, ("p7",))
        self.assertEqual(session.num_winners, 1)
        self.assertEqual(session.payout, Decimal("25"))
        self.assertEqual(session.gross_income, Decimal("100"))
        self.assertEqual(session.profit, Decimal("75"))
        self.assertEqual(session.dropped_numbers, (3,))

    def test_strict_mode_raises(self):
        players = [p for p in self.players if p.assigned_number != 3]
        with self.assertRaises(SettlementInconsistency) as ctx:
            self._settle(players, strict=True)
        self.assertEqual(ctx.exception.numbers, (3,))

    def test_identical_inputs_give_identical_sessions(self):
        self.assertEqual(self._settle(self.players), self._settle(self.players))

    def test_generates_identity_and_timestamp(self):
        first = settle([7], 1, self.players, self.mode)
        second = settle([7], 1, self.players, self.mode)
        self.assertNotEqual(first.id, second.id)
        self.assertIsNotNone(first.played_at.tzinfo)

    def test_fewer_finishers_than_required(self):
        session = settle([5], 2, self.players, self.mode, session_id="s")
        self.assertEqual(session.winning_numbers, (5,))
        self.assertEqual(session.payout, Decimal("25"))

    def test_rejects_bad_quota(self):
        with self.assertRaises(ConfigurationError):
            settle([1], 0, self.players, self.mode)
        with self.assertRaises(ConfigurationError):
            settle([1, 2, 3], 3, self.players, self.mode)

    def test_rejects_shared_numbers(self):
        players = self.players + [Player(display_name="Copycat", assigned_number=7)]
        with self.assertRaises(ConfigurationError):
            settle([7], 1, players, self.mode)


if __name__ == "__main__":
    unittest.main()
