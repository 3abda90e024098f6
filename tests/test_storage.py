from __future__ import annotations

import dataclasses
import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from winniluck.models import Base, GameModeRecord, GameSessionRecord
from winniluck.race import GameMode, Player, settle
from winniluck.storage import SQLAlchemyStore, default_game_modes, open_store

PLAYED_AT = datetime(2024, 5, 1, 20, 30, tzinfo=timezone.utc)


class StorageTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(
            bind=self.engine, future=True, expire_on_commit=False
        )
        self.store = SQLAlchemyStore(self.Session)

        self.mode = GameMode(
            title="Standard Game",
            max_players=10,
            entry_price=Decimal("5.00"),
            prize_tiers=(Decimal("25.00"), Decimal("15.00")),
            max_winners=2,
            repetitions=3,
        )
        self.players = [
            Player(display_name=f"Player {n}", assigned_number=n, id=f"p{n}")
            for n in range(1, 11)
        ]

    def tearDown(self) -> None:
        self.engine.dispose()

    def _session(self, session_id: str = "session-1", played_at: datetime = PLAYED_AT):
        return settle(
            [4, 8, 1],
            2,
            self.players,
            self.mode,
            session_id=session_id,
            played_at=played_at,
        )


class GameModeStorageTests(StorageTestCase):
    def test_defaults_seeded_once(self):
        modes = self.store.fetch_game_modes()
        self.assertEqual(
            [m.title for m in modes], ["Quick Game", "Standard Game", "Premium Game"]
        )
        self.assertEqual(self.store.storage_info()["game_modes"], 3)

        again = self.store.fetch_game_modes()
        self.assertEqual([m.id for m in again], [m.id for m in modes])
        self.assertEqual(self.store.storage_info()["game_modes"], 3)

    def test_default_modes_are_consistent(self):
        for mode in default_game_modes():
            self.assertGreaterEqual(len(mode.prize_tiers), mode.max_winners)
            self.assertLessEqual(mode.max_winners, mode.max_players)

    def test_save_update_delete(self):
        self.assertTrue(self.store.save_game_mode(self.mode))
        self.assertEqual(self.store.fetch_game_modes(), [self.mode])

        renamed = dataclasses.replace(self.mode, title="Evening Game", repetitions=4)
        self.assertTrue(self.store.update_game_mode(renamed))
        (stored,) = self.store.fetch_game_modes()
        self.assertEqual(stored.title, "Evening Game")
        self.assertEqual(stored.repetitions, 4)
        self.assertEqual(stored.prize_tiers, (Decimal("25"), Decimal("15")))

        self.assertTrue(self.store.delete_game_mode(self.mode.id))
        self.assertEqual(self.store.storage_info()["game_modes"], 0)

    def test_record_serialization(self):
        self.store.save_game_mode(self.mode)
        with self.Session() as db:
            record = GameModeRecord.get_by_id(db, self.mode.id)
            payload = record.to_json()
        self.assertEqual(payload["prize_tiers"], ["25.00", "15.00"])
        self.assertEqual(payload["title"], "Standard Game")
        self.assertTrue(payload["created_at"].endswith("+00:00"))


class PlayerStorageTests(StorageTestCase):
    def test_upsert_and_delete(self):
        ana = Player(display_name="Ana", id="ana")
        self.assertTrue(self.store.save_player(ana))
        self.assertTrue(self.store.save_player(ana.with_number(7)))

        (stored,) = self.store.fetch_players()
        self.assertEqual(stored, Player(display_name="Ana", assigned_number=7, id="ana"))

        self.assertTrue(self.store.delete_player("ana"))
        self.assertEqual(self.store.fetch_players(), [])


class GameSessionStorageTests(StorageTestCase):
    def test_round_trip(self):
        session = self._session()
        self.assertTrue(self.store.save(session))

        loaded = self.store.get_game_session("session-1")
        self.assertEqual(loaded, session)
        self.assertEqual(loaded.played_at.tzinfo, timezone.utc)
        self.assertEqual(loaded.profit, Decimal("10"))
        self.assertIsNone(self.store.get_game_session("missing"))

    def test_saving_twice_keeps_one_record(self):
        session = self._session()
        self.assertTrue(self.store.save_game_session(session))
        self.assertTrue(self.store.save_game_session(session))
        with self.Session() as db:
            rows = db.scalars(select(GameSessionRecord)).all()
        self.assertEqual(len(rows), 1)

    def test_sessions_newest_first(self):
        older = self._session("older", PLAYED_AT - timedelta(days=1))
        newer = self._session("newer", PLAYED_AT)
        self.store.save(older)
        self.store.save(newer)

        self.assertEqual([s.id for s in self.store.fetch_game_sessions()], ["newer", "older"])
        self.assertEqual([s.id for s in self.store.fetch_game_sessions(limit=1)], ["newer"])

        self.assertTrue(self.store.delete_game_session("newer"))
        self.assertEqual([s.id for s in self.store.fetch_game_sessions()], ["older"])

    def test_failed_write_returns_false(self):
        broken = dataclasses.replace(self._session(), mode_id=None)
        with self.assertLogs("winniluck.storage", level="ERROR"):
            self.assertFalse(self.store.save(broken))
        self.assertEqual(self.store.storage_info()["game_sessions"], 0)

    def test_record_serialization(self):
        self.store.save(self._session())
        with self.Session() as db:
            payload = GameSessionRecord.get_by_id(db, "session-1").to_json()
        self.assertEqual(payload["winning_numbers"], [4, 8])
        self.assertEqual(payload["winner_ids"], ["p4", "p8"])
        self.assertEqual(payload["played_at"], "2024-05-01T20:30:00+00:00")
        self.assertEqual(payload["payout"], "40.00")

    def test_clear_all_data(self):
        self.store.fetch_game_modes()
        self.store.save_player(self.players[0])
        self.store.save(self._session())

        self.assertTrue(self.store.clear_all_data())
        self.assertEqual(
            self.store.storage_info(),
            {"players": 0, "game_modes": 0, "game_sessions": 0},
        )


class OpenStoreTests(unittest.TestCase):
    def test_in_memory_store_with_schema(self):
        store = open_store("sqlite+pysqlite:///:memory:", create_schema=True)
        self.assertEqual(len(store.fetch_game_modes()), 3)
        self.assertEqual(store.storage_info()["game_sessions"], 0)


if __name__ == "__main__":
    unittest.main()
