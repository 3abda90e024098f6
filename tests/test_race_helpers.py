import random
import unittest

from winniluck.race import (
    ConfigurationError,
    DrawCursor,
    DrawSequence,
    NotStarted,
    RaceTracker,
    SequenceExhausted,
    StopReason,
    evaluate_stop,
    generate_draw_sequence,
    should_stop,
)


def _sequence(*values: int, repetitions: int = 1) -> DrawSequence:
    return DrawSequence(
        values=tuple(values),
        start=min(values),
        end=max(values),
        repetitions=repetitions,
    )


class RaceTrackerTests(unittest.TestCase):
    def test_finisher_order_follows_draws(self):
        tracker = RaceTracker.replay([1, 2, 1, 3, 2, 2], target=2)
        self.assertEqual(tracker.finisher_order(), (1, 2))
        self.assertEqual(tracker.count_of(2), 3)
        self.assertEqual(tracker.count_of(4), 0)
        self.assertEqual(tracker.counts(), {1: 2, 2: 3, 3: 1})
        self.assertEqual(tracker.total_draws, 6)

    def test_replay_is_deterministic(self):
        draws = [4, 1, 4, 2, 1, 3, 2, 3]
        first = RaceTracker.replay(draws, target=2)
        second = RaceTracker.replay(draws, target=2)
        self.assertEqual(first.finisher_order(), second.finisher_order())
        self.assertEqual(first.finisher_order(), (4, 1, 2, 3))

    def test_pacing_between_draws_does_not_change_order(self):
        sequence = generate_draw_sequence(
            1, 6, 3, max_repair_attempts=100, rng=random.Random(21)
        )
        tight = RaceTracker.replay(sequence, target=3)

        paced = RaceTracker()
        ticks = []

        def pace():
            ticks.append(None)

        for number in sequence:
            pace()
            paced.record_draw(number, 3)
            pace()

        self.assertEqual(paced.finisher_order(), tight.finisher_order())
        self.assertEqual(paced.counts(), tight.counts())
        self.assertEqual(len(ticks), 2 * len(sequence))
        self.assertEqual(len(tight.finisher_order()), 6)

    def test_target_of_one_finishes_on_first_call(self):
        tracker = RaceTracker()
        tracker.record_draw(9, 1)
        tracker.record_draw(9, 1)
        self.assertEqual(tracker.finisher_order(), (9,))

    def test_rejects_non_positive_target(self):
        with self.assertRaises(ConfigurationError):
            RaceTracker().record_draw(1, 0)


class DrawCursorTests(unittest.TestCase):
    def test_current_before_start_raises(self):
        cursor = DrawCursor(_sequence(3, 1, 2))
        self.assertIsNone(cursor.position)
        self.assertEqual(cursor.drawn, ())
        with self.assertRaises(NotStarted):
            cursor.current()

    def test_advance_walks_sequence(self):
        cursor = DrawCursor(_sequence(3, 1, 2))
        self.assertEqual(cursor.advance(), 3)
        self.assertEqual(cursor.current(), 3)
        self.assertEqual(cursor.position, 0)
        self.assertEqual(cursor.remaining, 2)
        self.assertEqual(cursor.advance(), 1)
        self.assertEqual(cursor.drawn, (3, 1))
        self.assertTrue(cursor.has_next())

    def test_advance_past_end_raises(self):
        cursor = DrawCursor(_sequence(3, 1))
        cursor.advance()
        cursor.advance()
        self.assertFalse(cursor.has_next())
        with self.assertRaises(SequenceExhausted):
            cursor.advance()
        self.assertEqual(cursor.current(), 1)


class TerminationTests(unittest.TestCase):
    def test_should_stop_exactly_at_quota(self):
        tracker = RaceTracker()
        for number in [1, 2, 1]:
            tracker.record_draw(number, 2)
        self.assertTrue(should_stop(tracker, 1, 2))
        self.assertFalse(should_stop(tracker, 2, 2))
        tracker.record_draw(2, 2)
        self.assertTrue(should_stop(tracker, 2, 2))

    def test_should_stop_false_before_quota_draw(self):
        sequence = generate_draw_sequence(
            1, 8, 3, max_repair_attempts=100, rng=random.Random(4)
        )
        required = 3
        tracker = RaceTracker()
        flags = []
        for number in sequence:
            tracker.record_draw(number, 3)
            flags.append(should_stop(tracker, required, 3))

        stop_index = flags.index(True)
        self.assertEqual(flags, [False] * stop_index + [True] * (len(flags) - stop_index))
        self.assertEqual(tracker.finisher_order()[required - 1], sequence[stop_index])
        replayed = RaceTracker.replay(sequence.values[:stop_index], target=3)
        self.assertEqual(len(replayed.finisher_order()), required - 1)
        self.assertFalse(should_stop(replayed, required, 3))

    def test_quota_takes_precedence_over_exhaustion(self):
        cursor = DrawCursor(_sequence(1, 2, 1, 2, repetitions=2))
        tracker = RaceTracker()
        reasons = []
        while cursor.has_next():
            tracker.record_draw(cursor.advance(), 2)
            reasons.append(evaluate_stop(tracker, cursor, 2, 2))
        self.assertEqual(reasons, [None, None, None, StopReason.QUOTA_REACHED])

    def test_exhaustion_before_quota(self):
        cursor = DrawCursor(_sequence(1, 2))
        tracker = RaceTracker()
        tracker.record_draw(cursor.advance(), 2)
        self.assertIsNone(evaluate_stop(tracker, cursor, 1, 2))
        tracker.record_draw(cursor.advance(), 2)
        self.assertEqual(
            evaluate_stop(tracker, cursor, 1, 2), StopReason.SEQUENCE_EXHAUSTED
        )


if __name__ == "__main__":
    unittest.main()
