import unittest

from screentime import ManualClock, TimerState
from screentime.ledger import Ledger
from screentime.reconciliation import ReconciliationEngine


def _engine(remaining: int, checkpoint, now: float):
    state = TimerState(remaining_seconds=remaining, last_checkpoint=checkpoint)
    clock = ManualClock(now)
    return state, ReconciliationEngine(state, Ledger(state), clock)


class ReconciliationEngineTests(unittest.TestCase):
    def test_debits_whole_elapsed_seconds_and_advances_checkpoint_exactly(self) -> None:
        state, engine = _engine(100, 1000.0, 1037.0)

        result = engine.reconcile()

        self.assertEqual(37, result.elapsed_seconds)
        self.assertEqual(37, result.debited_seconds)
        self.assertEqual(63, state.remaining_seconds)
        self.assertEqual(1037.0, state.last_checkpoint)

    def test_fractional_remainder_stays_behind_the_checkpoint(self) -> None:
        state, engine = _engine(100, 1000.0, 1037.75)

        engine.reconcile()

        self.assertEqual(63, state.remaining_seconds)
        self.assertEqual(1037.0, state.last_checkpoint)

    def test_less_than_one_second_is_not_applied(self) -> None:
        state, engine = _engine(100, 1000.0, 1000.9)

        result = engine.reconcile()

        self.assertFalse(result.applied)
        self.assertEqual(100, state.remaining_seconds)
        self.assertEqual(1000.0, state.last_checkpoint)

    def test_without_checkpoint_nothing_happens(self) -> None:
        state, engine = _engine(100, None, 5000.0)

        result = engine.reconcile()

        self.assertFalse(result.applied)
        self.assertEqual(100, state.remaining_seconds)

    def test_clamps_at_zero_and_reports_zero_crossing(self) -> None:
        state, engine = _engine(200, 1000.0, 1500.0)

        result = engine.reconcile()

        self.assertEqual(500, result.elapsed_seconds)
        self.assertEqual(200, result.debited_seconds)
        self.assertTrue(result.crossed_zero)
        self.assertEqual(0, state.remaining_seconds)

    def test_already_empty_budget_does_not_cross_zero_again(self) -> None:
        state, engine = _engine(0, 1000.0, 1010.0)

        result = engine.reconcile()

        self.assertFalse(result.crossed_zero)
        self.assertEqual(0, state.remaining_seconds)

    def test_future_checkpoint_is_rebased_without_debit(self) -> None:
        state, engine = _engine(100, 2000.0, 1000.0)

        with self.assertLogs("reconciliation", level="WARNING"):
            result = engine.reconcile()

        self.assertFalse(result.applied)
        self.assertEqual(100, state.remaining_seconds)
        self.assertEqual(1000.0, state.last_checkpoint)

    def test_reconcile_from_uses_restored_checkpoint(self) -> None:
        state, engine = _engine(100, None, 1040.0)

        result = engine.reconcile_from(1000.0)

        self.assertEqual(40, result.elapsed_seconds)
        self.assertEqual(60, state.remaining_seconds)


if __name__ == "__main__":
    unittest.main()
