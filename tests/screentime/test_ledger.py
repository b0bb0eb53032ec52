import unittest

from screentime import TimerState
from screentime.ledger import Ledger, validate_amount


class LedgerTests(unittest.TestCase):
    def test_credit_adds_to_balance(self) -> None:
        state = TimerState(remaining_seconds=30)
        change = Ledger(state).credit(60)

        self.assertEqual(90, state.remaining_seconds)
        self.assertEqual(60, change.applied_seconds)
        self.assertFalse(change.crossed_zero)

    def test_debit_clamps_at_zero(self) -> None:
        state = TimerState(remaining_seconds=10)
        change = Ledger(state).debit(25)

        self.assertEqual(0, state.remaining_seconds)
        self.assertEqual(10, change.applied_seconds)
        self.assertTrue(change.crossed_zero)

    def test_debit_of_empty_balance_does_not_cross_zero(self) -> None:
        state = TimerState()
        change = Ledger(state).debit(5)

        self.assertEqual(0, change.applied_seconds)
        self.assertFalse(change.crossed_zero)

    def test_restore_clamps_negative_values(self) -> None:
        state = TimerState()
        Ledger(state).restore(-50)

        self.assertEqual(0, state.remaining_seconds)

    def test_clear_returns_discarded_balance(self) -> None:
        state = TimerState(remaining_seconds=42)

        self.assertEqual(42, Ledger(state).clear())
        self.assertEqual(0, state.remaining_seconds)

    def test_validate_amount_rejects_non_positive_and_non_integers(self) -> None:
        for value in (0, -1, 1.5, True, "60"):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    validate_amount(value)  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
