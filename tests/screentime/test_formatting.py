import unittest

from screentime import TimerState
from screentime.formatting import format_amount, format_clock
from screentime.state import BudgetStatus


class FormattingTests(unittest.TestCase):
    def test_format_clock_pads_and_keeps_counting_minutes(self) -> None:
        self.assertEqual("00:00", format_clock(0))
        self.assertEqual("01:05", format_clock(65))
        self.assertEqual("75:00", format_clock(4500))
        self.assertEqual("00:00", format_clock(-3))

    def test_format_amount_prefers_minutes(self) -> None:
        self.assertEqual("1 minute", format_amount(60))
        self.assertEqual("5 minutes", format_amount(330))
        self.assertEqual("1 second", format_amount(1))
        self.assertEqual("45 seconds", format_amount(45))

    def test_status_snapshot_is_detached_from_state(self) -> None:
        state = TimerState(remaining_seconds=125)
        status = BudgetStatus.from_state(state)
        state.remaining_seconds = 0

        self.assertEqual(125, status.remaining_seconds)
        self.assertEqual("02:05", status.formatted_time)
        self.assertFalse(status.is_running)


if __name__ == "__main__":
    unittest.main()
