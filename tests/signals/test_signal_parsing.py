import unittest
from datetime import datetime, timezone

from signals import (
    ForegroundSignal,
    LockSignal,
    SignalParseError,
    parse_foreground_state,
    parse_lock_state,
)


class SignalParsingTests(unittest.TestCase):
    def test_lock_state_aliases(self) -> None:
        cases = {
            "locked": "locked",
            " LOCK ": "locked",
            "deviceLocked": "locked",
            "device_unlocked": "unlocked",
            "unlock": "unlocked",
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(expected, parse_lock_state(raw))

    def test_lock_state_accepts_booleans(self) -> None:
        self.assertEqual("locked", parse_lock_state(True))
        self.assertEqual("unlocked", parse_lock_state(False))

    def test_foreground_state_aliases(self) -> None:
        self.assertEqual("active", parse_foreground_state("Foreground"))
        self.assertEqual("inactive", parse_foreground_state("inactive"))
        self.assertEqual("background", parse_foreground_state("BACKGROUND"))

    def test_unknown_values_raise_parse_error(self) -> None:
        for parser, value in (
            (parse_lock_state, "ajar"),
            (parse_lock_state, 1),
            (parse_foreground_state, "minimized"),
            (parse_foreground_state, None),
        ):
            with self.subTest(parser=parser.__name__, value=value):
                with self.assertRaises(SignalParseError):
                    parser(value)

    def test_signals_validate_state_and_expose_epoch(self) -> None:
        occurred_at = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

        signal = LockSignal("locked", occurred_at=occurred_at)

        self.assertEqual(1_700_000_000.0, signal.occurred_at_epoch)
        self.assertIsNone(ForegroundSignal("background").occurred_at_epoch)
        with self.assertRaises(ValueError):
            ForegroundSignal("foreground")


if __name__ == "__main__":
    unittest.main()
