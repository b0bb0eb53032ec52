import unittest

from screentime import EventBus, TimerEvent


def _event(kind: str = "time-update", **details) -> TimerEvent:
    return TimerEvent(
        kind=kind,
        remaining_seconds=42,
        timestamp=0.0,
        run_state="running",
        details=details,
    )


class EventBusTests(unittest.TestCase):
    def test_delivers_in_subscription_order(self) -> None:
        bus = EventBus()
        seen: list[str] = []
        bus.subscribe(lambda event: seen.append("first"))
        bus.subscribe(lambda event: seen.append("second"))

        bus.publish(_event())

        self.assertEqual(["first", "second"], seen)

    def test_unsubscribe_stops_delivery(self) -> None:
        bus = EventBus()
        seen: list[TimerEvent] = []
        unsubscribe = bus.subscribe(seen.append)

        unsubscribe()
        unsubscribe()
        bus.publish(_event())

        self.assertEqual([], seen)
        self.assertEqual(0, bus.observer_count)

    def test_failing_observer_is_logged_and_skipped(self) -> None:
        bus = EventBus()
        seen: list[TimerEvent] = []

        def broken(event: TimerEvent) -> None:
            raise RuntimeError("boom")

        bus.subscribe(broken)
        bus.subscribe(seen.append)

        with self.assertLogs("event_bus", level="ERROR") as logs:
            bus.publish(_event())

        self.assertEqual(1, len(seen))
        self.assertIn("boom", logs.output[0])

    def test_payload_flattens_details_without_shadowing_core_fields(self) -> None:
        payload = TimerEvent(
            kind="credits-added",
            remaining_seconds=42,
            timestamp=0.0,
            run_state="running",
            details={"added_seconds": 60, "kind": "spoofed"},
        ).to_payload()

        self.assertEqual("credits-added", payload["kind"])
        self.assertEqual(60, payload["added_seconds"])
        self.assertEqual(42, payload["remaining_seconds"])
        self.assertEqual("running", payload["run_state"])
        self.assertEqual("1970-01-01T00:00:00+00:00", payload["occurred_at"])


if __name__ == "__main__":
    unittest.main()
