import threading
import unittest

from reminders import ThreadedReminderScheduler
from reminders.messages import expired_reminder, warning_reminder
from screentime import ManualClock


class ThreadedReminderSchedulerTests(unittest.TestCase):
    def test_past_fire_time_is_delivered_synchronously(self) -> None:
        delivered = []
        scheduler = ThreadedReminderScheduler(delivered.append, clock=ManualClock(100.0))

        scheduler.schedule_at(90.0, expired_reminder())

        self.assertEqual(["Time Expired"], [payload.title for payload in delivered])
        self.assertEqual(0, scheduler.pending_count)

    def test_future_reminder_fires_on_timer_thread(self) -> None:
        fired = threading.Event()
        delivered = []

        def deliver(payload) -> None:
            delivered.append(payload)
            fired.set()

        scheduler = ThreadedReminderScheduler(deliver, clock=ManualClock(100.0))
        scheduler.schedule_at(100.05, warning_reminder(60))

        self.assertTrue(fired.wait(timeout=2.0))
        self.assertEqual("1 Minute Remaining", delivered[0].title)

    def test_cancel_all_drops_pending_reminders(self) -> None:
        delivered = []
        scheduler = ThreadedReminderScheduler(delivered.append, clock=ManualClock(0.0))
        scheduler.schedule_at(60.0, warning_reminder(300))
        scheduler.schedule_at(90.0, warning_reminder(30))
        self.assertEqual(2, scheduler.pending_count)

        scheduler.cancel_all()

        self.assertEqual(0, scheduler.pending_count)
        self.assertEqual([], delivered)

    def test_delivery_errors_are_logged(self) -> None:
        def deliver(payload) -> None:
            raise RuntimeError("notification service down")

        scheduler = ThreadedReminderScheduler(deliver, clock=ManualClock(10.0))

        with self.assertLogs("reminder_scheduler", level="ERROR"):
            scheduler.schedule_at(0.0, expired_reminder())


if __name__ == "__main__":
    unittest.main()
