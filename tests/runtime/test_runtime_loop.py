import logging
import unittest
from queue import Queue

from runtime import RuntimeBootstrap, RuntimeEngine, RuntimeHooks
from runtime.commands import (
    AddCreditsCommand,
    RemoveCreditsCommand,
    ResetCommand,
    ShutdownRequest,
    StatusRequest,
)
from screentime import CheckpointStore, EventBus, ManualClock, ScreenTimeBudget
from signals import ForegroundSignal, LockSignal
from storage import InMemoryKeyValueStore


class _StubUIServer:
    def __init__(self):
        self.published: list[tuple[str, dict]] = []
        self.stopped = False

    def publish(self, event_type: str, **payload) -> None:
        self.published.append((event_type, payload))

    def stop(self, timeout_seconds: float = 5.0) -> None:
        self.stopped = True

    def types(self) -> list[str]:
        return [event_type for event_type, _ in self.published]


class _StubScheduler:
    def __init__(self):
        self.cancelled = 0

    def schedule_at(self, fire_time, payload) -> None:
        pass

    def cancel_all(self) -> None:
        self.cancelled += 1


def _engine(initial=None, hooks=None):
    clock = ManualClock(1_000.0)
    kv = InMemoryKeyValueStore(initial)
    budget = ScreenTimeBudget(
        store=CheckpointStore(kv),
        bus=EventBus(),
        clock=clock,
    )
    queue: Queue = Queue()
    ui = _StubUIServer()
    scheduler = _StubScheduler()
    engine = RuntimeEngine(
        RuntimeBootstrap(
            logger=logging.getLogger("test_runtime"),
            budget=budget,
            event_queue=queue,
            hooks=hooks or RuntimeHooks(setup_signal_handlers=lambda publisher: None),
            ui_server=ui,
            reminder_scheduler=scheduler,
        )
    )
    return engine, budget, clock, queue, ui, scheduler, kv


class RuntimeEngineTests(unittest.TestCase):
    def test_signals_and_commands_are_applied_in_order(self) -> None:
        engine, budget, clock, queue, ui, _, _ = _engine()
        budget.start()

        queue.put(AddCreditsCommand(seconds=120))
        queue.put(ForegroundSignal("background"))
        queue.put(LockSignal("locked"))
        for _ in range(3):
            self.assertIsNone(engine.step(0))

        status = budget.status()
        self.assertEqual(120, status.remaining_seconds)
        self.assertEqual("stopped", status.run_state)
        kinds = [payload["kind"] for event_type, payload in ui.published if event_type == "budget"]
        self.assertEqual(
            ["time-loaded", "credits-added", "tracking-started", "tracking-stopped"],
            kinds,
        )

    def test_step_ticks_after_each_poll(self) -> None:
        engine, budget, clock, queue, _, _, _ = _engine({"@timer_remaining": "60"})
        budget.start()
        queue.put(ForegroundSignal("background"))
        engine.step(0)

        clock.advance(4)
        engine.step(0)

        self.assertEqual(56, budget.status().remaining_seconds)

    def test_status_request_publishes_snapshot(self) -> None:
        engine, budget, _, queue, ui, _, _ = _engine({"@timer_remaining": "75"})
        budget.start()

        queue.put(StatusRequest())
        engine.step(0)

        event_type, payload = ui.published[-1]
        self.assertEqual("status", event_type)
        self.assertEqual(75, payload["remaining_seconds"])
        self.assertEqual("01:15", payload["formatted_time"])

    def test_rejected_command_is_reported_as_error(self) -> None:
        engine, budget, _, queue, ui, _, _ = _engine()
        budget.start()

        queue.put(RemoveCreditsCommand(seconds=-5))
        with self.assertLogs("test_runtime", level="WARNING"):
            self.assertIsNone(engine.step(0))

        self.assertEqual("error", ui.types()[-1])

    def test_reset_command_clears_budget(self) -> None:
        engine, budget, _, queue, _, _, kv = _engine({"@timer_remaining": "75"})
        budget.start()

        queue.put(ResetCommand())
        engine.step(0)

        self.assertEqual(0, budget.status().remaining_seconds)
        self.assertEqual({}, kv.snapshot())

    def test_run_until_shutdown_flushes_and_stops_collaborators(self) -> None:
        installed = []
        hooks = RuntimeHooks(setup_signal_handlers=installed.append)
        engine, budget, _, queue, ui, scheduler, kv = _engine(
            {"@timer_remaining": "30"},
            hooks=hooks,
        )
        queue.put(ShutdownRequest(reason="SIGTERM", exit_code=0))

        exit_code = engine.run()

        self.assertEqual(0, exit_code)
        self.assertEqual([engine.publisher], installed)
        self.assertIn("status", ui.types())
        self.assertTrue(ui.stopped)
        self.assertEqual(1, scheduler.cancelled)
        self.assertEqual("30", kv.snapshot()["@timer_remaining"])
        self.assertEqual(0, budget.bus.observer_count)

    def test_unexpected_error_returns_one_and_still_shuts_down(self) -> None:
        def broken_hook(publisher) -> None:
            raise RuntimeError("cannot install handlers")

        engine, _, _, _, ui, _, _ = _engine(hooks=RuntimeHooks(setup_signal_handlers=broken_hook))

        with self.assertLogs("test_runtime", level="ERROR"):
            self.assertEqual(1, engine.run())

        self.assertTrue(ui.stopped)

    def test_rejects_non_positive_tick_interval(self) -> None:
        with self.assertRaises(ValueError):
            RuntimeEngine(
                RuntimeBootstrap(
                    logger=logging.getLogger("test_runtime"),
                    budget=ScreenTimeBudget(
                        store=CheckpointStore(InMemoryKeyValueStore()),
                        bus=EventBus(),
                    ),
                    event_queue=Queue(),
                    hooks=RuntimeHooks(setup_signal_handlers=lambda publisher: None),
                    tick_interval_seconds=0,
                )
            )


if __name__ == "__main__":
    unittest.main()
