import logging
import signal
import sys
from queue import Queue
from typing import Any, Optional

from app_config import (
    AppConfig,
    AppConfigurationError,
    load_app_config,
    log_level,
    resolve_config_path,
)
from app_config_schema import STORAGE_BACKEND_MEMORY
from reminders import ReminderPayload, ReminderPlanner, ThreadedReminderScheduler
from runtime import RuntimeBootstrap, RuntimeEngine, RuntimeHooks
from runtime.commands import ShutdownRequest, parse_bridge_message
from runtime.ui import RuntimeUIPublisher
from screentime import CheckpointStore, EventBus, ScreenTimeBudget, SystemClock
from server import ServerConfigurationError, UIServer, UIServerConfig
from signals import LockStateProbe, QueueSignalPublisher, command_lock_probe
from storage import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("screentime_app")


def setup_signal_handlers(publisher: QueueSignalPublisher) -> None:
    """Turn SIGTERM and SIGINT into a queued shutdown so the budget gets flushed."""

    def signal_handler(signum: int, frame) -> None:
        del frame
        signal_name = signal.Signals(signum).name
        logging.getLogger("screentime_app").info("%s received, stopping...", signal_name)
        publisher.publish(ShutdownRequest(reason=signal_name))

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def build_store(app_config: AppConfig, logger: logging.Logger) -> KeyValueStore:
    if app_config.storage.backend == STORAGE_BACKEND_MEMORY:
        logger.warning("Using in-memory storage; the budget will not survive restarts.")
        return InMemoryKeyValueStore()
    logger.info("Persisting budget to %s", app_config.storage.path)
    return JsonFileKeyValueStore(
        app_config.storage.path,
        logger=logging.getLogger("storage"),
    )


def start_ui_server(
    app_config: AppConfig,
    publisher: QueueSignalPublisher,
    logger: logging.Logger,
) -> Optional[UIServer]:
    try:
        ui_server_config = UIServerConfig.from_settings(app_config.ui_server)
    except ServerConfigurationError as error:
        logger.error("UI server configuration error: %s", error)
        logger.warning("Continuing without UI server.")
        return None

    if not ui_server_config.enabled:
        return None

    ui_server = UIServer(
        ui_server_config,
        parse_message=parse_bridge_message,
        on_message=publisher.publish,
        logger=logging.getLogger("ui_server"),
    )
    try:
        logger.info("Starting UI server...")
        ui_server.start(timeout_seconds=5.0)
    except Exception as error:
        logger.error("UI server startup failed: %s", error)
        logger.warning("Continuing without UI server.")
        return None

    logger.info(
        "Bridge ready at ws://%s:%d%s",
        ui_server.host,
        ui_server.port,
        ui_server.websocket_path,
    )
    return ui_server


def main() -> int:
    """Run the screen-time budget until a shutdown signal arrives."""
    logger = setup_logging(level=logging.INFO)

    try:
        config_path = resolve_config_path()
        app_config = load_app_config(str(config_path))
        logger.info("Loaded runtime config: %s", config_path)
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    logging.getLogger().setLevel(log_level(app_config.logging))

    event_queue: Queue[Any] = Queue()
    publisher = QueueSignalPublisher(event_queue)
    clock = SystemClock()

    bus = EventBus(logger=logging.getLogger("screentime.events"))
    budget = ScreenTimeBudget(
        store=CheckpointStore(
            build_store(app_config, logger),
            logger=logging.getLogger("screentime.persistence"),
        ),
        bus=bus,
        clock=clock,
        foreground_state=app_config.budget.initial_foreground_state,
        lock_state=app_config.budget.initial_lock_state,
        logger=logging.getLogger("screentime"),
    )

    ui_server = start_ui_server(app_config, publisher, logger)
    ui_publisher = RuntimeUIPublisher(ui_server)
    reminder_logger = logging.getLogger("reminders")

    def deliver_reminder(reminder: ReminderPayload) -> None:
        reminder_logger.info("%s: %s", reminder.title, reminder.message)
        ui_publisher.publish_reminder(reminder)

    reminder_scheduler: Optional[ThreadedReminderScheduler] = None
    if app_config.reminders.enabled:
        reminder_scheduler = ThreadedReminderScheduler(
            deliver_reminder,
            clock=clock,
            logger=logging.getLogger("reminders.scheduler"),
        )
        bus.subscribe(
            ReminderPlanner(
                reminder_scheduler,
                thresholds_seconds=app_config.reminders.thresholds_seconds,
                announce_credits=app_config.reminders.announce_credits,
                logger=reminder_logger,
            )
        )

    lock_probe: Optional[LockStateProbe] = None
    if app_config.lock_probe.enabled:
        try:
            lock_probe = LockStateProbe(
                command_lock_probe(app_config.lock_probe.command),
                publisher,
                interval_seconds=app_config.lock_probe.interval_seconds,
                logger=logging.getLogger("lock_probe"),
            )
        except ValueError as error:
            logger.error("Lock probe configuration error: %s", error)
            if ui_server:
                ui_server.stop(timeout_seconds=5.0)
            return 1

    engine = RuntimeEngine(
        RuntimeBootstrap(
            logger=logger,
            budget=budget,
            event_queue=event_queue,
            hooks=RuntimeHooks(setup_signal_handlers=setup_signal_handlers),
            tick_interval_seconds=app_config.budget.tick_interval_seconds,
            ui_server=ui_server,
            lock_probe=lock_probe,
            reminder_scheduler=reminder_scheduler,
        )
    )
    return engine.run()


if __name__ == "__main__":
    sys.exit(main())
