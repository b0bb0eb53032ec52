from .clock import ClockSource, ManualClock, SystemClock
from .conditions import should_run
from .events import EventBus, Observer, TimerEvent
from .formatting import format_clock
from .persistence import CheckpointStore, StoredCheckpoint
from .service import ScreenTimeBudget
from .state import BudgetStatus, ForegroundState, LockState, RunState, TimerState

__all__ = [
    "BudgetStatus",
    "CheckpointStore",
    "ClockSource",
    "EventBus",
    "ForegroundState",
    "LockState",
    "ManualClock",
    "Observer",
    "RunState",
    "ScreenTimeBudget",
    "StoredCheckpoint",
    "SystemClock",
    "TimerEvent",
    "TimerState",
    "format_clock",
    "should_run",
]
