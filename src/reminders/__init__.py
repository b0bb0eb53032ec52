"""Low-time warning planning and in-process reminder scheduling."""

from .contracts import ReminderPayload, ReminderScheduler
from .planner import ReminderPlanner
from .scheduler import ThreadedReminderScheduler

__all__ = [
    "ReminderPayload",
    "ReminderPlanner",
    "ReminderScheduler",
    "ThreadedReminderScheduler",
]
