"""Lock and foreground signal types, parsing, and the polling lock probe."""

from .events import (
    ForegroundSignal,
    LockSignal,
    QueueSignalPublisher,
    SignalParseError,
    SignalPublisher,
    parse_foreground_state,
    parse_lock_state,
)
from .probe import LockStateProbe, command_lock_probe

__all__ = [
    "ForegroundSignal",
    "LockSignal",
    "LockStateProbe",
    "QueueSignalPublisher",
    "SignalParseError",
    "SignalPublisher",
    "command_lock_probe",
    "parse_foreground_state",
    "parse_lock_state",
]
