"""Runtime queue commands and the parser for inbound bridge messages."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

from contracts.ui_protocol import (
    INBOUND_MESSAGE_TYPES,
    MESSAGE_ADD_CREDITS,
    MESSAGE_APP_STATE,
    MESSAGE_LOCK,
    MESSAGE_REMOVE_CREDITS,
    MESSAGE_RESET,
    MESSAGE_STATUS,
)
from signals import (
    ForegroundSignal,
    LockSignal,
    SignalParseError,
    parse_foreground_state,
    parse_lock_state,
)


@dataclass(frozen=True)
class AddCreditsCommand:
    seconds: int


@dataclass(frozen=True)
class RemoveCreditsCommand:
    seconds: int


@dataclass(frozen=True)
class ResetCommand:
    pass


@dataclass(frozen=True)
class StatusRequest:
    pass


@dataclass(frozen=True)
class ShutdownRequest:
    """Asks the runtime loop to exit after flushing the budget."""
    reason: str = "requested"
    exit_code: int = 0


RuntimeCommand = Union[
    LockSignal,
    ForegroundSignal,
    AddCreditsCommand,
    RemoveCreditsCommand,
    ResetCommand,
    StatusRequest,
    ShutdownRequest,
]


def parse_bridge_message(raw: str) -> RuntimeCommand:
    """Translate one JSON websocket message from the host bridge.

    Raises `SignalParseError` for anything that is not a well-formed message.
    """
    try:
        message = json.loads(raw)
    except (TypeError, ValueError) as error:
        raise SignalParseError(f"Message is not valid JSON: {error}") from error
    if not isinstance(message, Mapping):
        raise SignalParseError("Message must be a JSON object.")

    message_type = message.get("type")
    if message_type not in INBOUND_MESSAGE_TYPES:
        raise SignalParseError(f"Unsupported message type: {message_type!r}")

    if message_type == MESSAGE_LOCK:
        return LockSignal(
            state=parse_lock_state(message.get("state")),
            occurred_at=_parse_timestamp(message.get("timestamp")),
        )
    if message_type == MESSAGE_APP_STATE:
        return ForegroundSignal(
            state=parse_foreground_state(message.get("state")),
            occurred_at=_parse_timestamp(message.get("timestamp")),
        )
    if message_type == MESSAGE_ADD_CREDITS:
        return AddCreditsCommand(seconds=_parse_seconds(message.get("seconds")))
    if message_type == MESSAGE_REMOVE_CREDITS:
        return RemoveCreditsCommand(seconds=_parse_seconds(message.get("seconds")))
    if message_type == MESSAGE_RESET:
        return ResetCommand()
    return StatusRequest()


def _parse_seconds(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise SignalParseError(f"seconds must be a positive integer, got: {value!r}")
    return value


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """Accept epoch milliseconds (as sent by native bridges) or ISO-8601."""
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            seconds = value / 1000.0
            if not math.isfinite(seconds):
                raise ValueError("timestamp must be finite")
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as error:
            raise SignalParseError(f"Timestamp out of range: {value!r}") from error
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as error:
            raise SignalParseError(f"Invalid timestamp: {value!r}") from error
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    raise SignalParseError(f"Invalid timestamp: {value!r}")
