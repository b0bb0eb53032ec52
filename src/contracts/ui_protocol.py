"""Websocket bridge event and inbound message constants."""

from __future__ import annotations

# Outbound websocket event types
EVENT_HELLO = "hello"
EVENT_BUDGET = "budget"
EVENT_STATUS = "status"
EVENT_REMINDER = "reminder"
EVENT_ERROR = "error"

# Inbound message types sent by the host bridge
MESSAGE_LOCK = "lock"
MESSAGE_APP_STATE = "app_state"
MESSAGE_ADD_CREDITS = "add_credits"
MESSAGE_REMOVE_CREDITS = "remove_credits"
MESSAGE_RESET = "reset"
MESSAGE_STATUS = "status"

INBOUND_MESSAGE_TYPES: frozenset[str] = frozenset(
    {
        MESSAGE_LOCK,
        MESSAGE_APP_STATE,
        MESSAGE_ADD_CREDITS,
        MESSAGE_REMOVE_CREDITS,
        MESSAGE_RESET,
        MESSAGE_STATUS,
    }
)

STICKY_EVENT_TYPES: frozenset[str] = frozenset(
    {
        EVENT_BUDGET,
        EVENT_STATUS,
        EVENT_REMINDER,
        EVENT_ERROR,
    }
)

STICKY_EVENT_ORDER: tuple[str, ...] = (
    EVENT_BUDGET,
    EVENT_STATUS,
    EVENT_REMINDER,
    EVENT_ERROR,
)
