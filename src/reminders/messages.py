"""English reminder text builders for warning, expiry, and credit alerts."""

from __future__ import annotations

from screentime.formatting import format_amount

from .contracts import (
    REMINDER_TIME_ADDED,
    REMINDER_TIME_EXPIRED,
    REMINDER_TIME_WARNING,
    ReminderPayload,
)


def warning_reminder(threshold_seconds: int) -> ReminderPayload:
    """Build the low-time warning fired when `threshold_seconds` remain."""
    if threshold_seconds >= 60 and threshold_seconds % 60 == 0:
        minutes = threshold_seconds // 60
        plural = "s" if minutes != 1 else ""
        return ReminderPayload(
            kind=REMINDER_TIME_WARNING,
            title=f"{minutes} Minute{plural} Remaining",
            message=f"You have {minutes} minute{plural} of screen time left.",
            seconds_remaining=threshold_seconds,
        )
    return ReminderPayload(
        kind=REMINDER_TIME_WARNING,
        title=f"{threshold_seconds} Seconds Left",
        message="Your screen time is almost up!",
        seconds_remaining=threshold_seconds,
    )


def expired_reminder() -> ReminderPayload:
    return ReminderPayload(
        kind=REMINDER_TIME_EXPIRED,
        title="Time Expired",
        message="Your screen time has run out!",
        seconds_remaining=0,
    )


def credits_added_reminder(seconds: int) -> ReminderPayload:
    return ReminderPayload(
        kind=REMINDER_TIME_ADDED,
        title="Time Added",
        message=f"You earned {format_amount(seconds)} of screen time!",
        seconds_added=seconds,
    )
