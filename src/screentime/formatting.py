from __future__ import annotations


def format_clock(seconds: int) -> str:
    """Render seconds as MM:SS; minutes keep counting past 59."""
    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


def format_amount(seconds: int) -> str:
    """Human wording for a credit amount, e.g. `5 minutes` or `45 seconds`."""
    minutes = int(seconds) // 60
    if minutes > 0:
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    return f"{int(seconds)} second{'s' if int(seconds) != 1 else ''}"
