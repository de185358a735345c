"""
Date and time utilities for Mention Service.

Jobs take their identity and creation time from a single clock reading
expressed as integer epoch milliseconds, so the clock is a plain callable
that tests can replace.
"""

import time
from datetime import datetime, timezone
from typing import Callable

UTC = timezone.utc

Clock = Callable[[], int]


def epoch_millis() -> int:
    """Current wall-clock time in integer milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def millis_to_iso(millis: int) -> str:
    """
    Format epoch milliseconds as an ISO-8601 UTC timestamp.

    The output uses millisecond precision and a trailing "Z",
    e.g. 2023-11-14T22:13:20.000Z.

    Args:
        millis: Milliseconds since the epoch

    Returns:
        ISO-8601 string
    """
    seconds, remainder = divmod(millis, 1000)
    dt = datetime.fromtimestamp(seconds, tz=UTC).replace(microsecond=remainder * 1000)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
