"""Helper utility functions."""

import time
from datetime import datetime, timezone


def get_today_date_string() -> str:
    """Return today's UTC calendar day as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


_last_timestamp = 0


def monotonic_timestamp_ms() -> int:
    """Wall-clock milliseconds, strictly increasing within this process."""
    global _last_timestamp
    now = int(time.time() * 1000)
    if now <= _last_timestamp:
        now = _last_timestamp + 1
    _last_timestamp = now
    return now
