from __future__ import annotations

import time
from datetime import datetime
from typing import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    """Current epoch time in milliseconds.

    Note: Injected everywhere a clock is needed so tests can pass a fake one.
    """
    return int(time.time() * 1000)


def now_local() -> datetime:
    return datetime.now()


def parse_iso_datetime(value) -> datetime | None:
    """Parse an ISO date/datetime string coming from the backend (naive local time)."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
