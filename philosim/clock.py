"""Wall-clock helpers in milliseconds."""

from __future__ import annotations

import time


def now_ms() -> int:
    """Current wall-clock time in whole milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def msleep(duration_ms: float) -> None:
    """Wait until at least ``duration_ms`` milliseconds of wall-clock time have passed."""
    goal = now_ms() + duration_ms
    while True:
        remaining = goal - now_ms()
        if remaining <= 0:
            return
        time.sleep(remaining / 2000 if remaining > 2 else 0.0002)