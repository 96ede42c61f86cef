from __future__ import annotations

from typing import Callable
import time

Clock = Callable[[], int]


def wall_clock_ns() -> int:
    return time.time_ns()
