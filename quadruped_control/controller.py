"""Controller-level helpers: loop timing, yaw unwrapping and the default stand-up motion."""

from __future__ import annotations

import time

from .rotations import shortest_angular_distance
from .stand import StandController

STAND_MIDDLE_POSITION: tuple[float, ...] = (
    0.0, 1.535, -2.486,
    0.0, 1.535, -2.486,
    0.0, 1.535, -2.486,
    0.0, 1.535, -2.486,
)

STAND_FINAL_POSITION: tuple[float, ...] = (
    0.0, 0.72, -1.44,
    0.0, 0.72, -1.44,
    0.0, 0.72, -1.44,
    0.0, 0.72, -1.44,
)


class RepeatedTimer:
    """Measures repeated intervals and reports their maximum and average."""

    def __init__(self) -> None:
        self._started_at: float | None = None
        self._count = 0
        self._total = 0.0
        self._max = 0.0

    def start(self) -> None:
        """Mark the beginning of an interval."""
        self._started_at = time.perf_counter()

    def stop(self) -> None:
        """Mark the end of the current interval and record its length."""
        if self._started_at is None:
            raise RuntimeError("timer stopped without being started")
        interval = time.perf_counter() - self._started_at
        self._started_at = None
        self._count += 1
        self._total += interval
        self._max = max(self._max, interval)

    def max_interval_ms(self) -> float:
        """Longest recorded interval in milliseconds; zero before any interval."""
        return 1000.0 * self._max

    def average_ms(self) -> float:
        """Mean recorded interval in milliseconds; zero before any interval."""
        if self._count == 0:
            return 0.0
        return 1000.0 * self._total / self._count


def unwrap_yaw(last_yaw: float, new_yaw: float) -> float:
    """Yaw equivalent to ``new_yaw`` that lies within pi of ``last_yaw``."""
    return last_yaw + shortest_angular_distance(last_yaw, new_yaw)


def make_stand_controller() -> StandController:
    """Stand-up controller for a twelve-joint quadruped with the default poses."""
    return StandController(STAND_MIDDLE_POSITION, STAND_FINAL_POSITION)