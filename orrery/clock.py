#!/usr/bin/env python3
"""
Simulation clock: converts host frame timestamps into elapsed simulated days.
"""
import math
from typing import Optional

from .constants import DEFAULT_SPEED, FRAME_CAP_MS, SPEED_MAX, SPEED_MIN
from .vector_utils import clamp


class SimulationClock:
    """
    Days-elapsed counter advanced once per frame.

    Attributes:
        elapsed_days: simulated days since start; only grows while unpaused.
        paused: when True, ticks still move the wall-clock baseline but add no days.
        speed: simulated days per real second, clamped to [SPEED_MIN, SPEED_MAX].
        last_ms: timestamp of the previous tick, or None before the first one.

    The first tick after construction or restart() only records a baseline, so start-up
    latency never shows up as a jump. Frame deltas are capped at FRAME_CAP_MS so a
    backgrounded window does not skip months of orbit when it comes back.
    """

    def __init__(self, speed: float = DEFAULT_SPEED, cap_ms: float = FRAME_CAP_MS):
        self.elapsed_days = 0.0
        self.paused = False
        self.speed = clamp(speed, SPEED_MIN, SPEED_MAX) if math.isfinite(speed) else DEFAULT_SPEED
        self.cap_ms = cap_ms
        self.last_ms: Optional[float] = None

    def tick(self, now_ms: float) -> float:
        """Advance to now_ms and return the simulated days added by this frame."""
        if self.last_ms is None:
            self.last_ms = now_ms
            return 0.0
        dt_ms = min(max(now_ms - self.last_ms, 0.0), self.cap_ms)
        self.last_ms = now_ms
        if self.paused:
            return 0.0
        delta_days = (dt_ms / 1000.0) * self.speed
        self.elapsed_days += delta_days
        return delta_days

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        return self.paused

    def set_speed(self, speed: float) -> None:
        if not math.isfinite(speed):
            return
        self.speed = clamp(speed, SPEED_MIN, SPEED_MAX)

    def restart(self) -> None:
        """Forget the baseline; the next tick re-anchors without advancing."""
        self.last_ms = None

    def reset(self, speed: float = DEFAULT_SPEED) -> None:
        self.elapsed_days = 0.0
        self.paused = False
        self.set_speed(speed)
        self.restart()
