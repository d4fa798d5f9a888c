"""
Frame-rate statistics for presented frames.
"""

from collections import deque
from dataclasses import dataclass
from typing import Deque


class RollingAverage:
    """Rolling average over the last N values."""

    def __init__(self, maxlen: int = 30) -> None:
        self._values: Deque[float] = deque(maxlen=maxlen)

    def add(self, value: float) -> None:
        self._values.append(value)

    @property
    def average(self) -> float:
        if not self._values:
            return 0.0
        return sum(self._values) / len(self._values)

    def clear(self) -> None:
        self._values.clear()


@dataclass(frozen=True)
class FrameStats:
    fps: float
    interval_ms: float
    rolling_avg_ms: float


class FrameRateMeter:
    """
    Tracks the interval between presented frames, keyed by frame timestamp.

    Because the loop only reschedules after inference completes, the reported
    fps follows inference throughput rather than the display refresh rate.
    """

    def __init__(self, rolling_size: int = 30) -> None:
        self._last_ms: float | None = None
        self._rolling = RollingAverage(maxlen=rolling_size)

    def tick(self, timestamp_ms: float) -> FrameStats:
        """Call once per presented frame."""
        interval_ms = 0.0
        if self._last_ms is not None:
            interval_ms = timestamp_ms - self._last_ms
            self._rolling.add(interval_ms)
        self._last_ms = timestamp_ms
        fps = 1000.0 / interval_ms if interval_ms > 0 else 0.0
        return FrameStats(fps=fps, interval_ms=interval_ms, rolling_avg_ms=self._rolling.average)

    def reset(self) -> None:
        self._last_ms = None
        self._rolling.clear()
