from __future__ import annotations

import math
from typing import List

DEFAULT_PIXELS_PER_SECOND = 10


def fmt_time(sec: float) -> str:
    sec = max(0, int(sec))
    m = sec // 60
    s = sec - m * 60
    return f"{m:02d}:{s:02d}"


class TimeAxis:
    """Fixed-scale mapping between timeline pixels and whole seconds."""

    def __init__(self, pixels_per_second: float = DEFAULT_PIXELS_PER_SECOND) -> None:
        pps = float(pixels_per_second)
        if pps <= 0:
            raise ValueError("pixels_per_second must be positive")
        self.pixels_per_second = pps

    def time_from_pixels(self, px: float) -> int:
        return max(0, int(math.floor(float(px) / self.pixels_per_second)))

    def pixels_from_time(self, sec: float) -> float:
        return float(sec) * self.pixels_per_second

    def ruler_labels(self, count: int) -> List[str]:
        """One `mm:ss` label per elapsed second, matching the thumbnail strip."""
        return [fmt_time(i) for i in range(max(0, int(count)))]
