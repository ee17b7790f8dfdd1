from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from copter.internal.math import Rect


@dataclass
class Obstacle:
    x: float
    top_height: float
    gap_start_y: float

    def right(self, width: float) -> float:
        return self.x + width

    def top_rect(self, width: float) -> Rect:
        return Rect(self.x, 0.0, width, self.top_height)

    def bottom_rect(self, width: float, viewport_height: float) -> Rect:
        return Rect(self.x, self.gap_start_y, width, viewport_height - self.gap_start_y)

    def rects(self, width: float, viewport_height: float) -> Tuple[Rect, Rect]:
        return self.top_rect(width), self.bottom_rect(width, viewport_height)
