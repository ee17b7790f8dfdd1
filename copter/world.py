from __future__ import annotations

from copter.config import DEFAULT_TUNING, Tuning


class World:
    """Viewport of the game.

    Every craft and obstacle dimension is derived from the viewport height so
    proportions hold across sizes. Instances are never mutated: a resize
    builds a new World and swaps it in between ticks.
    """

    def __init__(
        self,
        width: float,
        height: float,
        tuning: Tuning = DEFAULT_TUNING,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Viewport size must be positive, got {width}x{height}")
        self._width = float(width)
        self._height = float(height)
        self._tuning = tuning

        self._craft_width = tuning.scaled(tuning.craft_width, self._height)
        self._craft_height = tuning.scaled(tuning.craft_height, self._height)
        self._obstacle_width = tuning.scaled(tuning.obstacle_width, self._height)
        self._obstacle_gap = tuning.scaled(tuning.obstacle_gap, self._height)
        self._obstacle_min_height = tuning.scaled(tuning.obstacle_min_height, self._height)
        self._craft_x = self._width * tuning.craft_x_ratio

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def tuning(self) -> Tuning:
        return self._tuning

    @property
    def craft_width(self) -> float:
        return self._craft_width

    @property
    def craft_height(self) -> float:
        return self._craft_height

    @property
    def craft_x(self) -> float:
        return self._craft_x

    @property
    def obstacle_width(self) -> float:
        return self._obstacle_width

    @property
    def obstacle_gap(self) -> float:
        return self._obstacle_gap

    @property
    def obstacle_min_height(self) -> float:
        return self._obstacle_min_height

    def resized(self, width: float, height: float) -> "World":
        return World(width, height, tuning=self._tuning)

    def same_size(self, width: float, height: float) -> bool:
        return self._width == float(width) and self._height == float(height)

    def __repr__(self) -> str:
        return f"World(width={self._width}, height={self._height})"
