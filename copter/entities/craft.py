from __future__ import annotations

from dataclasses import dataclass

from copter.internal.math import Rect
from copter.world import World


@dataclass
class Craft:
    y: float
    velocity: float
    x: float
    width: float
    height: float

    @classmethod
    def centered(cls, world: World) -> "Craft":
        """Craft at rest in the vertical middle of the viewport."""
        return cls(
            y=world.height / 2 - world.craft_height / 2,
            velocity=0.0,
            x=world.craft_x,
            width=world.craft_width,
            height=world.craft_height,
        )

    def fit_to(self, world: World) -> None:
        # Vertical position is kept as-is; only the derived size and column change
        self.x = world.craft_x
        self.width = world.craft_width
        self.height = world.craft_height

    def bounds(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)
