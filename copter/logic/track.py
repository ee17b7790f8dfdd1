from __future__ import annotations

import logging
from typing import Iterator, List, Optional

import numpy as np

from copter.entities.obstacle import Obstacle
from copter.world import World

logger = logging.getLogger(__name__)


class ObstacleTrack:
    """Obstacles currently on screen, leftmost first.

    All obstacles move at the same speed, so appending new ones on the right
    keeps the sequence ordered without sorting.
    """

    def __init__(self):
        self._obstacles: List[Obstacle] = []

    def __len__(self) -> int:
        return len(self._obstacles)

    def __iter__(self) -> Iterator[Obstacle]:
        return iter(self._obstacles)

    def __getitem__(self, index: int) -> Obstacle:
        return self._obstacles[index]

    def clear(self) -> None:
        self._obstacles.clear()

    @staticmethod
    def top_height_range(world: World) -> Optional[tuple[float, float]]:
        low = world.obstacle_min_height
        high = world.height - world.obstacle_gap - world.obstacle_min_height
        if high < low:
            return None
        return low, high

    def spawn(self, world: World, rng: np.random.Generator) -> Optional[Obstacle]:
        height_range = self.top_height_range(world)
        if height_range is None:
            logger.debug("Viewport %s too small for gap and minimum height, skipping obstacle", world)
            return None

        low, high = height_range
        top_height = float(rng.uniform(low, high)) if high > low else low
        obstacle = Obstacle(
            x=world.width,
            top_height=top_height,
            gap_start_y=top_height + world.obstacle_gap,
        )
        self._obstacles.append(obstacle)
        return obstacle

    def spawn_first(self, world: World, rng: np.random.Generator) -> Optional[Obstacle]:
        """Spawn the opening obstacle closer than the right edge to shorten the warmup."""
        obstacle = self.spawn(world, rng)
        if obstacle is not None:
            obstacle.x = world.width * world.tuning.first_obstacle_x_ratio
        return obstacle

    def maybe_generate(
        self,
        tick_count: int,
        frequency: int,
        world: World,
        rng: np.random.Generator,
    ) -> Optional[Obstacle]:
        if tick_count > 0 and tick_count % frequency == 0:
            return self.spawn(world, rng)
        return None

    def advance(self, speed: float, world: World) -> None:
        width = world.obstacle_width
        for obstacle in self._obstacles:
            obstacle.x -= speed
        self._obstacles = [o for o in self._obstacles if o.right(width) >= 0]
