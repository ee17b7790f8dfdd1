from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from copter.entities.craft import Craft
    from copter.entities.obstacle import Obstacle
    from copter.world import World


def first_hit(craft: Craft, obstacles: Iterable[Obstacle], world: World) -> Optional[Obstacle]:
    """Return the first obstacle whose top or bottom segment overlaps the craft.

    Scans in track order until one overlaps; a hit behind the craft counts too.
    """
    craft_rect = craft.bounds()
    width = world.obstacle_width
    for obstacle in obstacles:
        top, bottom = obstacle.rects(width, world.height)
        if craft_rect.intersects(top) or craft_rect.intersects(bottom):
            return obstacle
    return None


def check(craft: Craft, obstacles: Iterable[Obstacle], world: World) -> bool:
    return first_hit(craft, obstacles, world) is not None
