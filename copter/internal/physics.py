from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from copter.config import DEFAULT_TUNING, Tuning

if TYPE_CHECKING:
    from copter.entities.craft import Craft


@dataclass(frozen=True)
class PhysicsOutcome:
    in_bounds: bool


class CraftPhysics:
    """Vertical Euler integration of the craft, one step per tick."""

    def __init__(self, tuning: Tuning = DEFAULT_TUNING):
        self._tuning = tuning

    @property
    def tuning(self) -> Tuning:
        return self._tuning

    def clamp_velocity(self, velocity: float) -> float:
        limit = self._tuning.max_velocity
        return max(min(velocity, limit), -limit)

    def update(self, craft: Craft, lifting: bool, viewport_height: float) -> PhysicsOutcome:
        acceleration = self._tuning.lift if lifting else self._tuning.gravity
        craft.velocity = self.clamp_velocity(craft.velocity + acceleration)
        craft.y += craft.velocity
        return PhysicsOutcome(in_bounds=self.in_bounds(craft, viewport_height))

    @staticmethod
    def in_bounds(craft: Craft, viewport_height: float) -> bool:
        return not (craft.y < 0 or craft.y + craft.height > viewport_height)
