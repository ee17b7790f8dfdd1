from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tuning:
    """Per-tick gameplay constants.

    Speeds and accelerations are expressed per tick, not per second, so the
    game runs faster on displays that refresh faster.
    """

    gravity: float = 0.14
    lift: float = -0.35
    max_velocity: float = 6.0
    obstacle_speed: float = 3.5
    obstacle_frequency: int = 100

    # Sizes are given in pixels against this base height and scaled with the viewport
    base_height: float = 400.0
    craft_width: float = 60.0
    craft_height: float = 25.0
    obstacle_width: float = 70.0
    obstacle_gap: float = 140.0
    obstacle_min_height: float = 40.0

    craft_x_ratio: float = 0.15
    first_obstacle_x_ratio: float = 0.9

    max_high_scores: int = 10
    max_name_length: int = 10
    default_name: str = "Player"

    best_score_key: str = "helicopterBestScore"
    leaderboard_key: str = "helicopterGameHighScores_v1"

    def scaled(self, size: float, viewport_height: float) -> float:
        return size * viewport_height / self.base_height


DEFAULT_TUNING = Tuning()


def tuning_from_dict(payload: Dict[str, Any], base: Tuning = DEFAULT_TUNING) -> Tuning:
    overrides: Dict[str, Any] = {}
    known = {f.name: f for f in fields(Tuning)}
    for key, value in payload.items():
        field = known.get(key)
        if field is None:
            logger.warning("Ignoring unknown tuning key %r", key)
            continue
        current = getattr(base, key)
        if isinstance(current, str):
            if isinstance(value, str) and value.strip():
                overrides[key] = value
                continue
        elif isinstance(current, int):
            if isinstance(value, int) and not isinstance(value, bool) and value > 0:
                overrides[key] = value
                continue
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            overrides[key] = float(value)
            continue
        logger.warning("Ignoring tuning key %r with invalid value %r", key, value)
    return replace(base, **overrides)


def load_tuning(path: Optional[Path] = None) -> Tuning:
    """Read JSON overrides on top of the defaults; a missing or broken file yields defaults."""
    if path is None or not path.exists():
        return DEFAULT_TUNING
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("Could not read tuning file %s, using defaults", path, exc_info=True)
        return DEFAULT_TUNING
    if not isinstance(payload, dict):
        logger.warning("Tuning file %s does not hold an object, using defaults", path)
        return DEFAULT_TUNING
    return tuning_from_dict(payload)
