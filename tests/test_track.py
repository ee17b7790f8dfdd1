from __future__ import annotations

import numpy as np
import pytest

from copter.config import Tuning
from copter.entities.obstacle import Obstacle
from copter.logic.track import ObstacleTrack
from copter.world import World


def _rng(seed: int = 7) -> np.random.Generator:
    return np.random.default_rng(seed)


def test_generation_only_on_cadence() -> None:
    world = World(800, 400)
    track = ObstacleTrack()
    rng = _rng()

    assert track.maybe_generate(0, 100, world, rng) is None
    assert track.maybe_generate(99, 100, world, rng) is None
    assert len(track) == 0

    obstacle = track.maybe_generate(100, 100, world, rng)
    assert obstacle is not None
    assert obstacle.x == pytest.approx(world.width)
    assert len(track) == 1

    assert track.maybe_generate(200, 100, world, rng) is not None
    assert len(track) == 2


def test_top_height_stays_within_bounds() -> None:
    world = World(800, 400)
    track = ObstacleTrack()
    rng = _rng(3)
    low = world.obstacle_min_height
    high = world.height - world.obstacle_gap - world.obstacle_min_height

    for _ in range(500):
        obstacle = track.spawn(world, rng)
        assert low <= obstacle.top_height <= high
        assert obstacle.gap_start_y == pytest.approx(obstacle.top_height + world.obstacle_gap)


def test_degenerate_viewport_skips_generation() -> None:
    world = World(800, 400)
    track = ObstacleTrack()
    assert track.spawn(world, _rng()) is not None

    cramped = World(800, 400, tuning=Tuning(obstacle_gap=350.0))
    assert ObstacleTrack.top_height_range(cramped) is None
    assert track.spawn(cramped, _rng()) is None
    assert track.maybe_generate(100, 100, cramped, _rng()) is None
    assert len(track) == 1


def test_exactly_fitting_viewport_uses_minimum_height() -> None:
    world = World(800, 400, tuning=Tuning(obstacle_gap=320.0))
    track = ObstacleTrack()
    obstacle = track.spawn(world, _rng())
    assert obstacle is not None
    assert obstacle.top_height == pytest.approx(world.obstacle_min_height)


def test_first_obstacle_starts_closer() -> None:
    world = World(800, 400)
    track = ObstacleTrack()
    obstacle = track.spawn_first(world, _rng())
    assert obstacle.x == pytest.approx(720.0)


def test_advance_moves_and_prunes_preserving_order() -> None:
    world = World(800, 400)
    width = world.obstacle_width
    track = ObstacleTrack()
    track._obstacles = [
        Obstacle(x=-width + 1.0, top_height=50.0, gap_start_y=190.0),
        Obstacle(x=100.0, top_height=60.0, gap_start_y=200.0),
        Obstacle(x=400.0, top_height=70.0, gap_start_y=210.0),
    ]

    track.advance(3.5, world)

    assert [o.x for o in track] == [pytest.approx(96.5), pytest.approx(396.5)]
    assert [o.top_height for o in track] == [60.0, 70.0]


def test_obstacle_right_edge_at_origin_is_kept() -> None:
    world = World(800, 400)
    track = ObstacleTrack()
    track._obstacles = [Obstacle(x=-world.obstacle_width + 3.5, top_height=50.0, gap_start_y=190.0)]
    track.advance(3.5, world)
    assert len(track) == 1
    track.advance(0.5, world)
    assert len(track) == 0
