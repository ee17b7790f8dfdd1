from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from copter.config import DEFAULT_TUNING, Tuning
from copter.entities.craft import Craft
from copter.internal import collision
from copter.internal.math import Rect
from copter.internal.physics import CraftPhysics
from copter.logic.fsm import EventData, Machine
from copter.logic.leaderboard import Leaderboard, ScoreEntry
from copter.logic.track import ObstacleTrack
from copter.storage import ScoreStore
from copter.world import World

logger = logging.getLogger(__name__)


class Phase(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class Trigger(Enum):
    PAUSE = "pause"
    RESUME = "resume"
    END = "end"
    RESTART = "restart"


@dataclass
class Session:
    score: int = 0
    tick_count: int = 0
    lifting: bool = False


@dataclass(frozen=True)
class GameOverSummary:
    final_score: int
    best_score: int
    new_best: bool
    qualifies: bool


@dataclass(frozen=True)
class RenderSnapshot:
    width: float
    height: float
    craft: Rect
    obstacles: Tuple[Tuple[Rect, Rect], ...]
    score: int
    best_score: int
    phase: Phase
    awaiting_name: bool
    final_score: Optional[int]
    leaderboard: Tuple[ScoreEntry, ...]


class Simulation:
    """One game of lift-and-dodge.

    `step()` advances exactly one tick and never schedules itself; the frame
    loop driving it lives in the presentation layer. All other public methods
    are the input surface and may be called between ticks.
    """

    def __init__(
        self,
        width: float,
        height: float,
        tuning: Tuning = DEFAULT_TUNING,
        store: Optional[ScoreStore] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.tuning = tuning
        self.store = store
        if rng is None:
            rng = np.random.default_rng()
        self.rng = rng

        self.world = World(width, height, tuning=tuning)
        self.physics = CraftPhysics(tuning)
        self.track = ObstacleTrack()
        self.leaderboard = Leaderboard(
            store=store,
            max_entries=tuning.max_high_scores,
            max_name_length=tuning.max_name_length,
            default_name=tuning.default_name,
        )

        self.craft = Craft.centered(self.world)
        self.session = Session()
        self.best_score = 0
        self.summary: Optional[GameOverSummary] = None
        self.awaiting_name = False
        self._pending_size: Optional[Tuple[float, float]] = None

        self.machine = Machine(states=list(Phase), initial_state=Phase.RUNNING)
        self.machine.add_transition(Trigger.PAUSE, Phase.RUNNING, Phase.PAUSED, after=self._on_pause)
        self.machine.add_transition(Trigger.RESUME, Phase.PAUSED, Phase.RUNNING)
        self.machine.add_transition(Trigger.END, Phase.RUNNING, Phase.GAME_OVER, after=self._on_game_over)
        self.machine.add_transition(
            Trigger.RESTART,
            Phase.GAME_OVER,
            Phase.RUNNING,
            conditions=lambda _: not self.awaiting_name,
            after=self._reset,
        )

        self._reset()

    @property
    def phase(self) -> Phase:
        return self.machine.state

    @property
    def score(self) -> int:
        return self.session.score

    # ------------------------------------------------------------------ #
    # Tick pipeline
    # ------------------------------------------------------------------ #
    def step(self) -> Phase:
        if self.phase is not Phase.RUNNING:
            return self.phase

        outcome = self.physics.update(self.craft, self.session.lifting, self.world.height)
        self.track.maybe_generate(
            self.session.tick_count,
            self.tuning.obstacle_frequency,
            self.world,
            self.rng,
        )
        self.track.advance(self.tuning.obstacle_speed, self.world)
        hit = collision.check(self.craft, self.track, self.world)

        if not outcome.in_bounds or hit:
            self.end()
            return self.phase

        self.session.score += 1
        self.session.tick_count += 1
        return self.phase

    # ------------------------------------------------------------------ #
    # Input surface
    # ------------------------------------------------------------------ #
    def set_lifting(self, active: bool) -> bool:
        self.session.lifting = bool(active) and self.phase is Phase.RUNNING
        return self.session.lifting

    def toggle_pause(self) -> bool:
        if self.phase is Phase.RUNNING:
            return self.machine.trigger(Trigger.PAUSE)
        if self.phase is Phase.PAUSED:
            return self.machine.trigger(Trigger.RESUME)
        return False

    def end(self) -> bool:
        return self.machine.trigger(Trigger.END)

    def restart(self) -> bool:
        return self.machine.trigger(Trigger.RESTART)

    def submit_name(self, name: Optional[str]) -> Optional[ScoreEntry]:
        if self.phase is not Phase.GAME_OVER or not self.awaiting_name:
            return None
        entry = self.leaderboard.submit(name, self.summary.final_score)
        logger.info("Recorded high score %s: %d", entry.name, entry.score)
        self.awaiting_name = False
        self.restart()
        return entry

    def clear_leaderboard(self) -> None:
        self.leaderboard.clear()

    def resize(self, width: float, height: float) -> bool:
        if width <= 0 or height <= 0:
            logger.debug("Ignoring resize to %sx%s", width, height)
            return False
        if self.phase is Phase.GAME_OVER:
            # Applied by the next restart
            self._pending_size = (width, height)
            return False
        if self.world.same_size(width, height):
            return False
        self.world = self.world.resized(width, height)
        self.craft.fit_to(self.world)
        logger.debug("Resized to %s", self.world)
        return True

    # ------------------------------------------------------------------ #
    # Render surface
    # ------------------------------------------------------------------ #
    def snapshot(self) -> RenderSnapshot:
        width = self.world.obstacle_width
        obstacles: List[Tuple[Rect, Rect]] = [
            obstacle.rects(width, self.world.height) for obstacle in self.track
        ]
        return RenderSnapshot(
            width=self.world.width,
            height=self.world.height,
            craft=self.craft.bounds(),
            obstacles=tuple(obstacles),
            score=self.session.score,
            best_score=self.best_score,
            phase=self.phase,
            awaiting_name=self.awaiting_name,
            final_score=self.summary.final_score if self.summary else None,
            leaderboard=tuple(self.leaderboard.entries),
        )

    # ------------------------------------------------------------------ #
    # Transition callbacks
    # ------------------------------------------------------------------ #
    def _on_pause(self, data: Optional[EventData] = None) -> None:
        self.session.lifting = False

    def _on_game_over(self, data: Optional[EventData] = None) -> None:
        self.session.lifting = False
        final_score = self.session.score

        new_best = final_score > self.best_score
        if new_best:
            self.best_score = final_score
            if self.store is not None:
                self.store.save_best_score(final_score)

        qualifies = self.leaderboard.qualifies(final_score)
        self.awaiting_name = qualifies
        self.summary = GameOverSummary(
            final_score=final_score,
            best_score=self.best_score,
            new_best=new_best,
            qualifies=qualifies,
        )
        logger.info(
            "Game over at %d (best %d, leaderboard %s)",
            final_score,
            self.best_score,
            "qualified" if qualifies else "not qualified",
        )

    def _reset(self, data: Optional[EventData] = None) -> None:
        if self._pending_size is not None:
            width, height = self._pending_size
            self._pending_size = None
            if not self.world.same_size(width, height):
                self.world = self.world.resized(width, height)

        self.craft = Craft.centered(self.world)
        self.track.clear()
        self.session = Session()
        self.summary = None
        self.awaiting_name = False

        if self.store is not None:
            self.best_score = max(self.best_score, self.store.load_best_score())
        self.leaderboard.reload()

        self.track.spawn_first(self.world, self.rng)
