from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ipycanvas import Canvas
from ipyevents import Event

from copter.config import DEFAULT_TUNING, Tuning, load_tuning
from copter.render import Renderer
from copter.simulation import Phase, Simulation
from copter.storage import ScoreStore

logger = logging.getLogger(__name__)


class CopterGame:
    """
    Notebook front end: owns the canvas, the input bindings and the frame loop.

    Controls
    --------
    Space / left mouse button: hold to lift (also resumes a paused game and
        restarts after a game over)
    P: pause / resume
    Enter: restart after a game over, or submit the typed name
    L: show / hide the leaderboard
    C (twice, leaderboard open): clear all high scores
    """

    def __init__(
        self,
        *,
        size: tuple[int, int] = (800, 400),
        tuning: Tuning = DEFAULT_TUNING,
        store: Optional[ScoreStore] = None,
        fps: float = 60.0,
        simulation: Optional[Simulation] = None,
        tuning_path: Optional[Path] = None,
    ) -> None:
        width, height = size
        if tuning_path is not None:
            tuning = load_tuning(tuning_path)
        self.tuning = tuning
        self.dt = 1.0 / fps
        if simulation is None:
            simulation = Simulation(
                width,
                height,
                tuning=tuning,
                store=store if store is not None else ScoreStore(tuning=tuning),
            )
        self.sim = simulation

        self.canvas: Canvas = Canvas(width=width, height=height)
        self.canvas.layout.border = "2px solid #999"
        self.renderer = Renderer(self.canvas)

        self.name_buffer = ""
        self.show_leaderboard = False
        self._confirm_clear = False
        self._loop_task: Optional[asyncio.Task] = None

        self._bind_events()
        self._draw()

    # ------------------------------------------------------------------ #
    # Frame loop
    # ------------------------------------------------------------------ #
    def start(self) -> None:
        if self._loop_task is None or self._loop_task.done():
            self._loop_task = asyncio.create_task(self._frame_loop())
        try:
            self.canvas.focus()
        except Exception:
            pass

    def stop(self) -> None:
        if self._loop_task and not self._loop_task.done():
            self._loop_task.cancel()
        self._loop_task = None

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    async def _frame_loop(self) -> None:
        try:
            while True:
                phase = self.sim.step()
                self._draw()
                if phase is Phase.GAME_OVER:
                    # No more frames until restart
                    self.name_buffer = ""
                    self.show_leaderboard = False
                    self._draw()
                    return
                await asyncio.sleep(self.dt)
        except asyncio.CancelledError:
            pass

    def resize(self, width: int, height: int) -> None:
        if self.sim.resize(width, height):
            self._draw()

    def _sync_canvas_size(self) -> None:
        # A resize held during game over lands in the world on restart
        width = int(round(self.sim.world.width))
        height = int(round(self.sim.world.height))
        if (self.canvas.width, self.canvas.height) != (width, height):
            self.canvas.width = width
            self.canvas.height = height

    def _draw(self) -> None:
        self._sync_canvas_size()
        self.renderer.draw(
            self.sim.snapshot(),
            name_buffer=self.name_buffer,
            show_leaderboard=self.show_leaderboard,
            confirm_clear=self._confirm_clear,
        )

    # ------------------------------------------------------------------ #
    # Input handling
    # ------------------------------------------------------------------ #
    def _bind_events(self) -> None:
        self._event = Event(
            source=self.canvas,
            watched_events=["keydown", "keyup", "mousedown", "mouseup"],
            prevent_default_action=True,
            stop_propagation=True,
        )
        self._event.on_dom_event(self.handle_event)

    def handle_event(self, event: Dict[str, Any]) -> None:
        etype = event.get("type")
        if etype == "keydown":
            self._handle_key_down(event)
        elif etype == "keyup":
            if event.get("code") == "Space":
                self.sim.set_lifting(False)
        elif etype == "mousedown":
            if event.get("button", 0) == 0:
                self._handle_press()
        elif etype == "mouseup":
            if event.get("button", 0) == 0:
                self.sim.set_lifting(False)
        self._draw()

    def _handle_key_down(self, event: Dict[str, Any]) -> None:
        key = event.get("key") or ""
        code = event.get("code") or ""

        if self.sim.phase is Phase.GAME_OVER and self.sim.awaiting_name:
            self._handle_name_key(key)
            return

        if code == "KeyL":
            self._toggle_leaderboard()
            return
        if self.show_leaderboard:
            if code == "KeyC":
                self._request_clear()
            return

        if code == "Space":
            if not event.get("repeat", False):
                self._handle_press()
        elif code == "Enter":
            self._restart()
        elif code == "KeyP" and self.sim.phase is not Phase.GAME_OVER:
            self.sim.toggle_pause()

    def _handle_press(self) -> None:
        phase = self.sim.phase
        if phase is Phase.GAME_OVER:
            if not self.sim.awaiting_name:
                self._restart()
        elif phase is Phase.PAUSED:
            self.sim.toggle_pause()
        else:
            self.sim.set_lifting(True)

    def _handle_name_key(self, key: str) -> None:
        if key == "Enter":
            self.sim.submit_name(self.name_buffer)
            self.name_buffer = ""
            self.start()
        elif key == "Backspace":
            self.name_buffer = self.name_buffer[:-1]
        elif len(key) == 1 and key.isprintable():
            if len(self.name_buffer) < self.tuning.max_name_length:
                self.name_buffer += key

    def _restart(self) -> None:
        if self.sim.restart():
            self.show_leaderboard = False
            self.start()

    def _toggle_leaderboard(self) -> None:
        self.show_leaderboard = not self.show_leaderboard
        self._confirm_clear = False

    def _request_clear(self) -> None:
        if not self._confirm_clear:
            self._confirm_clear = True
            return
        self._confirm_clear = False
        self.sim.clear_leaderboard()
        logger.info("High scores cleared")
