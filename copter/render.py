from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ipycanvas import Canvas, hold_canvas

from copter.internal.math import Rect
from copter.logic.leaderboard import ScoreEntry
from copter.simulation import Phase, RenderSnapshot


@dataclass(frozen=True)
class Colors:
    sky: str = "#87ceeb"
    craft: str = "#FFA500"
    obstacle_fill: str = "#2E8B57"
    obstacle_stroke: str = "#1E5E3A"
    hud: str = "#10202b"
    overlay: str = "rgba(0, 0, 0, 0.55)"
    panel: str = "rgba(31, 31, 37, 0.88)"
    label: str = "#ffffff"
    highlight: str = "#ffd166"
    muted: str = "#b8c0cc"


class Renderer:
    """Draws simulation snapshots on an ipycanvas Canvas.

    Only reads `RenderSnapshot`s; it never touches the simulation itself.
    """

    def __init__(self, canvas: Canvas, colors: Colors = Colors()):
        self.canvas = canvas
        self.colors = colors
        self.font = "16px monospace"
        self.title_font = "28px monospace"

    def draw(
        self,
        snapshot: RenderSnapshot,
        *,
        name_buffer: str = "",
        show_leaderboard: bool = False,
        confirm_clear: bool = False,
    ) -> None:
        with hold_canvas(self.canvas):
            self._render_background(snapshot)
            self._render_obstacles(snapshot.obstacles)
            self._render_craft(snapshot.craft)
            self._render_hud(snapshot)

            if snapshot.phase is Phase.PAUSED:
                self._render_pause(snapshot)
            elif snapshot.phase is Phase.GAME_OVER:
                self._render_game_over(snapshot, name_buffer)

            if show_leaderboard:
                self._render_leaderboard(snapshot, snapshot.leaderboard, confirm_clear)

    def _render_background(self, snapshot: RenderSnapshot) -> None:
        self.canvas.clear()
        self.canvas.fill_style = self.colors.sky
        self.canvas.fill_rect(0, 0, snapshot.width, snapshot.height)

    def _render_obstacles(self, obstacles: Sequence[tuple[Rect, Rect]]) -> None:
        canvas = self.canvas
        canvas.fill_style = self.colors.obstacle_fill
        canvas.stroke_style = self.colors.obstacle_stroke
        canvas.line_width = 2
        for top, bottom in obstacles:
            for rect in (top, bottom):
                canvas.fill_rect(*rect.as_tuple())
                canvas.stroke_rect(*rect.as_tuple())

    def _render_craft(self, craft: Rect) -> None:
        self.canvas.fill_style = self.colors.craft
        self.canvas.fill_rect(*craft.as_tuple())

    def _render_hud(self, snapshot: RenderSnapshot) -> None:
        canvas = self.canvas
        canvas.font = self.font
        canvas.fill_style = self.colors.hud
        canvas.text_align = "left"
        canvas.text_baseline = "top"
        canvas.fill_text(f"Score: {snapshot.score}", 10, 10)
        canvas.text_align = "right"
        canvas.fill_text(f"Best: {snapshot.best_score}", snapshot.width - 10, 10)
        canvas.text_align = "left"

    def _render_pause(self, snapshot: RenderSnapshot) -> None:
        self._dim(snapshot)
        self._centered_text(snapshot, "Paused", snapshot.height / 2 - 14, self.title_font)
        self._centered_text(snapshot, "Press P or click to resume", snapshot.height / 2 + 20)

    def _render_game_over(self, snapshot: RenderSnapshot, name_buffer: str) -> None:
        self._dim(snapshot)
        mid = snapshot.height / 2
        self._centered_text(snapshot, "Game Over", mid - 60, self.title_font)
        self._centered_text(snapshot, f"Score: {snapshot.final_score or 0}", mid - 20)
        if snapshot.awaiting_name:
            self._centered_text(snapshot, "New high score! Enter your name:", mid + 10, color=self.colors.highlight)
            self._centered_text(snapshot, f"> {name_buffer}_", mid + 36)
            self._centered_text(snapshot, "Press ENTER to submit", mid + 62, color=self.colors.muted)
        else:
            self._centered_text(snapshot, "Press ENTER or click to restart", mid + 20)

    def _render_leaderboard(
        self,
        snapshot: RenderSnapshot,
        entries: Sequence[ScoreEntry],
        confirm_clear: bool,
    ) -> None:
        canvas = self.canvas
        panel_width = min(260.0, snapshot.width * 0.45)
        x0 = snapshot.width - panel_width
        canvas.fill_style = self.colors.panel
        canvas.fill_rect(x0, 0, panel_width, snapshot.height)

        canvas.font = self.font
        canvas.text_baseline = "top"
        canvas.text_align = "left"
        canvas.fill_style = self.colors.label
        canvas.fill_text("High Scores", x0 + 12, 12)

        line_height = 22
        y = 44
        if not entries:
            canvas.fill_style = self.colors.muted
            canvas.fill_text("No scores yet!", x0 + 12, y)
        for rank, entry in enumerate(entries, start=1):
            canvas.fill_style = self.colors.label
            canvas.text_align = "left"
            canvas.fill_text(f"{rank:>2}. {entry.name}", x0 + 12, y)
            canvas.text_align = "right"
            canvas.fill_text(str(entry.score), snapshot.width - 12, y)
            y += line_height

        canvas.text_align = "left"
        canvas.fill_style = self.colors.highlight if confirm_clear else self.colors.muted
        hint = "Press C again to clear all scores" if confirm_clear else "C: clear  L: close"
        canvas.fill_text(hint, x0 + 12, snapshot.height - 28)

    def _dim(self, snapshot: RenderSnapshot) -> None:
        self.canvas.fill_style = self.colors.overlay
        self.canvas.fill_rect(0, 0, snapshot.width, snapshot.height)

    def _centered_text(
        self,
        snapshot: RenderSnapshot,
        text: str,
        y: float,
        font: Optional[str] = None,
        color: Optional[str] = None,
    ) -> None:
        canvas = self.canvas
        canvas.font = font or self.font
        canvas.fill_style = color or self.colors.label
        canvas.text_align = "center"
        canvas.text_baseline = "middle"
        canvas.fill_text(text, snapshot.width / 2, y)
        canvas.text_align = "left"
        canvas.text_baseline = "top"
