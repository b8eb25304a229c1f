"""Textual integration for scenefx. Opt-in — requires textual.

Hosts a scene inside a terminal widget: one surface unit is one character
cell. CellPainter rasterises the default unit drawing (fills, clips,
text) into a cell grid; images and shadows are ignored. SceneView drives
the scheduler from a Textual interval timer and forwards mouse events to
the sketch's GestureDetector.
"""

from __future__ import annotations

import functools
import math
from typing import Any

from rich.color import Color, ColorParseError
from rich.style import Style
from rich.text import Text
from textual import events
from textual.widget import Widget

from scenefx.frames import ManualFrameSource, monotonic_ms
from scenefx.sketch import BuildFn, launch

Matrix = tuple[float, float, float, float, float, float]

_IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


@functools.lru_cache(maxsize=256)
def parse_color(value: str | None) -> Color | None:
    """Rich colour for ``value``; None for transparent or unparseable colours."""
    if not value or value == "transparent":
        return None
    try:
        return Color.parse(value)
    except ColorParseError:
        return None


def _apply(m: Matrix, x: float, y: float) -> tuple[float, float]:
    a, b, c, d, e, f = m
    return a * x + c * y + e, b * x + d * y + f


def _invert(m: Matrix) -> Matrix | None:
    a, b, c, d, e, f = m
    det = a * d - b * c
    if det == 0:
        return None
    return (
        d / det,
        -b / det,
        -c / det,
        a / det,
        (c * f - d * e) / det,
        (b * e - a * f) / det,
    )


class _Clip:
    __slots__ = ("inverse", "x", "y", "width", "height", "radius")

    def __init__(self, inverse: Matrix, x: float, y: float, width: float, height: float, radius: float):
        self.inverse = inverse
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.radius = radius

    def contains(self, px: float, py: float) -> bool:
        lx, ly = _apply(self.inverse, px, py)
        if not (self.x <= lx <= self.x + self.width and self.y <= ly <= self.y + self.height):
            return False
        r = self.radius
        if r <= 0:
            return True
        # Outside the rounded corner arcs only.
        cx = min(max(lx, self.x + r), self.x + self.width - r)
        cy = min(max(ly, self.y + r), self.y + self.height - r)
        return math.hypot(lx - cx, ly - cy) <= r


class CellSurface:
    """A ``width`` x ``height`` grid of (char, fg, bg) cells."""

    def __init__(self, width: int = 80, height: int = 24) -> None:
        self.width = width
        self.height = height
        self._cells: list[list[list[Any]]] = []
        self.resize(width, height)

    def resize(self, width: int, height: int) -> None:
        self.width = max(0, int(width))
        self.height = max(0, int(height))
        self._cells = [[[" ", None, None] for _ in range(self.width)] for _ in range(self.height)]

    def cell(self, col: int, row: int) -> tuple[str, Color | None, Color | None]:
        char, fg, bg = self._cells[row][col]
        return char, fg, bg

    def put(
        self,
        col: int,
        row: int,
        *,
        char: str | None = None,
        fg: Color | None = None,
        bg: Color | None = None,
    ) -> None:
        if not (0 <= col < self.width and 0 <= row < self.height):
            return
        cell = self._cells[row][col]
        if bg is not None:
            cell[1] = None
            cell[2] = bg
            cell[0] = " "
        if char is not None:
            cell[0] = char
            cell[1] = fg

    def get_painter(self) -> CellPainter:
        return CellPainter(self)

    def render_text(self) -> Text:
        text = Text(no_wrap=True, overflow="crop", end="")
        for r, row in enumerate(self._cells):
            if r:
                text.append("\n")
            for char, fg, bg in row:
                text.append(char, Style(color=fg, bgcolor=bg) if fg or bg else None)
        return text


class CellPainter:
    """Painter over a CellSurface. One painter per draw call; state starts at identity."""

    text_padding = 0
    line_height = 1

    def __init__(self, surface: CellSurface) -> None:
        self.surface = surface
        self._matrix: Matrix = _IDENTITY
        self._alpha = 1.0
        self._clips: tuple[_Clip, ...] = ()
        self._stack: list[tuple[Matrix, float, tuple[_Clip, ...]]] = []

    # --- State ---

    def save(self) -> None:
        self._stack.append((self._matrix, self._alpha, self._clips))

    def restore(self) -> None:
        if self._stack:
            self._matrix, self._alpha, self._clips = self._stack.pop()

    def translate(self, x: float, y: float) -> None:
        a, b, c, d, e, f = self._matrix
        self._matrix = (a, b, c, d, e + a * x + c * y, f + b * x + d * y)

    def rotate(self, angle: float) -> None:
        a, b, c, d, e, f = self._matrix
        cos = math.cos(angle)
        sin = math.sin(angle)
        self._matrix = (a * cos + c * sin, b * cos + d * sin, c * cos - a * sin, d * cos - b * sin, e, f)

    def scale(self, x: float, y: float) -> None:
        a, b, c, d, e, f = self._matrix
        self._matrix = (a * x, b * x, c * y, d * y, e, f)

    def set_alpha(self, alpha: float) -> None:
        self._alpha = alpha

    def set_shadow(self, color: str, blur: float, offset_x: float, offset_y: float) -> None:
        pass

    def clip_rounded_rect(self, x: float, y: float, width: float, height: float, radius: float) -> None:
        inverse = _invert(self._matrix)
        if inverse is None:
            # Degenerate transform: nothing can be drawn inside this clip.
            inverse = (0.0, 0.0, 0.0, 0.0, math.inf, math.inf)
        self._clips = self._clips + (_Clip(inverse, x, y, width, height, radius),)

    # --- Drawing ---

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None:
        bg = parse_color(color)
        inverse = _invert(self._matrix)
        if bg is None or inverse is None or self._alpha <= 0:
            return
        corners = [_apply(self._matrix, px, py) for px, py in ((x, y), (x + width, y), (x + width, y + height), (x, y + height))]
        col0 = max(0, math.floor(min(p[0] for p in corners)))
        col1 = min(self.surface.width, math.ceil(max(p[0] for p in corners)))
        row0 = max(0, math.floor(min(p[1] for p in corners)))
        row1 = min(self.surface.height, math.ceil(max(p[1] for p in corners)))
        for row in range(row0, row1):
            for col in range(col0, col1):
                px, py = col + 0.5, row + 0.5
                lx, ly = _apply(inverse, px, py)
                if not (x <= lx <= x + width and y <= ly <= y + height):
                    continue
                if self._clipped(px, py):
                    continue
                self.surface.put(col, row, bg=bg)

    def draw_image(self, image: Any, x: float, y: float, width: float, height: float) -> None:
        pass

    def fill_text(self, text: str, x: float, y: float, *, color: str, font: str, align: str) -> None:
        if self._alpha <= 0:
            return
        fg = parse_color(color)
        dx, dy = _apply(self._matrix, x, y)
        width = self.measure_text(text, font)
        if align == "right":
            dx -= width
        elif align != "left":
            dx -= width / 2
        row = math.floor(dy)
        start = math.floor(dx)
        for i, char in enumerate(text):
            col = start + i
            if self._clipped(col + 0.5, row + 0.5):
                continue
            self.surface.put(col, row, char=char, fg=fg)

    def measure_text(self, text: str, font: str) -> float:
        return float(len(text))

    def _clipped(self, px: float, py: float) -> bool:
        return any(not clip.contains(px, py) for clip in self._clips)


class SceneView(Widget):
    """A widget running a sketch. ``build`` receives the Sketch once, at construction.

    Usage:
        def build(sketch):
            Unit(sketch.context, pos=Point(2, 1), size=Size(20, 3),
                 text={"label": "click me"}, on_click=lambda e: ...)

        class Demo(App):
            def compose(self):
                yield SceneView(build)
    """

    DEFAULT_CSS = """
    SceneView {
        width: 1fr;
        height: 1fr;
    }
    """

    def __init__(
        self,
        build: BuildFn | None = None,
        *,
        fps: float = 30,
        background: str = "black",
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.fps = fps
        self.surface = CellSurface()
        self.frames = ManualFrameSource(monotonic_ms)
        self.sketch = launch(
            self.surface,
            build,
            request_frame=self.frames.request_frame,
            background=background,
        )

    def on_mount(self) -> None:
        self.set_interval(1 / self.fps, self._advance)

    def on_unmount(self) -> None:
        self.sketch.stop()

    def _advance(self) -> None:
        self.frames.step()
        self.refresh()

    def render(self) -> Text:
        return self.surface.render_text()

    def on_resize(self, event: events.Resize) -> None:
        self.surface.resize(event.size.width, event.size.height)
        self.sketch.context.handle_resize()

    # --- Pointer forwarding ---

    def on_mouse_down(self, event: events.MouseDown) -> None:
        self.sketch.gestures.press(event.x, event.y, event)

    def on_mouse_up(self, event: events.MouseUp) -> None:
        self.sketch.gestures.release(event.x, event.y, event)

    def on_mouse_move(self, event: events.MouseMove) -> None:
        self.sketch.gestures.move(event.x, event.y, event)

    def on_leave(self, event: events.Leave) -> None:
        self.sketch.gestures.leave(event)

    def on_click(self, event: events.Click) -> None:
        if getattr(event, "chain", 1) >= 2:
            self.sketch.gestures.double_click(event.x, event.y, event)
        else:
            self.sketch.gestures.click(event.x, event.y, event)
