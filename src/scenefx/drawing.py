"""Drawing contract between units and the host's drawing surface.

The core never rasterises anything itself. A host supplies a Surface whose
painter understands the handful of 2D primitives below, and the default
unit drawing is expressed entirely in those primitives.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Protocol

from scenefx.geometry import Box

if TYPE_CHECKING:
    from scenefx.context import Context
    from scenefx.unit import Unit

TEXT_PADDING = 10
LINE_HEIGHT = 18
SHADOW_COLOR = "rgba(0, 0, 0, 0.5)"


class Painter(Protocol):
    def save(self) -> None: ...
    def restore(self) -> None: ...
    def translate(self, x: float, y: float) -> None: ...
    def rotate(self, angle: float) -> None: ...
    def scale(self, x: float, y: float) -> None: ...
    def set_alpha(self, alpha: float) -> None: ...
    def set_shadow(self, color: str, blur: float, offset_x: float, offset_y: float) -> None: ...
    def clip_rounded_rect(self, x: float, y: float, width: float, height: float, radius: float) -> None: ...
    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None: ...
    def draw_image(self, image: Any, x: float, y: float, width: float, height: float) -> None: ...
    def fill_text(self, text: str, x: float, y: float, *, color: str, font: str, align: str) -> None: ...
    def measure_text(self, text: str, font: str) -> float: ...


class Surface(Protocol):
    width: int
    height: int

    def get_painter(self) -> Painter: ...


def text_style(
    size: int | str = 16,
    family: str = "sans-serif",
    weight: str | None = None,
    style: str | None = None,
) -> str:
    """Build a CSS-like font description, e.g. ``"italic bold 16px sans-serif"``."""
    size_str = f"{size}px" if isinstance(size, (int, float)) else size
    return " ".join(part for part in (style, weight, size_str, family) if part)


def wrap_text(text: str, max_width: float, measure: Callable[[str], float]) -> list[str]:
    """Greedy word wrap. A single word wider than ``max_width`` gets its own line."""
    lines: list[str] = []
    line = ""
    for word in text.split(" "):
        candidate = f"{line} {word}" if line else word
        if measure(candidate) > max_width and line:
            lines.append(line)
            line = word
        else:
            line = candidate
    if line:
        lines.append(line)
    return lines


def image_fit_rect(fit: str, area: Box, image_width: float, image_height: float) -> Box:
    """Where to draw an image inside ``area``.

    ``ar`` letterboxes preserving aspect ratio, ``fill`` covers the area
    preserving aspect ratio (overflow is clipped by the caller), and
    ``stretch`` (or anything else) uses the area as is.
    """
    if area.width <= 0 or area.height <= 0 or image_width <= 0 or image_height <= 0:
        return area
    if fit == "ar":
        ratio = image_width / image_height
        if ratio > area.width / area.height:
            h = area.width / ratio
            return Box(area.x, area.y + (area.height - h) / 2, area.width, h)
        w = area.height * ratio
        return Box(area.x + (area.width - w) / 2, area.y, w, area.height)
    if fit == "fill":
        factor = max(area.width / image_width, area.height / image_height)
        w = image_width * factor
        h = image_height * factor
        return Box(area.x + (area.width - w) / 2, area.y + (area.height - h) / 2, w, h)
    return area


def draw_unit(unit: Unit, painter: Painter) -> None:
    """Default unit look: rounded, filled, optionally imaged and labelled rectangle.

    Drawing happens in the unit's local frame centred on ``unit.center_pos()``
    with its rotation and scale applied.
    """
    width, height = unit.size
    painter.save()
    try:
        painter.set_alpha(unit.opacity)
        center = unit.center_pos()
        painter.translate(center.x, center.y)
        painter.rotate(unit.rot)
        painter.scale(unit.scale.x, unit.scale.y)

        if unit.enable_shadow:
            painter.set_shadow(SHADOW_COLOR, unit.shadow_blur, *unit.shadow_offset)

        area = Box(-width / 2, -height / 2, width, height)
        radius = min(unit.border_radius, width / 2, height / 2)
        painter.clip_rounded_rect(*area, radius)
        painter.fill_rect(*area, unit.colors.get("primary") or "black")

        image = unit.image
        if image is not None and getattr(image, "width", 0) > 0 and getattr(image, "height", 0) > 0:
            target = image_fit_rect(unit.image_fit or "fill", area, image.width, image.height)
            painter.draw_image(image, *target)

        _draw_text(unit, painter, width, height)
    finally:
        painter.restore()


def _draw_text(unit: Unit, painter: Painter, width: float, height: float) -> None:
    # Painters working in coarser units (terminal cells) may override the metrics.
    padding = getattr(painter, "text_padding", TEXT_PADDING)
    line_height = getattr(painter, "line_height", LINE_HEIGHT)
    y = -height / 2 + padding
    for slot, text in unit.text.items():
        if not text:
            continue
        color = unit.colors.get(slot) or "red"
        font = unit.text_styles.get(slot) or text_style()
        align = unit.text_align.get(slot) or "center"
        if align == "left":
            x = -width / 2 + padding
        elif align == "right":
            x = width / 2 - padding
        else:
            x = 0.0
        lines = wrap_text(text, width - 2 * padding, lambda s: painter.measure_text(s, font))
        for line in lines:
            painter.fill_text(line, x, y, color=color, font=font, align=align)
            y += line_height


def draw_nothing(unit: Unit, context: Context) -> None:
    pass
