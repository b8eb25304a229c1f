"""Value types for unit geometry plus the transform math shared by hit testing."""

from __future__ import annotations

import math
from typing import NamedTuple


class Point(NamedTuple):
    x: float = 0.0
    y: float = 0.0


class Size(NamedTuple):
    width: float = 0.0
    height: float = 0.0


class Scale(NamedTuple):
    x: float = 1.0
    y: float = 1.0


class Box(NamedTuple):
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)


def to_local(center: Point, rotation: float, scale: Scale, x: float, y: float) -> Point | None:
    """Map a surface point into a box's un-rotated, un-scaled frame around its centre.

    Returns None when either scale factor is zero (the box has no area).
    """
    if scale.x == 0 or scale.y == 0:
        return None
    lx = x - center.x
    ly = y - center.y
    sin = math.sin(-rotation)
    cos = math.cos(-rotation)
    rx = lx * cos - ly * sin
    ry = lx * sin + ly * cos
    return Point(rx / scale.x, ry / scale.y)


def contains_point(
    box: Box,
    rotation: float,
    scale: Scale,
    x: float,
    y: float,
    center: Point | None = None,
) -> bool:
    """Hit test a rotated, scaled box.

    The point is translated by the negative centre, inverse-rotated, divided
    by the scale and shifted into ``[0, width] x [0, height]``.
    """
    local = to_local(center or box.center, rotation, scale, x, y)
    if local is None:
        return False
    fx = local.x + box.width / 2
    fy = local.y + box.height / 2
    return 0 <= fx <= box.width and 0 <= fy <= box.height


def measured_bounds(box: Box, rotation: float, scale: Scale) -> Box:
    """Axis-aligned bounds of ``box`` after scaling and rotating about its centre."""
    cx, cy = box.center
    half_w = box.width * scale.x / 2
    half_h = box.height * scale.y / 2
    sin = math.sin(rotation)
    cos = math.cos(rotation)
    xs = []
    ys = []
    for dx, dy in ((-half_w, -half_h), (half_w, -half_h), (half_w, half_h), (-half_w, half_h)):
        xs.append(cx + dx * cos - dy * sin)
        ys.append(cy + dx * sin + dy * cos)
    return Box(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))
