"""Placement rules for positioning one box relative to another.

Corners sit flush against the matching corner of the reference box, edges
sit flush on one axis and centred on the other, and ``center`` (or any
unrecognised direction) centres on both axes.
"""

from __future__ import annotations

from typing import Mapping, Tuple, Union

from scenefx.geometry import Box, Point, Size

DIRECTIONS = frozenset(
    {
        "top-left",
        "top-right",
        "bottom-left",
        "bottom-right",
        "left",
        "right",
        "top",
        "bottom",
        "center",
    }
)

Offset = Union[Point, Tuple[float, float], Mapping[str, float]]


def as_offset(offset: Offset | None) -> Point:
    """Normalise an offset given as a Point, a 2-tuple or a mapping with x/y."""
    if offset is None:
        return Point(0.0, 0.0)
    if isinstance(offset, Mapping):
        return Point(offset.get("x", 0.0), offset.get("y", 0.0))
    x, y = offset
    return Point(x, y)


def place(direction: str, size: Size, other: Box, offset: Offset | None = None) -> Point:
    """Top-left position for a box of ``size`` placed ``direction`` of ``other``."""
    centred_x = other.x + (other.width - size.width) / 2
    centred_y = other.y + (other.height - size.height) / 2
    left = other.x - size.width
    right = other.x + other.width
    above = other.y - size.height
    below = other.y + other.height

    if direction == "top-left":
        x, y = left, above
    elif direction == "top-right":
        x, y = right, above
    elif direction == "bottom-left":
        x, y = left, below
    elif direction == "bottom-right":
        x, y = right, below
    elif direction == "left":
        x, y = left, centred_y
    elif direction == "right":
        x, y = right, centred_y
    elif direction == "top":
        x, y = centred_x, above
    elif direction == "bottom":
        x, y = centred_x, below
    else:
        x, y = centred_x, centred_y

    dx, dy = as_offset(offset)
    return Point(x + dx, y + dy)
