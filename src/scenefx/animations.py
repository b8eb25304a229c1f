"""Tween helpers built on Scheduler.add_anim.

Each helper writes through Unit.update, so units bound to the animated
unit follow it frame by frame. Helpers return the names of the tasks they
scheduled so callers can cancel them with ``scheduler.remove(name)``.
"""

from __future__ import annotations

from scenefx.easing import Curve, linear
from scenefx.layout import Offset, as_offset
from scenefx.unit import Unit


def _tween_opacity(unit: Unit, start: float, end: float, duration: float, curve: Curve, prefix: str) -> str:
    context = unit.context
    name = context.random_name(prefix)
    context.scheduler.add_anim(name, start, end, curve, duration, lambda v: unit.update("opacity", v))
    return name


def fade_in(unit: Unit, duration: float, curve: Curve = linear) -> str:
    return _tween_opacity(unit, 0.0, 1.0, duration, curve, "fade-in-anim")


def fade_out(unit: Unit, duration: float, curve: Curve = linear) -> str:
    return _tween_opacity(unit, 1.0, 0.0, duration, curve, "fade-out-anim")


def move_by(unit: Unit, dx: float, dy: float, duration: float, curve: Curve = linear) -> list[str]:
    """Slide ``unit`` by (dx, dy). The axes run as two independent tasks."""
    context = unit.context
    scheduler = context.scheduler
    x_task = context.random_name("anim")
    y_task = context.random_name("anim")
    scheduler.add_anim(
        x_task,
        unit.pos.x,
        unit.pos.x + dx,
        curve,
        duration,
        lambda v: unit.update("pos", unit.pos._replace(x=v)),
    )
    scheduler.add_anim(
        y_task,
        unit.pos.y,
        unit.pos.y + dy,
        curve,
        duration,
        lambda v: unit.update("pos", unit.pos._replace(y=v)),
    )
    return [x_task, y_task]


def move_to_unit(
    direction: str,
    moving: Unit,
    target: Unit,
    offset: Offset | None = None,
    duration: float = 500,
    curve: Curve = linear,
) -> list[str]:
    """Slide ``moving`` next to ``target``.

    ``direction`` may combine a horizontal and a vertical word
    (``"top-left"``, ``"bottom"``); an axis not named is centred. The
    offset pushes away from ``target``: ``left``/``top`` subtract it,
    ``right``/``bottom`` add it.
    """
    pad = as_offset(offset)
    word = direction.lower()
    box = moving.box()
    other = target.box()

    if "left" in word:
        final_x = other.x - box.width - pad.x
    elif "right" in word:
        final_x = other.x + other.width + pad.x
    else:
        final_x = other.x + (other.width - box.width) / 2

    if "top" in word:
        final_y = other.y - box.height - pad.y
    elif "bottom" in word:
        final_y = other.y + other.height + pad.y
    else:
        final_y = other.y + (other.height - box.height) / 2

    return move_by(moving, final_x - box.x, final_y - box.y, duration, curve)


def apply_hover_color(unit: Unit, hover_color: str) -> None:
    """Swap the primary colour while hovered and restore it on leave."""
    base = unit.colors.get("primary")

    def _hover(event) -> None:
        unit.colors["primary"] = hover_color

    def _leave(event) -> None:
        unit.colors["primary"] = base

    unit.on_hover = _hover
    unit.on_mouse_leave = _leave
