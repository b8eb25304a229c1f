"""The render procedure, registered as the ``render`` task of a Context's scheduler."""

from __future__ import annotations

import logging

from scenefx.context import Context
from scenefx.scheduler import INFINITE, TimedTask

RENDER_TASK = "render"
RENDER_CHANNEL = "render"

logger = logging.getLogger("scenefx.render")


def render_frame(context: Context) -> None:
    """Clear the surface and draw every visible unit in ascending z-order.

    A unit whose draw raises is logged and skipped; the rest of the frame
    still draws.
    """
    context.zsort_units()
    surface = context.surface
    context.painter().fill_rect(0, 0, surface.width, surface.height, context.background)
    for unit in context.units:
        if not unit.visible:
            continue
        try:
            unit.draw(context)
        except Exception:
            logger.exception("Drawing unit %r failed", unit.name)


def register_draw_loop(context: Context, *, background: str | None = None) -> TimedTask:
    """Run render_frame on every scheduler tick, on channel ``render`` only.

    Pausing ``render`` freezes the picture without pausing animations.
    """
    if background is not None:
        context.background = background
    return context.scheduler.add(
        RENDER_TASK,
        0,
        INFINITE,
        lambda: render_frame(context),
        (RENDER_CHANNEL,),
    )
