"""Sketch environment — wire up a scene for a surface and run user code in it.

launch() builds the full stack (scheduler, store, context, gesture
detector, draw loop), hands it to a build function and starts the loop.
SketchHost keeps at most one running sketch per id, so re-running user
code replaces the previous instance instead of stacking loops.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from scenefx.context import Context
from scenefx.drawing import Surface
from scenefx.frames import FrameCallback, monotonic_ms
from scenefx.gestures import GestureDetector
from scenefx.render import register_draw_loop
from scenefx.scheduler import Scheduler
from scenefx.store import Store

logger = logging.getLogger("scenefx.sketch")


@dataclass
class Sketch:
    context: Context
    scheduler: Scheduler
    store: Store
    gestures: GestureDetector

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def stop(self) -> None:
        """Halt the loop and drop every task, gesture polling included."""
        self.gestures.dispose()
        self.scheduler.stop()


BuildFn = Callable[[Sketch], None]


def launch(
    surface: Surface,
    build: BuildFn | None = None,
    *,
    request_frame: Callable[[FrameCallback], None] | None = None,
    clock: Callable[[], float] = monotonic_ms,
    background: str = "white",
    logger: logging.Logger | None = None,
) -> Sketch:
    """Create and start a sketch on ``surface``.

    If ``build`` raises, the error is logged and the sketch keeps running
    with whatever the build managed to create.
    """
    log = logger or logging.getLogger("scenefx.sketch")
    scheduler = Scheduler(request_frame, clock=clock, logger=logger)
    store = Store(logger=logger)
    context = Context(surface, scheduler, store, background=background, logger=logger)
    gestures = GestureDetector(context, logger=logger)
    register_draw_loop(context)
    sketch = Sketch(context, scheduler, store, gestures)

    if build is not None:
        try:
            build(sketch)
        except Exception:
            log.exception("Sketch build failed; running with a partial scene")

    scheduler.start()
    return sketch


class SketchHost:
    """Registry of running sketches keyed by id."""

    def __init__(self) -> None:
        self._sketches: dict[str, Sketch] = {}

    def run(self, sketch_id: str, surface: Surface, build: BuildFn | None = None, **options) -> Sketch:
        """Stop any sketch already running under ``sketch_id``, then launch a new one."""
        previous = self._sketches.pop(sketch_id, None)
        if previous is not None:
            previous.stop()
            logger.info("Replaced sketch %r", sketch_id)
        sketch = launch(surface, build, **options)
        self._sketches[sketch_id] = sketch
        return sketch

    def get(self, sketch_id: str) -> Sketch | None:
        return self._sketches.get(sketch_id)

    @property
    def ids(self) -> list[str]:
        return list(self._sketches)

    def stop(self, sketch_id: str) -> bool:
        sketch = self._sketches.pop(sketch_id, None)
        if sketch is None:
            return False
        sketch.stop()
        return True

    def stop_all(self) -> None:
        for sketch_id in list(self._sketches):
            self.stop(sketch_id)
