"""GestureDetector — routes pointer input to the topmost unit under the pointer.

The host forwards surface-local pointer events (press, release, move,
leave, click, double click). Discrete events go to the first enabled unit
that hit-tests true, scanning the unit collection back to front, so
exactly one unit receives each event. Drags stick to the unit that was
pressed. Hover is polled every frame by a scheduler task rather than
derived from move events, so units that slide under a still pointer get
hovered too.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable

from scenefx.geometry import Point
from scenefx.scheduler import DEFAULT_CHANNELS, INFINITE

if TYPE_CHECKING:
    from scenefx.context import Context
    from scenefx.unit import Unit

LONG_PRESS_DELAY = 500


@dataclass(frozen=True)
class PointerEvent:
    x: float
    y: float
    raw: Any = None

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class DragEvent:
    event: PointerEvent
    start: Point
    current: Point


class GestureDetector:
    """Per-surface pointer state machine.

    Usage:
        gestures = GestureDetector(ctx)
        # from the host's input callbacks:
        gestures.press(x, y)
        gestures.move(x, y)
        gestures.release(x, y)
    """

    def __init__(
        self,
        context: Context,
        *,
        long_press_delay: float = LONG_PRESS_DELAY,
        channels: Iterable[str] = DEFAULT_CHANNELS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.context = context
        self.long_press_delay = long_press_delay
        self._channels = tuple(channels)
        self._logger = logger or logging.getLogger("scenefx.gestures")

        self._is_dragging = False
        self._drag_start: Point | None = None
        self._drag_unit: Unit | None = None
        self._hovered_unit: Unit | None = None
        self._last_pointer: Point | None = None

        self.long_press_task_name = context.random_name("long-press")
        self.hover_task_name = context.random_name("hover-polling")
        context.scheduler.add(self.hover_task_name, 0, INFINITE, self._poll_hover, self._channels)

    # --- Read-only state ---

    @property
    def is_dragging(self) -> bool:
        return self._is_dragging

    @property
    def drag_start(self) -> Point | None:
        return self._drag_start

    @property
    def drag_unit(self) -> Unit | None:
        return self._drag_unit

    @property
    def hovered_unit(self) -> Unit | None:
        return self._hovered_unit

    @property
    def last_pointer(self) -> Point | None:
        return self._last_pointer

    # --- Hit resolution ---

    def unit_at(self, x: float, y: float) -> Unit | None:
        """Topmost enabled unit containing (x, y), or None."""
        for unit in reversed(self.context.units):
            if unit.enabled and unit.hit_test(x, y):
                return unit
        return None

    def _fire(self, unit: Unit | None, handler_name: str, payload: Any) -> None:
        if unit is None or unit.deleted:
            return
        handler = getattr(unit, handler_name, None)
        if handler is None:
            return
        try:
            handler(payload)
        except Exception:
            self._logger.exception("%s handler of unit %r failed", handler_name, unit.name)

    # --- Input entry points ---

    def click(self, x: float, y: float, raw: Any = None) -> Unit | None:
        unit = self.unit_at(x, y)
        self._fire(unit, "on_click", PointerEvent(x, y, raw))
        return unit

    def double_click(self, x: float, y: float, raw: Any = None) -> Unit | None:
        unit = self.unit_at(x, y)
        self._fire(unit, "on_double_click", PointerEvent(x, y, raw))
        return unit

    def press(self, x: float, y: float, raw: Any = None) -> Unit | None:
        """Mouse down: notify the hit unit, start tracking a drag, arm long press."""
        self._cancel_long_press()
        unit = self.unit_at(x, y)
        if unit is None:
            return None
        event = PointerEvent(x, y, raw)
        self._fire(unit, "on_mouse_down", event)
        self._is_dragging = True
        self._drag_start = Point(x, y)
        self._drag_unit = unit
        self.context.scheduler.add(
            self.long_press_task_name,
            self.long_press_delay,
            1,
            lambda: self._fire(unit, "on_long_press", event),
            self._channels,
        )
        return unit

    def release(self, x: float, y: float, raw: Any = None) -> None:
        """Mouse up: mouse-up then drop on the pressed unit, wherever the pointer is now."""
        self._cancel_long_press()
        unit = self._drag_unit
        if not self._is_dragging or unit is None:
            return
        event = PointerEvent(x, y, raw)
        self._fire(unit, "on_mouse_up", event)
        self._fire(unit, "on_drop", DragEvent(event, self._drag_start or Point(x, y), Point(x, y)))
        self._clear_drag()

    def move(self, x: float, y: float, raw: Any = None) -> None:
        self._last_pointer = Point(x, y)
        unit = self._drag_unit
        if self._is_dragging and unit is not None:
            event = PointerEvent(x, y, raw)
            self._fire(unit, "on_drag", DragEvent(event, self._drag_start or Point(x, y), Point(x, y)))

    def leave(self, raw: Any = None) -> None:
        """Pointer left the surface: cancel everything in flight and end hover."""
        self._cancel_long_press()
        self._clear_drag()
        if self._hovered_unit is not None:
            last = self._last_pointer or Point(0.0, 0.0)
            self._fire(self._hovered_unit, "on_mouse_leave", PointerEvent(last.x, last.y, raw))
            self._hovered_unit = None
        self._last_pointer = None

    def dispose(self) -> None:
        """Remove this detector's scheduler tasks."""
        self._cancel_long_press()
        self.context.scheduler.remove(self.hover_task_name)

    # --- Internals ---

    def _poll_hover(self) -> None:
        if self._last_pointer is None:
            return
        x, y = self._last_pointer
        previous = self._hovered_unit
        if previous is not None and previous.deleted:
            self._hovered_unit = previous = None
        current = self.unit_at(x, y)
        if current is previous:
            return
        event = PointerEvent(x, y)
        self._hovered_unit = current
        if previous is not None:
            self._fire(previous, "on_mouse_leave", event)
        if current is not None:
            self._fire(current, "on_hover", event)

    def _cancel_long_press(self) -> None:
        self.context.scheduler.remove(self.long_press_task_name)

    def _clear_drag(self) -> None:
        self._is_dragging = False
        self._drag_start = None
        self._drag_unit = None
