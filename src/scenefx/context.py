"""Context — the aggregate root of a scene.

Owns the unit collection and z-order, shares one Scheduler and one Store
with every unit, and keeps nine invisible anchor units pinned to canonical
screen positions. Resizing the surface republishes ``SIZE_STORE_KEY``;
the anchors move in response, and anything bound to an anchor follows.
"""

from __future__ import annotations

import logging
import sys
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from scenefx.drawing import Painter, Surface, draw_nothing
from scenefx.errors import AnchorMissingError, ConfigurationError
from scenefx.geometry import Box, Point, Size

if TYPE_CHECKING:
    from scenefx.scheduler import Scheduler
    from scenefx.store import Store
    from scenefx.unit import Unit

SIZE_STORE_KEY = "CONTEXT::size"
ANCHOR_PREFIX = "CONTEXT-ANCHOR-UNIT-"
ANCHOR_NAMES = (
    ("top-left", "top-center", "top-right"),
    ("center-left", "center", "center-right"),
    ("bottom-left", "bottom-center", "bottom-right"),
)
ANCHOR_Z_ORDER = -sys.maxsize


@dataclass(frozen=True)
class FocusRequest:
    """A unit asking the host for text input bound to a store key."""

    store_key: str
    text: str
    on_input: Callable[[str], None]
    bounds: Box | None = None


class Context:
    """Unit registry, anchors and shared services for one drawing surface.

    Usage:
        ctx = Context(surface, scheduler, store)
        title = Unit(ctx, size=Size(200, 40), text={"label": "Title"})
        title.bind_position_relative_to(ctx.get_anchor("top-center"), "bottom")
    """

    SIZE_STORE_KEY = SIZE_STORE_KEY

    def __init__(
        self,
        surface: Surface,
        scheduler: Scheduler,
        store: Store,
        *,
        background: str = "white",
        logger: logging.Logger | None = None,
    ) -> None:
        if surface is None:
            raise ConfigurationError("Could not find a drawing surface")
        if scheduler is None:
            raise ConfigurationError("Context requires a Scheduler")
        if store is None:
            raise ConfigurationError("Context requires a Store")

        self.surface = surface
        self.scheduler = scheduler
        self.store = store
        self.background = background
        self.logger = logger or logging.getLogger("scenefx.context")
        self.input_hook: Callable[[FocusRequest], None] | None = None

        self._units: list[Unit] = []
        self._z_sorted = True

        self._create_anchors()
        self._size_subscription = store.on_change(SIZE_STORE_KEY, self._layout_anchors)
        self.handle_resize()

    # --- Units ---

    @property
    def units(self) -> list[Unit]:
        """Snapshot of the unit collection in its current order."""
        return list(self._units)

    def add_unit(self, unit: Unit) -> None:
        self._z_sorted = False
        self._units.append(unit)

    def remove_unit(self, name: str) -> None:
        self._units = [unit for unit in self._units if unit.name != name]

    def get_unit(self, name: str) -> Unit | None:
        for unit in self._units:
            if unit.name == name:
                return unit
        return None

    def mark_unsorted(self) -> None:
        self._z_sorted = False

    def zsort_units(self) -> None:
        """Stable sort by z_order. Equal z keeps registration order."""
        if self._z_sorted:
            return
        self._units.sort(key=lambda unit: unit.z_order)
        self._z_sorted = True

    def random_name(self, prefix: str) -> str:
        return f"{prefix}::{uuid.uuid4()}"

    # --- Surface ---

    def painter(self) -> Painter:
        return self.surface.get_painter()

    @property
    def size(self) -> Size:
        return self.store.get(SIZE_STORE_KEY)

    def handle_resize(self) -> None:
        """Publish the surface's current size. Hosts call this after a resize."""
        self.store.set(SIZE_STORE_KEY, Size(self.surface.width, self.surface.height))

    # --- Anchors ---

    def get_anchor(self, name: str) -> Unit:
        """One of the nine invisible units pinned to the screen (``top-left`` … ``bottom-right``)."""
        if not any(name in row for row in ANCHOR_NAMES):
            raise ConfigurationError(f"Unknown anchor {name!r}")
        unit = self.get_unit(ANCHOR_PREFIX + name)
        if unit is None:
            raise AnchorMissingError(f"Screen anchor {name!r} was removed")
        return unit

    def _create_anchors(self) -> None:
        from scenefx.unit import Unit

        for row in ANCHOR_NAMES:
            for name in row:
                Unit(
                    self,
                    name=ANCHOR_PREFIX + name,
                    pos=Point(0.0, 0.0),
                    size=Size(0.0, 0.0),
                    z_order=ANCHOR_Z_ORDER,
                    enabled=False,
                    draw_fn=draw_nothing,
                )

    def _layout_anchors(self, size: Size) -> None:
        for r, row in enumerate(ANCHOR_NAMES):
            for c, name in enumerate(row):
                anchor = self.get_unit(ANCHOR_PREFIX + name)
                if anchor is None:
                    raise AnchorMissingError(f"Screen anchor {name!r} was removed")
                anchor.update("pos", Point(size.width * c / 2, size.height * r / 2))

    # --- Text input ---

    def focus_input(
        self,
        store_key: str,
        on_input: Callable[[str], None],
        bounds: Box | None = None,
    ) -> None:
        """Ask the host to start text entry for ``store_key``.

        The host's ``input_hook`` receives the current text (``""`` if the
        key is unset) and calls ``on_input`` with each new value.
        """
        text: Any = self.store.get(store_key) if store_key in self.store else ""
        request = FocusRequest(store_key, "" if text is None else str(text), on_input, bounds)
        if self.input_hook is None:
            self.logger.debug("No input hook installed; ignoring focus on %r", store_key)
            return
        self.input_hook(request)

    def __repr__(self) -> str:
        return f"Context({len(self._units)} units)"
