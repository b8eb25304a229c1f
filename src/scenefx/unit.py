"""Unit — a positioned, styled, interactive rectangle in a Context.

Units are plain mutable objects. Writes that other units should react to
go through update(), which mirrors the value into the shared store under
``"<name>::<attr>"``; position bindings and data-change handlers are
ordinary store subscriptions held by the unit and revoked by delete().
"""

from __future__ import annotations

import dataclasses
import logging
import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Mapping

from scenefx.drawing import draw_unit, text_style
from scenefx.geometry import Box, Point, Scale, Size, contains_point, measured_bounds
from scenefx.layout import Offset, as_offset, place
from scenefx.store import Subscription

if TYPE_CHECKING:
    from scenefx.context import Context
    from scenefx.gestures import DragEvent, PointerEvent

logger = logging.getLogger("scenefx.unit")

PointerHandler = Callable[["PointerEvent"], None]
DragHandler = Callable[["DragEvent"], None]

# Attributes whose mirrored store keys drive a position binding.
_TARGET_KEYS = ("pos", "size", "rot", "scale")
# The bound unit's own pos is left out so repositioning cannot retrigger itself.
_SELF_KEYS = ("size", "rot", "scale")


@dataclass
class UnitConfig:
    """Construction attributes for a Unit. Every field is optional.

    name: unique name; ``"Unit::<uuid>"`` when omitted.
    pos / size: top-left corner and extent in surface coordinates.
    scale / rot: scale factors and rotation in radians, both about the centre.
    z_order: render and hit-test ordering, higher is on top.
    colors: ``primary`` fill plus one colour per text slot.
    image / image_fit: any object with ``width``/``height``; fit is
        ``fill``, ``ar`` or ``stretch``.
    text / text_align / text_styles: per-slot label, alignment and font.
    enabled: whether gestures reach the unit. visible: whether it is drawn.
    on_*: gesture handlers, None for no-op.
    on_data_change: store key -> callback, subscribed at construction.
    draw_fn / hit_test_fn / center_fn: replace the default drawing, hit
        test or transform origin; each receives the unit first.
    """

    name: str | None = None
    pos: Point = Point(10.0, 10.0)
    size: Size = Size(100.0, 100.0)
    scale: Scale = Scale(1.0, 1.0)
    rot: float = 0.0
    z_order: int = 0
    colors: dict[str, str] = field(default_factory=lambda: {"primary": "blue", "label": "white"})
    image: Any = None
    image_fit: str = "fill"
    opacity: float = 1.0
    border_radius: float = 16
    enable_shadow: bool = False
    shadow_blur: float = 5
    shadow_offset: Point = Point(0.0, 4.0)
    text: dict[str, str] = field(default_factory=dict)
    text_align: dict[str, str] = field(default_factory=lambda: {"label": "center"})
    text_styles: dict[str, str] = field(default_factory=lambda: {"label": text_style()})
    enabled: bool = True
    visible: bool = True
    on_click: PointerHandler | None = None
    on_double_click: PointerHandler | None = None
    on_hover: PointerHandler | None = None
    on_mouse_leave: PointerHandler | None = None
    on_mouse_down: PointerHandler | None = None
    on_mouse_up: PointerHandler | None = None
    on_drag: DragHandler | None = None
    on_drop: DragHandler | None = None
    on_long_press: PointerHandler | None = None
    on_data_change: Mapping[str, Callable[[Any], None]] = field(default_factory=dict)
    draw_fn: Callable[[Unit, Context], None] | None = None
    hit_test_fn: Callable[[Unit, float, float], bool] | None = None
    center_fn: Callable[[Unit], Point] | None = None


class Unit:
    """A node of the scene. Registers itself with ``context`` on construction.

    Usage:
        card = Unit(ctx, size=Size(120, 60), text={"label": "Hi"})
        badge = Unit(ctx, size=Size(20, 20))
        badge.bind_position_relative_to(card, "top-right", (-10, 10))

        card.update("pos", Point(200, 40))
        # badge has already followed card
    """

    def __init__(self, context: Context, config: UnitConfig | None = None, **fields: Any) -> None:
        if config is None:
            config = UnitConfig(**fields)
        elif fields:
            config = dataclasses.replace(config, **fields)

        self.context = context
        self.name: str = config.name or context.random_name("Unit")

        self.pos = _coerce("pos", config.pos)
        self.size = _coerce("size", config.size)
        self.scale = _coerce("scale", config.scale)
        self.rot = config.rot
        self._z_order = config.z_order

        self.colors = dict(config.colors)
        self.image = config.image
        self.image_fit = config.image_fit
        self.opacity = config.opacity
        self.border_radius = config.border_radius
        self.enable_shadow = config.enable_shadow
        self.shadow_blur = config.shadow_blur
        self.shadow_offset = _coerce("shadow_offset", config.shadow_offset)
        self.text = dict(config.text)
        self.text_align = dict(config.text_align)
        self.text_styles = dict(config.text_styles)

        self.enabled = config.enabled
        self.visible = config.visible
        self.on_click = config.on_click
        self.on_double_click = config.on_double_click
        self.on_hover = config.on_hover
        self.on_mouse_leave = config.on_mouse_leave
        self.on_mouse_down = config.on_mouse_down
        self.on_mouse_up = config.on_mouse_up
        self.on_drag = config.on_drag
        self.on_drop = config.on_drop
        self.on_long_press = config.on_long_press

        self.draw_fn = config.draw_fn
        self.hit_test_fn = config.hit_test_fn
        self.center_fn = config.center_fn

        self.deleted = False
        self._bound_listeners: list[Subscription] = []
        context.add_unit(self)
        self._data_subscriptions = [
            context.store.on_change(key, fn) for key, fn in config.on_data_change.items()
        ]

    # --- Geometry ---

    @property
    def z_order(self) -> int:
        return self._z_order

    @z_order.setter
    def z_order(self, value: int) -> None:
        self._z_order = value
        self.context.mark_unsorted()

    def box(self) -> Box:
        return Box(self.pos.x, self.pos.y, self.size.width, self.size.height)

    def center_pos(self) -> Point:
        """Transform origin. Defaults to the centre of the unrotated box."""
        if self.center_fn is not None:
            return self.center_fn(self)
        return self.box().center

    def measured_bounds(self) -> Box:
        return measured_bounds(self.box(), self.rot, self.scale)

    def hit_test(self, x: float, y: float) -> bool:
        if self.hit_test_fn is not None:
            return self.hit_test_fn(self, x, y)
        return contains_point(self.box(), self.rot, self.scale, x, y, center=self.center_pos())

    def draw(self, context: Context) -> None:
        if self.draw_fn is not None:
            self.draw_fn(self, context)
            return
        painter = context.painter()
        if painter is not None:
            draw_unit(self, painter)

    # --- Store mirroring ---

    def store_key(self, attr: str) -> str:
        return f"{self.name}::{attr}"

    def update(self, attr: str, value: Any) -> None:
        """Set an attribute (dotted paths allowed) and mirror it into the store."""
        head, _, rest = attr.partition(".")
        if rest:
            setattr(self, head, _with_path(getattr(self, head), rest.split("."), value))
        else:
            setattr(self, head, _coerce(head, value))
        self.publish(attr)

    def publish(self, attr: str) -> None:
        """Mirror the current value of ``attr`` into the store without changing it."""
        self.context.store.set(self.store_key(attr), _read_path(self, attr.split(".")))

    # --- Position binding ---

    @property
    def bound_listeners(self) -> tuple[Subscription, ...]:
        return tuple(self._bound_listeners)

    def bind_position_relative_to(
        self,
        other: Unit,
        direction: str = "center",
        offset: Offset | None = None,
    ) -> None:
        """Keep this unit placed ``direction`` of ``other``, plus ``offset``.

        Re-runs whenever other's pos/size/rot/scale or this unit's
        size/rot/scale is published, and once immediately. Replaces any
        previous binding. Do not move the unit by hand while bound.
        """
        self.unbind_position_relative_to()
        target = weakref.ref(other)
        delta = as_offset(offset)

        def reposition(_value: Any = None) -> None:
            other_unit = target()
            if other_unit is None or other_unit.deleted:
                logger.warning("Unit %r is bound to a deleted unit; unbinding", self.name)
                self.unbind_position_relative_to()
                return
            self.update("pos", place(direction, self.size, other_unit.box(), delta))

        store = self.context.store
        keys = [other.store_key(a) for a in _TARGET_KEYS] + [self.store_key(a) for a in _SELF_KEYS]
        self._bound_listeners = [store.on_change(key, reposition) for key in keys]
        reposition()

    def unbind_position_relative_to(self) -> None:
        for sub in self._bound_listeners:
            sub.dispose()
        self._bound_listeners = []

    # --- Lifecycle ---

    def delete(self) -> None:
        """Revoke this unit's subscriptions and remove it from its Context.

        Values the unit mirrored into the store are left in place.
        """
        if self.deleted:
            return
        self.unbind_position_relative_to()
        for sub in self._data_subscriptions:
            sub.dispose()
        self._data_subscriptions = []
        self.deleted = True
        self.context.remove_unit(self.name)

    def __repr__(self) -> str:
        return f"Unit({self.name!r}, pos=({self.pos.x:g}, {self.pos.y:g}), z={self._z_order})"


_GEOMETRY_TYPES: dict[str, tuple[type, tuple[str, str]]] = {
    "pos": (Point, ("x", "y")),
    "size": (Size, ("width", "height")),
    "scale": (Scale, ("x", "y")),
    "shadow_offset": (Point, ("x", "y")),
}


def _coerce(attr: str, value: Any) -> Any:
    """Normalise a whole geometry value given as a named tuple, 2-tuple or mapping."""
    spec = _GEOMETRY_TYPES.get(attr)
    if spec is None:
        return value
    cls, fields = spec
    if isinstance(value, cls):
        return value
    if isinstance(value, Mapping):
        defaults = cls()
        return cls(*(value.get(f, getattr(defaults, f)) for f in fields))
    return cls(*value)


def _read_path(obj: Any, parts: list[str]) -> Any:
    for part in parts:
        if obj is None:
            return None
        if isinstance(obj, Mapping):
            obj = obj.get(part)
        else:
            obj = getattr(obj, part, None)
    return obj


def _with_path(obj: Any, parts: list[str], value: Any) -> Any:
    """Return ``obj`` with the nested attribute at ``parts`` replaced by ``value``.

    Dicts and plain objects are changed in place; named tuples are rebuilt.
    """
    key = parts[0]
    if len(parts) > 1:
        value = _with_path(_read_path(obj, [key]), parts[1:], value)
    if isinstance(obj, dict):
        obj[key] = value
        return obj
    if hasattr(obj, "_replace"):
        return obj._replace(**{key: value})
    setattr(obj, key, value)
    return obj
