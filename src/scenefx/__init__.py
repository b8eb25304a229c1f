"""SceneFX: reactive 2D scene graph with a cooperative animation scheduler."""

from importlib.metadata import version as _version

__version__ = _version("scenefx")

from scenefx.errors import (
    AnchorMissingError,
    ConfigurationError,
    MissingKeyError,
    SceneError,
    StoreCycleError,
)
from scenefx.geometry import Box, Point, Scale, Size
from scenefx.easing import ease_in_out_sigmoid, ease_in_out_sine, linear
from scenefx.store import Store, Subscription
from scenefx.unit import Unit, UnitConfig
from scenefx.frames import ManualClock, ManualFrameSource, monotonic_ms
from scenefx.scheduler import INFINITE, InterpolatedTask, Scheduler, TaskKind, TimedTask
from scenefx.context import Context, FocusRequest
from scenefx.render import register_draw_loop
from scenefx.gestures import DragEvent, GestureDetector, PointerEvent
from scenefx.animations import apply_hover_color, fade_in, fade_out, move_by, move_to_unit
from scenefx.console import DebugConsole
from scenefx.sketch import Sketch, SketchHost, launch
# textual NOT auto-imported: opt-in only

__all__ = [
    "SceneError",
    "ConfigurationError",
    "MissingKeyError",
    "StoreCycleError",
    "AnchorMissingError",
    "Point",
    "Size",
    "Scale",
    "Box",
    "linear",
    "ease_in_out_sine",
    "ease_in_out_sigmoid",
    "Store",
    "Subscription",
    "Unit",
    "UnitConfig",
    "ManualClock",
    "ManualFrameSource",
    "monotonic_ms",
    "INFINITE",
    "TaskKind",
    "TimedTask",
    "InterpolatedTask",
    "Scheduler",
    "Context",
    "FocusRequest",
    "register_draw_loop",
    "PointerEvent",
    "DragEvent",
    "GestureDetector",
    "fade_in",
    "fade_out",
    "move_by",
    "move_to_unit",
    "apply_hover_color",
    "DebugConsole",
    "Sketch",
    "SketchHost",
    "launch",
]
