"""Scheduler — named, channel-tagged tasks advanced once per frame.

Two kinds of task share one capability set (is_due / run / notify_paused /
notify_resumed) and are told apart by ``kind``:

- TimedTask: runs ``fn()`` every ``delay`` ms, ``repeat`` times (or forever).
- InterpolatedTask: calls ``fn(value)`` every frame with a value eased from
  ``start`` to ``end`` over ``duration`` ms, then finishes.

Every task carries channel tags. Pausing a channel freezes every task that
carries it, and resuming shifts the task's timing by the time spent paused
so nothing jumps ahead. Task names are unique: adding a task replaces any
task of the same name.
"""

from __future__ import annotations

import functools
import logging
from enum import Enum
from typing import Callable, Iterable, Union

from scenefx.easing import Curve, linear
from scenefx.errors import ConfigurationError
from scenefx.frames import FrameCallback, monotonic_ms

INFINITE = -1

DEFAULT_CHANNELS = ("global",)
ANIMATION_CHANNELS = ("global", "animation")


class TaskKind(Enum):
    TIMED = "timed"
    INTERPOLATED = "interpolated"


def _channels(channels: Iterable[str] | str) -> tuple[str, ...]:
    if isinstance(channels, str):
        return (channels,)
    return tuple(channels)


class TimedTask:
    """A repeatable no-argument action, due once ``delay`` ms have passed since its last run."""

    kind = TaskKind.TIMED

    __slots__ = ("name", "delay", "repeat", "remaining", "fn", "channels", "last_run", "paused_at")

    def __init__(
        self,
        name: str,
        delay: float,
        repeat: int,
        fn: Callable[[], None],
        channels: Iterable[str] | str,
        now: float,
    ) -> None:
        self.name = name
        self.delay = delay
        self.repeat = repeat
        self.remaining = repeat
        self.fn = fn
        self.channels = _channels(channels)
        self.last_run = now
        self.paused_at: float | None = None

    @property
    def done(self) -> bool:
        return self.remaining == 0

    def is_due(self, now: float) -> bool:
        return now - self.last_run >= self.delay

    def run(self, now: float) -> bool:
        """Run once. Returns whether the task should stay scheduled."""
        try:
            self.fn()
        finally:
            self.last_run = now
            if self.repeat != INFINITE:
                self.remaining -= 1
        return not self.done

    def notify_paused(self, now: float) -> None:
        if self.paused_at is None:
            self.paused_at = now

    def notify_resumed(self, now: float) -> None:
        if self.paused_at is not None:
            self.last_run += now - self.paused_at
            self.paused_at = None

    def __repr__(self) -> str:
        repeat = "inf" if self.repeat == INFINITE else f"{self.remaining}/{self.repeat}"
        return f"TimedTask({self.name!r}, delay={self.delay}, repeat={repeat})"


class InterpolatedTask:
    """Eases a number from ``start`` to ``end`` over ``duration`` ms, once per frame."""

    kind = TaskKind.INTERPOLATED

    __slots__ = (
        "name",
        "start",
        "end",
        "curve",
        "duration",
        "fn",
        "channels",
        "anim_start",
        "last_run",
        "paused_at",
        "total_paused",
        "done",
    )

    def __init__(
        self,
        name: str,
        start: float,
        end: float,
        curve: Curve | None,
        duration: float,
        fn: Callable[[float], None],
        channels: Iterable[str] | str,
        now: float,
    ) -> None:
        self.name = name
        self.start = start
        self.end = end
        self.curve = curve or linear
        self.duration = duration
        self.fn = fn
        self.channels = _channels(channels)
        self.anim_start = now
        self.last_run = now
        self.paused_at: float | None = None
        self.total_paused = 0.0
        self.done = False

    def elapsed(self, now: float) -> float:
        return now - self.anim_start - self.total_paused

    def value_at(self, now: float) -> float:
        if self.duration <= 0:
            progress = 1.0
        else:
            progress = min(1.0, max(0.0, self.elapsed(now) / self.duration))
        return self.start + (self.end - self.start) * self.curve(progress)

    def is_due(self, now: float) -> bool:
        return True

    def run(self, now: float) -> bool:
        """Emit the eased value for ``now``. Returns False once the duration has elapsed."""
        value = self.value_at(now)
        self.done = self.elapsed(now) >= self.duration
        try:
            self.fn(value)
        finally:
            self.last_run = now
        return not self.done

    def notify_paused(self, now: float) -> None:
        if self.paused_at is None:
            self.paused_at = now

    def notify_resumed(self, now: float) -> None:
        if self.paused_at is not None:
            self.total_paused += now - self.paused_at
            self.paused_at = None

    def __repr__(self) -> str:
        return (
            f"InterpolatedTask({self.name!r}, {self.start}->{self.end}, "
            f"duration={self.duration})"
        )


Task = Union[TimedTask, InterpolatedTask]


class Scheduler:
    """Cooperative per-frame task runner.

    ``request_frame`` is the host's frame primitive (see frames.py). Without
    one, the host drives the scheduler by calling tick() itself.

    Usage:
        scheduler = Scheduler(frames.request_frame)
        scheduler.add("blink", 500, INFINITE, toggle)
        scheduler.add_anim("fade", 1, 0, ease_in_out_sine, 300, set_opacity)
        scheduler.start()

        scheduler.pause("animation")   # fade freezes, blink keeps going
        scheduler.resume("animation")  # fade continues where it left off
    """

    def __init__(
        self,
        request_frame: Callable[[FrameCallback], None] | None = None,
        *,
        clock: Callable[[], float] = monotonic_ms,
        logger: logging.Logger | None = None,
    ) -> None:
        self._request_frame = request_frame
        self._clock = clock
        self._logger = logger or logging.getLogger("scenefx.scheduler")
        self._tasks: list[Task] = []
        self._paused: set[str] = set()
        self._running = False
        self._generation = 0
        self.now = clock()

    # --- Task registry ---

    def add(
        self,
        name: str,
        delay: float,
        repeat: int,
        fn: Callable[[], None],
        channels: Iterable[str] | str = DEFAULT_CHANNELS,
    ) -> TimedTask:
        if repeat != INFINITE and repeat < 1:
            raise ConfigurationError(f"Task {name!r}: repeat must be INFINITE or >= 1, got {repeat}")
        if delay < 0:
            raise ConfigurationError(f"Task {name!r}: delay must be >= 0, got {delay}")
        task = TimedTask(name, delay, repeat, fn, channels, self._clock())
        self._replace(task)
        return task

    def add_anim(
        self,
        name: str,
        start: float,
        end: float,
        curve: Curve | None,
        duration: float,
        fn: Callable[[float], None],
        channels: Iterable[str] | str = ANIMATION_CHANNELS,
    ) -> InterpolatedTask:
        task = InterpolatedTask(name, start, end, curve, duration, fn, channels, self._clock())
        self._replace(task)
        return task

    def remove(self, name: str) -> bool:
        before = len(self._tasks)
        self._tasks = [task for task in self._tasks if task.name != name]
        return len(self._tasks) != before

    def get(self, name: str) -> Task | None:
        for task in self._tasks:
            if task.name == name:
                return task
        return None

    def __contains__(self, name: object) -> bool:
        return any(task.name == name for task in self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def names(self) -> list[str]:
        return [task.name for task in self._tasks]

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def _replace(self, task: Task) -> None:
        self.remove(task.name)
        # Added onto a paused channel: frozen from now until that channel resumes.
        if self._paused.intersection(task.channels):
            task.notify_paused(self._clock())
        self._tasks.append(task)

    # --- Loop ---

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        # Frames requested by an earlier run carry a stale generation and are ignored.
        self._generation += 1
        self._logger.debug("Scheduler started (generation %d)", self._generation)
        self._schedule_frame(self._generation)

    def _schedule_frame(self, generation: int) -> None:
        if self._request_frame is not None:
            self._request_frame(functools.partial(self._on_frame, generation))

    def _on_frame(self, generation: int, now: float) -> None:
        if not self._running or generation != self._generation:
            return
        self.tick(now)
        if self._running and generation == self._generation:
            self._schedule_frame(generation)

    def tick(self, now: float | None = None) -> None:
        """Run one pass over a snapshot of the task list."""
        if now is None:
            now = self._clock()
        self.now = now
        for task in list(self._tasks):
            if self._paused.intersection(task.channels):
                continue
            if not task.is_due(now):
                continue
            try:
                active = task.run(now)
            except Exception:
                self._logger.exception("Task %r failed", task.name)
                active = not task.done
            if not active:
                self._discard(task)

    def _discard(self, task: Task) -> None:
        # By identity: the callback may already have re-added a task under the same name.
        self._tasks = [t for t in self._tasks if t is not task]

    # --- Channels ---

    @property
    def paused_channels(self) -> frozenset[str]:
        return frozenset(self._paused)

    def is_paused(self, channel: str) -> bool:
        return channel in self._paused

    def pause(self, channel: str = "global") -> None:
        now = self._clock()
        self._paused.add(channel)
        for task in list(self._tasks):
            if channel in task.channels:
                task.notify_paused(now)

    def resume(self, channel: str = "global") -> None:
        now = self._clock()
        self._paused.discard(channel)
        for task in list(self._tasks):
            # A task tagged with several paused channels waits for the last one.
            if channel in task.channels and not self._paused.intersection(task.channels):
                task.notify_resumed(now)
        if not self._running:
            self.start()

    def stop(self, channel: str | None = None) -> None:
        """Without a channel: halt the loop and discard every task and pause.

        With a channel: discard only the tasks carrying it.
        """
        if channel is None:
            self._running = False
            self._paused.clear()
            self._tasks = []
            self._logger.debug("Scheduler stopped")
        else:
            self._tasks = [task for task in self._tasks if channel not in task.channels]
            self._paused.discard(channel)

    def __repr__(self) -> str:
        state = "running" if self._running else "stopped"
        return f"Scheduler({len(self._tasks)} tasks, {state})"
