"""Frame sources and clocks — the one external tick entry point.

A frame source is anything with ``request_frame(callback)`` that later
calls ``callback(now)`` once, the way a browser's animation-frame request
does. The scheduler re-requests a frame after every tick while it runs.
All times are milliseconds.
"""

from __future__ import annotations

import time
from typing import Callable, Protocol

FrameCallback = Callable[[float], None]


class FrameSource(Protocol):
    def request_frame(self, callback: FrameCallback) -> None: ...


def monotonic_ms() -> float:
    return time.perf_counter() * 1000.0


class ManualClock:
    """A clock that only moves when told to. Useful for hosts that own time."""

    __slots__ = ("now",)

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now

    def __repr__(self) -> str:
        return f"ManualClock({self.now!r})"


class ManualFrameSource:
    """Queue frame requests and fire them on step().

    Callbacks requested while a step is running wait for the next step.

    Usage:
        clock = ManualClock()
        frames = ManualFrameSource(clock)
        scheduler = Scheduler(frames.request_frame, clock=clock)
        scheduler.start()

        clock.advance(16)
        frames.step()   # one scheduler tick at t=16
    """

    def __init__(self, clock: Callable[[], float] = monotonic_ms) -> None:
        self._clock = clock
        self._pending: list[FrameCallback] = []

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> None:
        self._pending.append(callback)

    def step(self, now: float | None = None) -> None:
        if now is None:
            now = self._clock()
        callbacks, self._pending = self._pending, []
        for callback in callbacks:
            callback(now)
