"""Shared fixtures: deterministic time and a recording surface."""

import pytest

from scenefx import Context, ManualClock, ManualFrameSource, Scheduler, Store


PAINTER_METHODS = {
    "save",
    "restore",
    "translate",
    "rotate",
    "scale",
    "set_alpha",
    "set_shadow",
    "clip_rounded_rect",
    "fill_rect",
    "draw_image",
    "fill_text",
}


class RecordingPainter:
    """Painter that records every call as (method, args, kwargs)."""

    def __init__(self, log):
        self.log = log

    def measure_text(self, text, font):
        return float(len(text) * 8)

    def __getattr__(self, name):
        if name not in PAINTER_METHODS:
            raise AttributeError(name)

        def _record(*args, **kwargs):
            self.log.append((name, args, kwargs))

        return _record


class RecordingSurface:
    def __init__(self, width=400, height=300):
        self.width = width
        self.height = height
        self.calls = []

    def get_painter(self):
        return RecordingPainter(self.calls)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def frames(clock):
    return ManualFrameSource(clock)


@pytest.fixture
def scheduler(clock, frames):
    return Scheduler(frames.request_frame, clock=clock)


@pytest.fixture
def store():
    return Store()


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def context(surface, scheduler, store):
    return Context(surface, scheduler, store)
