"""Tests for Scheduler, TimedTask and InterpolatedTask."""

import logging

import pytest

from scenefx import (
    INFINITE,
    ConfigurationError,
    InterpolatedTask,
    ManualClock,
    ManualFrameSource,
    Scheduler,
    TaskKind,
    TimedTask,
    linear,
)


def _frame(clock, frames, at):
    clock.now = at
    frames.step()


class TestRegistry:
    def test_add_returns_timed_task(self, scheduler):
        task = scheduler.add("t", 100, 1, lambda: None)
        assert isinstance(task, TimedTask)
        assert task.kind is TaskKind.TIMED
        assert "t" in scheduler
        assert scheduler.names == ["t"]

    def test_add_anim_returns_interpolated_task(self, scheduler):
        task = scheduler.add_anim("a", 0, 1, linear, 100, lambda v: None)
        assert isinstance(task, InterpolatedTask)
        assert task.kind is TaskKind.INTERPOLATED
        assert task.channels == ("global", "animation")

    def test_same_name_replaces(self, scheduler):
        first = scheduler.add("t", 100, INFINITE, lambda: None)
        second = scheduler.add("t", 50, INFINITE, lambda: None)
        assert scheduler.names == ["t"]
        assert scheduler.get("t") is second
        assert scheduler.get("t") is not first

    def test_anim_replaces_timed_of_same_name(self, scheduler):
        scheduler.add("x", 100, INFINITE, lambda: None)
        scheduler.add_anim("x", 0, 1, None, 100, lambda v: None)
        assert len(scheduler) == 1
        assert scheduler.get("x").kind is TaskKind.INTERPOLATED

    def test_remove(self, scheduler):
        scheduler.add("t", 0, 1, lambda: None)
        assert scheduler.remove("t") is True
        assert scheduler.remove("t") is False
        assert "t" not in scheduler

    def test_string_channel_is_one_channel(self, scheduler):
        task = scheduler.add("t", 0, 1, lambda: None, "ui")
        assert task.channels == ("ui",)

    @pytest.mark.parametrize("repeat", [0, -2])
    def test_invalid_repeat(self, scheduler, repeat):
        with pytest.raises(ConfigurationError):
            scheduler.add("t", 0, repeat, lambda: None)

    def test_negative_delay(self, scheduler):
        with pytest.raises(ConfigurationError):
            scheduler.add("t", -1, 1, lambda: None)


class TestTimedTasks:
    def test_runs_when_delay_elapsed(self, clock, scheduler):
        log = []
        scheduler.add("t", 100, INFINITE, lambda: log.append(clock.now))
        scheduler.tick(50)
        assert log == []
        clock.now = 100
        scheduler.tick(100)
        assert log == [100]

    def test_repeat_count_then_removed(self, scheduler):
        log = []
        scheduler.add("t", 0, 3, lambda: log.append(1))
        for now in range(5):
            scheduler.tick(now)
        assert log == [1, 1, 1]
        assert "t" not in scheduler

    def test_zero_delay_runs_every_tick(self, scheduler):
        log = []
        scheduler.add("t", 0, INFINITE, lambda: log.append(1))
        for now in range(4):
            scheduler.tick(now)
        assert len(log) == 4

    def test_failing_task_is_logged_and_counted(self, scheduler, caplog):
        log = []

        def boom():
            raise RuntimeError("boom")

        scheduler.add("bad", 0, 2, boom)
        scheduler.add("good", 0, INFINITE, lambda: log.append(1))
        with caplog.at_level(logging.ERROR, logger="scenefx.scheduler"):
            scheduler.tick(0)
            scheduler.tick(1)
        assert log == [1, 1]
        assert "bad" not in scheduler
        assert "Task 'bad' failed" in caplog.text


class TestSnapshot:
    def test_task_added_during_tick_waits(self, scheduler):
        log = []

        def spawner():
            scheduler.add("child", 0, 1, lambda: log.append("child"))

        scheduler.add("parent", 0, 1, spawner)
        scheduler.tick(0)
        assert log == []
        scheduler.tick(1)
        assert log == ["child"]

    def test_task_re_adding_itself_survives(self, scheduler):
        log = []

        def chain():
            log.append(len(log))
            if len(log) < 3:
                scheduler.add("step", 0, 1, chain)

        scheduler.add("step", 0, 1, chain)
        for now in range(5):
            scheduler.tick(now)
        assert log == [0, 1, 2]
        assert "step" not in scheduler


class TestAnimation:
    def test_identity_curve_samples(self, clock, scheduler):
        values = []
        task = scheduler.add_anim("a", 0, 10, linear, 100, values.append)
        assert task.value_at(0) == 0
        assert task.value_at(50) == 5
        assert task.value_at(100) == 10

        scheduler.tick(0)
        scheduler.tick(50)
        assert "a" in scheduler
        scheduler.tick(100)
        assert values == [0, 5, 10]
        assert "a" not in scheduler

    def test_inactive_past_duration(self, scheduler):
        task = scheduler.add_anim("a", 0, 10, None, 100, lambda v: None)
        assert task.run(99) is True
        assert task.run(100) is False
        assert task.run(150) is False

    def test_value_clamped(self, scheduler):
        values = []
        scheduler.add_anim("a", 0, 10, linear, 100, values.append)
        scheduler.tick(250)
        assert values == [10]

    def test_curve_is_applied(self, scheduler):
        values = []
        scheduler.add_anim("a", 0, 100, lambda t: t * t, 100, values.append)
        scheduler.tick(50)
        assert values == [25]

    def test_zero_duration_jumps_to_end(self, scheduler):
        values = []
        scheduler.add_anim("a", 3, 7, linear, 0, values.append)
        scheduler.tick(0)
        assert values == [7]
        assert "a" not in scheduler


class TestPauseResume:
    def test_timed_task_due_time_shifts_by_pause(self, clock, scheduler):
        log = []
        scheduler.add("t", 100, 1, lambda: log.append(clock.now))
        clock.now = 30
        scheduler.pause()
        clock.now = 80
        scheduler.resume()
        # Originally due at 100; paused for 50.
        clock.now = 100
        scheduler.tick(100)
        clock.now = 149
        scheduler.tick(149)
        assert log == []
        clock.now = 150
        scheduler.tick(150)
        assert log == [150]

    def test_paused_task_is_skipped(self, scheduler):
        log = []
        scheduler.add("t", 0, INFINITE, lambda: log.append(1))
        scheduler.pause()
        scheduler.tick(10)
        assert log == []
        assert scheduler.is_paused("global")

    def test_animation_excludes_paused_time(self, clock, scheduler):
        values = []
        scheduler.add_anim("a", 0, 10, linear, 100, values.append)
        scheduler.tick(40)
        clock.now = 40
        scheduler.pause("animation")
        clock.now = 1040
        scheduler.resume("animation")
        scheduler.tick(1060)
        assert values == [4, 6]

    def test_animation_added_to_paused_channel_starts_on_resume(self, clock, scheduler):
        values = []
        scheduler.pause("animation")
        scheduler.add_anim("a", 0, 10, linear, 100, values.append)
        clock.now = 1000
        scheduler.resume("animation")
        scheduler.tick(1000)
        scheduler.tick(1050)
        assert values == [0, 5]

    def test_timed_task_added_to_paused_channel(self, clock, scheduler):
        log = []
        scheduler.pause()
        scheduler.add("t", 100, 1, lambda: log.append(clock.now))
        clock.now = 500
        scheduler.resume()
        clock.now = 599
        scheduler.tick(599)
        assert log == []
        clock.now = 600
        scheduler.tick(600)
        assert log == [600]

    def test_channel_isolation(self, scheduler):
        ui, anim = [], []
        scheduler.add("ui", 0, INFINITE, lambda: ui.append(1), ("ui",))
        scheduler.add_anim("a", 0, 1, linear, 1000, anim.append, ("animation",))
        scheduler.pause("animation")
        scheduler.tick(10)
        scheduler.tick(20)
        assert len(ui) == 2
        assert anim == []

    def test_multi_channel_task_waits_for_last_resume(self, clock, scheduler):
        log = []
        scheduler.add("t", 100, 1, lambda: log.append(clock.now), ("a", "b"))
        clock.now = 10
        scheduler.pause("a")
        clock.now = 20
        scheduler.pause("b")
        clock.now = 30
        scheduler.resume("a")
        scheduler.tick(200)
        assert log == []
        clock.now = 60
        scheduler.resume("b")
        # Paused from 10 to 60: due at 150.
        clock.now = 149
        scheduler.tick(149)
        assert log == []
        clock.now = 150
        scheduler.tick(150)
        assert log == [150]


class TestLoop:
    def test_start_requests_frames(self, clock, frames, scheduler):
        log = []
        scheduler.add("t", 0, INFINITE, lambda: log.append(clock.now))
        scheduler.start()
        assert scheduler.running
        assert frames.pending == 1
        _frame(clock, frames, 16)
        _frame(clock, frames, 32)
        assert log == [16, 32]
        assert frames.pending == 1

    def test_start_is_idempotent(self, frames, scheduler):
        scheduler.start()
        scheduler.start()
        assert frames.pending == 1

    def test_stop_halts_and_clears(self, clock, frames, scheduler):
        log = []
        scheduler.add("t", 0, INFINITE, lambda: log.append(1))
        scheduler.pause("x")
        scheduler.start()
        scheduler.stop()
        assert not scheduler.running
        assert len(scheduler) == 0
        assert scheduler.paused_channels == frozenset()
        _frame(clock, frames, 16)
        assert log == []
        assert frames.pending == 0

    def test_stop_channel_discards_only_that_channel(self, scheduler):
        scheduler.add("ui", 0, INFINITE, lambda: None, ("ui",))
        scheduler.add("render", 0, INFINITE, lambda: None, ("render",))
        scheduler.pause("ui")
        scheduler.stop("ui")
        assert scheduler.names == ["render"]
        assert not scheduler.is_paused("ui")

    def test_restart_after_stop_runs_one_loop(self, clock, frames, scheduler):
        log = []
        scheduler.start()
        scheduler.stop()
        scheduler.add("t", 0, INFINITE, lambda: log.append(1))
        scheduler.start()
        assert frames.pending == 2  # stale request from the first run + new one
        _frame(clock, frames, 16)
        assert log == [1]
        assert frames.pending == 1

    def test_resume_restarts_stopped_loop(self, frames, scheduler):
        scheduler.resume("global")
        assert scheduler.running
        assert frames.pending == 1

    def test_stop_from_inside_task(self, clock, frames, scheduler):
        scheduler.add("t", 0, INFINITE, scheduler.stop)
        scheduler.start()
        _frame(clock, frames, 16)
        assert not scheduler.running
        assert frames.pending == 0

    def test_host_driven_without_frame_source(self):
        clock = ManualClock()
        scheduler = Scheduler(clock=clock)
        log = []
        scheduler.add("t", 10, INFINITE, lambda: log.append(clock.now))
        scheduler.start()
        clock.advance(10)
        scheduler.tick()
        assert log == [10]

    def test_frame_source_defers_new_requests(self, clock):
        frames = ManualFrameSource(clock)
        seen = []

        def again(now):
            seen.append(now)
            frames.request_frame(again)

        frames.request_frame(again)
        frames.step(5)
        assert seen == [5]
        assert frames.pending == 1
