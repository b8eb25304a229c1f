"""Tests for geometry, placement rules and easing curves."""

import math

import pytest

from scenefx import Box, Point, Scale, Size, ease_in_out_sigmoid, ease_in_out_sine, linear
from scenefx.geometry import contains_point, measured_bounds
from scenefx.layout import DIRECTIONS, as_offset, place


class TestContainsPoint:
    box = Box(10, 10, 100, 100)

    def test_inside_and_outside(self):
        assert contains_point(self.box, 0.0, Scale(), 50, 50)
        assert not contains_point(self.box, 0.0, Scale(), 200, 200)

    def test_edges_are_inclusive(self):
        assert contains_point(self.box, 0.0, Scale(), 10, 10)
        assert contains_point(self.box, 0.0, Scale(), 110, 110)

    def test_rotation_about_centre(self):
        wide = Box(0, 0, 200, 20)  # centre (100, 10)
        assert contains_point(wide, 0.0, Scale(), 190, 10)
        assert not contains_point(wide, 0.0, Scale(), 100, 80)

        turned = math.pi / 2
        assert not contains_point(wide, turned, Scale(), 190, 10)
        assert contains_point(wide, turned, Scale(), 100, 80)

    def test_scale_grows_hit_area(self):
        box = Box(0, 0, 100, 100)
        assert not contains_point(box, 0.0, Scale(), 130, 50)
        assert contains_point(box, 0.0, Scale(2, 2), 130, 50)

    def test_zero_scale_never_hits(self):
        assert not contains_point(self.box, 0.0, Scale(0, 1), 60, 60)

    def test_hit_area_follows_custom_centre(self):
        box = Box(0, 0, 100, 100)
        origin = Point(0, 0)
        assert contains_point(box, 0.0, Scale(), -40, -40, center=origin)
        assert contains_point(box, 0.0, Scale(), 40, 40, center=origin)
        assert not contains_point(box, 0.0, Scale(), 60, 60, center=origin)


class TestMeasuredBounds:
    def test_unrotated_is_identity(self):
        assert measured_bounds(Box(10, 20, 30, 40), 0.0, Scale()) == Box(10, 20, 30, 40)

    def test_quarter_turn_swaps_extent(self):
        bounds = measured_bounds(Box(0, 0, 200, 20), math.pi / 2, Scale())
        assert bounds.width == pytest.approx(20)
        assert bounds.height == pytest.approx(200)
        assert bounds.center.x == pytest.approx(100)
        assert bounds.center.y == pytest.approx(10)

    def test_scale(self):
        bounds = measured_bounds(Box(0, 0, 10, 10), 0.0, Scale(3, 1))
        assert bounds == Box(-10, 0, 30, 10)


class TestPlace:
    other = Box(100, 100, 50, 40)
    size = Size(10, 20)

    @pytest.mark.parametrize(
        "direction, expected",
        [
            ("top-left", (90, 80)),
            ("top-right", (150, 80)),
            ("bottom-left", (90, 140)),
            ("bottom-right", (150, 140)),
            ("left", (90, 110)),
            ("right", (150, 110)),
            ("top", (120, 80)),
            ("bottom", (120, 140)),
            ("center", (120, 110)),
        ],
    )
    def test_directions(self, direction, expected):
        assert direction in DIRECTIONS
        assert place(direction, self.size, self.other) == Point(*expected)

    def test_unknown_direction_centres(self):
        assert place("sideways", self.size, self.other) == Point(120, 110)

    def test_offset_forms(self):
        assert place("right", self.size, self.other, {"x": 5}) == Point(155, 110)
        assert place("right", self.size, self.other, (5, -5)) == Point(155, 105)
        assert place("right", self.size, self.other, Point(0, 1)) == Point(150, 111)

    def test_as_offset_defaults(self):
        assert as_offset(None) == Point(0, 0)
        assert as_offset({"y": 3}) == Point(0, 3)


class TestEasing:
    @pytest.mark.parametrize("curve", [linear, ease_in_out_sine])
    def test_endpoints(self, curve):
        assert curve(0.0) == pytest.approx(0.0)
        assert curve(1.0) == pytest.approx(1.0)

    @pytest.mark.parametrize("curve", [linear, ease_in_out_sine, ease_in_out_sigmoid])
    def test_midpoint(self, curve):
        assert curve(0.5) == pytest.approx(0.5)

    def test_sine_is_slow_at_start(self):
        assert ease_in_out_sine(0.1) < 0.1

    def test_sigmoid_only_approaches_ends(self):
        assert 0 < ease_in_out_sigmoid(0.0) < 0.01
        assert 0.99 < ease_in_out_sigmoid(1.0) < 1

    def test_monotonic(self):
        samples = [ease_in_out_sigmoid(i / 10) for i in range(11)]
        assert samples == sorted(samples)
