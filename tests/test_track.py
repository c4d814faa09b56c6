"""Tests for the loop parameterization and the layout predicates."""

import numpy as np
import pytest

from constants import TRACK_LENGTH, SIDE_NAMES
from track import (
    TrackGeometry, DEFAULT_TRACK, locate,
    in_battery_occlusion, in_switch_occlusion, in_field_exclusion,
)

L = TRACK_LENGTH
# Cumulative segment boundaries, starting at top-center.
BOUNDARIES = [317.5, 702.5, 1337.5, 1722.5, L]


class TestLayout:
    def test_total_length(self):
        assert DEFAULT_TRACK.length == 2040
        assert DEFAULT_TRACK.segments == (317.5, 385, 635, 385, 317.5)

    @pytest.mark.parametrize("position, expected", [
        (0.0, (367.5, 50.0, "top")),
        (317.5, (685.0, 50.0, "right")),
        (702.5, (685.0, 435.0, "bottom")),
        (1337.5, (50.0, 435.0, "left")),
        (1722.5, (50.0, 50.0, "top")),
    ])
    def test_corners_and_start(self, position, expected):
        point = locate(position, 0.0)
        assert point.x == pytest.approx(expected[0])
        assert point.y == pytest.approx(expected[1])
        assert point.side == expected[2]

    def test_sides_in_order(self):
        assert locate(100).side == "top"
        assert locate(500).side == "right"
        assert locate(1000).side == "bottom"
        assert locate(1500).side == "left"
        assert locate(2000).side == "top"

    def test_clockwise_direction(self):
        # Moving forward goes right on top, down on the right, left on the bottom, up on the left.
        assert locate(110).x > locate(100).x
        assert locate(510).y > locate(500).y
        assert locate(1010).x < locate(1000).x
        assert locate(1510).y < locate(1500).y


class TestContinuityAndPeriodicity:
    @pytest.mark.parametrize("offset", [0.0, 2.5, -2.5])
    @pytest.mark.parametrize("boundary", BOUNDARIES)
    def test_no_jump_at_segment_boundaries(self, boundary, offset):
        eps = 1e-7
        before = locate(boundary - eps, offset)
        after = locate(boundary + eps, offset)
        assert abs(before.x - after.x) < 1e-5
        assert abs(before.y - after.y) < 1e-5

    def test_periodic_over_several_laps(self):
        for p in np.linspace(0.0, 4 * L, 1001):
            a = locate(p, 0.0)
            b = locate(p + L, 0.0)
            assert a.x == pytest.approx(b.x, abs=1e-6)
            assert a.y == pytest.approx(b.y, abs=1e-6)

    def test_small_steps_never_jump(self):
        # Consecutive samples along the loop are at most one step apart.
        step = 0.5
        points = [locate(p, 0.0) for p in np.arange(0.0, 4 * L, step)]
        for a, b in zip(points, points[1:]):
            assert np.hypot(a.x - b.x, a.y - b.y) <= step + 1e-6

    def test_negative_positions_wrap_with_floored_modulo(self):
        assert locate(-10.0) == locate(L - 10.0)
        assert locate(-L) == locate(0.0)

    def test_wrap(self):
        assert DEFAULT_TRACK.wrap(L) == 0.0
        assert DEFAULT_TRACK.wrap(-1.0) == pytest.approx(L - 1.0)
        assert 0.0 <= DEFAULT_TRACK.wrap(-1e-20) < L


class TestLateralOffset:
    def test_offset_points_outward_on_every_side(self):
        o = 2.0
        assert locate(100, o).y == pytest.approx(50.0 - o)
        assert locate(500, o).x == pytest.approx(685.0 + o)
        assert locate(1000, o).y == pytest.approx(435.0 + o)
        assert locate(1500, o).x == pytest.approx(50.0 - o)

    def test_offset_keeps_start_point_horizontal(self):
        point = locate(0.0, 2.0)
        assert point.x == pytest.approx(367.5)
        assert point.y == pytest.approx(48.0)

    def test_corner_with_offset_lands_on_inflated_rectangle(self):
        point = locate(317.5, 3.0)
        assert point.x == pytest.approx(688.0)
        assert point.y == pytest.approx(47.0)


class TestVectorizedProjection:
    def test_matches_scalar_locate(self, rng):
        positions = rng.uniform(-L, 3 * L, size=200)
        offsets = rng.uniform(-3, 3, size=200)
        xs, ys, sides = DEFAULT_TRACK.project(positions, offsets)
        for p, o, x, y, side in zip(positions, offsets, xs, ys, sides):
            point = locate(p, o)
            assert x == pytest.approx(point.x)
            assert y == pytest.approx(point.y)
            assert SIDE_NAMES[side] == point.side


class TestGeometryValidation:
    @pytest.mark.parametrize("rect", [
        (100, 50, 100, 400),
        (100, 50, 50, 400),
        (50, 400, 600, 400),
    ])
    def test_non_positive_segments_rejected(self, rect):
        with pytest.raises(ValueError):
            TrackGeometry(*rect)

    def test_custom_geometry_length(self):
        geometry = TrackGeometry(0, 0, 100, 50)
        assert geometry.length == 300
        assert geometry.locate(0).x == pytest.approx(50)


class TestPredicates:
    def test_battery_occlusion(self):
        assert in_battery_occlusion(325.0, 50.0)
        assert not in_battery_occlusion(450.0, 50.0)

    def test_switch_occlusion(self):
        assert in_switch_occlusion(530.0, 50.0)
        assert not in_switch_occlusion(530.0, 435.0)

    def test_predicates_accept_arrays(self):
        xs = np.array([325.0, 450.0, 530.0])
        ys = np.array([50.0, 50.0, 50.0])
        assert in_battery_occlusion(xs, ys).tolist() == [True, False, False]
        assert in_switch_occlusion(xs, ys).tolist() == [False, False, True]

    def test_field_exclusion_only_on_top(self):
        assert in_field_exclusion(300.0, "top")
        assert not in_field_exclusion(300.0, "bottom")
        assert not in_field_exclusion(450.0, "top")
