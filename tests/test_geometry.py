"""Tests for the geometry transform."""

import pytest

from geometry import (
    EE_TO_MM, EMPTY_BOUNDS, BoundingBox, arc_midpoint, pad_bounds, parse_arc_path,
    path_to_points, round_half_away, to_mm, transform_point, transform_points,
)
from models import Point


class TestRounding:
    @pytest.mark.parametrize("value, places, expected", [
        (2.5, 0, 3.0),
        (-2.5, 0, -3.0),
        (0.125, 2, 0.13),
        (-0.125, 2, -0.13),
        (1.00005, 4, 1.0001),
        (0.1 + 0.2, 3, 0.3),
    ])
    def test_half_away_from_zero(self, value, places, expected):
        assert round_half_away(value, places) == expected

    def test_negative_zero_folds(self):
        result = round_half_away(-0.00001, 3)
        assert result == 0.0
        assert str(result) == "0.0"

    def test_non_finite(self):
        assert round_half_away(float("nan"), 2) == 0.0


class TestTransform:
    def test_unit(self):
        assert EE_TO_MM == 0.254
        assert to_mm(10) == 2.54

    def test_origin_subtracted_and_y_flipped(self):
        origin = Point(4000, 3000)
        assert transform_point(4010, 3020, origin) == (2.54, -5.08)
        assert transform_point(3990, 2980, origin) == (-2.54, 5.08)

    def test_origin_maps_to_zero(self):
        x, y = transform_point(400, 300, Point(400, 300))
        assert (x, y) == (0.0, 0.0)
        assert str(y) == "0.0"

    def test_footprint_precision(self):
        assert transform_point(4003.15, 3000, Point(4000, 3000)) == (0.8001, 0.0)

    def test_symbol_precision(self):
        assert transform_points([(3.15, 0)], Point(), places=3) == [(0.8, 0.0)]

    def test_missing_origin(self):
        assert transform_point(10, 10) == (2.54, -2.54)


class TestBounds:
    def test_empty(self):
        assert pad_bounds([]) == BoundingBox(-1.0, 1.0, -1.0, 1.0)
        assert pad_bounds([]) is not EMPTY_BOUNDS

    def test_pads(self, smd_pads):
        box = pad_bounds(smd_pads)
        assert box.min_x == pytest.approx(-1.1001, abs=1e-6)
        assert box.max_x == pytest.approx(1.1001, abs=1e-6)
        assert box.min_y == pytest.approx(-0.3, abs=1e-6)
        assert box.max_y == pytest.approx(0.3, abs=1e-6)

    def test_origin_applies(self, smd_pads):
        shifted = pad_bounds(smd_pads, Point(10, 0))
        assert shifted.min_x == pytest.approx(-1.1001 - 2.54, abs=1e-6)

    def test_expanded(self):
        box = BoundingBox(-1.1001, 1.1001, -0.3, 0.3).expanded(0.15)
        assert box == BoundingBox(-1.25, 1.25, -0.45, 0.45)


class TestArcs:
    def test_semicircle_midpoint(self):
        mx, my = arc_midpoint(0, 0, 1, 1, 0, False, True, 2, 0)
        assert mx == pytest.approx(1.0)
        assert my == pytest.approx(-1.0)

    def test_opposite_sweep(self):
        mx, my = arc_midpoint(0, 0, 1, 1, 0, False, False, 2, 0)
        assert mx == pytest.approx(1.0)
        assert my == pytest.approx(1.0)

    def test_degenerate_radius(self):
        assert arc_midpoint(0, 0, 0, 0, 0, False, True, 4, 2) == (2.0, 1.0)

    def test_parse_arc_path(self):
        start, mid, end = parse_arc_path("M 0 0 A 1 1 0 0 1 2 0")
        assert start == (0.0, 0.0)
        assert end == (2.0, 0.0)
        assert mid == pytest.approx((1.0, -1.0))

    def test_parse_relative_arc(self):
        start, _, end = parse_arc_path("M 5 5 a 1 1 0 0 1 2 0")
        assert end == (7.0, 5.0)

    def test_parse_arc_path_invalid(self):
        assert parse_arc_path("M 0 0 L 1 1") is None
        assert parse_arc_path("") is None


class TestPathToPoints:
    def test_absolute(self):
        assert path_to_points("M 0 0 L 10 0 V 5 H 0 Z") == [
            (0.0, 0.0), (10.0, 0.0), (10.0, 5.0), (0.0, 5.0), (0.0, 0.0),
        ]

    def test_relative(self):
        assert path_to_points("m 1 1 l 2 0 v 3") == [(1.0, 1.0), (3.0, 1.0), (3.0, 4.0)]

    def test_implicit_lineto(self):
        assert path_to_points("M 0 0 5 5") == [(0.0, 0.0), (5.0, 5.0)]

    def test_truncated(self):
        assert path_to_points("M 0 0 L 3") == [(0.0, 0.0)]
