"""Tests for sample-point geometry."""

import logging
import math

import pytest

from povengine.sampling import (
    compute_sample_points,
    sample_offset,
    sample_points_or_center,
)
from povengine.types import EPSILON, BoundingBox, InvalidGeometry, SamplingMode


def _box(cx=100.0, cy=100.0, w=40.0, h=40.0):
    return BoundingBox(center_x=cx, center_y=cy, width=w, height=h)


def _coords(points):
    return [(p.x, p.y) for p in points]


class TestSingleModes:
    def test_center(self):
        points = compute_sample_points(_box(), SamplingMode.CENTER)
        assert _coords(points) == [(100.0, 100.0)]
        assert points[0].slot_index == 0

    def test_top_left_nudged_on_both_axes(self):
        (p,) = compute_sample_points(_box(), SamplingMode.TOP_LEFT)
        assert p.x == pytest.approx(80.01)
        assert p.y == pytest.approx(80.01)

    def test_top_right(self):
        (p,) = compute_sample_points(_box(), SamplingMode.TOP_RIGHT)
        assert p.x == 120.0
        assert p.y == pytest.approx(80.01)

    def test_bottom_left(self):
        (p,) = compute_sample_points(_box(), SamplingMode.BOTTOM_LEFT)
        assert p.x == pytest.approx(80.01)
        assert p.y == 120.0

    def test_bottom_right_matches_bottom_left(self):
        """Bottom-right keeps the bottom-left placement existing scenes use."""
        (br,) = compute_sample_points(_box(), SamplingMode.BOTTOM_RIGHT)
        (bl,) = compute_sample_points(_box(), SamplingMode.BOTTOM_LEFT)
        assert (br.x, br.y) == (bl.x, bl.y)
        assert br.slot_index == 4

    def test_mids(self):
        box = _box()
        (top,) = compute_sample_points(box, SamplingMode.TOP)
        (bottom,) = compute_sample_points(box, SamplingMode.BOTTOM)
        (left,) = compute_sample_points(box, SamplingMode.LEFT)
        (right,) = compute_sample_points(box, SamplingMode.RIGHT)
        assert (top.x, top.y) == pytest.approx((100.0, 80.01))
        assert (bottom.x, bottom.y) == (100.0, 120.0)
        assert (left.x, left.y) == pytest.approx((80.01, 100.0))
        assert (right.x, right.y) == (120.0, 100.0)

    def test_single_modes_yield_one_point(self):
        for mode in SamplingMode:
            if mode.is_multi_point:
                continue
            points = compute_sample_points(_box(), mode)
            assert len(points) == 1
            assert points[0].slot_index == int(mode)

    def test_accepts_integer_codes(self):
        assert compute_sample_points(_box(), 8) == compute_sample_points(
            _box(), SamplingMode.LEFT
        )


class TestMultiModes:
    def test_all_mids_and_center(self):
        points = compute_sample_points(_box(), SamplingMode.ALL_MIDS_AND_CENTER)
        expected = [
            (100.0, 100.0),
            (100.0, 80.01),
            (100.0, 120.0),
            (80.01, 100.0),
            (120.0, 100.0),
        ]
        for actual, want in zip(_coords(points), expected):
            assert actual == pytest.approx(want)
        assert len(points) == len(expected)
        assert [p.slot_index for p in points] == [0, 6, 7, 8, 9]

    @pytest.mark.parametrize(
        "w,h", [(40.0, 40.0), (100.0, 50.0), (1.0, 3.0), (0.5, 0.5)]
    )
    def test_all_corners_and_center(self, w, h):
        box = _box(cx=37.5, cy=-12.0, w=w, h=h)
        points = compute_sample_points(box, SamplingMode.ALL_CORNERS_AND_CENTER)
        assert len(points) == 5
        assert (points[0].x, points[0].y) == (37.5, -12.0)
        assert [p.slot_index for p in points] == [0, 1, 2, 3, 4]

        left = 37.5 - w / 2
        right = 37.5 + w / 2
        top = -12.0 - h / 2
        bottom = -12.0 + h / 2
        tl, tr, bl, br = points[1:]
        assert tl.x == pytest.approx(left + EPSILON)
        assert tl.y == pytest.approx(top + EPSILON)
        assert tr.x == right
        assert tr.y == pytest.approx(top + EPSILON)
        assert bl.x == pytest.approx(left + EPSILON)
        assert bl.y == bottom
        assert br.y == bottom

    def test_only_all_modes_expand(self):
        multi = [
            m
            for m in SamplingMode
            if len(compute_sample_points(_box(), m)) > 1
        ]
        assert multi == [
            SamplingMode.ALL_CORNERS_AND_CENTER,
            SamplingMode.ALL_MIDS_AND_CENTER,
        ]


class TestEdgeNudge:
    @pytest.mark.parametrize("w,h", [(40.0, 40.0), (140.0, 70.0), (2.0, 8.0)])
    def test_no_point_on_left_or_top_edge(self, w, h):
        box = _box(w=w, h=h)
        for mode in SamplingMode:
            for p in compute_sample_points(box, mode):
                dx = p.x - box.center_x
                dy = p.y - box.center_y
                assert dx != -w / 2
                assert dy != -h / 2
                assert dx >= -w / 2 + EPSILON - 1e-9
                assert dy >= -h / 2 + EPSILON - 1e-9

    def test_right_and_bottom_edges_exact(self):
        box = _box(w=60.0, h=30.0)
        (right,) = compute_sample_points(box, SamplingMode.RIGHT)
        (bottom,) = compute_sample_points(box, SamplingMode.BOTTOM)
        assert right.x == 130.0
        assert bottom.y == 115.0


class TestErrors:
    def test_unknown_mode_logs_and_returns_empty(self, caplog):
        with caplog.at_level(logging.ERROR):
            assert compute_sample_points(_box(), 11) == []
        assert "Invalid sampling mode" in caplog.text

    def test_negative_code_is_unknown(self):
        assert compute_sample_points(_box(), -1) == []

    def test_bool_is_not_a_mode(self):
        assert compute_sample_points(_box(), True) == []

    @pytest.mark.parametrize(
        "field", ["center_x", "center_y", "width", "height"]
    )
    def test_non_finite_box_raises(self, field):
        values = {"center_x": 1.0, "center_y": 1.0, "width": 1.0, "height": 1.0}
        for bad in (math.nan, math.inf, -math.inf):
            values[field] = bad
            with pytest.raises(InvalidGeometry):
                compute_sample_points(BoundingBox(**values), SamplingMode.CENTER)

    def test_negative_size_raises(self):
        with pytest.raises(InvalidGeometry):
            compute_sample_points(_box(w=-1.0), SamplingMode.CENTER)

    def test_invalid_geometry_is_value_error(self):
        assert issubclass(InvalidGeometry, ValueError)


class TestFallbackAndOffsets:
    def test_fallback_to_center(self):
        points = sample_points_or_center(_box(), 42)
        assert _coords(points) == [(100.0, 100.0)]

    def test_fallback_passes_valid_modes_through(self):
        points = sample_points_or_center(
            _box(), SamplingMode.ALL_CORNERS_AND_CENTER
        )
        assert len(points) == 5

    def test_sample_offset_single_mode(self):
        assert sample_offset(40.0, 20.0, SamplingMode.RIGHT) == (20.0, 0.0)
        assert sample_offset(40.0, 20.0, SamplingMode.TOP) == pytest.approx(
            (0.0, -9.99)
        )

    def test_sample_offset_defined_for_every_single_mode(self):
        for mode in SamplingMode:
            if mode.is_multi_point:
                continue
            dx, dy = sample_offset(40.0, 20.0, mode)
            assert -20.0 < dx <= 20.0
            assert -10.0 < dy <= 10.0

    def test_sample_offset_rejects_multi_point(self, caplog):
        with caplog.at_level(logging.ERROR):
            assert (
                sample_offset(40.0, 40.0, SamplingMode.ALL_MIDS_AND_CENTER)
                is None
            )
        assert caplog.records

    def test_zero_size_box(self):
        points = compute_sample_points(
            _box(w=0.0, h=0.0), SamplingMode.ALL_CORNERS_AND_CENTER
        )
        assert len(points) == 5


def test_idempotent():
    box = _box(cx=13.3, cy=7.7, w=33.0, h=17.0)
    for mode in SamplingMode:
        assert compute_sample_points(box, mode) == compute_sample_points(
            box, mode
        )
