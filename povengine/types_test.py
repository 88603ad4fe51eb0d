"""Tests for bounding boxes and sampling modes."""

import math

import pytest

from povengine.types import BoundingBox, InvalidGeometry, SamplingMode


class TestSamplingMode:
    def test_codes(self):
        assert SamplingMode.CENTER == 0
        assert SamplingMode.ALL_CORNERS_AND_CENTER == 5
        assert SamplingMode.ALL_MIDS_AND_CENTER == 10

    def test_parse_known(self):
        assert SamplingMode.parse(3) is SamplingMode.BOTTOM_LEFT
        assert SamplingMode.parse(SamplingMode.TOP) is SamplingMode.TOP

    def test_parse_unknown(self):
        assert SamplingMode.parse(-1) is None
        assert SamplingMode.parse(11) is None
        assert SamplingMode.parse(False) is None

    def test_multi_point(self):
        assert [m for m in SamplingMode if m.is_multi_point] == [
            SamplingMode.ALL_CORNERS_AND_CENTER,
            SamplingMode.ALL_MIDS_AND_CENTER,
        ]


class TestBoundingBox:
    def test_from_top_left(self):
        box = BoundingBox.from_top_left(100, 50, 40, 20)
        assert (box.center_x, box.center_y) == (120, 60)

    def test_dict_round_trip(self):
        box = BoundingBox(center_x=1.5, center_y=2.5, width=3.0, height=4.0)
        assert BoundingBox.from_dict(box.to_dict()) == box

    def test_validate_ok(self):
        BoundingBox(center_x=0, center_y=0, width=0, height=0).validate()

    def test_validate_nan(self):
        with pytest.raises(InvalidGeometry, match="center_y"):
            BoundingBox(
                center_x=0, center_y=math.nan, width=1, height=1
            ).validate()

    def test_validate_non_numeric(self):
        box = BoundingBox.from_dict(
            {"center_x": "10", "center_y": 0, "width": 1, "height": 1}
        )
        with pytest.raises(InvalidGeometry, match="must be a number"):
            box.validate()

    def test_validate_none(self):
        with pytest.raises(InvalidGeometry, match="width"):
            BoundingBox(
                center_x=0, center_y=0, width=None, height=1
            ).validate()

    def test_validate_negative(self):
        with pytest.raises(InvalidGeometry, match="non-negative"):
            BoundingBox(center_x=0, center_y=0, width=1, height=-1).validate()
