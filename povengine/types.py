"""Geometry and mode types shared by the sampling and visibility modules."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum

# Inward nudge applied to points on the -x / -y edges of a token.
EPSILON = 0.01


class InvalidGeometry(ValueError):
    """Raised when a bounding box holds non-finite or negative values."""


class SamplingMode(IntEnum):
    CENTER = 0
    TOP_LEFT = 1
    TOP_RIGHT = 2
    BOTTOM_LEFT = 3
    BOTTOM_RIGHT = 4
    ALL_CORNERS_AND_CENTER = 5
    TOP = 6
    BOTTOM = 7
    LEFT = 8
    RIGHT = 9
    ALL_MIDS_AND_CENTER = 10

    @property
    def is_multi_point(self) -> bool:
        return self in (
            SamplingMode.ALL_CORNERS_AND_CENTER,
            SamplingMode.ALL_MIDS_AND_CENTER,
        )

    @staticmethod
    def parse(value: int | SamplingMode) -> SamplingMode | None:
        """Return the mode for an integer code, or None if unknown."""
        if isinstance(value, bool):
            return None
        try:
            return SamplingMode(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class BoundingBox:
    center_x: float
    center_y: float
    width: float
    height: float

    @staticmethod
    def from_dict(d: dict) -> BoundingBox:
        return BoundingBox(
            center_x=d["center_x"],
            center_y=d["center_y"],
            width=d["width"],
            height=d["height"],
        )

    @staticmethod
    def from_top_left(x: float, y: float, w: float, h: float) -> BoundingBox:
        """Build a box from a top-left placement, the way tokens are stored."""
        return BoundingBox(
            center_x=x + w / 2, center_y=y + h / 2, width=w, height=h
        )

    def to_dict(self) -> dict:
        return {
            "center_x": self.center_x,
            "center_y": self.center_y,
            "width": self.width,
            "height": self.height,
        }

    def validate(self) -> None:
        """Raise InvalidGeometry unless fields are finite and sizes >= 0."""
        for name in ("center_x", "center_y", "width", "height"):
            value = getattr(self, name)
            try:
                finite = math.isfinite(value)
            except TypeError:
                raise InvalidGeometry(
                    f"Bounding box {name} must be a number, got {value!r}"
                ) from None
            if not finite:
                raise InvalidGeometry(
                    f"Bounding box {name} must be finite, got {value!r}"
                )
        if self.width < 0 or self.height < 0:
            raise InvalidGeometry(
                f"Bounding box size must be non-negative, got "
                f"{self.width!r} x {self.height!r}"
            )


@dataclass(frozen=True)
class SamplePoint:
    x: float
    y: float
    # Mode code of the offset rule that produced this point (0 = center).
    slot_index: int
