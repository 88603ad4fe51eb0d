"""Sample-point geometry for multi-point token vision.

A token normally sees from its center. This module computes the alternative
origins a token can see from: one of the four corners, one of the four edge
midpoints, or the center plus all four of either family.

Grid cells own their top-left boundary. A point exactly on a token's left or
top edge would therefore fall into the neighbouring cell, so those edges are
nudged inward by ``EPSILON``. The right and bottom edges already belong to
the next cell over and are left untouched:

    TOP_LEFT      (-hw + eps, -hh + eps)
    TOP_RIGHT     (+hw,       -hh + eps)
    BOTTOM_LEFT   (-hw + eps, +hh)
    BOTTOM_RIGHT  (-hw + eps, +hh)
    TOP           (0,         -hh + eps)
    BOTTOM        (0,         +hh)
    LEFT          (-hw + eps, 0)
    RIGHT         (+hw,       0)

BOTTOM_RIGHT deliberately shares BOTTOM_LEFT's formula; existing scenes were
authored against that placement.

The two ``ALL_*`` modes expand to the center followed by their four
single-point members in enumeration order. Each point carries the mode code
that produced it as ``slot_index`` so callers can key one vision source per
point.
"""

from __future__ import annotations

import logging

from .types import EPSILON, BoundingBox, SamplePoint, SamplingMode

logger = logging.getLogger(__name__)

_CORNERS = (
    SamplingMode.TOP_LEFT,
    SamplingMode.TOP_RIGHT,
    SamplingMode.BOTTOM_LEFT,
    SamplingMode.BOTTOM_RIGHT,
)
_MIDS = (
    SamplingMode.TOP,
    SamplingMode.BOTTOM,
    SamplingMode.LEFT,
    SamplingMode.RIGHT,
)

_EXPANSIONS: dict[SamplingMode, tuple[SamplingMode, ...]] = {
    SamplingMode.ALL_CORNERS_AND_CENTER: (SamplingMode.CENTER, *_CORNERS),
    SamplingMode.ALL_MIDS_AND_CENTER: (SamplingMode.CENTER, *_MIDS),
}


def _single_offsets(
    hw: float, hh: float
) -> dict[SamplingMode, tuple[float, float]]:
    """Offset from the center for every single-point mode."""
    left = -hw + EPSILON
    top = -hh + EPSILON
    return {
        SamplingMode.CENTER: (0.0, 0.0),
        SamplingMode.TOP_LEFT: (left, top),
        SamplingMode.TOP_RIGHT: (hw, top),
        SamplingMode.BOTTOM_LEFT: (left, hh),
        SamplingMode.BOTTOM_RIGHT: (left, hh),
        SamplingMode.TOP: (0.0, top),
        SamplingMode.BOTTOM: (0.0, hh),
        SamplingMode.LEFT: (left, 0.0),
        SamplingMode.RIGHT: (hw, 0.0),
    }


def sample_offset(
    width: float, height: float, mode: int | SamplingMode
) -> tuple[float, float] | None:
    """Offset from the token center for a single-point mode.

    Returns None (and logs an error) for unknown codes and for the
    multi-point modes, which have no single offset.
    """
    parsed = SamplingMode.parse(mode)
    if parsed is None or parsed.is_multi_point:
        logger.error("Invalid sampling mode for a single offset: %r", mode)
        return None
    return _single_offsets(width / 2, height / 2)[parsed]


def compute_sample_points(
    box: BoundingBox, mode: int | SamplingMode
) -> list[SamplePoint]:
    """Absolute sample points for ``box`` under ``mode``.

    Center comes first when present. An unknown mode is logged and yields an
    empty list; see ``sample_points_or_center`` for the usual fallback.

    Raises:
        InvalidGeometry: if the box has non-finite or negative values.
    """
    box.validate()
    parsed = SamplingMode.parse(mode)
    if parsed is None:
        logger.error("Invalid sampling mode: %r", mode)
        return []

    members = _EXPANSIONS.get(parsed, (parsed,))
    offsets = _single_offsets(box.width / 2, box.height / 2)
    points = []
    for member in members:
        dx, dy = offsets[member]
        points.append(
            SamplePoint(
                x=box.center_x + dx,
                y=box.center_y + dy,
                slot_index=int(member),
            )
        )
    return points


def sample_points_or_center(
    box: BoundingBox, mode: int | SamplingMode
) -> list[SamplePoint]:
    """Like ``compute_sample_points`` but never empty.

    Falls back to the single center point so a token always keeps at least
    one vision source.
    """
    points = compute_sample_points(box, mode)
    if not points:
        return compute_sample_points(box, SamplingMode.CENTER)
    return points
