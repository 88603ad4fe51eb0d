"""Multi-point visibility test for tokens.

This module answers the question: can anyone currently see token X? The
host's own test only checks whether X's center is lit. Here a token counts
as visible if any of nine probe points (center, four corners, four edge
midpoints) passes two gates:

  line of sight   the point lies inside the ``los`` polygon of at least one
                  vision source. LOS polygons are wall-aware but ignore light
                  range, so this gate is coarse.

  field of view   the point lies inside the ``fov`` polygon of a vision
                  source or, failing that, of an ambient light source. Under
                  global illumination everything in LOS is lit and this gate
                  passes automatically.

The gates are evaluated separately: one probe point may satisfy LOS and a
different one FOV. Merging them into a single per-point test would hide
tokens standing half in a lit area that the observer's own vision does not
reach.

The probe set is fixed and does not depend on the token's own sampling mode.
Probes on the -x / -y edges are nudged inward by ``EPSILON`` for the same
grid-ownership reason as the sample points in ``sampling.py``. Unlike the
sampling table, the bottom-right probe sits on the true corner.

When the scene has no vision sources at all, only a privileged (GM) viewer
sees tokens.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .regions import LightRegions, VisionRegions
from .types import EPSILON, BoundingBox

Point = tuple[float, float]


def probe_points(box: BoundingBox) -> list[Point]:
    """The nine absolute probe coordinates for ``box``.

    Raises:
        InvalidGeometry: if the box has non-finite or negative values.
    """
    box.validate()
    hw = box.width / 2
    hh = box.height / 2
    left = -hw + EPSILON
    top = -hh + EPSILON
    offsets = [
        (0.0, 0.0),
        # corners
        (left, top),
        (hw, top),
        (left, hh),
        (hw, hh),
        # mids
        (0.0, top),
        (0.0, hh),
        (left, 0.0),
        (hw, 0.0),
    ]
    return [(box.center_x + dx, box.center_y + dy) for dx, dy in offsets]


def _any_point_in(region, points: Sequence[Point]) -> bool:
    return any(region.contains(x, y) for x, y in points)


def points_in_line_of_sight(
    points: Sequence[Point], vision_sources: Iterable[VisionRegions]
) -> bool:
    for source in vision_sources:
        if _any_point_in(source.los, points):
            return True
    return False


def points_in_field_of_view(
    points: Sequence[Point],
    vision_sources: Iterable[VisionRegions],
    light_sources: Iterable[LightRegions],
) -> bool:
    for source in vision_sources:
        if _any_point_in(source.fov, points):
            return True
    for light in light_sources:
        if _any_point_in(light.fov, points):
            return True
    return False


def is_visible(
    box: BoundingBox,
    vision_sources: Sequence[VisionRegions],
    light_sources: Sequence[LightRegions],
    global_illumination: bool,
    is_privileged: bool,
) -> bool:
    """True if any probe point of ``box`` is both in LOS and lit."""
    if not vision_sources:
        return is_privileged

    points = probe_points(box)
    if not points_in_line_of_sight(points, vision_sources):
        return False
    if global_illumination:
        return True
    return points_in_field_of_view(points, vision_sources, light_sources)
