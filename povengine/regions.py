"""Polygon regions consumed by the visibility evaluator.

The evaluator only needs a ``contains(x, y)`` test per region; any object
with that method will do. ``PolygonRegion`` is the concrete implementation
used by the host glue and the scene loader, backed by shapely so that
concave and self-touching polygons from the ray caster are handled.

Points exactly on a polygon boundary are outside (shapely's ``contains``
semantics). This is the reason sample points avoid the token's -x / -y
edges: a region edge drawn along a grid line would otherwise decide the
result by rounding.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np
import shapely
from shapely.geometry import Polygon as ShapelyPolygon


class Region(Protocol):
    def contains(self, x: float, y: float) -> bool:
        """True if (x, y) is strictly inside the region."""
        ...


class PolygonRegion:
    def __init__(self, vertices: list[tuple[float, float]]) -> None:
        if vertices and len(vertices) < 3:
            raise ValueError(
                "A region polygon needs at least 3 vertices, "
                f"got {len(vertices)}"
            )
        self.vertices = [(float(x), float(y)) for x, y in vertices]
        self._polygon = ShapelyPolygon(self.vertices)
        if not self._polygon.is_empty:
            shapely.prepare(self._polygon)

    @staticmethod
    def empty() -> PolygonRegion:
        return PolygonRegion([])

    @staticmethod
    def from_dict(d: dict) -> PolygonRegion:
        return PolygonRegion([(p["x"], p["y"]) for p in d["points"]])

    def to_dict(self) -> dict:
        return {"points": [{"x": x, "y": y} for x, y in self.vertices]}

    @property
    def is_empty(self) -> bool:
        return self._polygon.is_empty

    def contains(self, x: float, y: float) -> bool:
        if self._polygon.is_empty:
            return False
        return bool(shapely.contains_xy(self._polygon, x, y))

    def contains_points(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Vectorized ``contains``: boolean mask, one entry per point."""
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        if self._polygon.is_empty:
            return np.zeros(xs.shape, dtype=bool)
        return shapely.contains_xy(self._polygon, xs, ys)

    def __repr__(self) -> str:
        return f"PolygonRegion({self.vertices!r})"


@dataclass
class VisionRegions:
    """Polygons produced by one vision-emitting source."""

    los: Region
    fov: Region

    @staticmethod
    def from_dict(d: dict) -> VisionRegions:
        return VisionRegions(
            los=PolygonRegion.from_dict(d["los"]),
            fov=PolygonRegion.from_dict(d["fov"]),
        )


@dataclass
class LightRegions:
    """Polygon lit by one ambient light source."""

    fov: Region

    @staticmethod
    def from_dict(d: dict) -> LightRegions:
        return LightRegions(fov=PolygonRegion.from_dict(d["fov"]))
