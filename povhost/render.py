"""Debug rendering of a scene's regions, tokens, and probe points.

Draws, back to front: light FOV polygons, vision FOV polygons, vision LOS
outlines, token boxes, then every token's probe points. A probe point is
green when some LOS region contains it and red otherwise, which makes
grid-edge misclassification easy to spot.
"""

from __future__ import annotations

import numpy as np
from PIL import Image, ImageDraw

from povengine.regions import PolygonRegion
from povengine.visibility import probe_points

from .scene import Scene

BACKGROUND = "#1e1e1e"
LIGHT_FILL = "#4a4326"
FOV_FILL = "#2f4a5c"
LOS_OUTLINE = "#7fb3d5"
TOKEN_OUTLINE = "#e0e0e0"
HIDDEN_TOKEN_OUTLINE = "#808080"
PROBE_SEEN = "#3ccf4e"
PROBE_UNSEEN = "#e04040"


def probe_los_mask(scene: Scene, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Which of the given points lie inside at least one LOS polygon."""
    mask = np.zeros(len(xs), dtype=bool)
    for regions in scene.vision_regions():
        los = regions.los
        if isinstance(los, PolygonRegion):
            mask |= los.contains_points(xs, ys)
        else:
            mask |= np.array(
                [los.contains(x, y) for x, y in zip(xs, ys)], dtype=bool
            )
    return mask


def _scene_extent(scene: Scene) -> tuple[float, float]:
    max_x = 0.0
    max_y = 0.0
    for t in scene.tokens:
        max_x = max(max_x, t.box.center_x + t.box.width / 2)
        max_y = max(max_y, t.box.center_y + t.box.height / 2)
    polygons = [lt.fov for lt in scene.lights]
    for regions in scene.vision_regions():
        polygons.extend([regions.los, regions.fov])
    for poly in polygons:
        for x, y in getattr(poly, "vertices", []):
            max_x = max(max_x, x)
            max_y = max(max_y, y)
    return max_x, max_y


def _draw_polygon(draw, poly, scale, fill=None, outline=None):
    vertices = getattr(poly, "vertices", None)
    if not vertices:
        return
    draw.polygon(
        [(x * scale, y * scale) for x, y in vertices],
        fill=fill,
        outline=outline,
    )


def render_scene(scene: Scene, scale: float = 1.0, margin: int = 10):
    """Render ``scene`` to a new RGB image, ``scale`` pixels per unit."""
    max_x, max_y = _scene_extent(scene)
    w = int(max_x * scale) + margin
    h = int(max_y * scale) + margin
    img = Image.new("RGB", (max(w, 1), max(h, 1)), BACKGROUND)
    draw = ImageDraw.Draw(img)

    for light in scene.lights:
        _draw_polygon(draw, light.fov, scale, fill=LIGHT_FILL)
    vision = scene.vision_regions()
    for regions in vision:
        _draw_polygon(draw, regions.fov, scale, fill=FOV_FILL)
    for regions in vision:
        _draw_polygon(draw, regions.los, scale, outline=LOS_OUTLINE)

    r = max(2.0, scale * 0.1)
    for token in scene.tokens:
        box = token.box
        x0 = (box.center_x - box.width / 2) * scale
        y0 = (box.center_y - box.height / 2) * scale
        x1 = (box.center_x + box.width / 2) * scale
        y1 = (box.center_y + box.height / 2) * scale
        outline = HIDDEN_TOKEN_OUTLINE if token.hidden else TOKEN_OUTLINE
        draw.rectangle([x0, y0, x1, y1], outline=outline, width=1)

        points = probe_points(box)
        xs = np.array([p[0] for p in points])
        ys = np.array([p[1] for p in points])
        seen = probe_los_mask(scene, xs, ys)
        for x, y, hit in zip(xs, ys, seen):
            px = x * scale
            py = y * scale
            draw.ellipse(
                [px - r, py - r, px + r, py + r],
                fill=PROBE_SEEN if hit else PROBE_UNSEEN,
            )
    return img
