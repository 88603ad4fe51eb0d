"""Load and save scene descriptions as JSON.

A scene file holds everything the visibility test needs, with polygons
precomputed by whatever built them:

    {
      "settings": {"pov": 5, "expandVisibility": true},
      "global_illumination": false,
      "token_vision": true,
      "tokens": [{"id": "a", "box": {...}, "flags": {"pov": 10}}],
      "sources": {"Token.a": {"x": .., "y": .., "regions": {"los": .., "fov": ..}}},
      "lights": [{"fov": {"points": [{"x": .., "y": ..}, ...]}}]
    }

Used by ``render.py`` and ``scripts/render_probes.py``.
"""

from __future__ import annotations

import json
from pathlib import Path

from .scene import Scene
from .settings import PovSettings


def load_scene_dict(path: Path) -> dict:
    """Load a scene JSON file and return the raw dict.

    Raises ValueError for anything other than a ``.json`` file.
    """
    path = Path(path)
    if path.suffix.lower() != ".json":
        raise ValueError(f"Unsupported file extension: {path}")
    with open(path) as f:
        return json.load(f)


def load_scene(path: Path) -> tuple[Scene, PovSettings]:
    """Load a scene file into a typed ``Scene`` and its settings."""
    data = load_scene_dict(path)
    return Scene.from_dict(data), PovSettings.from_dict(data.get("settings"))


def save_scene_dict(data: dict, path: Path) -> None:
    """Write a scene dict to a JSON file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
