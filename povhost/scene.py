"""Host-side records: tokens, vision sources, and the scene's sight layer.

These mirror the pieces of the host engine that point-of-vision touches. A
real host supplies its own objects; anything satisfying ``SightLayer`` works
with ``sources.update_token_sources`` and ``policy.token_is_visible``.
``Scene`` is the in-process implementation used by the scene loader, the
debug renderer and the tests.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field, replace
from typing import Callable, Protocol

from povengine.regions import LightRegions, PolygonRegion, VisionRegions
from povengine.types import BoundingBox


@dataclass
class VisionSourceData:
    x: float
    y: float
    z: float | None = None
    dim: float = 0.0
    bright: float = 0.0
    angle: float = 360.0
    rotation: float = 0.0
    color: str | None = None
    alpha: float = 0.5
    darkness: dict = field(default_factory=dict)
    source_type: str = "sight"
    animation: dict = field(default_factory=dict)
    seed: int | None = None
    # LOS / FOV polygons, filled in by the host's polygon builder.
    regions: VisionRegions | None = None

    @staticmethod
    def from_dict(d: dict) -> VisionSourceData:
        regions_d = d.get("regions")
        return VisionSourceData(
            x=d["x"],
            y=d["y"],
            z=d.get("z"),
            dim=d.get("dim", 0.0),
            bright=d.get("bright", 0.0),
            angle=d.get("angle", 360.0),
            rotation=d.get("rotation", 0.0),
            color=d.get("color"),
            alpha=d.get("alpha", 0.5),
            darkness=d.get("darkness", {}),
            source_type=d.get("source_type", "sight"),
            animation=d.get("animation", {}),
            seed=d.get("seed"),
            regions=(
                VisionRegions.from_dict(regions_d) if regions_d else None
            ),
        )

    def moved_to(self, x: float, y: float) -> VisionSourceData:
        """Copy with a new origin; polygons must be rebuilt for it."""
        return replace(
            self,
            x=x,
            y=y,
            darkness=dict(self.darkness),
            animation=dict(self.animation),
            regions=None,
        )


@dataclass
class TokenState:
    id: str
    box: BoundingBox
    flags: dict = field(default_factory=dict)
    hidden: bool = False
    controlled: bool = False

    @property
    def source_id(self) -> str:
        return f"Token.{self.id}"

    @staticmethod
    def from_dict(d: dict) -> TokenState:
        return TokenState(
            id=d["id"],
            box=BoundingBox.from_dict(d["box"]),
            flags=d.get("flags", {}),
            hidden=d.get("hidden", False),
            controlled=d.get("controlled", False),
        )


class SightLayer(Protocol):
    sources: MutableMapping[str, VisionSourceData]
    token_vision: bool
    global_illumination: bool

    def draw(self, source: VisionSourceData) -> None:
        """Rebuild the polygons for a freshly installed source."""
        ...

    def refresh(self, no_update_fog: bool = False) -> None:
        """Recompute scene visibility after a batch of source changes."""
        ...

    def vision_regions(self) -> list[VisionRegions]:
        """One entry per registered source, drawn or not."""
        ...

    def light_regions(self) -> list[LightRegions]: ...


PolygonBuilder = Callable[[VisionSourceData], VisionRegions]

_UNDRAWN = VisionRegions(
    los=PolygonRegion.empty(), fov=PolygonRegion.empty()
)


@dataclass
class Scene:
    tokens: list[TokenState] = field(default_factory=list)
    sources: dict[str, VisionSourceData] = field(default_factory=dict)
    lights: list[LightRegions] = field(default_factory=list)
    global_illumination: bool = False
    token_vision: bool = True
    polygon_builder: PolygonBuilder | None = None
    refresh_count: int = 0

    @staticmethod
    def from_dict(d: dict) -> Scene:
        return Scene(
            tokens=[TokenState.from_dict(t) for t in d.get("tokens", [])],
            sources={
                key: VisionSourceData.from_dict(s)
                for key, s in d.get("sources", {}).items()
            },
            lights=[LightRegions.from_dict(lt) for lt in d.get("lights", [])],
            global_illumination=d.get("global_illumination", False),
            token_vision=d.get("token_vision", True),
        )

    def token(self, token_id: str) -> TokenState:
        for t in self.tokens:
            if t.id == token_id:
                return t
        raise KeyError(f"No token with id {token_id!r}")

    def draw(self, source: VisionSourceData) -> None:
        if self.polygon_builder is not None:
            source.regions = self.polygon_builder(source)

    def refresh(self, no_update_fog: bool = False) -> None:
        self.refresh_count += 1

    def vision_regions(self) -> list[VisionRegions]:
        # A source not drawn yet still counts, but contains nothing.
        return [
            s.regions if s.regions is not None else _UNDRAWN
            for s in self.sources.values()
        ]

    def light_regions(self) -> list[LightRegions]:
        return list(self.lights)
