"""Token visibility policy and the host extension points.

``token_is_visible`` decides whether the current viewer can see a token. The
checks run in a fixed order; the first one that applies wins:

  1. expanded checks disabled   -> the host's own test (``fallback``)
  2. token is hidden            -> only a GM sees it
  3. scene has no token vision  -> visible
  4. viewer controls the token  -> visible
  5. token emits its own vision -> visible
  6. no vision sources at all   -> only a GM sees it
  7. otherwise                  -> nine-point test in povengine.visibility

``PointOfVision`` wires these functions to the host. Instead of patching the
host's methods, the host calls the ``on_*`` / ``is_token_visible`` hooks at
its own extension points and passes its built-in behaviour in as
``fallback`` where one exists.
"""

from __future__ import annotations

from typing import Callable

from povengine.visibility import is_visible

from .scene import SightLayer, TokenState, VisionSourceData
from .settings import (
    PovSettings,
    SettingsStore,
    apply_token_change,
    token_config_choices,
)
from .sources import update_token_sources


def token_is_visible(
    token: TokenState,
    sight: SightLayer,
    settings: PovSettings,
    *,
    is_gm: bool,
    fallback: Callable[[], bool],
) -> bool:
    if not settings.expand_visibility:
        return fallback()
    if token.hidden:
        return is_gm
    if not sight.token_vision:
        return True
    if token.controlled:
        return True
    if token.source_id in sight.sources:
        return True
    if not sight.sources:
        return is_gm
    vision = sight.vision_regions()
    if not vision:
        # Sources exist but none has polygons yet: nothing is in sight.
        return False
    return is_visible(
        token.box,
        vision,
        sight.light_regions(),
        sight.global_illumination,
        is_gm,
    )


class PointOfVision:
    def __init__(self, store: SettingsStore | None = None) -> None:
        self.store = store if store is not None else SettingsStore()

    def on_setting_changed(self, key: str, value) -> PovSettings:
        return self.store.on_change(key, value)

    def on_token_update(
        self,
        sight: SightLayer,
        token: TokenState,
        *,
        defer: bool = False,
        deleted: bool = False,
        no_update_fog: bool = False,
    ) -> list[VisionSourceData]:
        return update_token_sources(
            sight,
            token,
            self.store.current,
            defer=defer,
            deleted=deleted,
            no_update_fog=no_update_fog,
        )

    def is_token_visible(
        self,
        token: TokenState,
        sight: SightLayer,
        *,
        is_gm: bool,
        fallback: Callable[[], bool],
    ) -> bool:
        return token_is_visible(
            token, sight, self.store.current, is_gm=is_gm, fallback=fallback
        )

    def on_pre_update_token(self, token: TokenState, change: dict) -> None:
        token.flags = apply_token_change(token.flags, change)

    def token_config_choices(self):
        return token_config_choices(self.store.current)
