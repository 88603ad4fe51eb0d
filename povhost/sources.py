"""Rebuild a token's vision sources from its sample points.

Runs after the host has refreshed a token's primary vision source. The
primary record is used as a template: every sample point gets a copy of it
with only the origin changed. The center (or sole) point keeps the token's
own source key; auxiliary points in the ``ALL_*`` modes are keyed
``"{source_id}-{slot}"``, where slot is the mode code of the point.

The token's primary key and all its ``"{source_id}-"`` keys are dropped
before the new set is installed, so switching modes or moving repeatedly
never leaves stale auxiliaries behind.
"""

from __future__ import annotations

import logging

from povengine.sampling import sample_points_or_center

from .scene import SightLayer, TokenState, VisionSourceData
from .settings import PovSettings, resolve_mode

logger = logging.getLogger(__name__)


def auxiliary_key(source_id: str, slot_index: int) -> str:
    return f"{source_id}-{slot_index}"


def _belongs_to(key: str, source_id: str) -> bool:
    # "Token.1-5" belongs to Token.1; "Token.12" does not.
    return key == source_id or key.startswith(f"{source_id}-")


def remove_token_sources(sight: SightLayer, source_id: str) -> list[str]:
    """Remove the primary and auxiliary sources registered for a token."""
    stale = [key for key in sight.sources if _belongs_to(key, source_id)]
    for key in stale:
        del sight.sources[key]
    return stale


def update_token_sources(
    sight: SightLayer,
    token: TokenState,
    settings: PovSettings,
    *,
    defer: bool = False,
    deleted: bool = False,
    no_update_fog: bool = False,
) -> list[VisionSourceData]:
    """Replace ``token``'s vision sources with one per sample point.

    Returns the newly installed sources, center first. When the token has no
    primary source there is nothing to rebuild; a non-deferred deletion
    still refreshes the scene.
    """
    primary = sight.sources.get(token.source_id)
    if primary is None:
        if deleted and not defer:
            sight.refresh()
        return []

    mode = resolve_mode(token.flags, settings)
    points = sample_points_or_center(token.box, mode)

    removed = remove_token_sources(sight, token.source_id)
    logger.debug(
        "Rebuilding %s: removed %d source(s), installing %d for mode %s",
        token.source_id,
        len(removed),
        len(points),
        mode.name,
    )

    installed = []
    for i, point in enumerate(points):
        source = primary.moved_to(point.x, point.y)
        if i == 0:
            key = token.source_id
        else:
            key = auxiliary_key(token.source_id, point.slot_index)
        sight.sources[key] = source
        installed.append(source)

    if not defer:
        for source in installed:
            sight.draw(source)
        sight.refresh(no_update_fog=no_update_fog)
    return installed
