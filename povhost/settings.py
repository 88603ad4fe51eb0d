"""World settings and per-token mode flags.

The external settings collaborator persists three values:

  * ``pov``: the world default sampling mode, one of the codes in
    ``WORLD_DEFAULT_CHOICES`` (center, all corners + center, all mids +
    center). Defaults to all corners + center.
  * ``expandVisibility``: whether the nine-point visibility test replaces
    the host's single-point one. Defaults to on.
  * a per-token ``pov`` flag on the token document, absent when the token
    follows the world default.

``SettingsStore`` holds the current snapshot and is the only thing updated
when the collaborator reports a change; everything downstream receives an
immutable ``PovSettings`` at call time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable

from povengine.types import SamplingMode

logger = logging.getLogger(__name__)

MODULE_ID = "point-of-vision"
SETTING_KEY = "pov"
EXPAND_VISIBILITY_KEY = "expandVisibility"

# Token-config form value meaning "follow the world default".
UNSET = -1

WORLD_DEFAULT_CHOICES = (
    SamplingMode.CENTER,
    SamplingMode.ALL_CORNERS_AND_CENTER,
    SamplingMode.ALL_MIDS_AND_CENTER,
)

MODE_LABELS: dict[SamplingMode, str] = {
    SamplingMode.CENTER: "Center",
    SamplingMode.TOP_LEFT: "Top Left",
    SamplingMode.TOP_RIGHT: "Top Right",
    SamplingMode.BOTTOM_LEFT: "Bottom Left",
    SamplingMode.BOTTOM_RIGHT: "Bottom Right",
    SamplingMode.ALL_CORNERS_AND_CENTER: "All Corners + Center",
    SamplingMode.TOP: "Top",
    SamplingMode.BOTTOM: "Bottom",
    SamplingMode.LEFT: "Left",
    SamplingMode.RIGHT: "Right",
    SamplingMode.ALL_MIDS_AND_CENTER: "All Mids + Center",
}


def _parse_world_default(value: Any) -> SamplingMode:
    mode = SamplingMode.parse(value)
    if mode not in WORLD_DEFAULT_CHOICES:
        raise ValueError(
            f"Invalid world default sampling mode {value!r}; expected one of "
            f"{[int(m) for m in WORLD_DEFAULT_CHOICES]}"
        )
    return mode


@dataclass(frozen=True)
class PovSettings:
    default_mode: SamplingMode = SamplingMode.ALL_CORNERS_AND_CENTER
    expand_visibility: bool = True

    @staticmethod
    def from_dict(d: dict | None) -> PovSettings:
        if not d:
            return PovSettings()
        return PovSettings(
            default_mode=_parse_world_default(
                d.get(SETTING_KEY, SamplingMode.ALL_CORNERS_AND_CENTER)
            ),
            expand_visibility=bool(d.get(EXPAND_VISIBILITY_KEY, True)),
        )

    def to_dict(self) -> dict:
        return {
            SETTING_KEY: int(self.default_mode),
            EXPAND_VISIBILITY_KEY: self.expand_visibility,
        }


class SettingsStore:
    """Current settings snapshot, updated by the settings collaborator."""

    def __init__(self, initial: PovSettings | None = None) -> None:
        self._current = initial if initial is not None else PovSettings()
        self._listeners: list[Callable[[PovSettings], None]] = []

    @property
    def current(self) -> PovSettings:
        return self._current

    def subscribe(self, listener: Callable[[PovSettings], None]) -> None:
        self._listeners.append(listener)

    def on_change(self, key: str, value: Any) -> PovSettings:
        """Apply one changed setting and notify subscribers.

        Raises:
            KeyError: for a key this module does not own.
            ValueError: for a world default outside WORLD_DEFAULT_CHOICES.
        """
        if key == SETTING_KEY:
            updated = replace(
                self._current, default_mode=_parse_world_default(value)
            )
        elif key == EXPAND_VISIBILITY_KEY:
            updated = replace(self._current, expand_visibility=bool(value))
        else:
            raise KeyError(f"Unknown {MODULE_ID} setting: {key!r}")
        logger.debug("Setting %s changed to %r", key, value)
        self._current = updated
        for listener in self._listeners:
            listener(updated)
        return updated


def resolve_mode(token_flags: dict, settings: PovSettings) -> SamplingMode:
    """Effective sampling mode: token override if set, else world default.

    An unrecognized stored flag is logged and ignored.
    """
    flag = token_flags.get(SETTING_KEY)
    if flag is None:
        return settings.default_mode
    mode = SamplingMode.parse(flag)
    if mode is None:
        logger.error("Ignoring invalid token sampling mode flag %r", flag)
        return settings.default_mode
    return mode


def apply_token_change(token_flags: dict, change: dict) -> dict:
    """Apply a token-config form submission to the token's flags.

    ``change["pov"] == -1`` clears the override; any known mode code sets
    it. Returns a new flags dict; the input is not modified.

    Raises:
        ValueError: if the submitted value is not a known mode code.
    """
    flags = dict(token_flags)
    if SETTING_KEY not in change:
        return flags
    value = int(change[SETTING_KEY])
    if value == UNSET:
        flags.pop(SETTING_KEY, None)
        return flags
    mode = SamplingMode.parse(value)
    if mode is None:
        raise ValueError(f"Invalid token sampling mode {value!r}")
    flags[SETTING_KEY] = int(mode)
    return flags


def token_config_choices(
    settings: PovSettings,
) -> list[tuple[str | None, list[tuple[int, str]]]]:
    """Options for the per-token select, as (group label, options) pairs.

    The first group (label None) holds the "follow world default" entry and
    plain center; the corner and midpoint families follow in their own
    groups.
    """
    default_label = MODE_LABELS[settings.default_mode]
    top = [
        (UNSET, f"Default ({default_label})"),
        (
            int(SamplingMode.CENTER),
            f"{MODE_LABELS[SamplingMode.CENTER]} (Host Default)",
        ),
    ]
    corners = [
        (int(m), MODE_LABELS[m])
        for m in (
            SamplingMode.TOP_LEFT,
            SamplingMode.TOP_RIGHT,
            SamplingMode.BOTTOM_LEFT,
            SamplingMode.BOTTOM_RIGHT,
            SamplingMode.ALL_CORNERS_AND_CENTER,
        )
    ]
    mids = [
        (int(m), MODE_LABELS[m])
        for m in (
            SamplingMode.TOP,
            SamplingMode.BOTTOM,
            SamplingMode.LEFT,
            SamplingMode.RIGHT,
            SamplingMode.ALL_MIDS_AND_CENTER,
        )
    ]
    return [(None, top), ("Corners", corners), ("Midpoints", mids)]
