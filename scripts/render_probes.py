#!/usr/bin/env python3
"""Render a scene file's probe points and report token visibility.

Loads a scene JSON (see ``povhost/scene_io.py`` for the format), prints
whether each token is visible to a player and to a GM, and optionally writes
a PNG showing the regions and probe points.

Usage:
    python scripts/render_probes.py scene.json
    python scripts/render_probes.py scene.json -o probes.png --scale 4
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from povhost.policy import token_is_visible  # noqa: E402
from povhost.render import render_scene  # noqa: E402
from povhost.scene_io import load_scene  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("scene", type=Path, help="Scene JSON file")
    parser.add_argument(
        "-o", "--output", type=Path, help="Write a PNG rendering here"
    )
    parser.add_argument(
        "--scale", type=float, default=1.0, help="Pixels per scene unit"
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    scene, settings = load_scene(args.scene)

    def host_default():
        return False

    print(f"{'token':<20} {'player':>8} {'gm':>8}")
    for token in scene.tokens:
        verdicts = [
            token_is_visible(
                token, scene, settings, is_gm=gm, fallback=host_default
            )
            for gm in (False, True)
        ]
        print(
            f"{token.id:<20} {str(verdicts[0]):>8} {str(verdicts[1]):>8}"
        )

    if args.output:
        img = render_scene(scene, scale=args.scale)
        img.save(args.output)
        print(f"Wrote {args.output}")


if __name__ == "__main__":
    main()
