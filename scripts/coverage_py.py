#!/usr/bin/env python3
"""Run the unit tests under coverage and gate on core coverage.

The sampling and visibility core (``povengine``) must stay above a line
coverage threshold; the host glue (``povhost``) is reported but not gated.
Exits non-zero when tests fail or the core drops below the threshold.

Usage:
    python scripts/coverage_py.py                    # gate at 95%
    python scripts/coverage_py.py --fail-under 90
    python scripts/coverage_py.py --html             # also write HTML report
"""

import argparse
import subprocess
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent
DATA_FILE = ROOT_DIR / ".coverage"
CORE_PACKAGE = "povengine"
GLUE_PACKAGE = "povhost"


def coverage(*args: str) -> int:
    cmd = [sys.executable, "-m", "coverage", *args]
    cmd.append(f"--data-file={DATA_FILE}")
    return subprocess.run(cmd, cwd=str(ROOT_DIR)).returncode


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--fail-under",
        type=float,
        default=95.0,
        help=f"Minimum line coverage for {CORE_PACKAGE} (percent)",
    )
    parser.add_argument(
        "--html", action="store_true", help="Write an HTML report too"
    )
    args = parser.parse_args(argv)

    # Test modules sit beside the code; keep them out of the numbers.
    omit = "--omit=*_test.py"
    rc = coverage(
        "run",
        f"--source={CORE_PACKAGE},{GLUE_PACKAGE}",
        omit,
        "-m",
        "pytest",
        CORE_PACKAGE,
        GLUE_PACKAGE,
    )
    if rc != 0:
        sys.exit(rc)

    print(f"\n=== {GLUE_PACKAGE} ===")
    coverage("report", f"--include={GLUE_PACKAGE}/*", omit)

    print(f"\n=== {CORE_PACKAGE} (gate {args.fail_under:.0f}%) ===")
    rc = coverage(
        "report",
        f"--include={CORE_PACKAGE}/*",
        omit,
        "--show-missing",
        f"--fail-under={args.fail_under}",
    )

    if args.html:
        html_dir = ROOT_DIR / "htmlcov"
        coverage("html", omit, f"--directory={html_dir}")
        print(f"HTML report: {html_dir / 'index.html'}")

    if rc != 0:
        print(
            f"{CORE_PACKAGE} coverage is below {args.fail_under}%",
            file=sys.stderr,
        )
    sys.exit(rc)


if __name__ == "__main__":
    main()
