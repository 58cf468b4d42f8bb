#!/usr/bin/env python3
"""Run repository checks: ruff, pyright, then pytest (Qt offscreen).

Exits non-zero on the first failing step so CI and local tooling can observe status.
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys


def run(cmd: list[str], env: dict[str, str] | None = None) -> int:
    print("=>", " ".join(cmd))
    res = subprocess.run(cmd, check=False, env=env)
    return res.returncode


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--no-tests", action="store_true", help="Skip running pytest")
    parser.add_argument("--no-types", action="store_true", help="Skip pyright")
    parser.add_argument("pytest_args", nargs=argparse.REMAINDER, help="Extra pytest args")
    args = parser.parse_args()

    rc = run([sys.executable, "-m", "ruff", "check", "code_chrono", "tests"])
    if rc != 0:
        print("ruff failed")
        return rc

    if not args.no_types:
        rc = run([sys.executable, "-m", "pyright", "code_chrono"])
        if rc != 0:
            print("pyright failed")
            return rc

    if not args.no_tests:
        env = os.environ.copy()
        # No window system needed: state tests only touch QApplication palettes.
        env.setdefault("QT_QPA_PLATFORM", "offscreen")
        extra = [a for a in args.pytest_args if a != "--"]
        rc = run([sys.executable, "-m", "pytest", "-q", *extra], env=env)
        if rc != 0:
            print("pytest failed")
            return rc

    print("All checks passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
