#!/usr/bin/env python3
# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, type check, tests, and build."""

import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/"]),
    ("Type check", ["uv", "run", "ty", "check", "src/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=scopelex", "--cov-report=term-missing"]),
    ("Build", ["uv", "build"]),
]


def main() -> int:
    """Run all CI steps and report results."""
    results: list[tuple[str, bool, float]] = []

    for name, cmd in STEPS:
        sep = chalk.blue("=" * 60)
        print(f"\n{sep}")
        print(chalk.blue(name))
        print(sep)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_repo_root())
        results.append((name, proc.returncode == 0, time.monotonic() - start))

    print(f"\n{chalk.blue('=' * 60)}")
    print(chalk.blue("  Summary"))
    print(chalk.blue("=" * 60))
    for name, passed, elapsed in results:
        if passed:
            print(chalk.green(f"  PASS  {name} ({elapsed:.1f}s)"))
        else:
            print(chalk.red(f"  FAIL  {name} ({elapsed:.1f}s)"))

    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################


def _repo_root() -> str:
    return str(Path(__file__).parent.parent)


if __name__ == "__main__":
    sys.exit(main())
