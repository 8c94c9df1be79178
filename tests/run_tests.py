#!/usr/bin/env python3
"""Run the fxplan test suites.

Suites map to directories, modules to ``tests/unit/test_<module>.py``. Async
tests carry the ``asyncio`` marker from pytest-asyncio and can be selected or
excluded on their own.
"""

import argparse
import sys
from pathlib import Path

TESTS = Path(__file__).parent
sys.path.insert(0, str(TESTS.parent / "src"))

import pytest  # type: ignore[import-not-found]

SUITES = {
    "unit": TESTS / "unit",
    "functional": TESTS / "functional",
}
MODULES = sorted(path.stem.removeprefix("test_") for path in (TESTS / "unit").glob("test_*.py"))


def build_pytest_args(args: argparse.Namespace) -> list[str]:
    if args.module:
        targets = [str(TESTS / "unit" / f"test_{module}.py") for module in args.module]
    else:
        targets = [str(SUITES[suite]) for suite in args.suite or SUITES]

    pytest_args = [*targets, "-vv" if args.verbose else "-q", "-ra"]
    if args.only_async:
        pytest_args.extend(["-m", "asyncio"])
    elif args.skip_async:
        pytest_args.extend(["-m", "not asyncio"])
    if args.keyword:
        pytest_args.extend(["-k", args.keyword])
    if args.failfast:
        pytest_args.append("-x")
    if args.coverage:
        pytest_args.extend(["--cov=fxplan", "--cov-branch", "--cov-report=term-missing"])
    return pytest_args


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--suite",
        "-s",
        action="append",
        choices=list(SUITES),
        help="Run one suite; repeatable (default: all suites)",
    )
    parser.add_argument(
        "--module",
        "-m",
        action="append",
        choices=MODULES,
        help="Run the unit tests of one module; repeatable",
    )
    timing = parser.add_mutually_exclusive_group()
    timing.add_argument("--only-async", action="store_true", help="Run only asyncio tests")
    timing.add_argument("--skip-async", action="store_true", help="Skip asyncio tests")
    parser.add_argument("--keyword", "-k", help="Run tests matching the given expression")
    parser.add_argument("--coverage", action="store_true", help="Report branch coverage")
    parser.add_argument("--failfast", "-x", action="store_true", help="Stop on first failure")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    pytest_args = build_pytest_args(parser.parse_args())
    print(f"Running: pytest {' '.join(pytest_args)}")
    return pytest.main(pytest_args)


if __name__ == "__main__":
    sys.exit(main())
