"""
LGPD compliance checks against the public LGPD routes.

Each response body is validated against its schema. With --race N the
consent route is also hit N times concurrently.

Usage:
    routewatch-lgpd
    routewatch-lgpd --race 5
"""

import argparse
import sys

from rich.console import Console

from routewatch.checks.lgpd import LGPD_CHECKS
from routewatch.checks.runner import CheckRunner, ResultCollector, print_score
from routewatch.checks.scoring import DEFAULT_POLICY
from routewatch.route_registry.prober import RouteProber
from routewatch.utils.cli_utils import (
    EXIT_FAILURES,
    EXIT_FATAL,
    EXIT_OK,
    add_common_arguments,
    apply_verbosity,
    build_prober,
    print_banner,
)
from routewatch.utils.logger import get_logger

logger = get_logger(__name__)

_RACE_CHECK_NAME = "Record consent"


def run_lgpd_checks(prober: RouteProber, console: Console, collector: ResultCollector, race: int = 0) -> bool:
    """
    Run the LGPD assertion list, optionally followed by a concurrent consent batch.

    Returns:
        True if the run passes the scoring policy.
    """
    print_banner(console, "🔍 LGPD COMPLIANCE CHECK")
    runner = CheckRunner(prober, console, collector)
    runner.run_all(LGPD_CHECKS)

    if race > 0:
        race_check = next(check for check in LGPD_CHECKS if check.name == _RACE_CHECK_NAME)
        console.print(f"\n🏁 Concurrent batch: {race} x {race_check.label}")
        runner.run_concurrent_batch(race_check, size=race)

    report = print_score(console, collector, DEFAULT_POLICY)
    return DEFAULT_POLICY.is_passing(report)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for LGPD checks."""
    parser = argparse.ArgumentParser(
        prog="routewatch-lgpd",
        description="Check the LGPD routes of the running server.",
    )
    parser.add_argument(
        "--race",
        type=int,
        default=0,
        help="Also send the consent request this many times concurrently (default: 0)",
    )
    add_common_arguments(parser)

    args = parser.parse_args(argv)
    apply_verbosity(args)

    console = Console()
    try:
        passed = run_lgpd_checks(build_prober(args), console, ResultCollector(), race=args.race)
    except Exception:
        logger.exception("Unexpected error during LGPD checks")
        return EXIT_FATAL

    return EXIT_OK if passed else EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
