"""
Smoke test of the critical public routes, with a timestamped JSON report.

Checks that /api/organizations/user-counts returns an array and that
/api/lgpd/terms and /api/health return the expected objects.

Usage:
    routewatch-system
    routewatch-system --reports-dir reports
    routewatch-system --no-report
"""

import argparse
import sys

from rich.console import Console
from rich.markup import escape

from routewatch.checks.models import ScoreReport
from routewatch.checks.runner import CheckRunner, ResultCollector, print_score
from routewatch.checks.scoring import DEFAULT_POLICY
from routewatch.checks.system import SYSTEM_CHECKS
from routewatch.config import Config
from routewatch.route_registry.prober import RouteProber
from routewatch.route_registry.reporter import write_timestamped_report
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

REPORT_PREFIX = "monitor-sistema"


def run_system_checks(prober: RouteProber, console: Console, collector: ResultCollector) -> tuple[bool, ScoreReport]:
    """
    Run the critical-route smoke checks and print the score.

    Returns:
        (passed, score) under the default scoring policy.
    """
    print_banner(console, "⚡ CRITICAL ENDPOINTS")
    CheckRunner(prober, console, collector).run_all(SYSTEM_CHECKS)
    report = print_score(console, collector, DEFAULT_POLICY)
    return DEFAULT_POLICY.is_passing(report), report


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the critical-route smoke test."""
    parser = argparse.ArgumentParser(
        prog="routewatch-system",
        description="Check that the critical public routes answer with the expected data shapes.",
    )
    parser.add_argument(
        "--reports-dir",
        default=Config.REPORTS_DIR,
        help=f"Directory for the JSON report (default: {Config.REPORTS_DIR})",
    )
    parser.add_argument(
        "--no-report",
        action="store_true",
        help="Do not write the JSON report",
    )
    add_common_arguments(parser)

    args = parser.parse_args(argv)
    apply_verbosity(args)

    console = Console()
    collector = ResultCollector()

    try:
        passed, report = run_system_checks(build_prober(args), console, collector)
        if not args.no_report:
            path = write_timestamped_report(
                {
                    "base_url": args.base_url,
                    "passed": passed,
                    "score": report.model_dump(mode="json"),
                    "outcomes": [o.model_dump(mode="json") for o in collector.outcomes],
                },
                args.reports_dir,
                prefix=REPORT_PREFIX,
            )
            console.print(f"📝 Report written to {escape(str(path))}")
    except Exception:
        logger.exception("Unexpected error during the system check")
        return EXIT_FATAL

    return EXIT_OK if passed else EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
