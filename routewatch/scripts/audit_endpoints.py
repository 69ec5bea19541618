"""
Security audit of every route in the endpoint catalog.

Each route is called without credentials and checked against its declared
intent, 2xx bodies are scanned for sensitive data, and protected routes are
called again with a bearer token to catch server errors.

Usage:
    routewatch-audit
    routewatch-audit --base-url http://localhost:5173
    routewatch-audit --report
"""

import argparse
import sys
import time

from rich.console import Console
from rich.markup import escape

from routewatch.checks.catalog import EndpointAuditor
from routewatch.checks.models import ScoreReport, Severity
from routewatch.checks.runner import ResultCollector, print_score
from routewatch.checks.scoring import DEFAULT_POLICY
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


def run_audit(
    prober: RouteProber,
    console: Console,
    collector: ResultCollector,
    bearer_token: str = Config.AUDIT_BEARER_TOKEN,
) -> tuple[bool, ScoreReport]:
    """
    Audit the catalog and print the final report.

    Returns:
        (passed, score). Passing requires no critical findings and a score
        at or above the policy's pass score.
    """
    print_banner(console, "🔒 ENDPOINT SECURITY AUDIT")
    started = time.monotonic()

    auditor = EndpointAuditor(prober, console, collector, bearer_token=bearer_token)
    auditor.run()

    console.print()
    console.print(f"⏱️  Duration: {time.monotonic() - started:.2f}s")
    report = print_score(console, collector, DEFAULT_POLICY)

    critical = [o for o in collector.outcomes if o.severity == Severity.CRITICAL]
    if critical:
        console.print()
        console.print("[bold red]🚨 CRITICAL FINDINGS[/bold red]")
        for outcome in critical:
            console.print(f"   ❌ {escape(outcome.label)}: {escape(', '.join(outcome.details))}")

    passed = DEFAULT_POLICY.is_passing(report)
    console.print()
    if report.critical_count:
        console.print("[bold red]⚠️  NOT READY FOR PRODUCTION: critical findings must be fixed[/bold red]")
    elif passed:
        console.print("[bold green]✅ APPROVED FOR PRODUCTION[/bold green]")
    else:
        console.print("[yellow]⚠️  SECURITY NEEDS IMPROVEMENT[/yellow]")
    return passed, report


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the endpoint catalog audit."""
    parser = argparse.ArgumentParser(
        prog="routewatch-audit",
        description="Audit every catalogued route for authentication and data leakage.",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help=f"Write a timestamped JSON summary to the reports directory ({Config.REPORTS_DIR})",
    )
    parser.add_argument(
        "--reports-dir",
        default=Config.REPORTS_DIR,
        help="Directory for --report output",
    )
    add_common_arguments(parser)

    args = parser.parse_args(argv)
    apply_verbosity(args)

    console = Console()
    collector = ResultCollector()

    try:
        passed, report = run_audit(build_prober(args), console, collector)
        if args.report:
            path = write_timestamped_report(
                {
                    "base_url": args.base_url,
                    "passed": passed,
                    "score": report.model_dump(mode="json"),
                    "outcomes": [o.model_dump(mode="json") for o in collector.outcomes],
                },
                args.reports_dir,
                prefix="endpoint-audit",
            )
            console.print(f"📝 Report written to {escape(str(path))}")
    except Exception:
        logger.exception("Unexpected error during the audit")
        return EXIT_FATAL

    return EXIT_OK if passed else EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
