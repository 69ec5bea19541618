"""
Pre-commit endpoint security gate.

Probes routes added since the last run; when there are any, the whole
endpoint catalog is audited as well. Exit code 1 blocks the commit.

Usage:
    routewatch-pre-commit
"""

import argparse
import sys

from rich.console import Console

from routewatch.checks.runner import ResultCollector
from routewatch.route_registry.monitor import RouteMonitor
from routewatch.route_registry.reporter import write_summary
from routewatch.scripts.audit_endpoints import run_audit
from routewatch.utils.cli_utils import (
    EXIT_FAILURES,
    EXIT_FATAL,
    EXIT_OK,
    add_common_arguments,
    add_registry_arguments,
    apply_verbosity,
    build_monitor,
    build_prober,
    print_banner,
)
from routewatch.utils.exceptions import RouteWatchError
from routewatch.utils.logger import get_logger

logger = get_logger(__name__)


def run_pre_commit(monitor: RouteMonitor, console: Console) -> bool:
    """
    Run the gate.

    Returns:
        True if the commit may proceed.
    """
    print_banner(console, "🔐 PRE-COMMIT: endpoint security check")

    result = monitor.monitor()
    write_summary(result, console.file)
    passed = result.passed
    if not passed:
        console.print("[red]❌ New routes with security problems detected[/red]")

    if result.new_routes:
        console.print("\n🧪 New routes found, running the full catalog audit...")
        audit_ok, _ = run_audit(monitor.prober, console, ResultCollector())
        if not audit_ok:
            console.print("[red]❌ Full catalog audit failed[/red]")
            passed = False

    if passed:
        console.print("\n[bold green]✅ COMMIT APPROVED[/bold green]")
    else:
        console.print("\n[bold red]🚫 COMMIT BLOCKED - fix the security problems first[/bold red]")
    return passed


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the pre-commit gate."""
    parser = argparse.ArgumentParser(
        prog="routewatch-pre-commit",
        description="Block commits that add insecure routes.",
    )
    add_registry_arguments(parser)
    add_common_arguments(parser)

    args = parser.parse_args(argv)
    apply_verbosity(args)

    console = Console()
    try:
        passed = run_pre_commit(build_monitor(args, build_prober(args)), console)
    except RouteWatchError as e:
        logger.error("Pre-commit check failed: %s", e)
        return EXIT_FATAL
    except Exception:
        logger.exception("Unexpected error during the pre-commit check")
        return EXIT_FATAL

    return EXIT_OK if passed else EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
