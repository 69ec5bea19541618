"""
Integrated endpoint validation: new-route monitoring plus the catalog audit.

Modes:
    complete  detect and probe new routes, then audit the whole catalog (default)
    quick     detect and probe new routes only
    monitor   repeat the new-route check every N minutes until interrupted

Usage:
    routewatch-validate
    routewatch-validate quick
    routewatch-validate monitor 10
"""

import argparse
import sys
import time
from datetime import datetime

from rich.console import Console
from rich.markup import escape

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

DEFAULT_INTERVAL_MINUTES = 5


def validate_new_routes(monitor: RouteMonitor, console: Console) -> bool:
    """Probe routes added since the last run. True if none is critical."""
    result = monitor.monitor()
    write_summary(result, console.file)
    return result.passed


def validate_complete(monitor: RouteMonitor, console: Console) -> bool:
    """New-route monitoring followed by the full catalog audit."""
    print_banner(console, "🛡️  COMPLETE ENDPOINT VALIDATION")
    started = time.monotonic()

    console.print("\n📡 PHASE 1: new routes")
    new_routes_ok = validate_new_routes(monitor, console)
    if not new_routes_ok:
        console.print("[red]❌ New routes failed validation[/red]")

    console.print("\n🔍 PHASE 2: catalog audit")
    audit_ok, _ = run_audit(monitor.prober, console, ResultCollector())
    if not audit_ok:
        console.print("[red]❌ Catalog audit failed[/red]")

    passed = new_routes_ok and audit_ok
    console.print()
    console.print(f"⏱️  Total duration: {time.monotonic() - started:.2f}s")
    if passed:
        console.print("[bold green]✅ ALL ENDPOINTS PASSED VALIDATION[/bold green]")
    else:
        console.print("[bold red]❌ SECURITY PROBLEMS DETECTED - not ready for production[/bold red]")
    return passed


def watch(monitor: RouteMonitor, console: Console, interval_minutes: int, max_iterations: int | None = None) -> None:
    """
    Check for new routes every `interval_minutes` until interrupted.

    Args:
        monitor: The configured route monitor.
        console: Output sink.
        interval_minutes: Minutes between checks.
        max_iterations: Stop after this many checks (None = forever).
    """
    console.print(f"🔄 Continuous monitoring every {interval_minutes} minutes")
    iteration = 0
    while max_iterations is None or iteration < max_iterations:
        iteration += 1
        console.print(escape(f"\n⏰ [{datetime.now().strftime('%H:%M:%S')}] Running check..."))
        new_routes = monitor.find_new_routes()
        if new_routes:
            console.print(f"[bold red]🚨 ALERT: {len(new_routes)} new routes detected![/bold red]")
            validate_new_routes(monitor, console)
        else:
            console.print("✅ No changes detected")

        if max_iterations is None or iteration < max_iterations:
            time.sleep(interval_minutes * 60)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for integrated endpoint validation."""
    parser = argparse.ArgumentParser(
        prog="routewatch-validate",
        description="Validate new routes and, in complete mode, the whole endpoint catalog.",
    )
    parser.add_argument(
        "mode",
        nargs="?",
        choices=["complete", "quick", "monitor"],
        default="complete",
        help="Validation mode (default: complete)",
    )
    parser.add_argument(
        "interval",
        nargs="?",
        type=int,
        default=DEFAULT_INTERVAL_MINUTES,
        help=f"Minutes between checks in monitor mode (default: {DEFAULT_INTERVAL_MINUTES})",
    )
    add_registry_arguments(parser)
    add_common_arguments(parser)

    args = parser.parse_args(argv)
    apply_verbosity(args)

    console = Console()
    monitor = build_monitor(args, build_prober(args))

    try:
        if args.mode == "monitor":
            watch(monitor, console, args.interval)
            return EXIT_OK
        if args.mode == "quick":
            print_banner(console, "⚡ QUICK ENDPOINT VALIDATION")
            passed = validate_new_routes(monitor, console)
        else:
            passed = validate_complete(monitor, console)
    except KeyboardInterrupt:
        console.print("\n👋 Monitoring stopped")
        return EXIT_OK
    except RouteWatchError as e:
        logger.error("Validation failed: %s", e)
        return EXIT_FATAL
    except Exception:
        logger.exception("Unexpected error during validation")
        return EXIT_FATAL

    return EXIT_OK if passed else EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
