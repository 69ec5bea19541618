"""
Detect routes added to the server since the last run and probe them.

Extracts route registrations from the server source, diffs them against the
known-routes file, probes each new route once without credentials and
records the new routes as known.

Usage:
    routewatch-monitor
    routewatch-monitor init
    routewatch-monitor monitor --format table
    routewatch-monitor --server-file server/index.ts --known-routes scripts/.endpoints-conhecidos.json
"""

import argparse
import sys
from typing import TextIO

from rich.console import Console
from rich.markup import escape

from routewatch.route_registry.models import MonitorResult
from routewatch.route_registry.reporter import write_json, write_summary, write_table
from routewatch.utils.cli_utils import (
    EXIT_FAILURES,
    EXIT_FATAL,
    EXIT_OK,
    add_common_arguments,
    add_registry_arguments,
    apply_verbosity,
    build_monitor,
    build_prober,
)
from routewatch.utils.exceptions import RouteWatchError
from routewatch.utils.logger import get_logger

logger = get_logger(__name__)


def _write_output(result: MonitorResult, output: TextIO, fmt: str) -> None:
    """Dispatch to the appropriate writer."""
    if fmt == "json":
        write_json(result, output)
    elif fmt == "table":
        write_table(result, output)
    else:
        write_summary(result, output)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the new-route monitor."""
    parser = argparse.ArgumentParser(
        prog="routewatch-monitor",
        description="Detect and probe routes added to the server since the last run.",
    )
    parser.add_argument(
        "action",
        nargs="?",
        choices=["init", "monitor"],
        default="monitor",
        help="init: record the current routes as known; monitor: detect and probe new routes (default)",
    )
    parser.add_argument(
        "--format", "-f",
        choices=["json", "summary", "table"],
        default="summary",
        help="Output format (default: summary)",
    )
    add_registry_arguments(parser)
    add_common_arguments(parser)

    args = parser.parse_args(argv)
    apply_verbosity(args)

    console = Console()
    monitor = build_monitor(args, build_prober(args))

    try:
        if args.action == "init":
            routes = monitor.initialize()
            console.print(f"🔧 {len(routes)} routes recorded as known in {escape(str(args.known_routes))}")
            console.print("✅ Monitor initialized")
            return EXIT_OK

        result = monitor.monitor()
    except RouteWatchError as e:
        logger.error("Monitor failed: %s", e)
        return EXIT_FATAL
    except Exception:
        logger.exception("Unexpected error during monitoring")
        return EXIT_FATAL

    _write_output(result, console.file, args.format)
    return EXIT_OK if result.passed else EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
