"""
routewatch/utils/cli_utils.py

Shared argument parsing and wiring for the routewatch entry points.
"""

import logging
from argparse import ArgumentParser, Namespace

from rich.console import Console

from routewatch.checks.scoring import DEFAULT_POLICY, ScoringPolicy
from routewatch.config import Config
from routewatch.route_registry.monitor import RouteMonitor
from routewatch.route_registry.prober import RouteProber
from routewatch.route_registry.store import KnownRouteStore
from routewatch.utils.logger import set_level

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_FATAL = 2


def add_common_arguments(parser: ArgumentParser) -> None:
    """
    Add --base-url, --timeout and --verbose to an ArgumentParser.

    Args:
        parser: The ArgumentParser to add the arguments to
    """
    parser.add_argument(
        "--base-url",
        default=Config.BASE_URL,
        help=f"Base URL of the running server (default: {Config.BASE_URL})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=Config.REQUEST_TIMEOUT,
        help=f"Per-request timeout in seconds (default: {Config.REQUEST_TIMEOUT})",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )


def add_registry_arguments(parser: ArgumentParser) -> None:
    """Add --server-file and --known-routes to an ArgumentParser."""
    parser.add_argument(
        "--server-file",
        default=Config.SERVER_FILE,
        help=f"Server entry point to scan for routes (default: {Config.SERVER_FILE})",
    )
    parser.add_argument(
        "--known-routes",
        default=Config.KNOWN_ROUTES_FILE,
        help=f"Known-routes JSON file (default: {Config.KNOWN_ROUTES_FILE})",
    )


def apply_verbosity(args: Namespace) -> None:
    if getattr(args, "verbose", False):
        set_level(logging.DEBUG)


def build_prober(args: Namespace) -> RouteProber:
    return RouteProber(base_url=args.base_url, timeout=args.timeout)


def build_monitor(args: Namespace, prober: RouteProber, policy: ScoringPolicy = DEFAULT_POLICY) -> RouteMonitor:
    return RouteMonitor(
        server_file=args.server_file,
        store=KnownRouteStore(args.known_routes),
        prober=prober,
        scoring_policy=policy,
    )


def print_banner(console: Console, title: str) -> None:
    console.print()
    console.print(f"[bold]{title}[/bold]")
    console.print("=" * len(title))
