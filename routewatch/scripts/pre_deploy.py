"""
Pre-deploy check: every required deployment secret is present in the
environment. Only presence is verified, never the value.

Usage:
    routewatch-pre-deploy
    routewatch-pre-deploy --secret DATABASE_URL --secret SESSION_SECRET
"""

import argparse
import os
import sys

from rich.console import Console

from routewatch.checks.deploy import check_required_secrets
from routewatch.checks.runner import ResultCollector
from routewatch.config import Config
from routewatch.utils.cli_utils import EXIT_FAILURES, EXIT_FATAL, EXIT_OK, print_banner
from routewatch.utils.logger import get_logger

logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the pre-deploy secrets check."""
    parser = argparse.ArgumentParser(
        prog="routewatch-pre-deploy",
        description="Verify that required deployment secrets are set.",
    )
    parser.add_argument(
        "--secret",
        action="append",
        dest="secrets",
        default=None,
        help=f"Secret to require (repeatable; default: {', '.join(Config.REQUIRED_SECRETS)})",
    )
    args = parser.parse_args(argv)

    console = Console()
    print_banner(console, "🔍 PRE-DEPLOY: required secrets")
    names = args.secrets or Config.REQUIRED_SECRETS
    try:
        passed = check_required_secrets(os.environ, names, console, ResultCollector())
    except Exception:
        logger.exception("Unexpected error during the pre-deploy check")
        return EXIT_FATAL

    return EXIT_OK if passed else EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
