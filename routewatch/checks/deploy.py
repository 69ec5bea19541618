"""
routewatch/checks/deploy.py

Pre-deploy secret presence checks. Values are never inspected, only whether
each variable is set to a non-empty string.
"""

from collections.abc import Mapping

from rich.console import Console
from rich.markup import escape

from routewatch.checks.models import CheckOutcome, Severity
from routewatch.checks.runner import ResultCollector, print_outcome


def find_missing_secrets(environ: Mapping[str, str], names: list[str]) -> list[str]:
    """Return the names that are unset or empty in `environ`, in input order."""
    return [name for name in names if not environ.get(name)]


def check_required_secrets(
    environ: Mapping[str, str],
    names: list[str],
    console: Console,
    collector: ResultCollector,
) -> bool:
    """
    Record one outcome per required secret and print a summary line.

    Returns:
        True if every secret is present.
    """
    missing = set(find_missing_secrets(environ, names))
    for name in names:
        outcome = CheckOutcome(
            name=name,
            method="ENV",
            path=name,
            category="secrets",
            passed=name not in missing,
            severity=Severity.CRITICAL if name in missing else Severity.OK,
            details=["missing"] if name in missing else ["present"],
        )
        collector.add(outcome)
        print_outcome(console, outcome)

    if missing:
        console.print(f"[bold red]🚫 Missing required secrets: {escape(', '.join(sorted(missing)))}[/bold red]")
        return False
    console.print("[green]🎉 All required secrets are present[/green]")
    return True
