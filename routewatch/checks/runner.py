"""
routewatch/checks/runner.py

Runs HttpCheck lists against the target server.

The output sink (a rich Console) and the result collector are passed in,
so composite commands can run several lists and read the results back
without intercepting process-level output or exit.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed

import requests
from rich.console import Console
from rich.markup import escape

from routewatch.checks.models import CheckOutcome, HttpCheck, ScoreReport, Severity
from routewatch.checks.schemas import validate_payload
from routewatch.checks.scoring import DEFAULT_POLICY, ScoringPolicy
from routewatch.route_registry.prober import RouteProber
from routewatch.utils.logger import get_logger

logger = get_logger(name=__name__)


class ResultCollector:
    """Accumulates CheckOutcomes across one or more check lists."""

    def __init__(self) -> None:
        self._outcomes: list[CheckOutcome] = []

    def add(self, outcome: CheckOutcome) -> None:
        self._outcomes.append(outcome)

    @property
    def outcomes(self) -> list[CheckOutcome]:
        return list(self._outcomes)

    @property
    def passed_count(self) -> int:
        return sum(1 for o in self._outcomes if o.passed)

    @property
    def failed_count(self) -> int:
        return len(self._outcomes) - self.passed_count

    @property
    def critical_count(self) -> int:
        return sum(1 for o in self._outcomes if o.severity == Severity.CRITICAL)

    def by_category(self) -> dict[str, tuple[int, int]]:
        """Map category -> (passed, total), in first-seen order."""
        stats: dict[str, tuple[int, int]] = {}
        for outcome in self._outcomes:
            passed, total = stats.get(outcome.category, (0, 0))
            stats[outcome.category] = (passed + int(outcome.passed), total + 1)
        return stats

    def score(self, policy: ScoringPolicy = DEFAULT_POLICY) -> ScoreReport:
        return policy.score([o.to_finding() for o in self._outcomes])


def print_outcome(console: Console, outcome: CheckOutcome) -> None:
    """Print one outcome line with a severity marker."""
    details = escape(", ".join(outcome.details))
    if outcome.passed:
        console.print(f"[green]✅ PASSED[/green] {escape(outcome.name)}" + (f" [dim]({details})[/dim]" if details else ""))
    elif outcome.severity == Severity.CRITICAL:
        console.print(f"[bold red]🚨 CRITICAL[/bold red] {escape(outcome.name)} - {details}")
    else:
        console.print(f"[yellow]❌ FAILED[/yellow] {escape(outcome.name)} - {details}")


def print_score(console: Console, collector: ResultCollector, policy: ScoringPolicy = DEFAULT_POLICY) -> ScoreReport:
    """Print per-category stats and the final score. Returns the ScoreReport."""
    report = collector.score(policy)

    console.print()
    console.print("[bold]📈 RESULTS BY CATEGORY[/bold]")
    for category, (passed, total) in collector.by_category().items():
        console.print(f"   {escape(category)}: {passed}/{total} ({100 * passed / total:.1f}%)")

    console.print()
    console.print(f"✅ Passed:   {report.secure_count}")
    console.print(f"❌ Failed:   {report.insecure_count}")
    console.print(f"🚨 Critical: {report.critical_count}")
    console.print(f"[bold]🎯 SCORE: {report.computed_score}/100 - {report.verdict}[/bold]")
    return report


class CheckRunner:
    """
    Executes HttpChecks one at a time, or as a small concurrent batch.

    Every check is isolated: a transport error, a bad status or an
    unparseable body becomes a failed CheckOutcome and the batch goes on.

    Usage:
        runner = CheckRunner(RouteProber(base_url), Console(), ResultCollector())
        runner.run_all(LGPD_CHECKS)
    """

    def __init__(
        self,
        prober: RouteProber,
        console: Console,
        collector: ResultCollector | None = None,
        bearer_token: str | None = None,
    ) -> None:
        self._prober = prober
        self._console = console
        self._collector = collector if collector is not None else ResultCollector()
        self._bearer_token = bearer_token

    @property
    def collector(self) -> ResultCollector:
        return self._collector

    def _evaluate(self, check: HttpCheck) -> CheckOutcome:
        outcome = CheckOutcome(
            name=check.name,
            method=check.method,
            path=check.path,
            category=check.category,
            passed=False,
            weight=check.weight,
        )

        try:
            response = self._prober.request(
                check.method,
                check.path,
                bearer_token=self._bearer_token if check.authenticated else None,
                json_body=check.json_body,
                headers=check.headers,
            )
        except requests.RequestException as e:
            outcome.severity = Severity.CRITICAL
            outcome.details.append(f"Network error: {e}")
            return outcome

        outcome.http_status = response.status_code

        if response.status_code not in check.expected_statuses:
            expected = "/".join(str(s) for s in check.expected_statuses)
            outcome.details.append(f"Status {response.status_code}, expected {expected}")
            if response.status_code >= 500 or check.critical:
                outcome.severity = Severity.CRITICAL
            else:
                outcome.severity = Severity.WARNING
            return outcome

        if check.response_schema is not None:
            try:
                payload = response.json()
            except ValueError:
                outcome.severity = Severity.CRITICAL if check.critical else Severity.WARNING
                outcome.details.append("Response body is not valid JSON")
                return outcome

            validation = validate_payload(check.response_schema, payload)
            if not validation.ok:
                outcome.severity = Severity.CRITICAL if check.critical else Severity.WARNING
                outcome.details.append(validation.describe())
                return outcome

        outcome.passed = True
        outcome.severity = Severity.OK
        outcome.details.append(f"Status {response.status_code}")
        return outcome

    def run_check(self, check: HttpCheck) -> CheckOutcome:
        """Run one check, record and print its outcome."""
        logger.debug("Running check %s (%s)", check.name, check.label)
        outcome = self._evaluate(check)
        self._collector.add(outcome)
        print_outcome(self._console, outcome)
        return outcome

    def run_all(self, checks: list[HttpCheck]) -> list[CheckOutcome]:
        """Run checks sequentially, in order."""
        return [self.run_check(check) for check in checks]

    def run_concurrent_batch(self, check: HttpCheck, size: int = 5) -> list[CheckOutcome]:
        """
        Fire the same check `size` times at once.

        Used to exercise race behaviour. Outcomes are collected in
        completion order, which is not deterministic.
        """
        outcomes: list[CheckOutcome] = []
        with ThreadPoolExecutor(max_workers=size) as executor:
            futures = [executor.submit(self._evaluate, check) for _ in range(size)]
            for future in as_completed(futures):
                outcomes.append(future.result())

        for outcome in outcomes:
            self._collector.add(outcome)
            print_outcome(self._console, outcome)
        return outcomes
