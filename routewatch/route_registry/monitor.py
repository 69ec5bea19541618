"""
routewatch/route_registry/monitor.py

Main orchestrator for route drift monitoring.

Pipeline:
1. Extract routes from the server source
2. Diff against the known-route store
3. Probe each new route once, unauthenticated
4. Save known ∪ current back to the store
5. Score the probes

With no new routes the store file is left untouched.
"""

from pathlib import Path

from routewatch.checks.models import WeightedFinding
from routewatch.checks.scoring import DEFAULT_POLICY, ScoringPolicy
from routewatch.route_registry.drift import find_new_routes, merge_routes
from routewatch.route_registry.extractors import extract_routes_from_file
from routewatch.route_registry.models import MonitorResult, ProbeResult, RouteEntry
from routewatch.route_registry.prober import RouteProber
from routewatch.route_registry.store import KnownRouteStore
from routewatch.utils.logger import get_logger

logger = get_logger(name=__name__)


def probe_findings(results: list[ProbeResult]) -> list[WeightedFinding]:
    return [
        WeightedFinding(
            name=result.route.label,
            passed=result.is_secure,
            critical=result.is_critical,
        )
        for result in results
    ]


class RouteMonitor:
    """
    Detects and probes routes added to the server since the last run.

    Usage:
        monitor = RouteMonitor("server/index.ts", KnownRouteStore(path), RouteProber(base_url))
        result = monitor.monitor()
        sys.exit(0 if result.passed else 1)
    """

    def __init__(
        self,
        server_file: str | Path,
        store: KnownRouteStore,
        prober: RouteProber,
        scoring_policy: ScoringPolicy = DEFAULT_POLICY,
        excluded_prefixes: list[str] | None = None,
    ) -> None:
        self._server_file = Path(server_file)
        self._store = store
        self._prober = prober
        self._scoring_policy = scoring_policy
        self._excluded_prefixes = excluded_prefixes

    @property
    def prober(self) -> RouteProber:
        return self._prober

    @property
    def store(self) -> KnownRouteStore:
        return self._store

    def extract_current_routes(self) -> list[RouteEntry]:
        return extract_routes_from_file(self._server_file, excluded_prefixes=self._excluded_prefixes)

    def find_new_routes(self) -> list[RouteEntry]:
        """Routes in the server source that are not in the store. No side effects."""
        return find_new_routes(self.extract_current_routes(), self._store.load())

    def monitor(self) -> MonitorResult:
        """
        Run the full pipeline.

        Returns:
            MonitorResult. `passed` is False if any new route probed as critical.
        """
        known = self._store.load()
        current = self.extract_current_routes()
        new_routes = find_new_routes(current, known)

        if not new_routes:
            logger.info("No new routes among %d extracted", len(current))
            return MonitorResult(
                current_routes=current,
                known_count_before=len(known),
                known_count_after=len(known),
            )

        logger.info("Detected %d new routes, probing", len(new_routes))
        probe_results = self._prober.probe_all(new_routes)

        updated = merge_routes(known, current)
        self._store.save(updated)

        return MonitorResult(
            current_routes=current,
            new_routes=new_routes,
            probe_results=probe_results,
            known_count_before=len(known),
            known_count_after=len(updated),
            score=self._scoring_policy.score(probe_findings(probe_results)),
        )

    def initialize(self) -> list[RouteEntry]:
        """
        Replace the store with the routes currently in the server source.

        This is the only operation that may shrink the known set.
        """
        current = self.extract_current_routes()
        self._store.save(current)
        logger.info("Initialized known routes with %d entries", len(current))
        return current
