"""
routewatch/checks/catalog.py

The declared endpoint catalog of the lab application and the security audit
that runs over it.

Each route declares whether it requires authentication, so intentionally
public routes (health, LGPD terms, subscription plans) are not reported
as leaks.

Audit per route:
1. Unauthenticated request, classified against the declared intent
2. Sensitive-data scan of any 2xx body
3. For protected routes, an authenticated request to catch server errors
"""

import re

import requests
from rich.console import Console
from rich.markup import escape

from routewatch.checks.models import CheckOutcome, Severity
from routewatch.checks.runner import ResultCollector, print_outcome
from routewatch.route_registry.models import ProbeClassification, RouteSpec
from routewatch.route_registry.prober import RouteProber, classify_status
from routewatch.utils.logger import get_logger

logger = get_logger(name=__name__)

# Categories whose responses legitimately carry ids, emails and tokens
_LEAKAGE_EXEMPT_CATEGORIES = {"lgpd", "observability"}

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"email.*@.*\.", re.IGNORECASE),
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"token", re.IGNORECASE),
    re.compile(r"uid.*[a-zA-Z0-9]", re.IGNORECASE),
    re.compile(r"organizationId.*\d+", re.IGNORECASE),
    re.compile(r"firebase_uid", re.IGNORECASE),
    re.compile(r'"id":\s*\d+', re.IGNORECASE),
    re.compile(r"\b[0-9]{10,}\b"),
]


def _route(
    method: str,
    path: str,
    description: str,
    category: str,
    requires_auth: bool = True,
    critical: bool = False,
    roles: list[str] | None = None,
) -> RouteSpec:
    if roles is None:
        roles = ["ALL"] if requires_auth else []
    return RouteSpec(
        method=method,
        path=path,
        description=description,
        category=category,
        requires_auth=requires_auth,
        critical=critical,
        roles=roles,
    )


ENDPOINT_CATALOG: list[RouteSpec] = [
    # observability (public)
    _route("GET", "/api/health", "System health check", "observability", requires_auth=False),
    _route("GET", "/api/metrics", "System metrics", "observability", requires_auth=False),
    _route("GET", "/api/metrics/performance", "Performance metrics", "observability", requires_auth=False),
    _route("GET", "/api/metrics/errors", "Error metrics", "observability", requires_auth=False),
    _route("GET", "/api/alerts", "System alerts", "observability", requires_auth=False),
    _route("GET", "/api/observability/dashboard", "Observability dashboard", "observability", requires_auth=False),

    # authentication
    _route("GET", "/api/auth/user", "Authenticated user data", "auth"),
    _route("POST", "/api/auth/sync-user", "Sync Firebase user with PostgreSQL", "auth"),
    _route("POST", "/api/auth/set-role", "Set user role", "auth", roles=["ADMIN", "DEVELOPER"]),

    # subscription (public)
    _route("GET", "/api/subscription/plans", "Subscription plans", "subscription", requires_auth=False),

    # user
    _route("GET", "/api/user/permissions", "User permissions", "user"),

    # administration
    _route("GET", "/api/admin/users", "User list (ADMIN)", "admin", roles=["ADMIN"]),
    _route("GET", "/api/developer/system-info", "System information (DEVELOPER)", "admin", roles=["DEVELOPER"]),

    # notifications
    _route("GET", "/api/notifications", "Fetch notifications", "notifications", roles=["ADMIN", "DEVELOPER"]),
    _route("PATCH", "/api/notifications/:id/read", "Mark notification as read", "notifications", roles=["ADMIN", "DEVELOPER"]),
    _route("PATCH", "/api/notifications/mark-all-read", "Mark all notifications as read", "notifications", roles=["ADMIN", "DEVELOPER"]),

    # payment
    _route("GET", "/api/payment/config", "Payment configuration", "payment"),

    # density tests: in situ
    _route("GET", "/api/ensaios/densidade-in-situ", "In-situ density tests (legacy)", "tests"),
    _route("GET", "/api/tests/density-in-situ", "List in-situ density tests", "tests"),
    _route("POST", "/api/tests/density-in-situ", "Create in-situ density test", "tests"),
    _route("PUT", "/api/tests/density-in-situ/:id", "Update in-situ density test", "tests"),
    _route("DELETE", "/api/tests/density-in-situ/:id", "Delete in-situ density test", "tests"),

    # density tests: real density
    _route("GET", "/api/tests/real-density", "List real density tests", "tests"),
    _route("POST", "/api/tests/real-density", "Create real density test", "tests"),
    _route("PUT", "/api/tests/real-density/:id", "Update real density test", "tests"),
    _route("DELETE", "/api/tests/real-density/:id", "Delete real density test", "tests"),

    # density tests: max/min
    _route("GET", "/api/tests/max-min-density", "List max/min density tests", "tests"),
    _route("POST", "/api/tests/max-min-density", "Create max/min density test", "tests"),
    _route("PUT", "/api/tests/max-min-density/:id", "Update max/min density test", "tests"),
    _route("DELETE", "/api/tests/max-min-density/:id", "Delete max/min density test", "tests"),

    # organizations
    _route("GET", "/api/organizations/user-counts", "User counts per organization", "organizations", requires_auth=False, critical=True),
    _route("GET", "/api/organizations", "Organization list", "organizations"),
    _route("POST", "/api/organizations", "Create organization", "organizations", roles=["ADMIN", "DEVELOPER"]),

    # users
    _route("GET", "/api/users", "User list", "users", critical=True),

    # equipment
    _route("GET", "/api/equipamentos", "List equipment", "equipment"),
    _route("POST", "/api/equipamentos", "Create equipment", "equipment"),
    _route("PUT", "/api/equipamentos/:id", "Update equipment", "equipment"),
    _route("DELETE", "/api/equipamentos/:id", "Delete equipment", "equipment", roles=["MANAGER", "ADMIN", "DEVELOPER"]),

    # LGPD (public)
    _route("GET", "/api/lgpd/terms", "LGPD terms of use", "lgpd", requires_auth=False),
    _route("GET", "/api/lgpd/privacy-policy", "LGPD privacy policy", "lgpd", requires_auth=False),
    _route("POST", "/api/lgpd/consent", "Record LGPD consent", "lgpd", requires_auth=False),
    _route("GET", "/api/lgpd/my-data", "LGPD personal data export", "lgpd", requires_auth=False),
    _route("POST", "/api/lgpd/request-deletion", "LGPD deletion request", "lgpd", requires_auth=False),
]


def detect_data_leakage(response_text: str, route: RouteSpec) -> bool:
    """
    Return True if a response body looks like it carries sensitive data.

    LGPD and observability routes are exempt.
    """
    if route.category in _LEAKAGE_EXEMPT_CATEGORIES:
        return False
    return any(pattern.search(response_text) for pattern in _SENSITIVE_PATTERNS)


class EndpointAuditor:
    """
    Audits every route of a catalog and records one CheckOutcome per route.

    Usage:
        auditor = EndpointAuditor(RouteProber(base_url), Console(), ResultCollector())
        auditor.run()
        report = auditor.collector.score()
    """

    def __init__(
        self,
        prober: RouteProber,
        console: Console,
        collector: ResultCollector | None = None,
        bearer_token: str | None = None,
        catalog: list[RouteSpec] | None = None,
    ) -> None:
        self._prober = prober
        self._console = console
        self._collector = collector if collector is not None else ResultCollector()
        self._bearer_token = bearer_token
        self._catalog = catalog if catalog is not None else ENDPOINT_CATALOG

    @property
    def collector(self) -> ResultCollector:
        return self._collector

    @property
    def catalog(self) -> list[RouteSpec]:
        return list(self._catalog)

    def audit_route(self, route: RouteSpec) -> CheckOutcome:
        """Audit one route. Never raises on HTTP or transport failure."""
        outcome = CheckOutcome(
            name=route.label,
            method=route.method,
            path=route.path,
            category=route.category,
            passed=False,
            weight=2.0 if route.critical else 1.0,
        )

        try:
            response = self._prober.request(route.method, route.path)
        except requests.RequestException as e:
            outcome.severity = Severity.CRITICAL
            outcome.details.append(f"Network error: {e}")
            return outcome

        outcome.http_status = response.status_code
        classification = classify_status(response.status_code, requires_auth=route.requires_auth)

        if classification == ProbeClassification.PUBLIC_UNEXPECTED:
            outcome.severity = Severity.CRITICAL
            outcome.details.append("Protected route reachable without authentication")
        elif classification == ProbeClassification.SERVER_ERROR:
            outcome.severity = Severity.CRITICAL
            outcome.details.append(f"Server error {response.status_code} without authentication")
        elif classification == ProbeClassification.UNEXPECTED_STATUS:
            outcome.severity = Severity.CRITICAL if route.critical else Severity.WARNING
            if route.requires_auth:
                outcome.details.append(f"Unexpected status {response.status_code}")
            else:
                outcome.details.append(f"Public route not reachable: {response.status_code}")

        if 200 <= response.status_code < 300 and detect_data_leakage(response.text or "", route):
            outcome.details.append("Possible sensitive data in response")
            if route.requires_auth or route.critical:
                outcome.severity = Severity.CRITICAL

        if route.requires_auth and outcome.severity == Severity.OK:
            self._check_authenticated(route, outcome)

        outcome.passed = outcome.severity == Severity.OK
        return outcome

    def _check_authenticated(self, route: RouteSpec, outcome: CheckOutcome) -> None:
        """
        Repeat the request with a bearer token.

        The token is not expected to be valid, so 401/403 is fine; a 5xx
        means the route breaks once past the auth gate.
        """
        try:
            response = self._prober.request(route.method, route.path, bearer_token=self._bearer_token)
        except requests.RequestException as e:
            outcome.severity = Severity.CRITICAL
            outcome.details.append(f"Network error on authenticated request: {e}")
            return

        if response.status_code >= 500:
            outcome.severity = Severity.CRITICAL
            outcome.details.append(f"Server error {response.status_code} with credentials")
        elif 200 <= response.status_code < 300:
            outcome.details.append("Authenticated request accepted")

    def run(self) -> list[CheckOutcome]:
        """Audit the whole catalog sequentially."""
        self._console.print(f"📊 Routes to audit: {len(self._catalog)}")
        self._console.print(f"🌐 Base URL: {escape(self._prober.base_url)}")

        outcomes: list[CheckOutcome] = []
        for route in self._catalog:
            outcome = self.audit_route(route)
            logger.debug("Audited %s -> %s", route.label, outcome.severity)
            self._collector.add(outcome)
            print_outcome(self._console, outcome)
            outcomes.append(outcome)
        return outcomes
