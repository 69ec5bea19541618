"""
routewatch/route_registry/prober.py

Synthetic HTTP probes against the target server.

Each route gets exactly one request, no retries. Transport failures are
recorded as NETWORK_ERROR on the result, never raised.
"""

import re
from typing import Any

import requests

from routewatch.config import Config
from routewatch.route_registry.models import (
    ProbeClassification,
    ProbeResult,
    RouteEntry,
    RouteSpec,
)
from routewatch.utils.logger import get_logger

logger = get_logger(name=__name__)

_EVIDENCE_LENGTH = 200

_BODY_METHODS = {"POST", "PUT", "PATCH"}

# Express path parameters such as :id or :userId
_PATH_PARAM_RE = re.compile(r":[A-Za-z_][A-Za-z0-9_]*")

_PLACEHOLDER_ID = "1"


def classify_status(status: int, requires_auth: bool = True) -> ProbeClassification:
    """
    Classify the status of an unauthenticated request.

    Args:
        status: HTTP status code.
        requires_auth: Declared intent of the route. New routes default to True.

    Returns:
        The classification for this status.
    """
    if status >= 500:
        return ProbeClassification.SERVER_ERROR
    if status in (401, 403):
        return ProbeClassification.SECURE if requires_auth else ProbeClassification.UNEXPECTED_STATUS
    if 200 <= status < 300:
        return ProbeClassification.PUBLIC_UNEXPECTED if requires_auth else ProbeClassification.PUBLIC_OK
    return ProbeClassification.UNEXPECTED_STATUS


def concrete_path(path: str) -> str:
    """Replace path parameters (`:id`) with a placeholder id so the path can be requested."""
    return _PATH_PARAM_RE.sub(_PLACEHOLDER_ID, path)


class RouteProber:
    """
    Sends probe requests to the target server.

    Usage:
        prober = RouteProber("http://localhost:5000")
        result = prober.probe(RouteSpec(method="GET", path="/api/users"))
    """

    def __init__(
        self,
        base_url: str = Config.BASE_URL,
        timeout: float = Config.REQUEST_TIMEOUT,
        session: requests.Session | None = None,
        user_agent: str = Config.USER_AGENT,
    ) -> None:
        """
        Initialize the prober.

        Args:
            base_url: Scheme and host of the target server, without trailing slash.
            timeout: Per-request timeout in seconds.
            session: Optional session to reuse (tests inject a mock here).
            user_agent: User-Agent header sent with every probe.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._user_agent = user_agent

    @property
    def base_url(self) -> str:
        return self._base_url

    def request(
        self,
        method: str,
        path: str,
        bearer_token: str | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        """
        Send one request to the target server.

        Write methods get a small JSON body if none is given.

        Raises:
            requests.RequestException: On transport failure.
        """
        request_headers = {
            "Content-Type": "application/json",
            "User-Agent": self._user_agent,
        }
        if bearer_token:
            request_headers["Authorization"] = f"Bearer {bearer_token}"
        if headers:
            request_headers.update(headers)

        method = method.upper()
        if json_body is None and method in _BODY_METHODS:
            json_body = {"test": "data"}

        url = f"{self._base_url}{concrete_path(path)}"
        logger.debug("%s %s", method, url)
        return self._session.request(
            method=method,
            url=url,
            headers=request_headers,
            json=json_body,
            timeout=self._timeout,
        )

    def probe(self, route: RouteSpec | RouteEntry) -> ProbeResult:
        """
        Probe one route without credentials and classify the answer.

        A RouteEntry has no declared intent and is probed as a private route.
        """
        spec = RouteSpec.from_entry(route) if isinstance(route, RouteEntry) else route

        try:
            response = self.request(spec.method, spec.path)
        except requests.RequestException as e:
            logger.warning("Probe %s failed: %s", spec.label, e)
            return ProbeResult(
                route=spec,
                classification=ProbeClassification.NETWORK_ERROR,
                evidence=str(e)[:_EVIDENCE_LENGTH],
            )

        classification = classify_status(response.status_code, requires_auth=spec.requires_auth)
        logger.info("Probe %s -> %d %s", spec.label, response.status_code, classification)
        return ProbeResult(
            route=spec,
            http_status=response.status_code,
            classification=classification,
            evidence=(response.text or "")[:_EVIDENCE_LENGTH],
        )

    def probe_all(self, routes: list[RouteSpec] | list[RouteEntry]) -> list[ProbeResult]:
        """Probe routes one after the other, in order."""
        return [self.probe(route) for route in routes]
