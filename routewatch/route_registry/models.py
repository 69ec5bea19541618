"""
routewatch/route_registry/models.py

Data models for the route registry and drift detection pipeline.

Contains Pydantic models for:
- RouteEntry: A (method, path) route registration observed in the server source
- RouteSpec: A route together with its declared public/private intent
- ProbeResult: The classified outcome of one synthetic request to a route
- MonitorResult: Aggregated outcome of a full monitor run
"""

from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from routewatch.checks.models import ScoreReport


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RouteEntry(BaseModel):
    """
    A route registration found in the server source.

    Serialized with the on-disk field names `method`, `url`, `detected`.
    Uniqueness key is (method, path).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    method: str = Field(description="Uppercase HTTP verb (GET, POST, ...)")
    path: str = Field(alias="url", description="URL pattern as registered, e.g. /api/tests/real-density/:id")
    first_seen_at: datetime = Field(
        default_factory=_utc_now,
        alias="detected",
        description="When the route was first observed by the extractor",
    )

    @field_validator("method")
    @classmethod
    def uppercase_method(cls, value: str) -> str:
        return value.upper()

    @property
    def key(self) -> tuple[str, str]:
        return (self.method, self.path)

    @property
    def label(self) -> str:
        return f"{self.method} {self.path}"


class RouteSpec(BaseModel):
    """
    A route plus what it is expected to do when called without credentials.

    Routes discovered by drift detection have no declared intent, so they get
    the defaults below: private, critical, category "new-endpoint".
    """
    method: str = Field(description="Uppercase HTTP verb")
    path: str = Field(description="Concrete or parameterized URL path")
    description: str = Field(default="", description="Human-readable purpose of the route")
    category: str = Field(default="new-endpoint", description="Grouping used in reports")
    requires_auth: bool = Field(default=True, description="True if unauthenticated access must be rejected")
    critical: bool = Field(default=True, description="True if a failure on this route blocks a release")
    roles: list[str] = Field(default_factory=list, description="Roles allowed to call the route")

    @classmethod
    def from_entry(cls, entry: RouteEntry) -> "RouteSpec":
        return cls(
            method=entry.method,
            path=entry.path,
            description=f"New route detected: {entry.label}",
        )

    @property
    def label(self) -> str:
        return f"{self.method} {self.path}"


class ProbeClassification(StrEnum):
    """How a route answered an unauthenticated probe."""
    SECURE = "SECURE"
    PUBLIC_OK = "PUBLIC_OK"
    PUBLIC_UNEXPECTED = "PUBLIC_UNEXPECTED"
    UNEXPECTED_STATUS = "UNEXPECTED_STATUS"
    SERVER_ERROR = "SERVER_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"


# Classifications that fail a run
CRITICAL_CLASSIFICATIONS: frozenset[ProbeClassification] = frozenset({
    ProbeClassification.PUBLIC_UNEXPECTED,
    ProbeClassification.SERVER_ERROR,
    ProbeClassification.NETWORK_ERROR,
})

# Classifications counted as the expected behaviour of a route
SECURE_CLASSIFICATIONS: frozenset[ProbeClassification] = frozenset({
    ProbeClassification.SECURE,
    ProbeClassification.PUBLIC_OK,
})


class ProbeResult(BaseModel):
    """Outcome of a single synthetic request. Never persisted."""
    route: RouteSpec = Field(description="The route that was probed")
    http_status: int | None = Field(default=None, description="Response status, None on transport failure")
    classification: ProbeClassification = Field(description="Classified outcome")
    evidence: str = Field(default="", description="Response body snippet or transport error message")

    @property
    def is_secure(self) -> bool:
        return self.classification in SECURE_CLASSIFICATIONS

    @property
    def is_critical(self) -> bool:
        return self.classification in CRITICAL_CLASSIFICATIONS


class MonitorResult(BaseModel):
    """Aggregated outcome of one monitor run."""
    current_routes: list[RouteEntry] = Field(default_factory=list, description="Routes extracted on this run")
    new_routes: list[RouteEntry] = Field(default_factory=list, description="Routes absent from the known set")
    probe_results: list[ProbeResult] = Field(default_factory=list, description="One probe per new route")
    known_count_before: int = Field(default=0, description="Size of the known set before the run")
    known_count_after: int = Field(default=0, description="Size of the known set after the run")
    score: ScoreReport | None = Field(default=None, description="Score over the probe results, if any")

    @computed_field
    @property
    def passed(self) -> bool:
        return not any(result.is_critical for result in self.probe_results)

    @property
    def secure_count(self) -> int:
        return sum(1 for result in self.probe_results if result.is_secure)

    @property
    def critical_count(self) -> int:
        return sum(1 for result in self.probe_results if result.is_critical)
