"""
routewatch/checks/models.py

Data models for parameterized HTTP assertion lists.

Contains:
- Severity: How bad a failed check is
- HttpCheck: One declarative HTTP assertion
- CheckOutcome: The result of running one HttpCheck
- WeightedFinding: A scored contribution to a ScoreReport
- ScoreReport: Aggregate score and verdict
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Severity(StrEnum):
    """Severity of a check outcome."""
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"


class HttpCheck(BaseModel):
    """
    A declarative HTTP assertion: send one request, expect one of a set of
    statuses and, optionally, a body that validates against a schema.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(description="Human-readable check name")
    method: str = Field(default="GET", description="HTTP verb")
    path: str = Field(description="Path relative to the base URL")
    json_body: Any = Field(default=None, description="JSON body to send, if any")
    headers: dict[str, str] = Field(default_factory=dict, description="Extra request headers")
    authenticated: bool = Field(default=False, description="Send the configured bearer token")
    expected_statuses: list[int] = Field(default_factory=lambda: [200], description="Statuses that pass")
    response_schema: type[BaseModel] | None = Field(
        default=None,
        description="Pydantic model the JSON body must validate against",
    )
    weight: float = Field(default=1.0, gt=0, description="Weight of this check in the score")
    critical: bool = Field(default=False, description="A failure counts as critical regardless of status")
    category: str = Field(default="general", description="Grouping used in reports")

    @property
    def label(self) -> str:
        return f"{self.method} {self.path}"


class CheckOutcome(BaseModel):
    """Result of running one HttpCheck (or one audited route)."""
    name: str = Field(description="Check name")
    method: str = Field(description="HTTP verb that was sent")
    path: str = Field(description="Path that was requested")
    category: str = Field(default="general", description="Grouping used in reports")
    passed: bool = Field(description="Whether the assertion held")
    severity: Severity = Field(default=Severity.OK, description="Severity of a failure")
    http_status: int | None = Field(default=None, description="Response status, None on transport failure")
    details: list[str] = Field(default_factory=list, description="Findings explaining the outcome")
    weight: float = Field(default=1.0, description="Weight carried into scoring")

    @property
    def label(self) -> str:
        return f"{self.method} {self.path}"

    def to_finding(self) -> "WeightedFinding":
        return WeightedFinding(
            name=self.name,
            weight=self.weight,
            passed=self.passed,
            critical=self.severity == Severity.CRITICAL,
        )


class WeightedFinding(BaseModel):
    """One weighted pass/fail contribution to a score."""
    name: str
    weight: float = 1.0
    passed: bool
    critical: bool = False


class ScoreReport(BaseModel):
    """Aggregate of a list of findings."""
    total_checked: int = Field(default=0, description="Number of findings scored")
    secure_count: int = Field(default=0, description="Findings that passed")
    insecure_count: int = Field(default=0, description="Findings that failed")
    critical_count: int = Field(default=0, description="Failed findings marked critical")
    computed_score: int = Field(default=100, description="Score from 0 to 100")
    verdict: str = Field(default="EXCELLENT", description="Verdict chosen by score threshold")
