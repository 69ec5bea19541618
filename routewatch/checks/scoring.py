"""
routewatch/checks/scoring.py

The single scoring policy shared by every command that prints a score.

    score = 100 * (passed_weight - critical_penalty * critical_weight) / total_weight

clamped to [0, 100] and rounded. An empty finding list scores 100. The
verdict is the label of the first threshold the score reaches.
"""

from pydantic import BaseModel, Field

from routewatch.checks.models import ScoreReport, WeightedFinding


class ScoringPolicy(BaseModel):
    """Weights, penalty and verdict thresholds for turning findings into a score."""
    critical_penalty: float = Field(
        default=2.0,
        ge=0,
        description="Extra weight subtracted for each failed critical finding",
    )
    thresholds: list[tuple[int, str]] = Field(
        default_factory=lambda: [
            (90, "EXCELLENT"),
            (80, "GOOD"),
            (70, "ACCEPTABLE"),
            (60, "CONCERNING"),
        ],
        description="(minimum score, verdict) pairs, highest first",
    )
    fallback_verdict: str = Field(default="CRITICAL", description="Verdict below every threshold")
    pass_score: int = Field(default=80, description="Minimum score for a passing run")

    def verdict_for(self, score: int) -> str:
        for minimum, verdict in sorted(self.thresholds, key=lambda t: -t[0]):
            if score >= minimum:
                return verdict
        return self.fallback_verdict

    def score(self, findings: list[WeightedFinding]) -> ScoreReport:
        """
        Aggregate weighted findings into a ScoreReport.

        Args:
            findings: One entry per check or probe.

        Returns:
            ScoreReport with counts, the clamped score and its verdict.
        """
        if not findings:
            return ScoreReport(computed_score=100, verdict=self.verdict_for(100))

        total_weight = sum(f.weight for f in findings)
        passed_weight = sum(f.weight for f in findings if f.passed)
        critical_weight = sum(f.weight for f in findings if not f.passed and f.critical)

        raw = 100 * (passed_weight - self.critical_penalty * critical_weight) / total_weight
        computed = max(0, min(100, round(raw)))

        passed_count = sum(1 for f in findings if f.passed)
        return ScoreReport(
            total_checked=len(findings),
            secure_count=passed_count,
            insecure_count=len(findings) - passed_count,
            critical_count=sum(1 for f in findings if not f.passed and f.critical),
            computed_score=computed,
            verdict=self.verdict_for(computed),
        )

    def is_passing(self, report: ScoreReport) -> bool:
        """A run passes with no critical failures and a score at or above pass_score."""
        return report.critical_count == 0 and report.computed_score >= self.pass_score


DEFAULT_POLICY = ScoringPolicy()
