"""
routewatch/checks/__init__.py

Parameterized HTTP assertion lists, response schemas and the shared scoring policy.
"""

from routewatch.checks.models import CheckOutcome, HttpCheck, ScoreReport, Severity, WeightedFinding
from routewatch.checks.scoring import DEFAULT_POLICY, ScoringPolicy
