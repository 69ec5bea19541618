"""
routewatch/checks/system.py

Smoke checks for the public routes the lab application cannot run without.
Each must answer 200 with a body of the expected shape.
"""

from routewatch.checks.models import HttpCheck
from routewatch.checks.schemas import HealthResponse, LgpdTermsResponse, UserCountsResponse

_SMOKE_HEADERS = {"User-Agent": "Critical Endpoint Tester"}

SYSTEM_CHECKS: list[HttpCheck] = [
    HttpCheck(
        name="Organization user counts",
        method="GET",
        path="/api/organizations/user-counts",
        headers=_SMOKE_HEADERS,
        response_schema=UserCountsResponse,
        category="system",
        critical=True,
    ),
    HttpCheck(
        name="LGPD terms",
        method="GET",
        path="/api/lgpd/terms",
        headers=_SMOKE_HEADERS,
        response_schema=LgpdTermsResponse,
        category="system",
        critical=True,
    ),
    HttpCheck(
        name="Health",
        method="GET",
        path="/api/health",
        headers=_SMOKE_HEADERS,
        response_schema=HealthResponse,
        category="system",
        critical=True,
    ),
]
