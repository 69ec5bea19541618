"""
routewatch/checks/lgpd.py

LGPD (Brazilian data-protection law) compliance assertions against the
public LGPD routes of the lab application.
"""

from routewatch.checks.models import HttpCheck
from routewatch.checks.schemas import (
    LgpdMyDataResponse,
    LgpdPrivacyPolicyResponse,
    LgpdSuccessResponse,
    LgpdTermsResponse,
)

LGPD_CHECKS: list[HttpCheck] = [
    HttpCheck(
        name="Terms of use",
        method="GET",
        path="/api/lgpd/terms",
        response_schema=LgpdTermsResponse,
        category="lgpd",
    ),
    HttpCheck(
        name="Privacy policy",
        method="GET",
        path="/api/lgpd/privacy-policy",
        response_schema=LgpdPrivacyPolicyResponse,
        category="lgpd",
    ),
    HttpCheck(
        name="Record consent",
        method="POST",
        path="/api/lgpd/consent",
        json_body={"consentType": "terms", "consentStatus": "given"},
        response_schema=LgpdSuccessResponse,
        category="lgpd",
        critical=True,
    ),
    HttpCheck(
        name="Personal data export",
        method="GET",
        path="/api/lgpd/my-data",
        response_schema=LgpdMyDataResponse,
        category="lgpd",
        critical=True,
    ),
    HttpCheck(
        name="Deletion request",
        method="POST",
        path="/api/lgpd/request-deletion",
        json_body={},
        response_schema=LgpdSuccessResponse,
        category="lgpd",
        critical=True,
    ),
]
