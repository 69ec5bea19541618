"""
routewatch/config.py

Environment variable configuration.

Contains:
- Config: Centralized settings from environment variables
- LOG_LEVEL, BASE_URL, SERVER_FILE, KNOWN_ROUTES_FILE, etc.
"""

import logging
import os
from typing import Any

from dotenv import load_dotenv

load_dotenv()

# configure urllib3 logger to suppress verbose connection logs from requests
logging.getLogger("urllib3").setLevel(logging.WARNING)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Config():
    """
    Centralized configuration for environment variables.
    """

    # logging configuration
    LOG_LEVEL: int = logging.getLevelNamesMapping().get(
        os.getenv("LOG_LEVEL", "INFO").upper(),
        logging.INFO
    )
    LOG_DATE_FORMAT: str = os.getenv("LOG_DATE_FORMAT", "%Y-%m-%d %H:%M:%S")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "[%(asctime)s] %(levelname)s:%(name)s:%(message)s")

    # target server
    BASE_URL: str = os.getenv("ROUTEWATCH_BASE_URL", "http://localhost:5000")
    REQUEST_TIMEOUT: float = float(os.getenv("ROUTEWATCH_REQUEST_TIMEOUT", "10"))
    USER_AGENT: str = os.getenv("ROUTEWATCH_USER_AGENT", "Mozilla/5.0 (Security Test Suite)")
    # bearer token sent on the authenticated pass of the endpoint audit
    AUDIT_BEARER_TOKEN: str = os.getenv("ROUTEWATCH_AUDIT_BEARER_TOKEN", "fake-token-for-testing")

    # route registry
    SERVER_FILE: str = os.getenv("ROUTEWATCH_SERVER_FILE", "server/index.ts")
    KNOWN_ROUTES_FILE: str = os.getenv("ROUTEWATCH_KNOWN_ROUTES_FILE", "scripts/.endpoints-conhecidos.json")
    EXCLUDED_PATH_PREFIXES: list[str] = _split_csv(os.getenv("ROUTEWATCH_EXCLUDED_PATH_PREFIXES", "/src/,/@"))

    # reports
    REPORTS_DIR: str = os.getenv("ROUTEWATCH_REPORTS_DIR", "reports")

    # deployment secrets whose presence is verified before a deploy
    REQUIRED_SECRETS: list[str] = _split_csv(
        os.getenv("ROUTEWATCH_REQUIRED_SECRETS", "DATABASE_URL,VITE_FIREBASE_API_KEY,VITE_FIREBASE_PROJECT_ID")
    )

    @classmethod
    def as_dict(cls) -> dict[str, Any]:
        """
        Return a dictionary of all UPPERCASE class attributes and their values.
        Return:
            dict[str, Any]: A dictionary of all UPPERCASE class attributes and their values.
        """
        return {
            key: getattr(cls, key)
            for key in dir(cls)
            if key.isupper()
        }
