"""
routewatch/route_registry/extractors.py

Regex-based extraction of route registrations from server source text.

Matches Express-style registrations such as:
- app.get('/api/health', ...)
- router.post("/api/tests/real-density", ...)
- get(`/api/lgpd/terms`, ...)

Extraction is advisory: a missing or unreadable source yields an empty list.
"""

import re
from datetime import datetime, timezone
from pathlib import Path

from routewatch.config import Config
from routewatch.route_registry.models import RouteEntry
from routewatch.utils.logger import get_logger

logger = get_logger(name=__name__)

ROUTE_METHODS = ("get", "post", "put", "delete", "patch")

# <verb>(<quoted-path> with an optional receiver before the verb. The
# leading \b keeps identifiers like `target(` or `forget(` from matching.
_ROUTE_REGISTRATION_RE = re.compile(
    r"""\b(?P<method>get|post|put|delete|patch)\s*\(\s*(?P<quote>['"`])(?P<path>[^'"`]+)(?P=quote)"""
)

_WILDCARD_MARKER = "*"


def _is_excluded(path: str, excluded_prefixes: list[str]) -> bool:
    """Asset, wildcard and dev-tool paths are not application routes."""
    if _WILDCARD_MARKER in path:
        return True
    return any(path.startswith(prefix) for prefix in excluded_prefixes)


def extract_routes(
    source: str | None,
    excluded_prefixes: list[str] | None = None,
    detected_at: datetime | None = None,
) -> list[RouteEntry]:
    """
    Extract route registrations from server source text.

    Args:
        source: Raw source text of the server entry point. None or empty yields [].
        excluded_prefixes: Path prefixes to drop. Defaults to Config.EXCLUDED_PATH_PREFIXES.
        detected_at: Timestamp stamped on every entry. Defaults to now (UTC).

    Returns:
        Routes in order of first appearance, deduplicated by (method, path).
    """
    if not source:
        return []

    if excluded_prefixes is None:
        excluded_prefixes = Config.EXCLUDED_PATH_PREFIXES
    if detected_at is None:
        detected_at = datetime.now(timezone.utc)

    routes: list[RouteEntry] = []
    seen: set[tuple[str, str]] = set()

    for match in _ROUTE_REGISTRATION_RE.finditer(source):
        method = match.group("method").upper()
        path = match.group("path")

        # Plain `.get("content-type")` style lookups are not routes
        if not path.startswith("/"):
            continue
        if _is_excluded(path, excluded_prefixes):
            logger.debug("Skipping excluded path %s %s", method, path)
            continue
        if (method, path) in seen:
            continue

        seen.add((method, path))
        routes.append(RouteEntry(method=method, path=path, first_seen_at=detected_at))

    logger.debug("Extracted %d routes", len(routes))
    return routes


def extract_routes_from_file(
    server_file: str | Path,
    excluded_prefixes: list[str] | None = None,
) -> list[RouteEntry]:
    """
    Read a server source file and extract its routes.

    A missing or unreadable file is logged and yields an empty list.
    """
    path = Path(server_file)
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read server source %s: %s", path, e)
        return []
    return extract_routes(source, excluded_prefixes=excluded_prefixes)
