"""
routewatch/route_registry/__init__.py

Route registry module - extracts route registrations from server source,
keeps the known-route set on disk, detects new routes and probes them.
"""

from routewatch.route_registry.drift import find_new_routes, merge_routes
from routewatch.route_registry.extractors import extract_routes, extract_routes_from_file
from routewatch.route_registry.models import (
    MonitorResult,
    ProbeClassification,
    ProbeResult,
    RouteEntry,
    RouteSpec,
)
from routewatch.route_registry.monitor import RouteMonitor
from routewatch.route_registry.prober import RouteProber, classify_status
from routewatch.route_registry.store import KnownRouteStore
