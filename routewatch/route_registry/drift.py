"""
routewatch/route_registry/drift.py

Set difference and monotonic union over route lists, keyed by (method, path).
"""

from routewatch.route_registry.models import RouteEntry


def find_new_routes(current: list[RouteEntry], known: list[RouteEntry]) -> list[RouteEntry]:
    """
    Return the routes in `current` whose key is absent from `known`.

    Extraction order is preserved. Duplicates within `current` are kept;
    the extractor already deduplicates.
    """
    known_keys = {route.key for route in known}
    return [route for route in current if route.key not in known_keys]


def merge_routes(known: list[RouteEntry], current: list[RouteEntry]) -> list[RouteEntry]:
    """
    Return known ∪ current.

    Known entries come first and keep their original first_seen_at. Routes
    are never dropped, so the result is at least as long as `known`.
    """
    merged = list(known)
    seen = {route.key for route in known}
    for route in current:
        if route.key in seen:
            continue
        seen.add(route.key)
        merged.append(route)
    return merged
