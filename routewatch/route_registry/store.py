"""
routewatch/route_registry/store.py

Persistence of the known-route set as a pretty-printed JSON array of
{"method", "url", "detected"} objects.

The file is rewritten whole on every save. There is no locking: two
processes saving at once can clobber each other.
"""

import json
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from routewatch.route_registry.models import RouteEntry
from routewatch.utils.exceptions import KnownRouteStoreError
from routewatch.utils.logger import get_logger

logger = get_logger(name=__name__)

_ROUTE_LIST_ADAPTER = TypeAdapter(list[RouteEntry])


class KnownRouteStore:
    """
    Reads and writes the known-route file.

    Usage:
        store = KnownRouteStore("scripts/.endpoints-conhecidos.json")
        known = store.load()
        store.save(known + new_routes)
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def load(self) -> list[RouteEntry]:
        """
        Load the known routes.

        Entries are validated one at a time. An invalid entry is logged and
        skipped, the rest are kept.

        Returns:
            The stored routes in file order, or [] if the file is absent or unparseable.
        """
        if not self.exists():
            logger.info("Known-routes file %s not found, starting from an empty set", self._path)
            return []

        try:
            with open(self._path, mode="r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Could not load known routes from %s, starting from an empty set: %s", self._path, e)
            return []

        if not isinstance(data, list):
            logger.warning("Known-routes file %s is not a JSON array, starting from an empty set", self._path)
            return []

        routes: list[RouteEntry] = []
        for index, item in enumerate(data):
            try:
                routes.append(RouteEntry.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping invalid entry %d in %s: %s", index, self._path, e)

        logger.debug("Loaded %d known routes from %s", len(routes), self._path)
        return routes

    def save(self, routes: list[RouteEntry]) -> None:
        """
        Overwrite the file with the full route list.

        Raises:
            KnownRouteStoreError: If the file cannot be written.
        """
        data = _ROUTE_LIST_ADAPTER.dump_python(routes, mode="json", by_alias=True)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, mode="w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.write("\n")
        except OSError as e:
            raise KnownRouteStoreError(f"Could not write known routes to {self._path}: {e}") from e

        logger.info("Saved %d known routes to %s", len(routes), self._path)
