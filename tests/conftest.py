"""
tests/conftest.py

Configuration for pytest.
"""

import io
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests
from rich.console import Console

from routewatch.route_registry.prober import RouteProber
from routewatch.route_registry.store import KnownRouteStore

BASE_URL = "http://testserver"

SERVER_SOURCE = """
import express from "express";

export async function registerRoutes(app) {
  app.get('/api/health', (req, res) => res.json(observability.getHealthStatus()));
  app.get("/api/subscription/plans", (req, res) => res.json(plans));
  app.post('/api/tests/real-density', verifyFirebaseToken, async (req, res) => {
    const token = req.get('Authorization');
    res.json(await storage.createRealDensityTest(req.body));
  });
  app.put(`/api/tests/real-density/:id`, verifyFirebaseToken, updateRealDensity);
  app.use('/src/*', serveStatic);
  app.get('/@vite/client', devClient);
  app.get('*', (req, res) => res.sendFile('index.html'));
}
"""


def make_response(status_code: int = 200, body: Any = None, text: str | None = None) -> requests.Response:
    """
    Build a real requests.Response with the given status and body.

    Args:
        status_code: HTTP status.
        body: Object serialized as JSON when `text` is None.
        text: Raw body, used verbatim.
    """
    response = requests.Response()
    response.status_code = status_code
    if text is None:
        text = json.dumps(body) if body is not None else ""
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    response.headers["Content-Type"] = "application/json"
    return response


def route_session(routes: dict[tuple[str, str], requests.Response | Exception]) -> MagicMock:
    """
    Mock requests.Session whose request() answers by (method, path).

    Values that are exceptions are raised. Unknown routes answer 404.
    """
    session = MagicMock(spec=requests.Session)

    def _request(method: str, url: str, **kwargs: Any) -> requests.Response:
        path = url.removeprefix(BASE_URL)
        answer = routes.get((method, path), make_response(404, {"message": "Not found"}))
        if isinstance(answer, Exception):
            raise answer
        return answer

    session.request.side_effect = _request
    return session


@pytest.fixture
def response_factory() -> Callable[..., requests.Response]:
    return make_response


@pytest.fixture
def session_factory() -> Callable[..., MagicMock]:
    return route_session


@pytest.fixture
def make_prober() -> Callable[[MagicMock], RouteProber]:
    """Factory fixture to create a RouteProber bound to a mocked session."""
    def _make(session: MagicMock) -> RouteProber:
        return RouteProber(base_url=BASE_URL, timeout=1.0, session=session)
    return _make


@pytest.fixture
def console_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(console_output: io.StringIO) -> Console:
    """Console writing plain text into console_output."""
    return Console(file=console_output, width=200, force_terminal=False, color_system=None)


@pytest.fixture
def server_file(tmp_path: Path) -> Path:
    path = tmp_path / "server" / "index.ts"
    path.parent.mkdir(parents=True)
    path.write_text(SERVER_SOURCE, encoding="utf-8")
    return path


@pytest.fixture
def store(tmp_path: Path) -> KnownRouteStore:
    return KnownRouteStore(tmp_path / "scripts" / ".endpoints-conhecidos.json")
