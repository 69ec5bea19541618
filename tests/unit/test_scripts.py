"""
tests/unit/test_scripts.py

Tests for the command-line entry points. HTTP is mocked by patching
requests.Session where the prober creates it.
"""

import io
import json
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests
from rich.console import Console

from routewatch.checks.runner import ResultCollector
from routewatch.route_registry.monitor import RouteMonitor
from routewatch.route_registry.store import KnownRouteStore
from routewatch.scripts import lgpd_check, monitor_routes, pre_commit, pre_deploy, system_check, validate_endpoints
from routewatch.utils.cli_utils import EXIT_FAILURES, EXIT_FATAL, EXIT_OK


def _registry_args(server_file: Path, store: KnownRouteStore) -> list[str]:
    return [
        "--server-file", str(server_file),
        "--known-routes", str(store.path),
        "--base-url", "http://testserver",
    ]


@pytest.fixture
def unauthorized_session(response_factory: Callable):
    """Patch the session class used by RouteProber so every request answers 401."""
    session = MagicMock(spec=requests.Session)
    with patch("routewatch.route_registry.prober.requests.Session") as session_cls:
        session.request.return_value = response_factory(401, {"message": "Unauthorized"})
        session_cls.return_value = session
        yield session


class TestMonitorRoutesScript:
    def test_init_then_monitor(
        self, server_file: Path, store: KnownRouteStore, unauthorized_session: MagicMock, capsys: pytest.CaptureFixture
    ) -> None:
        assert monitor_routes.main(["init", *_registry_args(server_file, store)]) == EXIT_OK
        assert len(store.load()) == 4

        assert monitor_routes.main(["monitor", *_registry_args(server_file, store)]) == EXIT_OK
        assert "No new routes detected" in capsys.readouterr().out
        unauthorized_session.request.assert_not_called()

    def test_new_routes_json_output(
        self, server_file: Path, store: KnownRouteStore, unauthorized_session: MagicMock, capsys: pytest.CaptureFixture
    ) -> None:
        assert monitor_routes.main([*_registry_args(server_file, store), "--format", "json"]) == EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert len(data["new_routes"]) == 4
        assert data["passed"] is True

    def test_open_route_exits_with_failure(
        self, server_file: Path, store: KnownRouteStore, response_factory: Callable
    ) -> None:
        with patch("routewatch.route_registry.prober.requests.Session") as session_cls:
            session_cls.return_value.request.return_value = response_factory(200, {"ok": True})
            assert monitor_routes.main(_registry_args(server_file, store)) == EXIT_FAILURES

    def test_unwritable_store_is_fatal(self, server_file: Path, tmp_path: Path, unauthorized_session: MagicMock) -> None:
        args = ["--server-file", str(server_file), "--known-routes", str(tmp_path)]
        assert monitor_routes.main(args) == EXIT_FATAL


class TestValidateEndpointsScript:
    def test_watch_single_iteration(
        self,
        server_file: Path,
        store: KnownRouteStore,
        make_prober: Callable,
        unauthorized_session: MagicMock,
        console: Console,
        console_output: io.StringIO,
    ) -> None:
        monitor = RouteMonitor(server_file, store, make_prober(unauthorized_session))
        with patch("routewatch.scripts.validate_endpoints.time.sleep") as sleep:
            validate_endpoints.watch(monitor, console, interval_minutes=1, max_iterations=1)
        sleep.assert_not_called()
        assert "ALERT: 4 new routes detected" in console_output.getvalue()
        assert len(store.load()) == 4

    def test_quick_mode(
        self, server_file: Path, store: KnownRouteStore, unauthorized_session: MagicMock
    ) -> None:
        assert validate_endpoints.main(["quick", *_registry_args(server_file, store)]) == EXIT_OK
        assert len(store.load()) == 4


class TestPreCommitScript:
    def test_no_new_routes_skips_audit(
        self,
        server_file: Path,
        store: KnownRouteStore,
        make_prober: Callable,
        unauthorized_session: MagicMock,
        console: Console,
        console_output: io.StringIO,
    ) -> None:
        monitor = RouteMonitor(server_file, store, make_prober(unauthorized_session))
        monitor.initialize()
        assert pre_commit.run_pre_commit(monitor, console)
        assert "COMMIT APPROVED" in console_output.getvalue()
        unauthorized_session.request.assert_not_called()

    def test_new_routes_trigger_catalog_audit(
        self,
        server_file: Path,
        store: KnownRouteStore,
        make_prober: Callable,
        unauthorized_session: MagicMock,
        console: Console,
        console_output: io.StringIO,
    ) -> None:
        monitor = RouteMonitor(server_file, store, make_prober(unauthorized_session))
        pre_commit.run_pre_commit(monitor, console)
        assert "ENDPOINT SECURITY AUDIT" in console_output.getvalue()
        # 4 new-route probes, then at least one request per catalogued route
        assert unauthorized_session.request.call_count > 4


class TestPreDeployScript:
    def test_missing_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ROUTEWATCH_TEST_SECRET", raising=False)
        assert pre_deploy.main(["--secret", "ROUTEWATCH_TEST_SECRET"]) == EXIT_FAILURES

    def test_present_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROUTEWATCH_TEST_SECRET", "value")
        assert pre_deploy.main(["--secret", "ROUTEWATCH_TEST_SECRET"]) == EXIT_OK


class TestLgpdScript:
    def test_all_lgpd_routes_compliant(
        self,
        make_prober: Callable,
        session_factory: Callable,
        response_factory: Callable,
        console: Console,
        console_output: io.StringIO,
    ) -> None:
        session = session_factory({
            ("GET", "/api/lgpd/terms"): response_factory(200, {"version": "1.0"}),
            ("GET", "/api/lgpd/privacy-policy"): response_factory(200, {"content": {"title": "POLÍTICA DE PRIVACIDADE"}}),
            ("POST", "/api/lgpd/consent"): response_factory(200, {"success": True}),
            ("GET", "/api/lgpd/my-data"): response_factory(200, {"personalData": {"name": "Ana"}, "lgpdCompliance": {"ok": True}}),
            ("POST", "/api/lgpd/request-deletion"): response_factory(200, {"success": True}),
        })
        collector = ResultCollector()
        assert lgpd_check.run_lgpd_checks(make_prober(session), console, collector, race=3)
        assert len(collector.outcomes) == 8
        assert "SCORE: 100/100 - EXCELLENT" in console_output.getvalue()

    def test_missing_deletion_route_fails(
        self,
        make_prober: Callable,
        session_factory: Callable,
        response_factory: Callable,
        console: Console,
    ) -> None:
        session = session_factory({
            ("GET", "/api/lgpd/terms"): response_factory(200, {"version": "1.0"}),
        })
        assert not lgpd_check.run_lgpd_checks(make_prober(session), console, ResultCollector())


class TestMonitorRoutesOutput:
    def test_report_is_written_through_the_console(
        self,
        server_file: Path,
        store: KnownRouteStore,
        unauthorized_session: MagicMock,
        console: Console,
        console_output: io.StringIO,
    ) -> None:
        with patch("routewatch.scripts.monitor_routes.Console", return_value=console):
            assert monitor_routes.main(["init", *_registry_args(server_file, store)]) == EXIT_OK
            assert monitor_routes.main(["--format", "table", *_registry_args(server_file, store)]) == EXIT_OK

        output = console_output.getvalue()
        assert "Monitor initialized" in output
        assert "Total: 0 new routes" in output


class TestPreDeployFatal:
    def test_unexpected_error_is_fatal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROUTEWATCH_TEST_SECRET", "value")
        with patch("routewatch.scripts.pre_deploy.check_required_secrets", side_effect=RuntimeError("boom")):
            assert pre_deploy.main(["--secret", "ROUTEWATCH_TEST_SECRET"]) == EXIT_FATAL


def _system_routes(response_factory: Callable, user_counts: object) -> dict:
    return {
        ("GET", "/api/organizations/user-counts"): response_factory(200, user_counts),
        ("GET", "/api/lgpd/terms"): response_factory(200, {"version": "1.0"}),
        ("GET", "/api/health"): response_factory(200, {"status": "healthy"}),
    }


class TestSystemCheckScript:
    def test_healthy_system(
        self,
        make_prober: Callable,
        session_factory: Callable,
        response_factory: Callable,
        console: Console,
        console_output: io.StringIO,
    ) -> None:
        session = session_factory(_system_routes(response_factory, [{"organizationId": 1, "users": 3}]))
        collector = ResultCollector()

        passed, report = system_check.run_system_checks(make_prober(session), console, collector)

        assert passed
        assert report.computed_score == 100
        assert len(collector.outcomes) == 3
        assert "SCORE: 100/100 - EXCELLENT" in console_output.getvalue()
        sent_headers = session.request.call_args.kwargs["headers"]
        assert sent_headers["User-Agent"] == "Critical Endpoint Tester"

    def test_user_counts_must_be_an_array(
        self,
        make_prober: Callable,
        session_factory: Callable,
        response_factory: Callable,
        console: Console,
    ) -> None:
        session = session_factory(_system_routes(response_factory, {"users": 3}))
        collector = ResultCollector()

        passed, _ = system_check.run_system_checks(make_prober(session), console, collector)

        assert not passed
        assert [o.name for o in collector.outcomes if not o.passed] == ["Organization user counts"]

    def test_main_writes_timestamped_report(
        self, tmp_path: Path, session_factory: Callable, response_factory: Callable
    ) -> None:
        reports_dir = tmp_path / "reports"
        session = session_factory(_system_routes(response_factory, []))
        with patch("routewatch.route_registry.prober.requests.Session") as session_cls:
            session_cls.return_value = session
            code = system_check.main(["--base-url", "http://testserver", "--reports-dir", str(reports_dir)])

        assert code == EXIT_OK
        [report_path] = reports_dir.glob("monitor-sistema-*.json")
        report = json.loads(report_path.read_text(encoding="utf-8"))
        assert report["passed"] is True
        assert len(report["outcomes"]) == 3
        assert "timestamp" in report

    def test_main_fails_when_health_is_down(self, session_factory: Callable, response_factory: Callable) -> None:
        routes = _system_routes(response_factory, [])
        routes[("GET", "/api/health")] = response_factory(503, {"status": "critical"})
        session = session_factory(routes)
        with patch("routewatch.route_registry.prober.requests.Session") as session_cls:
            session_cls.return_value = session
            code = system_check.main(["--base-url", "http://testserver", "--no-report"])

        assert code == EXIT_FAILURES
