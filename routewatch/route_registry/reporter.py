"""
routewatch/route_registry/reporter.py

Output formatters for monitor results.

Supports:
- JSON: Full structured output
- Summary: Human-readable console output with severity markers
- Table: Compact tabular format
- Timestamped JSON report files in a reports directory
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TextIO

from routewatch.route_registry.models import MonitorResult, ProbeClassification, ProbeResult

_MARKERS: dict[ProbeClassification, str] = {
    ProbeClassification.SECURE: "✅",
    ProbeClassification.PUBLIC_OK: "✅",
    ProbeClassification.UNEXPECTED_STATUS: "⚠️ ",
    ProbeClassification.PUBLIC_UNEXPECTED: "❌",
    ProbeClassification.SERVER_ERROR: "🚨",
    ProbeClassification.NETWORK_ERROR: "🚨",
}


def marker_for(result: ProbeResult) -> str:
    return _MARKERS[result.classification]


def write_json(result: MonitorResult, output: TextIO) -> None:
    """
    Write full results as JSON.

    Args:
        result: The monitor result to serialize.
        output: File-like object to write to.
    """
    data = result.model_dump(mode="json", by_alias=True)
    json.dump(data, output, indent=2, ensure_ascii=False)
    output.write("\n")


def write_summary(result: MonitorResult, output: TextIO) -> None:
    """
    Write a human-readable summary of a monitor run.
    """
    lines: list[str] = []
    lines.append("=" * 70)
    lines.append("🔍 NEW ROUTE MONITOR")
    lines.append("=" * 70)
    lines.append("")
    lines.append(f"Routes in server source: {len(result.current_routes)}")
    lines.append(f"Known before run:        {result.known_count_before}")
    lines.append(f"Known after run:         {result.known_count_after}")
    lines.append("")

    if not result.new_routes:
        lines.append("✅ No new routes detected")
        output.write("\n".join(lines))
        output.write("\n")
        return

    lines.append(f"🆕 {len(result.new_routes)} new routes detected:")
    for route in result.new_routes:
        lines.append(f"   {route.label}")
    lines.append("")

    lines.append("-" * 70)
    lines.append("🧪 PROBE RESULTS")
    lines.append("-" * 70)
    for probe in result.probe_results:
        status = probe.http_status if probe.http_status is not None else "---"
        lines.append(f"{marker_for(probe)} {probe.classification:<18} {status:<4} {probe.route.label}")
        if not probe.is_secure and probe.evidence:
            snippet = " ".join(probe.evidence.split())[:100]
            lines.append(f"      {snippet}")
    lines.append("")

    lines.append("📊 SUMMARY")
    lines.append(f"   New routes:      {len(result.new_routes)}")
    lines.append(f"   Secure:          {result.secure_count}")
    lines.append(f"   Critical issues: {result.critical_count}")
    if result.score:
        lines.append(f"   Score:           {result.score.computed_score}/100 - {result.score.verdict}")
    lines.append("")

    if result.passed:
        lines.append("✅ All new routes behave as expected")
    else:
        lines.append("⚠️  ACTION REQUIRED: new routes with security issues detected")

    output.write("\n".join(lines))
    output.write("\n")


def write_table(result: MonitorResult, output: TextIO) -> None:
    """
    Write a compact table of probed routes.
    """
    lines: list[str] = []

    lines.append(f"{'METHOD':<8} {'STATUS':<7} {'CLASSIFICATION':<18} {'ROUTE'}")
    lines.append("-" * 100)

    for probe in result.probe_results:
        status = str(probe.http_status) if probe.http_status is not None else "---"
        lines.append(f"{probe.route.method:<8} {status:<7} {probe.classification:<18} {probe.route.path[:120]}")

    lines.append("-" * 100)
    lines.append(f"Total: {len(result.new_routes)} new routes, {result.critical_count} critical")

    output.write("\n".join(lines))
    output.write("\n")


def write_timestamped_report(
    payload: dict[str, Any],
    reports_dir: str | Path,
    prefix: str,
    now: datetime | None = None,
) -> Path:
    """
    Write a JSON report named `<prefix>-<timestamp>.json` into reports_dir.

    Args:
        payload: JSON-serializable report body. A "timestamp" key is added.
        reports_dir: Directory to write into; created if missing.
        prefix: File name prefix, e.g. "endpoint-audit".
        now: Timestamp to use. Defaults to now (UTC).

    Returns:
        Path of the written file.
    """
    now = now or datetime.now(timezone.utc)
    directory = Path(reports_dir)
    directory.mkdir(parents=True, exist_ok=True)

    report_path = directory / f"{prefix}-{now.strftime('%Y%m%dT%H%M%SZ')}.json"
    body = {"timestamp": now.isoformat(), **payload}
    with open(report_path, mode="w", encoding="utf-8") as f:
        json.dump(body, f, indent=2, ensure_ascii=False)
        f.write("\n")
    return report_path
