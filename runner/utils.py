from __future__ import annotations

from app.domain.greeting import matches_greeting
from runner.types import CheckResult, Probe


def check_index(probe: Probe, expected_version: str | None = None) -> CheckResult:
    """GET / must be exactly 200 with the greeting body."""
    if probe.status != 200:
        return CheckResult("index", False, probe.status, f"expected 200, got {probe.status}")
    if not matches_greeting(probe.body, expected_version):
        return CheckResult("index", False, probe.status, f"unexpected body: {probe.body!r}")
    return CheckResult("index", True, probe.status)


def check_missing(probe: Probe) -> CheckResult:
    """Anything other than GET / must not succeed."""
    ok = not (200 <= probe.status < 300)
    detail = "" if ok else f"expected non-2xx for {probe.path}, got {probe.status}"
    return CheckResult("missing", ok, probe.status, detail)


def summarize(results: list[CheckResult]) -> tuple[dict, int]:
    """Compute summary dict and an exit code from check results."""
    failed = [r for r in results if not r.ok]
    summary = {
        "component": "runner",
        "event": "summary",
        "checks": len(results),
        "passed": len(results) - len(failed),
        "failed": len(failed),
        "failures": [{"check": r.name, "status": r.status, "detail": r.detail} for r in failed],
    }
    exit_code = 0 if results and not failed else 1
    return summary, exit_code
