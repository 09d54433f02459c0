from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Probe:
    """One request made against the server under test."""

    path: str
    status: int
    body: str


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one end-to-end scenario."""

    name: str
    ok: bool
    status: int
    detail: str = ""


class SmokeError(RuntimeError):
    """Raised when the smoke flow cannot proceed (e.g., server never ready)."""


class NotReadyError(SmokeError):
    """Raised when the server does not answer within the timeout."""


class ProbeError(SmokeError):
    """Raised when a request fails at the transport level after retries."""
