from __future__ import annotations

import re

__all__ = [
    "GREETING_PREFIX",
    "greeting",
    "matches_greeting",
]

GREETING_PREFIX = "Hello, this is Go Gin version"

_GREETING_RE = re.compile(rf"^{re.escape(GREETING_PREFIX)} (\S+)$")


def greeting(version: str) -> str:
    """Return the index greeting for the given framework version.

    Raises:
        ValueError: if the version is empty or blank.
    """
    if not isinstance(version, str) or not version.strip():
        raise ValueError("version must be a non-empty string")
    return f"{GREETING_PREFIX} {version}"


def matches_greeting(body: str, version: str | None = None) -> bool:
    """Check that a response body has the greeting shape.

    When `version` is given the version token must match it exactly.
    """
    m = _GREETING_RE.match(body or "")
    if m is None:
        return False
    return version is None or m.group(1) == version
