from __future__ import annotations

import asyncio
import time

import httpx

from app.logging_conf import get_logger
from runner.types import NotReadyError, Probe, ProbeError

logger = get_logger("runner.client")


async def wait_until_ready(
    base_url: str,
    timeout_s: float = 20.0,
    *,
    poll_s: float = 0.25,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Poll GET / until the server answers at all, or raise after a timeout.

    Any HTTP response counts as ready; only transport errors are retried.
    """
    deadline = time.monotonic() + timeout_s
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0, transport=transport) as client:
        while True:
            try:
                r = await client.get("/")
            except httpx.TransportError as e:
                if time.monotonic() >= deadline:
                    raise NotReadyError(f"{base_url} not reachable within {timeout_s}s: {e}") from e
                await asyncio.sleep(poll_s)
                continue
            logger.info(
                "server.ready",
                extra={"event": "server_ready", "base_url": base_url, "status_code": r.status_code},
            )
            return


async def fetch(
    base_url: str,
    path: str,
    *,
    retries: int = 3,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Probe:
    """GET `path` and return its status and body, retrying transport errors."""
    last_err: Exception | None = None
    for attempt in range(retries):
        try:
            async with httpx.AsyncClient(
                base_url=base_url, timeout=10.0, transport=transport
            ) as client:
                r = await client.get(path)
                return Probe(path=path, status=r.status_code, body=r.text)
        except httpx.TransportError as e:
            last_err = e
            logger.warning(
                "fetch.retry",
                extra={
                    "event": "fetch_retry",
                    "path": path,
                    "attempt": attempt + 1,
                    "error": str(e),
                },
            )
    raise ProbeError(f"GET {path} failed: {last_err}")
