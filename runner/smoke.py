#!/usr/bin/env python3
"""End-to-end smoke runner against a running hello server.

Steps:
- wait until the server answers
- GET / and expect 200 with the greeting body
- GET a missing path and expect a non-2xx status
- emit a compact summary and exit code
"""
from __future__ import annotations

import asyncio
import sys

import httpx

from app.logging_conf import get_logger, setup_logging
from runner.cli import parse_args
from runner.client import fetch, wait_until_ready
from runner.types import CheckResult, NotReadyError, SmokeError
from runner.utils import check_index, check_missing, summarize

setup_logging()
logger = get_logger("runner")


async def run_smoke(
    *,
    base_url: str,
    timeout_s: float = 20.0,
    missing_path: str = "/missing",
    expected_version: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    results: list[CheckResult] = []
    try:
        await wait_until_ready(base_url, timeout_s, transport=transport)
        results.append(
            check_index(await fetch(base_url, "/", transport=transport), expected_version)
        )
        results.append(check_missing(await fetch(base_url, missing_path, transport=transport)))
    except SmokeError as e:
        stage = "ready" if isinstance(e, NotReadyError) else "probe"
        results.append(CheckResult(stage, False, 0, str(e)))
    summary, exit_code = summarize(results)
    logger.info("runner.summary", extra=summary)
    return exit_code


def main(argv: list[str] | None = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)

    async def _run() -> int:
        return await run_smoke(
            base_url=args.base_url,
            timeout_s=args.timeout,
            missing_path=args.missing_path,
            expected_version=args.expected_version,
        )

    raise SystemExit(asyncio.run(_run()))


if __name__ == "__main__":
    main()
