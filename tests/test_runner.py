"""Tests for the smoke runner, in-process and against a real socket."""

import asyncio

import httpx
import pytest
import uvicorn

from app.config import ServerConfig
from app.main import create_app
from app.server import open_listener
from runner.cli import parse_args
from runner.client import fetch, wait_until_ready
from runner.smoke import run_smoke
from runner.types import CheckResult, NotReadyError, Probe, ProbeError
from runner.utils import check_index, check_missing, summarize

BASE = "http://testserver"


def _asgi(version="1.2.3"):
    return httpx.ASGITransport(app=create_app(ServerConfig(version=version)))


def _refusing():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(handler)


class TestChecks:
    def test_index_ok(self):
        r = check_index(Probe("/", 200, "Hello, this is Go Gin version 1.0"))
        assert r.ok

    def test_index_wrong_status(self):
        r = check_index(Probe("/", 500, "Internal Server Error"))
        assert not r.ok
        assert "expected 200" in r.detail

    def test_index_wrong_version(self):
        r = check_index(Probe("/", 200, "Hello, this is Go Gin version 1.0"), "2.0")
        assert not r.ok

    def test_missing_non_2xx(self):
        assert check_missing(Probe("/missing", 404, "")).ok
        assert check_missing(Probe("/missing", 405, "")).ok
        assert not check_missing(Probe("/missing", 204, "")).ok

    def test_summarize(self):
        summary, code = summarize(
            [CheckResult("index", True, 200), CheckResult("missing", False, 200, "nope")]
        )
        assert code == 1
        assert summary["passed"] == 1
        assert summary["failures"] == [{"check": "missing", "status": 200, "detail": "nope"}]

    def test_summarize_empty_is_failure(self):
        assert summarize([])[1] == 1


class TestCli:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("BASE_URL", raising=False)
        args = parse_args([])
        assert args.base_url == "http://127.0.0.1:8080"
        assert args.missing_path == "/missing"
        assert args.expected_version is None

    def test_base_url_from_env(self, monkeypatch):
        monkeypatch.setenv("BASE_URL", "http://svc:8080")
        assert parse_args([]).base_url == "http://svc:8080"


@pytest.mark.anyio
class TestHttpClient:
    async def test_fetch_index(self):
        probe = await fetch(BASE, "/", transport=_asgi())
        assert probe == Probe("/", 200, "Hello, this is Go Gin version 1.2.3")

    async def test_fetch_missing(self):
        probe = await fetch(BASE, "/missing", transport=_asgi())
        assert probe.status == 404

    async def test_fetch_gives_up(self):
        with pytest.raises(ProbeError):
            await fetch(BASE, "/", retries=2, transport=_refusing())

    async def test_ready(self):
        await wait_until_ready(BASE, 1.0, transport=_asgi())

    async def test_not_ready(self):
        with pytest.raises(NotReadyError):
            await wait_until_ready(BASE, 0.0, poll_s=0.0, transport=_refusing())


@pytest.mark.anyio
class TestRunSmoke:
    async def test_passes_against_app(self):
        assert await run_smoke(base_url=BASE, transport=_asgi()) == 0

    async def test_expected_version(self):
        assert await run_smoke(base_url=BASE, expected_version="1.2.3", transport=_asgi()) == 0
        assert await run_smoke(base_url=BASE, expected_version="0.0.1", transport=_asgi()) == 1

    async def test_fails_when_missing_path_exists(self):
        # "/" answers 200, so treating it as the missing path must fail
        assert await run_smoke(base_url=BASE, missing_path="/", transport=_asgi()) == 1

    async def test_unreachable_server_returns_failure(self):
        assert await run_smoke(base_url="http://x", timeout_s=0.0, transport=_refusing()) == 1

    async def test_unreachable_server_is_summarized(self, caplog):
        with caplog.at_level("INFO", logger="runner"):
            await run_smoke(base_url="http://x", timeout_s=0.0, transport=_refusing())
        [record] = [r for r in caplog.records if r.getMessage() == "runner.summary"]
        assert record.failed == 1
        assert record.failures[0]["check"] == "ready"
        assert record.failures[0]["status"] == 0

    async def test_failing_fetch_after_ready_returns_failure(self):
        calls = {"n": 0}

        def handler(request):
            calls["n"] += 1
            if calls["n"] == 1:
                return httpx.Response(200, text="ready")
            raise httpx.ConnectError("connection reset", request=request)

        code = await run_smoke(base_url=BASE, transport=httpx.MockTransport(handler))
        assert code == 1

    async def test_real_socket_end_to_end(self):
        sock = open_listener("127.0.0.1", 0)
        port = sock.getsockname()[1]
        server = uvicorn.Server(uvicorn.Config(create_app(), log_config=None))
        task = asyncio.create_task(server.serve(sockets=[sock]))
        try:
            code = await run_smoke(base_url=f"http://127.0.0.1:{port}", timeout_s=5.0)
        finally:
            server.should_exit = True
            await task
            sock.close()
        assert code == 0
