"""Explicit middleware chain for the app.

Nothing is installed implicitly: create_app() takes an ordered list of
Starlette `Middleware` entries (first entry is outermost).
default_middleware() gives the usual request logging + recovery pair.
"""
from __future__ import annotations

import time
from uuid import uuid4

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from .logging_conf import get_logger

__all__ = [
    "REQUEST_ID_HEADER",
    "RequestLogMiddleware",
    "RecoveryMiddleware",
    "default_middleware",
]

REQUEST_ID_HEADER = "X-Request-ID"

logger = get_logger("http")


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Log request start/end with a correlation id.

    - Reuses an incoming X-Request-ID, otherwise mints one
    - Logs method/path on start and status/elapsed_ms on end
    - Echoes X-Request-ID on the response
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        logger.info(
            "request.start",
            extra={
                "event": "request_start",
                "method": request.method,
                "path": request.url.path,
                "request_id": request_id,
            },
        )
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request.error",
                extra={
                    "event": "request_error",
                    "method": request.method,
                    "path": request.url.path,
                    "request_id": request_id,
                },
            )
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "request.end",
            extra={
                "event": "request_end",
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
                "request_id": request_id,
            },
        )
        return response


class RecoveryMiddleware(BaseHTTPMiddleware):
    """Turn an unhandled handler exception into a plain 500 and keep serving."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception:
            logger.exception(
                "request.recovered",
                extra={
                    "event": "request_recovered",
                    "method": request.method,
                    "path": request.url.path,
                    "request_id": getattr(request.state, "request_id", None),
                },
            )
            return PlainTextResponse("Internal Server Error", status_code=500)


def default_middleware() -> list[Middleware]:
    """Request logging outside, recovery inside, so recovered 500s get logged."""
    return [Middleware(RequestLogMiddleware), Middleware(RecoveryMiddleware)]
