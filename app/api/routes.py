from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from ..domain.greeting import greeting

router = APIRouter()


def framework_version(request: Request) -> str:
    """Version string injected into the app at construction time."""
    return request.app.state.config.version


@router.get(
    "/",
    response_class=PlainTextResponse,
    summary="Greeting with the framework version",
)
async def index(version: str = Depends(framework_version)) -> str:
    """Return the fixed greeting; nothing is read from the request."""
    return greeting(version)
