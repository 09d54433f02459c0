"""FastAPI app factory, ASGI entrypoint and console entrypoint."""
from __future__ import annotations

from collections.abc import Sequence

from fastapi import FastAPI
from starlette.middleware import Middleware

from app import __version__
from app.api import router as api_router
from app.config import ConfigError, ServerConfig
from app.logging_conf import get_logger, setup_logging
from app.middleware import default_middleware
from app.server import BindError, HttpServer

# Configure logging before anything else.
setup_logging()
logger = get_logger("app")


def create_app(
    config: ServerConfig | None = None,
    middleware: Sequence[Middleware] | None = None,
) -> FastAPI:
    """Build the app.

    `middleware` is the complete, ordered chain (first entry outermost).
    None selects default_middleware(); an empty list installs nothing.
    """
    config = config or ServerConfig()
    chain = default_middleware() if middleware is None else list(middleware)

    app = FastAPI(
        title="Hello Server",
        version=__version__,
        middleware=chain,
    )
    app.state.config = config
    app.include_router(api_router)
    return app


# ASGI entrypoint for uvicorn: `uvicorn app.main:app --host 0.0.0.0 --port 8080`
app = create_app()


def main() -> None:
    """Serve on HOST:PORT (default 0.0.0.0:8080); exit 1 if that fails."""
    try:
        config = ServerConfig.from_env()
    except ConfigError as e:
        logger.error("config.invalid", extra={"event": "config_invalid", "error": str(e)})
        raise SystemExit(1) from e

    logger.info(
        "server.start",
        extra={"event": "server_start", "address": config.address, "version": config.version},
    )
    try:
        HttpServer(create_app(config), config).start()
    except BindError as e:
        logger.error(
            "server.bind_failed",
            extra={
                "event": "server_bind_failed",
                "address": e.address,
                "port": e.port,
                "error": str(e),
            },
        )
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
