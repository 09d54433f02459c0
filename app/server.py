"""Listening socket + uvicorn serve loop.

The socket is bound before uvicorn is involved so a taken or privileged
address fails immediately with BindError instead of inside the event loop.
Once listening, the server runs for the lifetime of the process.
"""
from __future__ import annotations

import errno
import socket
from enum import Enum

import uvicorn
from fastapi import FastAPI

from .config import ServerConfig
from .logging_conf import get_logger

__all__ = [
    "BindError",
    "HttpServer",
    "ServerState",
    "open_listener",
    "start",
]

logger = get_logger("server")

_BACKLOG = 2048


class ServerState(str, Enum):
    stopped = "stopped"
    listening = "listening"


class BindError(OSError):
    """Raised when the listening socket cannot be opened.

    Covers address in use, address not assignable and privileged ports.
    """

    code: str = "bind_error"

    def __init__(self, address: str, port: int, reason: OSError) -> None:
        super().__init__(reason.errno, f"cannot bind {address}:{port}: {reason.strerror or reason}")
        self.address = address
        self.port = port
        self.reason = reason

    @property
    def in_use(self) -> bool:
        return self.reason.errno == errno.EADDRINUSE


def open_listener(bind_address: str, port: int, *, backlog: int = _BACKLOG) -> socket.socket:
    """Bind and listen on (bind_address, port); raise BindError on failure."""
    family = socket.AF_INET6 if ":" in bind_address else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((bind_address, port))
        sock.listen(backlog)
    except OSError as e:
        sock.close()
        raise BindError(bind_address, port, e) from e
    sock.set_inheritable(True)
    return sock


class HttpServer:
    """Serve one ASGI app on a configured address.

    Two states: stopped -> listening. There is no way back; start() blocks
    until the process is told to exit.
    """

    def __init__(self, app: FastAPI, config: ServerConfig | None = None) -> None:
        self.app = app
        self.config = config or ServerConfig()
        self.state = ServerState.stopped
        self._sock: socket.socket | None = None

    def bind(self) -> socket.socket:
        """Open the listening socket; the server is listening from here on."""
        if self.state is ServerState.listening:
            raise RuntimeError("server is already listening")
        self._sock = open_listener(self.config.bind_address, self.config.port)
        self.state = ServerState.listening
        host, port = self._sock.getsockname()[:2]
        logger.info(
            "server.listening",
            extra={"event": "server_listening", "host": host, "port": port},
        )
        return self._sock

    @property
    def bound_port(self) -> int | None:
        return self._sock.getsockname()[1] if self._sock else None

    def start(self) -> None:
        """Bind, then serve forever. Raises BindError without serving anything."""
        sock = self._sock if self._sock is not None else self.bind()
        uv_config = uvicorn.Config(
            self.app,
            log_config=None,
            log_level=self.config.log_level.lower(),
        )
        uvicorn.Server(uv_config).run(sockets=[sock])


def start(bind_address: str, port: int, *, app: FastAPI | None = None) -> None:
    """Start serving the hello app on bind_address:port.

    Only returns if uvicorn is asked to exit; a busy or privileged address
    raises BindError straight away, and an invalid port raises ConfigError.
    """
    config = ServerConfig.build(bind_address=bind_address, port=port)
    if app is None:
        from .main import create_app

        app = create_app(config)
    HttpServer(app, config).start()
