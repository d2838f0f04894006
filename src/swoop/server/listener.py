"""Listening socket lifecycle.

``Listener`` binds a TCP socket itself and hands it to a ``uvicorn.Server``
running as a background task on the current event loop. Binding first
means a taken port fails ``start()`` with ``TransportFailure`` instead of
uvicorn's process exit.
"""

from __future__ import annotations

import asyncio
import logging
import socket

import uvicorn

from swoop._internal.asgi import ASGIApp
from swoop.config import AppConfig
from swoop.errors import TransportFailure

logger = logging.getLogger("swoop.server")

_STARTUP_POLL_INTERVAL = 0.01


def bind_socket(host: str, port: int, *, backlog: int) -> socket.socket:
    """Bind and listen on ``host:port``.

    Raises ``TransportFailure`` (chained to the ``OSError``) on failure.
    """
    try:
        sock = socket.create_server((host, port), backlog=backlog)
    except OSError as exc:
        msg = f"Could not bind {host}:{port}: {exc.strerror or exc}"
        raise TransportFailure(msg) from exc
    sock.setblocking(False)
    return sock


class Listener:
    """A running uvicorn server bound to one socket.

    Created by ``App.listen()`` and exposed as ``App.instance`` while the
    app is listening.
    """

    __slots__ = ("_address", "_server", "_socket", "_task")

    def __init__(self, server: uvicorn.Server, sock: socket.socket) -> None:
        self._server = server
        self._socket = sock
        self._task: asyncio.Task[None] | None = None
        self._address: tuple[str, int] = sock.getsockname()[:2]

    @classmethod
    def create(
        cls,
        app: ASGIApp,
        port: int,
        config: AppConfig,
    ) -> Listener:
        sock = bind_socket(config.host, port, backlog=config.backlog)
        uv_config = uvicorn.Config(
            app,
            host=config.host,
            port=port,
            interface="asgi3",
            lifespan="off",
            log_config=None,
            access_log=config.access_log,
            timeout_keep_alive=int(config.keep_alive_timeout),
            backlog=config.backlog,
        )
        return cls(uvicorn.Server(uv_config), sock)

    # -- Address --

    @property
    def host(self) -> str:
        return self._address[0]

    @property
    def port(self) -> int:
        """The bound port (the real one when listening on port 0)."""
        return self._address[1]

    @property
    def server(self) -> uvicorn.Server:
        return self._server

    @property
    def serving(self) -> bool:
        return self._task is not None and not self._task.done()

    # -- Lifecycle --

    async def start(self) -> None:
        """Start serving and return once uvicorn reports it is accepting."""
        self._task = asyncio.create_task(self._server.serve(sockets=[self._socket]))
        while not self._server.started:
            if self._task.done():
                self._socket.close()
                exc = None if self._task.cancelled() else self._task.exception()
                msg = f"Server on port {self.port} stopped during startup"
                raise TransportFailure(msg) from exc
            await asyncio.sleep(_STARTUP_POLL_INTERVAL)
        logger.info("Listening on http://%s:%d", self.host, self.port)

    async def wait_closed(self) -> None:
        """Wait until the server stops on its own (e.g. after a signal)."""
        if self._task is not None:
            await asyncio.shield(self._task)

    async def stop(self) -> None:
        """Ask uvicorn to exit and wait for the serve task to finish."""
        if self._task is None:
            msg = "Listener was never started"
            raise TransportFailure(msg)
        self._server.should_exit = True
        try:
            await self._task
        except OSError as exc:
            msg = f"Could not release port: {exc.strerror or exc}"
            raise TransportFailure(msg) from exc
        finally:
            self._socket.close()
        logger.info("Stopped listening on http://%s:%d", self.host, self.port)

    def __repr__(self) -> str:
        state = "serving" if self.serving else "idle"
        return f"<Listener {self.host}:{self.port} {state}>"

