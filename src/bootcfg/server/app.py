"""API server — FastAPI app over the group store, served by uvicorn.

:func:`build_server` turns a :class:`ServerConfig` into a :class:`Server`;
:meth:`Server.serve` binds one listening socket and blocks in uvicorn until
the process is signalled to stop.
"""

from __future__ import annotations

import contextlib
import logging
import signal
import socket
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import uvicorn
from fastapi import FastAPI, HTTPException
from starlette.staticfiles import StaticFiles
from uvicorn.server import HANDLED_SIGNALS

from bootcfg import __version__

if TYPE_CHECKING:
    from bootcfg.domain.address import ListenAddress
    from bootcfg.infrastructure.store import Store

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """The server could not bind its listen address or stopped serving abnormally."""


@dataclass(frozen=True)
class ServerConfig:
    """Runtime configuration handed to :func:`build_server`."""

    store: Store
    image_path: str


def create_app(config: ServerConfig) -> FastAPI:
    """Create the FastAPI application for *config*."""
    app = FastAPI(title="bootcfg", version=__version__)
    store = config.store

    @app.get("/")
    def index() -> dict[str, str]:
        return {"service": "bootcfg", "version": __version__}

    @app.get("/groups")
    def list_groups() -> list[dict[str, Any]]:
        return [group.model_dump() for group in store.list_groups()]

    @app.get("/groups/{name}")
    def get_group(name: str) -> dict[str, Any]:
        group = store.get_group(name)
        if group is None:
            raise HTTPException(status_code=404, detail=f"group {name!r} not found")
        return group.model_dump()

    app.mount("/images", StaticFiles(directory=config.image_path), name="images")
    return app


class _UvicornServer(uvicorn.Server):
    """uvicorn server that treats SIGINT/SIGTERM as a clean stop.

    Stock uvicorn re-raises the captured signal once it has shut down,
    which would kill the process before startup can close the store and
    exit 0.
    """

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        if threading.current_thread() is not threading.main_thread():
            yield
            return
        original = {sig: signal.signal(sig, self.handle_exit) for sig in HANDLED_SIGNALS}
        try:
            yield
        finally:
            for sig, handler in original.items():
                signal.signal(sig, handler)


class Server:
    """An assembled API server, ready to serve."""

    def __init__(self, config: ServerConfig) -> None:
        self.config = config
        self.app = create_app(config)

    def serve(self, address: ListenAddress) -> None:
        """Bind *address* and serve until shut down.

        Returns when uvicorn exits after a shutdown signal.

        Raises:
            TransportError: If the address cannot be bound or uvicorn never
                finishes starting up.
        """
        sock = _bind_socket(address)
        uv_config = uvicorn.Config(self.app, log_config=None, access_log=True)
        server = _UvicornServer(uv_config)
        try:
            server.run(sockets=[sock])
        finally:
            sock.close()
        if not server.started:
            msg = f"server on {address} failed to start"
            raise TransportError(msg)


def build_server(config: ServerConfig) -> Server:
    """Build a :class:`Server` from *config*."""
    return Server(config)


def _bind_socket(address: ListenAddress) -> socket.socket:
    """Open the single listening socket for *address*.

    An empty host listens on IPv4 and IPv6 together where the platform
    supports dual-stack sockets, and on every IPv4 interface otherwise.
    """
    try:
        if not address.host and socket.has_dualstack_ipv6():
            sock = socket.create_server(
                ("::", address.port), family=socket.AF_INET6, dualstack_ipv6=True
            )
        else:
            sock = _bind_resolved(address)
    except OSError as exc:
        msg = f"failed to start listening on {address}: {exc}"
        raise TransportError(msg) from exc
    sock.set_inheritable(True)
    logger.debug("Bound listener on %s", sock.getsockname())
    return sock


def _bind_resolved(address: ListenAddress) -> socket.socket:
    try:
        infos = socket.getaddrinfo(
            address.bind_host,
            address.port,
            socket.AF_UNSPEC,
            socket.SOCK_STREAM,
            0,
            socket.AI_PASSIVE,
        )
    except (OSError, UnicodeError) as exc:
        msg = f"cannot resolve {address}: {exc}"
        raise TransportError(msg) from exc
    family, _, _, _, sockaddr = infos[0]
    return socket.create_server(sockaddr, family=family)
