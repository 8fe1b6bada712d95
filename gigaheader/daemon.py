from __future__ import annotations

import socket
import threading
import time
from dataclasses import dataclass
from typing import Callable

import uvicorn

from .config import HOST, LOG_LEVEL, SHUTDOWN_TIMEOUT, STARTUP_TIMEOUT
from .errors import BindError


@dataclass
class DaemonHandle:
    server: uvicorn.Server
    thread: threading.Thread
    sock: socket.socket
    port: int


def bind_socket(host: str, port: int) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
        sock.listen()
    except OSError:
        sock.close()
        raise
    return sock


def start(port: int, handler: Callable, host: str = HOST) -> DaemonHandle:
    """Bind ``port`` and serve ``handler`` (an ASGI app) on a background thread.

    The socket is bound here rather than by uvicorn so a busy port surfaces as
    :class:`BindError` in the caller instead of exiting the server thread.
    Returns once the server is accepting connections. Port 0 picks a free
    port; the handle records the one actually bound.
    """
    try:
        sock = bind_socket(host, port)
    except OSError as exc:
        raise BindError(port) from exc
    bound_port = sock.getsockname()[1]

    config = uvicorn.Config(
        handler,
        log_level=LOG_LEVEL,
        timeout_graceful_shutdown=SHUTDOWN_TIMEOUT,
    )
    server = uvicorn.Server(config)
    thread = threading.Thread(
        target=server.run,
        kwargs={"sockets": [sock]},
        name=f"gigaheader-{bound_port}",
        daemon=True,
    )
    thread.start()

    deadline = time.monotonic() + STARTUP_TIMEOUT
    while not server.started:
        if not thread.is_alive() or time.monotonic() > deadline:
            server.should_exit = True
            thread.join(SHUTDOWN_TIMEOUT)
            sock.close()
            raise BindError(port)
        time.sleep(0.01)

    return DaemonHandle(server=server, thread=thread, sock=sock, port=bound_port)


def stop(handle: DaemonHandle) -> None:
    handle.server.should_exit = True
    handle.thread.join(SHUTDOWN_TIMEOUT + 1)
    # uvicorn closes the listening socket on shutdown; closing again is a no-op.
    handle.sock.close()
