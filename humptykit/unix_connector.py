"""A Unix domain socket listener that hands every connection to a server."""

from __future__ import annotations

import os
import socket
from typing import Union

from humptykit.connector import Connector, ConnectorMeta
from humptykit.tcp_connector import _BACKLOG, _ListenerRuntime, _Server
from humptykit.thread_adapter import DefaultThreadAdapter, ThreadAdapter

PathLike = Union[str, "os.PathLike[str]"]


class UnixConnector(Connector):
    """A Unix domain socket listener running on a background thread."""

    def __init__(self, runtime: _ListenerRuntime) -> None:
        self._runtime = runtime

    @classmethod
    def start(
        cls, path: PathLike, server: _Server, thread_adapter: ThreadAdapter
    ) -> "UnixConnector":
        """Bind ``path``, replacing whatever file is there, and start listening."""
        path = os.fspath(path)
        if os.path.lexists(path):
            os.remove(path)

        listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            listener.bind(path)
            listener.listen(_BACKLOG)
        except OSError:
            listener.close()
            raise

        runtime = _ListenerRuntime(
            f"unix_connector[{path}]",
            listener,
            server,
            thread_adapter,
            ConnectorMeta.UNIX,
            signals_accept_stopped=False,
        )
        runtime.launch()
        return cls(runtime)

    @classmethod
    def start_unpooled(cls, path: PathLike, server: _Server) -> "UnixConnector":
        """Start with every connection served on a fresh thread."""
        return cls.start(path, server, DefaultThreadAdapter())

    def shutdown(self) -> None:
        self._runtime.shutdown()

    def is_marked_for_shutdown(self) -> bool:
        return self._runtime.is_marked_for_shutdown()

    def is_shutting_down(self) -> bool:
        return self._runtime.waiter.is_done(2)

    def is_shutdown(self) -> bool:
        return self._runtime.waiter.is_done(2)

    def shutdown_and_join(self, timeout: float | None = None) -> bool:
        self.shutdown()
        return self.join(timeout)

    def join(self, timeout: float | None = None) -> bool:
        return self._runtime.join(timeout)

    def __repr__(self) -> str:
        return f"UnixConnector({self._runtime.label})"