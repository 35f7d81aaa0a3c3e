"""A TLS listener on a Unix domain socket that hands connections to a server."""

from __future__ import annotations

import os
import socket
import ssl

from humptykit.connector import Connector, ConnectorMeta
from humptykit.tcp_connector import _BACKLOG, _Server
from humptykit.thread_adapter import DefaultThreadAdapter, ThreadAdapter
from humptykit.tls_tcp_connector import _check_server_context, _TlsListenerRuntime
from humptykit.unix_connector import PathLike


class TlsUnixConnector(Connector):
    """A TLS listener on a Unix domain socket, running on a background thread."""

    def __init__(self, runtime: _TlsListenerRuntime) -> None:
        self._runtime = runtime

    @classmethod
    def start(
        cls,
        path: PathLike,
        server: _Server,
        context: ssl.SSLContext,
        thread_adapter: ThreadAdapter,
    ) -> "TlsUnixConnector":
        """Check ``context``, bind ``path`` (replacing any file there) and listen."""
        _check_server_context(context)
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

        runtime = _TlsListenerRuntime(
            f"tls_unix_connector[{path}]",
            listener,
            server,
            thread_adapter,
            ConnectorMeta.TLS_UNIX,
            context,
            signals_accept_stopped=False,
        )
        runtime.launch()
        return cls(runtime)

    @classmethod
    def start_unpooled(
        cls, path: PathLike, context: ssl.SSLContext, server: _Server
    ) -> "TlsUnixConnector":
        """Start with every connection served on a fresh thread."""
        return cls.start(path, server, context, DefaultThreadAdapter())

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
        return f"TlsUnixConnector({self._runtime.label})"