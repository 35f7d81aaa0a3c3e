"""A TLS-over-TCP listener that hands every accepted connection to a server."""

from __future__ import annotations

import logging
import socket
import ssl
import threading

from humptykit.connector import Connector, ConnectorMeta
from humptykit.tcp_connector import (
    Address,
    _bind,
    _format_sockaddr,
    _ListenerRuntime,
    _Server,
    _split_addr,
)
from humptykit.thread_adapter import DefaultThreadAdapter, ThreadAdapter

_log = logging.getLogger(__name__)


def _check_server_context(context: ssl.SSLContext) -> None:
    """Raise unless ``context`` can be used for the server side of TLS."""
    if not isinstance(context, ssl.SSLContext):
        raise TypeError(f"expected an ssl.SSLContext, not {type(context).__name__}")
    try:
        context.wrap_bio(ssl.MemoryBIO(), ssl.MemoryBIO(), server_side=True)
    except (ssl.SSLError, ValueError) as exc:
        raise ValueError(f"TLS context cannot serve connections: {exc}") from exc


class _TlsListenerRuntime(_ListenerRuntime):
    """Listener runtime that performs the TLS handshake before serving."""

    def __init__(
        self,
        label: str,
        listener: socket.socket,
        server: _Server,
        thread_adapter: ThreadAdapter,
        meta: ConnectorMeta,
        context: ssl.SSLContext,
        signals_accept_stopped: bool = True,
    ) -> None:
        super().__init__(
            label, listener, server, thread_adapter, meta, signals_accept_stopped
        )
        self.context = context

    def _serve(
        self,
        conn_id: int,
        stream: socket.socket | None,
        error: OSError | None,
        done: threading.Event,
    ) -> None:
        if stream is not None:
            try:
                stream = self.context.wrap_socket(stream, server_side=True)
            except (OSError, ValueError) as exc:
                _log.error(
                    "%s: connection %d failed to establish the TLS stream err=%s",
                    self.label,
                    conn_id,
                    exc,
                )
                stream.close()
                done.set()
                return
        super()._serve(conn_id, stream, error, done)


class TlsTcpConnector(Connector):
    """A TLS-over-TCP listener running on a background thread."""

    def __init__(self, runtime: _TlsListenerRuntime) -> None:
        self._runtime = runtime

    @classmethod
    def start(
        cls,
        addr: Address,
        server: _Server,
        context: ssl.SSLContext,
        thread_adapter: ThreadAdapter,
    ) -> "TlsTcpConnector":
        """Check ``context``, bind ``addr`` and start listening."""
        _check_server_context(context)
        host, port = _split_addr(addr)
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        addr_string = ", ".join(_format_sockaddr(info[0], info[4]) for info in infos)
        listener = _bind(infos)
        runtime = _TlsListenerRuntime(
            f"tls_tcp_connector[{addr_string}]",
            listener,
            server,
            thread_adapter,
            ConnectorMeta.TLS_TCP,
            context,
        )
        runtime.launch()
        return cls(runtime)

    @classmethod
    def start_unpooled(
        cls, addr: Address, context: ssl.SSLContext, server: _Server
    ) -> "TlsTcpConnector":
        """Start with every connection served on a fresh thread."""
        return cls.start(addr, server, context, DefaultThreadAdapter())

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
        return f"TlsTcpConnector({self._runtime.label})"