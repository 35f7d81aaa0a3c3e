"""A TCP listener that hands every accepted connection to a server."""

from __future__ import annotations

import functools
import itertools
import logging
import os
import select
import socket
import threading
import weakref
from dataclasses import dataclass
from typing import Callable, Protocol, Union

from humptykit.connector import (
    CONNECTOR_SHUTDOWN_TIMEOUT,
    Connector,
    ConnectorMeta,
    ConnWait,
)
from humptykit.thread_adapter import (
    DefaultThreadAdapter,
    ThreadAdapter,
    ThreadAdapterJoinHandle,
)

_log = logging.getLogger(__name__)

# How often a waiting listener wakes up to look at the shutdown flags.
_POLL_INTERVAL = 1.0
_BACKLOG = 128

Address = Union[str, "tuple[str, int]"]


class _Server(Protocol):
    def is_shutdown(self) -> bool: ...

    def handle_connection_with_meta(self, stream: socket.socket, meta: ConnectorMeta) -> object: ...

    def add_shutdown_hook(self, hook: Callable[[], None]) -> object: ...


@dataclass
class _ActiveConnection:
    id: int
    handle: ThreadAdapterJoinHandle | None
    done: threading.Event


class _ListenerRuntime:
    """Accept loop, shutdown and join logic shared by the socket connectors.

    Progress is tracked in a ``ConnWait``: 1 means the accept loop has stopped,
    2 means every connection has finished and the listener is closed.
    """

    def __init__(
        self,
        label: str,
        listener: socket.socket,
        server: _Server,
        thread_adapter: ThreadAdapter,
        meta: ConnectorMeta,
        signals_accept_stopped: bool = True,
    ) -> None:
        self.label = label
        self.listener = listener
        self.server = server
        self.thread_adapter = thread_adapter
        self.meta = meta
        self.signals_accept_stopped = signals_accept_stopped
        self.waiter = ConnWait()
        self._flag_lock = threading.Lock()
        self._shutdown_flag = False
        self._main_lock = threading.Lock()
        self.main_thread: ThreadAdapterJoinHandle | None = None

    # -- lifecycle -----------------------------------------------------------

    def launch(self) -> None:
        """Start the accept loop and register with the server's shutdown."""
        try:
            handle = self.thread_adapter.spawn(self.run)
        except BaseException:
            self.listener.close()
            raise
        with self._main_lock:
            self.main_thread = handle

        ref = weakref.ref(self)

        def hook() -> None:
            target = ref()
            if target is not None:
                target.shutdown()

        self.server.add_shutdown_hook(hook)

    def is_marked_for_shutdown(self) -> bool:
        return self._shutdown_flag

    def _should_stop(self) -> bool:
        return self.server.is_shutdown() or self._shutdown_flag

    def shutdown(self) -> None:
        with self._flag_lock:
            if self._shutdown_flag:
                return
            self._shutdown_flag = True

        if self.waiter.is_done(1):
            return

        try:
            self.listener.shutdown(socket.SHUT_RDWR)
        except OSError as exc:
            if not self.waiter.wait(1, CONNECTOR_SHUTDOWN_TIMEOUT):
                _log.error("%s: shutdown failed: errno=%s", self.label, exc.errno)
            return

        if not self.waiter.wait(1, CONNECTOR_SHUTDOWN_TIMEOUT):
            _log.error("%s: shutdown failed to wake up the listener thread", self.label)

    def join(self, timeout: float | None) -> bool:
        if not self.waiter.wait(2, timeout):
            return False
        with self._main_lock:
            handle, self.main_thread = self.main_thread, None
        if handle is None:
            return True
        try:
            handle.join()
        except Exception as exc:
            _log.error("%s: listener thread failed: %s", self.label, exc)
        return True

    # -- accept loop ---------------------------------------------------------

    def _next(self) -> socket.socket:
        while True:
            try:
                readable, _, _ = select.select([self.listener], [], [], _POLL_INTERVAL)
            except (OSError, ValueError) as exc:
                if self._should_stop():
                    raise ConnectionAbortedError("listener is shutting down") from exc
                raise
            if self._should_stop():
                raise ConnectionAbortedError("listener is shutting down")
            if not readable:
                continue
            stream, _ = self.listener.accept()
            stream.setblocking(True)
            return stream

    def _serve(
        self,
        conn_id: int,
        stream: socket.socket | None,
        error: OSError | None,
        done: threading.Event,
    ) -> None:
        try:
            if stream is None:
                _log.error(
                    "%s: connection %d failed to accept a connection err=%s",
                    self.label,
                    conn_id,
                    error,
                )
                return
            try:
                self.server.handle_connection_with_meta(stream, self.meta)
            except Exception as exc:
                _log.error(
                    "%s: connection %d server returned err=%s", self.label, conn_id, exc
                )
            else:
                _log.info("%s: connection %d processed successfully", self.label, conn_id)
            finally:
                stream.close()
        finally:
            done.set()

    def _join_connection(self, conn: _ActiveConnection) -> None:
        handle, conn.handle = conn.handle, None
        if handle is None:
            return
        try:
            handle.join()
        except Exception as exc:
            _log.error("%s: connection %d thread failed: %s", self.label, conn.id, exc)

    def _still_running(self, conn: _ActiveConnection) -> bool:
        if not conn.done.is_set():
            return True
        self._join_connection(conn)
        return False

    def run(self) -> None:
        try:
            active: list[_ActiveConnection] = []
            _log.info("%s: listening...", self.label)
            for conn_id in itertools.count(1):
                stream: socket.socket | None = None
                error: OSError | None = None
                try:
                    stream = self._next()
                except OSError as exc:
                    error = exc

                if self._should_stop():
                    _log.info("%s: shutdown", self.label)
                    if stream is not None:
                        stream.close()
                    break

                _log.info("%s: connection %d accepted", self.label, conn_id)
                done = threading.Event()
                task = functools.partial(self._serve, conn_id, stream, error, done)
                try:
                    handle = self.thread_adapter.spawn(task)
                except Exception as exc:
                    _log.error(
                        "%s: connection %d failed to spawn new thread to handle the "
                        "connection err=%s, will drop connection.",
                        self.label,
                        conn_id,
                        exc,
                    )
                    if stream is not None:
                        stream.close()
                else:
                    active.append(_ActiveConnection(conn_id, handle, done))

                active = [conn for conn in active if self._still_running(conn)]

            if self.signals_accept_stopped:
                self.waiter.signal(1)

            _log.debug("%s: waiting for shutdown to finish", self.label)
            for conn in active:
                if not conn.done.is_set():
                    _log.debug(
                        "%s: connection %d is not yet done. blocking...", self.label, conn.id
                    )
                self._join_connection(conn)

            _log.info("%s: shutdown done", self.label)
        finally:
            self.listener.close()
            self.waiter.signal(2)


def _split_addr(addr: Address) -> tuple[str, int]:
    if isinstance(addr, tuple):
        host, port = addr
        return str(host), int(port)
    text = os.fspath(addr)
    host, sep, port_text = text.rpartition(":")
    if not sep or not port_text.isdigit():
        raise ValueError(f"invalid socket address: {text!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    port = int(port_text)
    if port > 0xFFFF:
        raise ValueError(f"invalid port in socket address: {text!r}")
    return host, port


def _format_sockaddr(family: int, sockaddr: tuple) -> str:
    host, port = sockaddr[0], sockaddr[1]
    if family == socket.AF_INET6:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def _bind(infos: list) -> socket.socket:
    last_error: OSError | None = None
    for family, socktype, proto, _, sockaddr in infos:
        sock = socket.socket(family, socktype, proto)
        try:
            if os.name != "nt":
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(sockaddr)
            sock.listen(_BACKLOG)
        except OSError as exc:
            sock.close()
            last_error = exc
            continue
        return sock
    if last_error is None:
        raise OSError("could not resolve to any addresses")
    raise last_error


class TcpConnector(Connector):
    """A TCP listener running on a background thread."""

    def __init__(self, runtime: _ListenerRuntime) -> None:
        self._runtime = runtime

    @classmethod
    def start(
        cls, addr: Address, server: _Server, thread_adapter: ThreadAdapter
    ) -> "TcpConnector":
        """Bind ``addr`` and start listening; raises if it cannot bind."""
        host, port = _split_addr(addr)
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        addr_string = ", ".join(_format_sockaddr(info[0], info[4]) for info in infos)
        listener = _bind(infos)
        runtime = _ListenerRuntime(
            f"tcp_connector[{addr_string}]",
            listener,
            server,
            thread_adapter,
            ConnectorMeta.TCP,
        )
        runtime.launch()
        return cls(runtime)

    @classmethod
    def start_unpooled(cls, addr: Address, server: _Server) -> "TcpConnector":
        """Start with every connection served on a fresh thread."""
        return cls.start(addr, server, DefaultThreadAdapter())

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
        return f"TcpConnector({self._runtime.label})"