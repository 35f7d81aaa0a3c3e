import socket
import threading

import pytest

from humptykit.connector import ConnectorMeta
from humptykit.tcp_connector import TcpConnector
from humptykit.thread_adapter import DefaultThreadAdapter, ThreadAdapter


class FakeServer:
    def __init__(self, fail_first=False):
        self.hooks = []
        self.metas = []
        self.down = False
        self.fail_first = fail_first
        self._lock = threading.Lock()

    def is_shutdown(self):
        return self.down

    def add_shutdown_hook(self, hook):
        self.hooks.append(hook)

    def handle_connection_with_meta(self, stream, meta):
        with self._lock:
            self.metas.append(meta)
            fail = self.fail_first and len(self.metas) == 1
        if fail:
            raise RuntimeError("boom")
        data = stream.recv(1024)
        stream.sendall(b"echo:" + data)

    def shutdown(self):
        self.down = True
        for hook in self.hooks:
            hook()


class CountingAdapter(ThreadAdapter):
    def __init__(self):
        self.count = 0
        self._inner = DefaultThreadAdapter()

    def spawn(self, task):
        self.count += 1
        return self._inner.spawn(task)


def free_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def exchange(port, payload):
    with socket.create_connection(("127.0.0.1", port), timeout=5) as client:
        client.sendall(payload)
        chunks = []
        while True:
            chunk = client.recv(1024)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


@pytest.fixture
def server():
    return FakeServer()


def test_serves_connection_and_shuts_down(server):
    port = free_port()
    connector = TcpConnector.start_unpooled(f"127.0.0.1:{port}", server)
    assert exchange(port, b"ping") == b"echo:ping"
    assert server.metas == [ConnectorMeta.TCP]
    assert connector.shutdown_and_join(10) is True
    assert connector.is_shutdown()
    assert connector.is_marked_for_shutdown()


def test_not_marked_before_shutdown(server):
    port = free_port()
    connector = TcpConnector.start_unpooled(("127.0.0.1", port), server)
    try:
        assert connector.is_marked_for_shutdown() is False
        assert connector.is_shutdown() is False
        assert connector.join(0.1) is False
    finally:
        assert connector.shutdown_and_join(10) is True


def test_server_shutdown_hook_stops_connector(server):
    port = free_port()
    connector = TcpConnector.start_unpooled(f"127.0.0.1:{port}", server)
    assert len(server.hooks) == 1
    server.shutdown()
    assert connector.is_marked_for_shutdown()
    assert connector.join(10) is True
    assert connector.is_shutting_down()


def test_port_can_be_rebound_after_shutdown(server):
    port = free_port()
    connector = TcpConnector.start_unpooled(f"127.0.0.1:{port}", server)
    assert exchange(port, b"x") == b"echo:x"
    assert connector.shutdown_and_join(10) is True
    with socket.create_server(("127.0.0.1", port)) as again:
        assert again.getsockname()[1] == port


def test_thread_adapter_spawns_listener_and_connections(server):
    port = free_port()
    adapter = CountingAdapter()
    connector = TcpConnector.start(f"127.0.0.1:{port}", server, adapter)
    assert exchange(port, b"a") == b"echo:a"
    assert connector.shutdown_and_join(10) is True
    assert adapter.count == 2


def test_join_twice_returns_true(server):
    port = free_port()
    connector = TcpConnector.start_unpooled(f"127.0.0.1:{port}", server)
    assert connector.shutdown_and_join(10) is True
    assert connector.join(None) is True


def test_invalid_address_raises(server):
    with pytest.raises(ValueError):
        TcpConnector.start_unpooled("not-an-address", server)


def test_address_in_use_raises(server):
    with socket.socket() as taken:
        taken.bind(("127.0.0.1", 0))
        taken.listen(1)
        port = taken.getsockname()[1]
        with pytest.raises(OSError):
            TcpConnector.start_unpooled(f"127.0.0.1:{port}", server)
    assert server.hooks == []