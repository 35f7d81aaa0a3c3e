import threading
import time

import pytest

from humptykit.connector import (
    ConnectorMeta,
    ConnWait,
    Connector,
)


def test_meta_str():
    assert ConnectorMeta.TCP.__str__() == "Tcp"
    assert ConnectorMeta.TLS_UNIX.__str__() == "TlsUnix"


def test_meta_str_distinct():
    names = {ConnectorMeta.__str__(meta) for meta in ConnectorMeta}
    assert len(names) == len(ConnectorMeta)


def test_conn_wait_initial_state():
    waiter = ConnWait()
    assert waiter.is_done(0)
    assert not waiter.is_done(1)


def test_conn_wait_signal():
    waiter = ConnWait()
    waiter.signal(1)
    assert waiter.is_done(1)
    assert not waiter.is_done(2)
    waiter.signal(2)
    assert waiter.is_done(1) and waiter.is_done(2)


def test_conn_wait_times_out():
    waiter = ConnWait()
    start = time.monotonic()
    assert waiter.wait(1, 0.05) is False
    assert time.monotonic() - start >= 0.04


def test_conn_wait_already_done():
    waiter = ConnWait()
    waiter.signal(2)
    assert waiter.wait(1, 0.0) is True
    assert waiter.wait(2, None) is True


@pytest.mark.parametrize("timeout", [None, 5.0])
def test_conn_wait_woken_by_other_thread(timeout):
    waiter = ConnWait()
    timer = threading.Timer(0.05, waiter.signal, args=(2,))
    timer.start()
    try:
        assert waiter.wait(2, timeout) is True
    finally:
        timer.join()
    assert waiter.is_done(2)


def test_conn_wait_insufficient_signal_still_waits():
    waiter = ConnWait()
    timer = threading.Timer(0.02, waiter.signal, args=(1,))
    timer.start()
    try:
        assert waiter.wait(2, 0.1) is False
    finally:
        timer.join()
    assert waiter.is_done(1)


class _FakeConnector(Connector):
    def __init__(self):
        self.calls = []
        self.marked = False

    def shutdown(self):
        self.calls.append("shutdown")
        self.marked = True

    def is_marked_for_shutdown(self):
        return self.marked

    def is_shutting_down(self):
        return False

    def is_shutdown(self):
        return self.marked

    def join(self, timeout=None):
        self.calls.append(("join", timeout))
        return self.marked


def test_shutdown_and_join_calls_both_in_order():
    connector = _FakeConnector()
    assert Connector.shutdown_and_join(connector, 1.5) is True
    assert connector.calls == ["shutdown", ("join", 1.5)]
    assert connector.is_marked_for_shutdown()


def test_connector_is_abstract():
    with pytest.raises(TypeError):
        Connector()