"""Shared parts of the listeners that feed connections into a server."""

from __future__ import annotations

import enum
import threading
from abc import ABC, abstractmethod

# Seconds to wait for a listener thread to confirm that it began shutting down.
CONNECTOR_SHUTDOWN_TIMEOUT = 5.0


class ConnectorMeta(enum.Enum):
    """Which kind of connector accepted a connection."""

    TCP = "Tcp"
    TLS_TCP = "TlsTcp"
    UNIX = "Unix"
    TLS_UNIX = "TlsUnix"

    def __str__(self) -> str:
        return self.value


class ConnWait:
    """A monotonic progress value that threads can wait on."""

    def __init__(self) -> None:
        self._value = 0
        self._cond = threading.Condition()

    def signal(self, value: int) -> None:
        """Store ``value`` and wake every waiter."""
        with self._cond:
            self._value = value
            self._cond.notify_all()

    def is_done(self, value: int) -> bool:
        """True once the stored value has reached ``value``."""
        return self._value >= value

    def wait(self, value: int, timeout: float | None = None) -> bool:
        """Block until ``value`` is reached; False if ``timeout`` seconds pass first."""
        if self.is_done(value):
            return True
        with self._cond:
            return self._cond.wait_for(lambda: self._value >= value, timeout)


class Connector(ABC):
    """What every connector offers for controlling its lifetime."""

    @abstractmethod
    def shutdown(self) -> None:
        """Ask the connector to stop accepting; open connections keep running."""

    @abstractmethod
    def is_marked_for_shutdown(self) -> bool:
        """True once a shutdown was requested."""

    @abstractmethod
    def is_shutting_down(self) -> bool:
        """True while waiting for open connections to finish."""

    @abstractmethod
    def is_shutdown(self) -> bool:
        """True once fully stopped; ``join`` will then not block."""

    def shutdown_and_join(self, timeout: float | None = None) -> bool:
        """Request a shutdown and wait for it; False if ``timeout`` passed first."""
        self.shutdown()
        return self.join(timeout)

    @abstractmethod
    def join(self, timeout: float | None = None) -> bool:
        """Wait until the connector is done; False if ``timeout`` passed first."""