"""Pluggable ways of running background tasks, and handles to await them."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Callable


def _nothing() -> None:
    return None


class ThreadAdapterJoinHandle:
    """Waits for a spawned task to finish.

    ``join`` re-raises any exception the task ended with.
    """

    def __init__(self, joiner: Callable[[], None] = _nothing) -> None:
        self._joiner = joiner

    def join(self) -> None:
        self._joiner()

    def __repr__(self) -> str:
        return "ThreadAdapterJoinHandle"


class ThreadAdapter(ABC):
    """Starts tasks, for example on fresh threads or from a pool."""

    @abstractmethod
    def spawn(self, task: Callable[[], None]) -> ThreadAdapterJoinHandle:
        """Start running ``task`` right away and return a handle to await it."""


class DefaultThreadAdapter(ThreadAdapter):
    """Runs every task on a new thread."""

    def spawn(self, task: Callable[[], None]) -> ThreadAdapterJoinHandle:
        failure: list[BaseException] = []

        def run() -> None:
            try:
                task()
            except BaseException as exc:  # handed to whoever joins
                failure.append(exc)

        thread = threading.Thread(target=run, daemon=True)
        thread.start()

        def joiner() -> None:
            thread.join()
            if failure:
                raise failure[0]

        return ThreadAdapterJoinHandle(joiner)

    def __repr__(self) -> str:
        return "DefaultThreadAdapter"