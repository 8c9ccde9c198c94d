"""Unbounded FIFO hand-off between pipeline threads."""

from __future__ import annotations

import queue
import threading
from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")

_CLOSED = object()


class ChannelClosed(Exception):
    """Raised by ``recv`` once the channel is closed and drained."""


class Channel(Generic[T]):
    """Multi-producer, multi-consumer queue with explicit close.

    ``send`` never blocks. ``recv`` blocks while the channel is empty and
    raises :class:`ChannelClosed` after ``close`` once every item sent before
    the close has been received.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[T | object] = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, item: T) -> bool:
        """Enqueue ``item``; return False if the channel is already closed."""

        with self._lock:
            if self._closed:
                return False
            self._queue.put(item)
        return True

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)

    def recv(self) -> T:
        item = self._queue.get()
        if item is _CLOSED:
            # Leave the marker in place for the next consumer.
            self._queue.put(_CLOSED)
            raise ChannelClosed
        return item  # type: ignore[return-value]

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.recv()
            except ChannelClosed:
                return
