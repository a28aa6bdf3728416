"""Events and the channel that carries them from the input thread."""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass

# Bounded so a stuck consumer cannot grow memory without limit.
DEFAULT_CAPACITY = 64

# How long ``send`` waits on a full queue before re-checking the receiver.
_SEND_RETRY_SECONDS = 0.1


@dataclass(frozen=True)
class Event:
    """Base type of everything sent over an ``EventChannel``."""


@dataclass(frozen=True)
class KeyEvent(Event):
    """A single decoded keypress."""

    key: str


class ChannelClosedError(Exception):
    """Raised by ``EventChannel.receive`` once the sender has gone away."""


class _Closed:
    """Marker queued by ``close_sender`` to wake a waiting receiver."""


_CLOSED = _Closed()


class EventChannel:
    """Ordered single-producer/single-consumer handoff of ``Event`` values.

    The producer stops when ``send`` returns False (receiver closed). The
    consumer gets ``ChannelClosedError`` once the producer has closed its
    side and every queued event has been delivered.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        self._queue: queue.Queue = queue.Queue(maxsize=capacity + 1)
        self._capacity = capacity
        self._sender_closed = threading.Event()
        self._receiver_closed = threading.Event()

    @property
    def sender_closed(self) -> bool:
        return self._sender_closed.is_set()

    @property
    def receiver_closed(self) -> bool:
        return self._receiver_closed.is_set()

    def send(self, event: Event) -> bool:
        """Queue an event. Returns False if it can no longer be delivered."""
        if self._sender_closed.is_set():
            return False
        while not self._receiver_closed.is_set():
            # Leave one slot free for the close marker.
            if self._queue.qsize() < self._capacity:
                self._queue.put(event)
                return True
            self._receiver_closed.wait(_SEND_RETRY_SECONDS)
        return False

    def receive(self, timeout: float) -> Event | None:
        """Wait up to ``timeout`` seconds for the next event.

        Returns None when nothing arrived in time.

        Raises:
            ChannelClosedError: the sender is closed and the queue is empty.
        """
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            if self._sender_closed.is_set():
                raise ChannelClosedError("input channel closed") from None
            return None

        if item is _CLOSED:
            # Keep the marker so later calls fail fast too.
            self._queue.put(_CLOSED)
            raise ChannelClosedError("input channel closed")
        return item

    def close_sender(self) -> None:
        """Called by the producer when it stops sending."""
        if not self._sender_closed.is_set():
            self._sender_closed.set()
            self._queue.put(_CLOSED)

    def close_receiver(self) -> None:
        """Called by the consumer when it stops receiving."""
        self._receiver_closed.set()
