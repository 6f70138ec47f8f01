"""Channels that receive serialized telemetry envelopes from the client.

A channel is the last hop inside this package. Network transport, batching
and retries belong to whatever consumes the channel and are not modelled
here.

Channels:
- InMemoryChannel: bounded buffer, the client's default. Useful for tests
  and for hosts that ship envelopes themselves.
- StreamChannel: newline-delimited JSON written to a text stream.
"""

from __future__ import annotations

import json
import sys
import threading
from collections import deque
from typing import IO, Any, Protocol, runtime_checkable

#: Default number of envelopes an InMemoryChannel retains.
DEFAULT_CHANNEL_CAPACITY = 500

Envelope = dict[str, Any]


@runtime_checkable
class TelemetryChannel(Protocol):  # pragma: no cover
    """Protocol for envelope consumers."""

    def send(self, envelope: Envelope) -> None:
        """Accept one serialized envelope."""
        ...

    def flush(self) -> None:
        """Push out anything held in the channel."""
        ...


class InMemoryChannel:
    """Thread-safe bounded buffer of envelopes.

    When the buffer is full the oldest envelope is dropped to make room,
    so a host that never drains the channel keeps a constant footprint.

    Example:
        >>> channel = InMemoryChannel(capacity=2)
        >>> channel.send({"name": "Message"})
        >>> len(channel)
        1
        >>> channel.drain()
        [{'name': 'Message'}]
    """

    def __init__(self, capacity: int = DEFAULT_CHANNEL_CAPACITY) -> None:
        """Create an empty channel.

        Args:
            capacity: Maximum number of envelopes retained. Must be positive.

        Raises:
            ValueError: If capacity is not positive.
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._items: deque[Envelope] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        """Maximum number of retained envelopes."""
        return self._items.maxlen or 0

    @property
    def items(self) -> list[Envelope]:
        """Snapshot of the buffered envelopes, oldest first."""
        with self._lock:
            return list(self._items)

    def send(self, envelope: Envelope) -> None:
        """Append an envelope, evicting the oldest one when full."""
        with self._lock:
            self._items.append(envelope)

    def drain(self) -> list[Envelope]:
        """Remove and return every buffered envelope, oldest first."""
        with self._lock:
            drained = list(self._items)
            self._items.clear()
        return drained

    def flush(self) -> None:
        """No-op: envelopes stay buffered until drained."""

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class StreamChannel:
    """Writes each envelope as one JSON line to a text stream.

    Non-serializable values fall back to str(), matching the JSON log
    formatting used elsewhere in the package.
    """

    def __init__(self, stream: IO[str] | None = None) -> None:
        """Bind the channel to a stream.

        Args:
            stream: Writable text stream. Default: sys.stderr, resolved at
                construction time.
        """
        self.stream = stream if stream is not None else sys.stderr
        self._lock = threading.Lock()

    def send(self, envelope: Envelope) -> None:
        """Serialize and write one envelope followed by a newline."""
        line = json.dumps(envelope, default=str)
        with self._lock:
            self.stream.write(line + "\n")

    def flush(self) -> None:
        """Flush the underlying stream if it supports flushing."""
        with self._lock:
            flush = getattr(self.stream, "flush", None)
            if flush is not None:
                flush()
