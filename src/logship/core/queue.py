"""
In-memory event queue that slices itself into CloudWatch-legal batches.

Design:
- FIFO list of immutable ``LogEvent``; insertion order is delivery order
- Oversized messages are truncated on ``add`` with a binary search over
  prefix lengths so every stored event fits ``MAX_EVENT_BYTES``
- ``get_next_batch`` hands out (and removes) the longest prefix that stays
  within ``MAX_BATCH_BYTES`` and ``MAX_EVENTS_PER_BATCH``
- A ``threading.Lock`` guards mutations; ``add`` never awaits, so producers
  on any thread never block on the network
"""

from __future__ import annotations

import threading
import time
from typing import Callable, NamedTuple

from .events import LogEvent, encoded_length
from .limits import (
    MAX_BATCH_BYTES,
    MAX_EVENT_BYTES,
    MAX_EVENTS_PER_BATCH,
    TRUNCATION_SUFFIX,
)


class NextBatch(NamedTuple):
    batch: list[LogEvent]
    has_more: bool


def truncate_message(message: str, max_bytes: int = MAX_EVENT_BYTES) -> str:
    """Return ``message`` unchanged if it fits, else a marked truncated copy.

    The kept prefix is the longest one (in characters) for which
    ``prefix + TRUNCATION_SUFFIX`` encodes to at most ``max_bytes``.
    """
    if encoded_length(message) <= max_bytes:
        return message

    low = 0
    high = len(message)
    while low < high:
        mid = (low + high + 1) // 2
        if encoded_length(message[:mid] + TRUNCATION_SUFFIX) <= max_bytes:
            low = mid
        else:
            high = mid - 1
    return message[:low] + TRUNCATION_SUFFIX


class EventQueue:
    """Ordered buffer of log events awaiting shipment.

    Only events not yet handed out by ``get_next_batch`` are held here; a
    batch that later fails to submit is not returned to the queue.
    """

    __slots__ = ("_clock", "_events", "_lock")

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._events: list[LogEvent] = []
        self._lock = threading.Lock()

    def add(self, message: str) -> LogEvent:
        """Store ``message`` (truncated if oversized) stamped with now."""
        event = LogEvent(
            message=truncate_message(message),
            timestamp=int(self._clock() * 1000),
        )
        with self._lock:
            self._events.append(event)
        return event

    def get_next_batch(self) -> NextBatch:
        """Remove and return the next sink-legal batch.

        Returns ``NextBatch([], False)`` when the queue is empty.
        """
        with self._lock:
            if not self._events:
                return NextBatch([], False)

            total = 0
            count = 0
            for event in self._events:
                size = event.size
                if total + size > MAX_BATCH_BYTES or count >= MAX_EVENTS_PER_BATCH:
                    break
                total += size
                count += 1

            batch = self._events[:count]
            del self._events[:count]
            return NextBatch(batch, bool(self._events))

    def get(self) -> list[LogEvent]:
        """Return an independent copy of every buffered event."""
        with self._lock:
            return [LogEvent(e.message, e.timestamp) for e in self._events]

    def size(self) -> int:
        return len(self._events)

    def __len__(self) -> int:
        return self.size()

    def reset(self) -> None:
        """Discard every buffered event."""
        with self._lock:
            self._events = []


__all__ = ["EventQueue", "NextBatch", "truncate_message"]
