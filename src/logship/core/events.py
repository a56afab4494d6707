"""
Log event model for the in-memory shipping queue.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .limits import ENCODING, EVENT_OVERHEAD


def encoded_length(text: str) -> int:
    """Return the number of bytes ``text`` occupies on the wire."""
    return len(text.encode(ENCODING, "surrogatepass"))


@dataclass(frozen=True)
class LogEvent:
    """A single buffered log line and its capture time (ms since epoch)."""

    message: str
    timestamp: int

    @property
    def size(self) -> int:
        """Bytes this event counts against a batch, overhead included."""
        return encoded_length(self.message) + EVENT_OVERHEAD

    def to_dict(self) -> dict[str, Any]:
        return {"timestamp": self.timestamp, "message": self.message}
