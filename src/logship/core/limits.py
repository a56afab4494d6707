"""
CloudWatch Logs ``PutLogEvents`` contract.

These values are fixed by the service and are not configurable.
"""

from __future__ import annotations

MAX_BATCH_BYTES = 1_048_576  # 1 MiB per PutLogEvents call
EVENT_OVERHEAD = 26  # bytes charged per event on top of the UTF-8 message
MAX_EVENT_BYTES = MAX_BATCH_BYTES - EVENT_OVERHEAD
MAX_EVENTS_PER_BATCH = 10_000

TRUNCATION_SUFFIX = "[TRUNCATED]"
ENCODING = "utf-8"

__all__ = [
    "ENCODING",
    "EVENT_OVERHEAD",
    "MAX_BATCH_BYTES",
    "MAX_EVENTS_PER_BATCH",
    "MAX_EVENT_BYTES",
    "TRUNCATION_SUFFIX",
]
