"""
Metrics for the logship buffering and flush path.

Implements a small set of Prometheus-compatible counters and histograms.

Design goals:
- No global registration; each collector owns an isolated registry
- Safe no-op exporters when metrics are disabled, while still tracking
  in-memory counters for tests
- Producer-side recording is synchronous because ``log()`` never awaits
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Any

from prometheus_client import CollectorRegistry, Counter, Histogram


@dataclass
class ShippingMetrics:
    """Captured runtime metrics for quick assertions in tests."""

    events_enqueued: int = 0
    events_truncated: int = 0
    events_submitted: int = 0
    events_dropped: int = 0
    batches_submitted: int = 0
    flush_errors: int = 0


class MetricsCollector:
    """Transport-scoped metrics collector."""

    def __init__(self, *, enabled: bool = False) -> None:
        self._enabled = bool(enabled)
        # Threading lock: producers may record from any thread
        self._lock = threading.Lock()
        self._state = ShippingMetrics()

        self._c_enqueued: Any | None = None
        self._c_truncated: Any | None = None
        self._c_submitted: Any | None = None
        self._c_dropped: Any | None = None
        self._c_batches: Any | None = None
        self._c_flush_errors: Any | None = None
        self._h_batch_size: Any | None = None
        self._h_flush_latency: Any | None = None
        self._registry: CollectorRegistry | None = None

        if self._enabled:
            self._registry = CollectorRegistry()
            self._c_enqueued = Counter(
                "logship_events_enqueued_total",
                "Total number of log events accepted into the queue",
                registry=self._registry,
            )
            self._c_truncated = Counter(
                "logship_events_truncated_total",
                "Total number of log events truncated to fit the event size limit",
                registry=self._registry,
            )
            self._c_submitted = Counter(
                "logship_events_submitted_total",
                "Total number of log events delivered to CloudWatch",
                registry=self._registry,
            )
            self._c_dropped = Counter(
                "logship_events_dropped_total",
                "Total number of log events lost to failed flushes",
                registry=self._registry,
            )
            self._c_batches = Counter(
                "logship_batches_submitted_total",
                "Total number of PutLogEvents calls that succeeded",
                registry=self._registry,
            )
            self._c_flush_errors = Counter(
                "logship_flush_errors_total",
                "Total number of aborted flush cycles",
                ["stage"],
                registry=self._registry,
            )
            self._h_batch_size = Histogram(
                "logship_batch_size",
                "Number of events per submitted batch",
                buckets=(1, 10, 50, 100, 500, 1000, 5000, 10000),
                registry=self._registry,
            )
            self._h_flush_latency = Histogram(
                "logship_flush_seconds",
                "Duration of a complete flush cycle",
                buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
                registry=self._registry,
            )

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def registry(self) -> CollectorRegistry | None:
        """Expose the isolated Prometheus registry when enabled."""
        return self._registry

    def record_event_enqueued(self, *, truncated: bool = False) -> None:
        with self._lock:
            self._state.events_enqueued += 1
            if truncated:
                self._state.events_truncated += 1
        if not self._enabled:
            return
        if self._c_enqueued is not None:
            self._c_enqueued.inc()
        if truncated and self._c_truncated is not None:
            self._c_truncated.inc()

    async def record_batch_submitted(self, batch_size: int) -> None:
        with self._lock:
            self._state.batches_submitted += 1
            self._state.events_submitted += batch_size
        if not self._enabled:
            return
        if self._c_batches is not None:
            self._c_batches.inc()
        if self._c_submitted is not None:
            self._c_submitted.inc(batch_size)
        if self._h_batch_size is not None:
            self._h_batch_size.observe(batch_size)

    async def record_flush_error(self, *, stage: str, dropped: int) -> None:
        with self._lock:
            self._state.flush_errors += 1
            self._state.events_dropped += dropped
        if not self._enabled:
            return
        if self._c_flush_errors is not None:
            self._c_flush_errors.labels(stage=stage).inc()
        if dropped and self._c_dropped is not None:
            self._c_dropped.inc(dropped)

    async def record_flush(self, *, latency_seconds: float) -> None:
        if self._enabled and self._h_flush_latency is not None:
            self._h_flush_latency.observe(latency_seconds)

    async def snapshot(self) -> ShippingMetrics:
        # Lightweight copy without exposing internals
        with self._lock:
            return replace(self._state)


__all__ = ["MetricsCollector", "ShippingMetrics"]
