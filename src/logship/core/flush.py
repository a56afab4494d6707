"""
Timer-driven, serialized draining of the event queue into CloudWatch.

Design:
- One ``asyncio.Lock`` serializes every flush cycle, whether triggered by
  the timer or by ``close()``
- A cycle drains batch after batch, submitting them sequentially, until
  the queue reports nothing more or a call fails
- A failed cycle drops its in-flight batch (already removed from the
  queue), reports through diagnostics, and leaves the rest for the next tick
- The timer waits on a stop event instead of being cancelled, so an
  in-flight submission is never interrupted
"""

from __future__ import annotations

import asyncio
import time

from ..metrics.metrics import MetricsCollector
from ..sinks import RemoteLogsClient
from . import diagnostics
from .destinations import DestinationNameProvider
from .events import LogEvent
from .queue import EventQueue

DEFAULT_FLUSH_INTERVAL_SECONDS = 3.0


class FlushCoordinator:
    """Drain an ``EventQueue`` to the remote client on a schedule."""

    def __init__(
        self,
        queue: EventQueue,
        names: DestinationNameProvider,
        client: RemoteLogsClient,
        log_group_name: str,
        *,
        flush_interval_seconds: float = DEFAULT_FLUSH_INTERVAL_SECONDS,
        metrics: MetricsCollector | None = None,
    ) -> None:
        if flush_interval_seconds <= 0:
            raise ValueError("flush_interval_seconds must be > 0")
        self._queue = queue
        self._names = names
        self._client = client
        self._log_group_name = log_group_name
        self._interval = flush_interval_seconds
        self._metrics = metrics
        # The "flush-cloudwatch-logs" region: one cycle body at a time
        self._lock = asyncio.Lock()
        self._timer: asyncio.Task[None] | None = None
        self._timer_stop: asyncio.Event | None = None
        self._retired: set[asyncio.Task[None]] = set()
        self._closed = False
        self._closing: asyncio.Future[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def is_closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """Start the periodic timer, replacing any timer already running.

        Must be called from within a running event loop.
        """
        if self._closed:
            raise RuntimeError("FlushCoordinator is closed")
        self._retire_timer()
        stop = asyncio.Event()
        self._timer_stop = stop
        self._timer = asyncio.create_task(
            self._timer_loop(stop), name="logship-flush-timer"
        )

    def _retire_timer(self) -> None:
        if self._timer_stop is not None:
            self._timer_stop.set()
        if self._timer is not None and not self._timer.done():
            # Let an in-progress cycle finish; close() awaits it
            self._retired.add(self._timer)
            self._timer.add_done_callback(self._retired.discard)
        self._timer = None
        self._timer_stop = None

    async def _timer_loop(self, stop: asyncio.Event) -> None:
        while not stop.is_set():
            try:
                await asyncio.wait_for(stop.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                await self.flush()

    async def stop(self) -> None:
        """Stop the timer, waiting for an in-progress cycle to complete."""
        self._retire_timer()
        pending = list(self._retired)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def flush(self) -> int:
        """Run one flush cycle; return the number of events submitted.

        Never raises: remote failures abort the cycle and are reported
        through diagnostics and metrics.
        """
        async with self._lock:
            return await self._drain()

    async def _drain(self) -> int:
        submitted = 0
        batch: list[LogEvent] = []
        stage = "destination"
        started = time.perf_counter()
        try:
            has_more = True
            while has_more:
                batch, has_more = self._queue.get_next_batch()
                if not batch:
                    break
                stage = "destination"
                destination = await self._names.current_destination_name()
                stage = "submit"
                await self._client.submit_batch(
                    self._log_group_name, destination, batch
                )
                submitted += len(batch)
                if self._metrics is not None:
                    await self._metrics.record_batch_submitted(len(batch))
                batch = []
        except Exception as exc:
            diagnostics.warn(
                "flush",
                "failed to flush log events to CloudWatch",
                log_group=self._log_group_name,
                stage=stage,
                dropped=len(batch),
                error_type=type(exc).__name__,
                error=str(exc),
            )
            if self._metrics is not None:
                await self._metrics.record_flush_error(stage=stage, dropped=len(batch))
        if self._metrics is not None and (submitted or batch):
            await self._metrics.record_flush(
                latency_seconds=time.perf_counter() - started
            )
        return submitted

    async def close(self) -> None:
        """Stop the timer, drain the queue once more, release the client.

        Events enqueued while ``close()`` is running may not be flushed.
        Concurrent callers all wait for the same shutdown to complete.
        """
        if self._closing is None:
            self._closed = True
            self._closing = asyncio.ensure_future(self._close_once())
        await asyncio.shield(self._closing)

    async def _close_once(self) -> None:
        await self.stop()
        await self.flush()
        try:
            await self._client.close()
        except Exception as exc:
            diagnostics.warn(
                "flush",
                "failed to close remote client",
                error_type=type(exc).__name__,
                error=str(exc),
            )


__all__ = [
    "DEFAULT_FLUSH_INTERVAL_SECONDS",
    "FlushCoordinator",
]
