"""
Producer-facing CloudWatch Logs transport.

Wires an ``EventQueue``, a ``DestinationNameProvider`` and a
``FlushCoordinator`` around a remote client. Producers call ``log()``,
which never awaits and never fails observably; the flush timer ships the
queue in the background.

Example:
    transport = await logship.create(log_group_name="/my/app")
    transport.log({"message": "hello"})
    await transport.close()
"""

from __future__ import annotations

import types
from typing import Any, Callable, Final, Mapping

from .core import diagnostics
from .core.destinations import DestinationNameProvider
from .core.flush import FlushCoordinator
from .core.queue import EventQueue
from .core.settings import TransportSettings, load_settings
from .core.shutdown import register_transport, unregister_transport
from .metrics.metrics import MetricsCollector
from .sinks import RemoteLogsClient
from .sinks.cloudwatch import CloudWatchLogsClient


class _MessageMarker:
    __slots__ = ()

    def __repr__(self) -> str:
        return "logship.MESSAGE"


# Reserved key holding a fully formatted line; preferred over "message"
MESSAGE: Final = _MessageMarker()


def extract_message(record: Any) -> str:
    """Pull the text to ship out of a log record.

    Lookup order: the ``MESSAGE`` marker key, then ``"message"``, then
    empty text. Strings are shipped as-is; non-mapping objects are checked
    for a ``message`` attribute.
    """
    if isinstance(record, str):
        return record
    if isinstance(record, Mapping):
        value = record.get(MESSAGE)
        if value is None:
            value = record.get("message")
    else:
        value = getattr(record, "message", None)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class CloudWatchLogsTransport:
    """Buffer log records in memory and ship them to CloudWatch Logs."""

    name = "cloudwatch"

    def __init__(
        self,
        settings: TransportSettings,
        client: RemoteLogsClient,
        *,
        metrics: MetricsCollector | None = None,
        queue: EventQueue | None = None,
        names: DestinationNameProvider | None = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._metrics = metrics or MetricsCollector(enabled=settings.enable_metrics)
        self._queue = queue or EventQueue()
        self._names = names or DestinationNameProvider(
            client,
            settings.log_group_name,
            settings.log_stream_name_prefix,
        )
        self._coordinator = FlushCoordinator(
            self._queue,
            self._names,
            client,
            settings.log_group_name,
            flush_interval_seconds=settings.flush_interval_seconds,
            metrics=self._metrics,
        )

    @classmethod
    async def create(
        cls,
        settings: TransportSettings | None = None,
        *,
        client: RemoteLogsClient | None = None,
        metrics: MetricsCollector | None = None,
        **overrides: Any,
    ) -> CloudWatchLogsTransport:
        """Build a transport and start its flush timer.

        Settings come from ``settings``, keyword ``overrides`` and
        ``LOGSHIP_*`` environment variables. No CloudWatch API call is made
        here; the first flush provisions the log stream.

        Raises:
            ConfigurationError: if the settings are invalid (for example an
                empty ``log_group_name``)
        """
        if settings is None:
            cfg = load_settings(**overrides)
        elif overrides:
            cfg = load_settings(**{**settings.model_dump(), **overrides})
        else:
            cfg = settings
        diagnostics.configure(enabled=cfg.internal_logging_enabled)
        if cfg.batch_size is not None:
            diagnostics.debug(
                "transport",
                "batch_size is ignored; PutLogEvents limits bound every batch",
                batch_size=cfg.batch_size,
            )
        if client is None:
            client = await CloudWatchLogsClient.from_config(cfg.client)
        instance = cls(cfg, client, metrics=metrics)
        instance._coordinator.start()
        register_transport(instance)
        return instance

    @property
    def settings(self) -> TransportSettings:
        return self._settings

    @property
    def queue(self) -> EventQueue:
        return self._queue

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics

    @property
    def coordinator(self) -> FlushCoordinator:
        return self._coordinator

    @property
    def atexit_drain_enabled(self) -> bool:
        return self._settings.atexit_drain_enabled

    @property
    def atexit_drain_timeout_seconds(self) -> float:
        return self._settings.atexit_drain_timeout_seconds

    def log(self, record: Any, callback: Callable[[], None] | None = None) -> None:
        """Queue ``record`` for shipment, then acknowledge via ``callback``.

        Never raises; the callback runs even when extraction fails.
        """
        try:
            if self._coordinator.is_closed:
                diagnostics.warn(
                    "transport",
                    "log called after close; event will not be shipped",
                    _rate_limit_key="transport-closed",
                )
            message = extract_message(record)
            event = self._queue.add(message)
            self._metrics.record_event_enqueued(truncated=event.message != message)
        except Exception as exc:
            diagnostics.warn(
                "transport",
                "failed to queue log",
                error_type=type(exc).__name__,
                error=str(exc),
            )
        finally:
            if callback is not None:
                callback()

    async def flush(self) -> int:
        """Run a flush cycle now; returns the number of events submitted."""
        return await self._coordinator.flush()

    async def close(self) -> None:
        """Stop the timer, flush everything queued, release the client."""
        unregister_transport(self)
        await self._coordinator.close()

    async def __aenter__(self) -> CloudWatchLogsTransport:
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc: BaseException | None,
        _tb: types.TracebackType | None,
    ) -> None:
        await self.close()


async def create(
    settings: TransportSettings | None = None,
    *,
    client: RemoteLogsClient | None = None,
    metrics: MetricsCollector | None = None,
    **overrides: Any,
) -> CloudWatchLogsTransport:
    """Shortcut for ``CloudWatchLogsTransport.create``."""
    return await CloudWatchLogsTransport.create(
        settings, client=client, metrics=metrics, **overrides
    )


__all__ = ["MESSAGE", "CloudWatchLogsTransport", "create", "extract_message"]
