"""
Bridge stdlib ``logging`` into a CloudWatch Logs transport.

``CloudWatchLogsHandler.emit`` only formats and enqueues, so it is safe to
call from any thread and never waits on the network. Records from the AWS
SDK and its HTTP stack are never forwarded: they are emitted while the
transport itself is flushing.
"""

from __future__ import annotations

import logging

from .transport import MESSAGE, CloudWatchLogsTransport

# Loggers written to by the SDK calls made during a flush
SDK_LOGGER_PREFIXES: tuple[str, ...] = ("boto3", "botocore", "s3transfer", "urllib3")


class _ExcludeLoggersFilter(logging.Filter):
    def __init__(self, prefixes: tuple[str, ...]) -> None:
        super().__init__()
        self._prefixes = prefixes

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        return not any(
            name == prefix or name.startswith(prefix + ".")
            for prefix in self._prefixes
        )


class CloudWatchLogsHandler(logging.Handler):
    """``logging.Handler`` that forwards formatted records to a transport."""

    def __init__(
        self, transport: CloudWatchLogsTransport, level: int = logging.NOTSET
    ) -> None:
        super().__init__(level)
        self._transport = transport
        self.addFilter(_ExcludeLoggersFilter(SDK_LOGGER_PREFIXES))

    @property
    def transport(self) -> CloudWatchLogsTransport:
        return self._transport

    def emit(self, record: logging.LogRecord) -> None:
        try:
            formatted = self.format(record)
            self._transport.log({MESSAGE: formatted, "message": record.getMessage()})
        except Exception:
            self.handleError(record)


def attach_handler(
    transport: CloudWatchLogsTransport,
    *,
    logger: logging.Logger | None = None,
    level: int = logging.INFO,
    formatter: logging.Formatter | None = None,
) -> CloudWatchLogsHandler:
    """Install a ``CloudWatchLogsHandler`` on ``logger`` (root by default).

    ``level`` filters at the handler. The root logger's level is never
    changed; an explicitly passed logger is lowered to ``level`` if it
    would otherwise drop those records.
    """
    target = logger if logger is not None else logging.getLogger()
    handler = CloudWatchLogsHandler(transport, level=level)
    if formatter is not None:
        handler.setFormatter(formatter)
    target.addHandler(handler)
    if logger is not None and logger is not logging.getLogger():
        if target.level == logging.NOTSET or target.level > level:
            target.setLevel(level)
    return handler


__all__ = ["SDK_LOGGER_PREFIXES", "CloudWatchLogsHandler", "attach_handler"]
