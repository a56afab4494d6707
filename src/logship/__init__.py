"""
logship: buffered, batch-safe shipping of log events to AWS CloudWatch Logs.

Producers enqueue without ever waiting on the network; a background timer
drains the queue in batches that respect the PutLogEvents limits and writes
them to an hourly log stream.
"""

from __future__ import annotations

from ._version import __version__
from .core.destinations import DestinationNameProvider, format_destination_name
from .core.errors import (
    ConfigurationError,
    DestinationError,
    LogshipError,
    RemoteCallError,
)
from .core.events import LogEvent
from .core.flush import FlushCoordinator
from .core.queue import EventQueue, NextBatch
from .core.settings import TransportSettings, load_settings
from .metrics.metrics import MetricsCollector
from .sinks import RemoteLogsClient
from .sinks.cloudwatch import CloudWatchClientConfig, CloudWatchLogsClient
from .stdlib_bridge import CloudWatchLogsHandler, attach_handler
from .transport import MESSAGE, CloudWatchLogsTransport, create, extract_message

__all__ = [
    "MESSAGE",
    "CloudWatchClientConfig",
    "CloudWatchLogsClient",
    "CloudWatchLogsHandler",
    "CloudWatchLogsTransport",
    "ConfigurationError",
    "DestinationError",
    "DestinationNameProvider",
    "EventQueue",
    "FlushCoordinator",
    "LogEvent",
    "LogshipError",
    "MetricsCollector",
    "NextBatch",
    "RemoteCallError",
    "RemoteLogsClient",
    "TransportSettings",
    "VERSION",
    "__version__",
    "attach_handler",
    "create",
    "extract_message",
    "format_destination_name",
    "load_settings",
]

VERSION = __version__
