"""
Error taxonomy for logship.

Truncation of oversized events is not an error and has no type here.
Errors raised on the flush path are contained by the flush coordinator and
never reach log producers.
"""

from __future__ import annotations


class LogshipError(Exception):
    """Base class for all logship errors."""


class ConfigurationError(LogshipError):
    """Invalid configuration; raised before any instance is created."""


class RemoteCallError(LogshipError):
    """A call to the remote log service failed.

    Attributes:
        operation: Name of the remote operation (e.g. ``put_log_events``)
        cause: The underlying transport/SDK exception, if any
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.cause = cause


class DestinationError(RemoteCallError):
    """Checking for or creating a log stream failed."""


__all__ = [
    "ConfigurationError",
    "DestinationError",
    "LogshipError",
    "RemoteCallError",
]
