"""
Hourly log stream naming with a local existence cache.

Stream names rotate at every UTC hour boundary. The first lookup of a name
checks CloudWatch (and creates the stream if needed); afterwards the name is
served from a process-lifetime cache. The cache is only touched from inside
the flush lock, so it needs no locking of its own.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from ..sinks import RemoteLogsClient
from . import diagnostics
from .errors import ConfigurationError


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_destination_name(prefix: str, when: datetime) -> str:
    """Return ``[prefix-]YYYY-MM-DD-HH-UTC`` for the UTC hour of ``when``."""
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    utc = when.astimezone(timezone.utc)
    separator = "-" if prefix else ""
    return f"{prefix}{separator}{utc:%Y-%m-%d-%H}-UTC"


class DestinationNameProvider:
    """Resolve, and lazily provision, the current hourly log stream."""

    def __init__(
        self,
        client: RemoteLogsClient,
        log_group_name: str,
        prefix: str | None = None,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        if not log_group_name or not log_group_name.strip():
            raise ConfigurationError("Log group name cannot be empty")
        self._client = client
        self._log_group_name = log_group_name
        self._prefix = prefix or ""
        self._clock = clock
        self._confirmed: set[str] = set()

    @property
    def cached_names(self) -> frozenset[str]:
        return frozenset(self._confirmed)

    def destination_name(self) -> str:
        """Name for the current UTC hour, without touching the remote side."""
        return format_destination_name(self._prefix, self._clock())

    async def current_destination_name(self) -> str:
        """Return the current stream name, ensuring the stream exists.

        Remote failures propagate and the name stays uncached, so the next
        call retries the check.
        """
        name = self.destination_name()
        if name not in self._confirmed:
            await self._ensure_exists(name)
            self._confirmed.add(name)
        return name

    async def _ensure_exists(self, name: str) -> None:
        existing = await self._client.describe_existing(self._log_group_name, name)
        if name in existing:
            return
        await self._client.create_destination(self._log_group_name, name)
        diagnostics.debug(
            "destinations",
            "created log stream",
            log_group=self._log_group_name,
            log_stream=name,
        )


__all__ = ["DestinationNameProvider", "format_destination_name"]
