from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from ..core.events import LogEvent


@runtime_checkable
class RemoteLogsClient(Protocol):
    """Async interface to the remote log ingestion service.

    Implementations wrap a concrete SDK. Every method may raise a
    transport-level error; retries and timeouts are the implementation's
    concern, not the flush coordinator's.
    """

    async def describe_existing(self, group: str, name_prefix: str) -> list[str]:
        """Return names of existing streams in ``group`` starting with the prefix."""
        ...

    async def create_destination(self, group: str, name: str) -> None: ...

    async def submit_batch(
        self, group: str, destination: str, events: Sequence[LogEvent]
    ) -> None:
        """Deliver ``events`` to ``destination`` in a single call."""
        ...

    async def close(self) -> None: ...


__all__ = ["RemoteLogsClient"]
