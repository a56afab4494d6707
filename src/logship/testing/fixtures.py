"""
Pytest fixtures for code that ships logs through logship.

Register with ``pytest_plugins = ("logship.testing.fixtures",)``.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest

from ..core import diagnostics
from ..core.settings import TransportSettings
from ..transport import CloudWatchLogsTransport
from .mocks import MockLogsClient


@pytest.fixture
def mock_logs_client() -> MockLogsClient:
    return MockLogsClient()


@pytest.fixture
def captured_diagnostics() -> Generator[list[dict[str, Any]], None, None]:
    """Collect diagnostics payloads instead of writing them to stderr."""
    diagnostics._reset_for_tests()
    diagnostics.configure(enabled=True)
    captured: list[dict[str, Any]] = []
    diagnostics.set_writer_for_tests(captured.append)
    yield captured
    diagnostics._reset_for_tests()


@pytest.fixture
async def started_transport(
    mock_logs_client: MockLogsClient,
) -> AsyncGenerator[CloudWatchLogsTransport, None]:
    """A transport on ``mock_logs_client`` with a long flush interval."""
    settings = TransportSettings(
        log_group_name="test-group",
        flush_interval_ms=60_000,
        atexit_drain_enabled=False,
    )
    transport = await CloudWatchLogsTransport.create(
        settings, client=mock_logs_client
    )
    yield transport
    await transport.close()


__all__ = ["captured_diagnostics", "mock_logs_client", "started_transport"]
