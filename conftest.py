"""
Root pytest configuration.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest

# Register logship testing fixtures for all tests
pytest_plugins = ("logship.testing.fixtures",)


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers",
        "critical: Tests that must never fail - core functionality",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take >1 second",
    )
    config.addinivalue_line(
        "markers",
        "property: Property-based tests (may be slow)",
    )


@pytest.fixture(autouse=True)
def reset_diagnostics() -> Generator[None, None, None]:
    """Reset the diagnostics module state around each test.

    The diagnostics module caches ``internal_logging_enabled`` at first
    access and transports override it on creation, so each test starts from
    a clean, env-driven state.
    """
    import logship.core.diagnostics as diag

    diag._reset_for_tests()
    yield
    diag._reset_for_tests()


@pytest.fixture(autouse=True)
def _isolate_exit_registry() -> Generator[None, None, None]:
    """Keep transports created by one test out of the atexit drain."""
    from logship.core import shutdown

    yield
    for transport in list(shutdown._registered):
        shutdown.unregister_transport(transport)
