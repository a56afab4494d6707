"""
Testing utilities for logship.

Example:
    from logship.testing import MockLogsClient

    async def test_ships():
        client = MockLogsClient()
        transport = await logship.create(log_group_name="g", client=client)
        transport.log("hello")
        await transport.close()
        assert client.submitted_messages == ["hello"]

Pytest fixtures live in ``logship.testing.fixtures`` and require pytest.
"""

from .mocks import MockLogsClient, MockLogsClientConfig

__all__ = ["MockLogsClient", "MockLogsClientConfig"]
