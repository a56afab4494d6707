"""
CloudWatch Logs client backed by boto3.

boto3 is synchronous; every SDK call is pushed to a worker thread with
``asyncio.to_thread`` so the event loop never blocks on the network.
"""

from __future__ import annotations

import asyncio
from typing import Any, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict, Field

from ..core import diagnostics
from ..core.errors import DestinationError, RemoteCallError
from ..core.events import LogEvent

__all__ = [
    "EMPTY_MESSAGE_PLACEHOLDER",
    "CloudWatchClientConfig",
    "CloudWatchLogsClient",
]


class CloudWatchClientConfig(BaseModel):
    """Connection settings passed through to ``boto3``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    region_name: str | None = None
    endpoint_url: str | None = None
    profile_name: str | None = None
    client_kwargs: dict[str, Any] = Field(
        default_factory=dict,
        description="Extra keyword arguments for boto3 Session.client('logs')",
    )


# PutLogEvents rejects zero-length messages, failing the whole call
EMPTY_MESSAGE_PLACEHOLDER = " "


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def _wire_event(event: LogEvent) -> dict[str, Any]:
    wire = event.to_dict()
    if not wire["message"]:
        wire["message"] = EMPTY_MESSAGE_PLACEHOLDER
    return wire


class CloudWatchLogsClient:
    """``RemoteLogsClient`` implementation for AWS CloudWatch Logs."""

    name = "cloudwatch"

    def __init__(self, client: Any) -> None:
        self._client = client
        self._closed = False

    @classmethod
    async def from_config(
        cls, config: CloudWatchClientConfig | None = None
    ) -> CloudWatchLogsClient:
        """Build the boto3 client off the event loop; makes no API calls."""
        cfg = config or CloudWatchClientConfig()

        def _build() -> Any:
            session = boto3.session.Session(profile_name=cfg.profile_name)
            kwargs: dict[str, Any] = dict(cfg.client_kwargs)
            if cfg.region_name:
                kwargs["region_name"] = cfg.region_name
            if cfg.endpoint_url:
                kwargs["endpoint_url"] = cfg.endpoint_url
            return session.client("logs", **kwargs)

        return cls(await asyncio.to_thread(_build))

    async def describe_existing(self, group: str, name_prefix: str) -> list[str]:
        try:
            response = await asyncio.to_thread(
                self._client.describe_log_streams,
                logGroupName=group,
                logStreamNamePrefix=name_prefix,
            )
        except (ClientError, BotoCoreError) as exc:
            raise DestinationError(
                f"describe_log_streams failed for {group!r}: {exc}",
                operation="describe_log_streams",
                cause=exc,
            ) from exc
        return [
            stream["logStreamName"]
            for stream in response.get("logStreams", [])
            if "logStreamName" in stream
        ]

    async def create_destination(self, group: str, name: str) -> None:
        try:
            await asyncio.to_thread(
                self._client.create_log_stream,
                logGroupName=group,
                logStreamName=name,
            )
        except ClientError as exc:
            # Another process may have created the stream since we looked
            if _error_code(exc) == "ResourceAlreadyExistsException":
                return
            raise DestinationError(
                f"create_log_stream failed for {name!r}: {exc}",
                operation="create_log_stream",
                cause=exc,
            ) from exc
        except BotoCoreError as exc:
            raise DestinationError(
                f"create_log_stream failed for {name!r}: {exc}",
                operation="create_log_stream",
                cause=exc,
            ) from exc

    async def submit_batch(
        self, group: str, destination: str, events: Sequence[LogEvent]
    ) -> None:
        try:
            response = await asyncio.to_thread(
                self._client.put_log_events,
                logGroupName=group,
                logStreamName=destination,
                logEvents=[_wire_event(event) for event in events],
            )
        except (ClientError, BotoCoreError) as exc:
            raise RemoteCallError(
                f"put_log_events failed for {destination!r}: {exc}",
                operation="put_log_events",
                cause=exc,
            ) from exc

        rejected = response.get("rejectedLogEventsInfo")
        if rejected:
            diagnostics.warn(
                "cloudwatch-client",
                "some log events were rejected",
                log_stream=destination,
                rejected=rejected,
            )

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        close = getattr(self._client, "close", None)
        if close is not None:
            await asyncio.to_thread(close)


# Plugin metadata for discovery
PLUGIN_METADATA = {
    "name": "cloudwatch",
    "version": "1.0.0",
    "plugin_type": "sink",
    "entry_point": "logship.sinks.cloudwatch:CloudWatchLogsClient",
    "description": "AWS CloudWatch Logs client with hourly log streams.",
    "author": "logship",
    "api_version": "1.0",
    "dependencies": ["boto3>=1.26.0"],
}
