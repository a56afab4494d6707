"""
Load test for the logship event queue and flush path.

Measures producer-side ``log()`` latency while a deliberately slow
in-memory client absorbs the flush traffic, then reports drain time and
batch shape. Producers must stay fast no matter how slow the sink is.

Usage:
    python scripts/load_test_event_queue.py --events 50000 --submit-delay 0.05
"""

from __future__ import annotations

import argparse
import asyncio
import json
import statistics
import time

from logship import CloudWatchLogsTransport, TransportSettings
from logship.testing import MockLogsClient, MockLogsClientConfig


async def run(events: int, message_bytes: int, submit_delay: float) -> dict[str, float]:
    client = MockLogsClient(MockLogsClientConfig(submit_delay_seconds=submit_delay))
    transport = await CloudWatchLogsTransport.create(
        TransportSettings(
            log_group_name="load-test",
            flush_interval_ms=100,
            atexit_drain_enabled=False,
        ),
        client=client,
    )
    payload = "x" * message_bytes
    latencies: list[float] = []
    for i in range(events):
        start = time.perf_counter()
        transport.log({"message": f"{i} {payload}"})
        latencies.append(time.perf_counter() - start)
        if i % 1000 == 0:
            await asyncio.sleep(0)

    drain_start = time.perf_counter()
    await transport.close()
    drain_seconds = time.perf_counter() - drain_start

    batch_sizes = [len(batch) for _, _, batch in client.submissions]
    return {
        "events": float(events),
        "submitted": float(len(client.submitted_events)),
        "batches": float(len(batch_sizes)),
        "mean_batch": statistics.fmean(batch_sizes) if batch_sizes else 0.0,
        "log_p50_us": statistics.median(latencies) * 1e6,
        "log_p99_us": statistics.quantiles(latencies, n=100)[98] * 1e6,
        "drain_seconds": drain_seconds,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--events", type=int, default=20_000)
    parser.add_argument("--message-bytes", type=int, default=256)
    parser.add_argument("--submit-delay", type=float, default=0.05)
    args = parser.parse_args()
    result = asyncio.run(run(args.events, args.message_bytes, args.submit_delay))
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
