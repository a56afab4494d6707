"""
Basic usage example for logship.

Ships application logs to CloudWatch Logs through an hourly log stream.
Requires AWS credentials and an existing log group; set LOGSHIP_LOG_GROUP_NAME
or edit the call below.
"""

import asyncio
import logging

import logship


async def main() -> None:
    transport = await logship.create(
        log_group_name="/logship/example",
        log_stream_name_prefix="basic",
        flush_interval_ms=1000,
        client={"region_name": "us-east-1"},
    )
    async with transport:
        # Direct records: a string, or a mapping with a "message" field
        transport.log("Application started")
        transport.log({"message": "User login", "user_id": "12345"})

        # Or route the stdlib logging tree through the transport
        logship.attach_handler(
            transport,
            formatter=logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"),
        )
        logging.getLogger("example").warning("Disk usage at %d%%", 91)

        await asyncio.sleep(1.5)
    # Leaving the block flushed everything queued and closed the client


if __name__ == "__main__":
    asyncio.run(main())
