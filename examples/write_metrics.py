"""Write a small batch of metrics to CrateDB.

Reads its settings from CRATESINK_* environment variables. Without
CRATESINK_URL the statements are printed instead of executed.

Run with:
    CRATESINK_URL=postgres://crate@localhost:5432/doc \
    CRATESINK_TABLE_CREATE=true python examples/write_metrics.py
"""

import asyncio
import logging
import os
from datetime import datetime, timezone

from cratesink import CrateDBConfig, CrateDBOutput, InMemoryExecutor, Metric

logging.basicConfig(level=logging.DEBUG)


def sample_batch() -> list[Metric]:
    now = datetime.now(timezone.utc)
    return [
        Metric(
            name="cpu",
            timestamp=now,
            tags={"host": "web-1", "cpu": "cpu-total"},
            fields={"usage_user": 12.5, "usage_system": 3.25},
        ),
        Metric(
            name="mem",
            timestamp=now,
            tags={"host": "web-1"},
            fields={"used_percent": 41.0, "available": 8_123_456_512},
        ),
    ]


async def main() -> None:
    config = CrateDBConfig()
    if "CRATESINK_URL" in os.environ:
        async with CrateDBOutput(config) as output:
            await output.write(sample_batch())
        return

    dry_run = InMemoryExecutor()

    async def connect_dry_run(_: CrateDBConfig) -> InMemoryExecutor:
        return dry_run

    async with CrateDBOutput(config, connector=connect_dry_run) as output:
        await output.write(sample_batch())
    for statement in dry_run.statements:
        print(statement)


if __name__ == "__main__":
    asyncio.run(main())
