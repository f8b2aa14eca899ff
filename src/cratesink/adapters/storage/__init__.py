"""Statement executors implementing core ports."""

from cratesink.adapters.storage.asyncpg_executor import AsyncpgExecutor
from cratesink.adapters.storage.in_memory import InMemoryExecutor

__all__ = [
    "AsyncpgExecutor",
    "InMemoryExecutor",
]
