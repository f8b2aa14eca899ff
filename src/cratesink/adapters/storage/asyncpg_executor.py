"""asyncpg-backed statement executor for CrateDB.

CrateDB speaks the PostgreSQL wire protocol, so a regular asyncpg pool is
used. Statements are sent without arguments, which makes asyncpg use the
simple query protocol.
"""

import logging

import asyncpg

logger = logging.getLogger(__name__)

_URL_SCHEME_ALIASES = {
    "crate://": "postgres://",
    "cratedb://": "postgres://",
}


def normalize_url(url: str) -> str:
    """Rewrite crate:// style URLs to a scheme asyncpg accepts."""
    for alias, scheme in _URL_SCHEME_ALIASES.items():
        if url.startswith(alias):
            return scheme + url[len(alias) :]
    return url


# @tra: Adapter.Asyncpg.ImplementsStatementExecutorPort
class AsyncpgExecutor:
    """StatementExecutorPort implementation on top of an asyncpg pool.

    Concurrent statements are spread over the pool's connections, the
    executor itself adds no locking.
    """

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool: asyncpg.Pool | None = pool

    @classmethod
    async def connect(
        cls, url: str, min_size: int = 1, max_size: int = 4
    ) -> "AsyncpgExecutor":
        """Open a pool against url.

        Raises:
            Whatever asyncpg raises when the cluster cannot be reached.
        """
        pool = await asyncpg.create_pool(
            normalize_url(url), min_size=min_size, max_size=max_size
        )
        logger.debug("Opened asyncpg pool (min_size=%d, max_size=%d)", min_size, max_size)
        return cls(pool)

    async def execute(self, statement: str, timeout: float | None = None) -> None:
        """Execute a statement on a pooled connection."""
        if self._pool is None:
            raise RuntimeError("Executor is closed")
        await self._pool.execute(statement, timeout=timeout)

    async def close(self) -> None:
        """Close the pool. Safe to call more than once."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
