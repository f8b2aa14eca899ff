"""CrateDB metrics output.

Owns the database handle, optionally creates the destination table and
writes each batch of metrics as a single INSERT statement bounded by the
configured timeout. Failures are surfaced to the caller, nothing is
retried here.

Example:
    ```python
    from cratesink import CrateDBConfig, CrateDBOutput

    async with CrateDBOutput(CrateDBConfig(table_create=True)) as output:
        await output.write(metrics)
    ```
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from types import TracebackType

from cratesink.adapters.storage.asyncpg_executor import AsyncpgExecutor
from cratesink.config import CrateDBConfig
from cratesink.core.encoding.statements import build_create_table, build_insert
from cratesink.core.errors import (
    ExecutionError,
    SinkConnectionError,
    StatementTimeoutError,
)
from cratesink.core.models import Metric
from cratesink.core.ports import StatementExecutorPort

logger = logging.getLogger(__name__)

Connector = Callable[[CrateDBConfig], Awaitable[StatementExecutorPort]]


async def connect_asyncpg(config: CrateDBConfig) -> StatementExecutorPort:
    """Default connector: an asyncpg pool against config.url."""
    return await AsyncpgExecutor.connect(config.url)


# @tra: Adapter.CrateDBOutput.Lifecycle
class CrateDBOutput:
    """Writes batches of metrics to a CrateDB table.

    The output is wired explicitly by its caller. Concurrent writes share
    one executor; any serialization is left to the executor's driver.
    """

    def __init__(
        self,
        config: CrateDBConfig | None = None,
        connector: Connector | None = None,
    ) -> None:
        """Initialize the output.

        Args:
            config: Output settings. Defaults to CrateDBConfig().
            connector: Coroutine function opening a StatementExecutorPort
                for a config. Defaults to an asyncpg pool.
        """
        self._config = config or CrateDBConfig()
        self._connector = connector or connect_asyncpg
        self._executor: StatementExecutorPort | None = None

    @property
    def config(self) -> CrateDBConfig:
        return self._config

    @property
    def connected(self) -> bool:
        """True between a successful connect() and close()."""
        return self._executor is not None

    async def connect(self) -> None:
        """Open the database handle and create the table if configured.

        Raises:
            SinkConnectionError: If the handle cannot be opened in time.
            ExecutionError: If the CREATE TABLE statement fails.
        """
        if self._executor is not None:
            return
        try:
            executor = await asyncio.wait_for(
                self._connector(self._config), self._config.timeout
            )
        except TimeoutError as exc:
            raise SinkConnectionError(
                f"connecting to CrateDB timed out after {self._config.timeout}s"
            ) from exc
        except Exception as exc:
            raise SinkConnectionError(f"connecting to CrateDB failed: {exc}") from exc
        logger.info("Connected CrateDB output for table %s", self._config.table)

        if self._config.table_create:
            statement = build_create_table(
                self._config.table, partition_by_day=self._config.partition_by_day
            )
            try:
                await self._execute(executor, statement)
            except ExecutionError:
                await executor.close()
                raise
            logger.info("Ensured table %s exists", self._config.table)

        self._executor = executor

    async def write(self, metrics: Iterable[Metric]) -> None:
        """Write a batch of metrics as one INSERT statement.

        Raises:
            RuntimeError: If the output is not connected.
            EmptyBatchError: If metrics is empty. Nothing is executed.
            EncodingError: If a metric cannot be encoded. Nothing is executed.
            StatementTimeoutError: If the statement exceeds the timeout.
            ExecutionError: If CrateDB rejects the statement.
        """
        if self._executor is None:
            raise RuntimeError("CrateDB output is not connected")
        batch = list(metrics)
        statement = build_insert(self._config.table, batch, tz=self._config.tzinfo)
        logger.debug("Writing %d metrics to %s", len(batch), self._config.table)
        await self._execute(self._executor, statement)

    async def close(self) -> None:
        """Close the database handle. Safe to call more than once."""
        if self._executor is not None:
            executor, self._executor = self._executor, None
            await executor.close()
            logger.info("Closed CrateDB output for table %s", self._config.table)

    async def _execute(self, executor: StatementExecutorPort, statement: str) -> None:
        timeout = self._config.timeout
        try:
            await asyncio.wait_for(executor.execute(statement, timeout), timeout)
        except TimeoutError as exc:
            logger.error("Statement timed out after %ss", timeout)
            logger.debug("Timed out statement:\n%s", statement)
            raise StatementTimeoutError(
                f"statement timed out after {timeout}s"
            ) from exc
        except Exception as exc:
            logger.error("Statement failed: %s", exc)
            logger.debug("Failed statement:\n%s", statement)
            raise ExecutionError(str(exc)) from exc

    async def __aenter__(self) -> "CrateDBOutput":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
