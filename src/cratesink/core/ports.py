"""Port interfaces for database adapters.

The lifecycle adapter depends only on these protocols, not on a concrete
database driver.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class StatementExecutorPort(Protocol):
    """Port for executing SQL text against the destination datastore.

    Examples: AsyncpgExecutor, InMemoryExecutor.
    """

    async def execute(self, statement: str, timeout: float | None = None) -> None:
        """Execute a statement, discarding any result.

        Args:
            statement: Complete SQL text.
            timeout: Seconds the driver may spend on the statement.
                None leaves the driver default in place.
        """
        ...

    async def close(self) -> None:
        """Release the underlying handle."""
        ...
