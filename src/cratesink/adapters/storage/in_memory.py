"""In-memory statement executor."""

import asyncio
from collections import deque


class InMemoryExecutor:
    """In-memory implementation of StatementExecutorPort.

    Records executed statements instead of sending them anywhere. Suitable
    for dry runs and testing.

    Args:
        max_size: Keep only the newest max_size statements. None keeps all.
        delay: Seconds each execute call sleeps before recording.
        error: Exception raised by every execute call, if set.
    """

    def __init__(
        self,
        max_size: int | None = None,
        delay: float = 0.0,
        error: Exception | None = None,
    ) -> None:
        self._statements: deque[str] = deque(maxlen=max_size)
        self.delay = delay
        self.error = error
        self.closed = False

    @property
    def statements(self) -> list[str]:
        """Executed statements, oldest first."""
        return list(self._statements)

    async def execute(self, statement: str, timeout: float | None = None) -> None:
        """Record a statement."""
        if self.closed:
            raise RuntimeError("Executor is closed")
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self._statements.append(statement)

    async def close(self) -> None:
        """Mark the executor closed."""
        self.closed = True
