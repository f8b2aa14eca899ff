"""Shared test fixtures for all test modules."""

import os
from collections.abc import Callable
from datetime import datetime, timezone

import pytest

from cratesink.adapters.storage.in_memory import InMemoryExecutor
from cratesink.config import CrateDBConfig
from cratesink.core.models import Metric


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CRATESINK_* variables from the host out of every test."""
    for name in list(os.environ):
        if name.upper().startswith("CRATESINK_"):
            monkeypatch.delenv(name)


@pytest.fixture
def timestamp() -> datetime:
    """A fixed UTC instant with a millisecond fraction."""
    return datetime(2023, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


@pytest.fixture
def cpu_metric(timestamp: datetime) -> Metric:
    """The reference metric: oversized identity and a quoted tag value."""
    return Metric(
        name="cpu",
        timestamp=timestamp,
        tags={"host": "a's-box"},
        fields={"usage": 42.5},
        identity=14305102049502225714,
    )


@pytest.fixture
def make_metric(timestamp: datetime) -> Callable[..., Metric]:
    """Factory fixture for metrics with sensible defaults."""

    def _make(
        name: str = "cpu",
        tags: dict[str, str] | None = None,
        fields: dict[str, object] | None = None,
        identity: int | None = 1,
    ) -> Metric:
        return Metric(
            name=name,
            timestamp=timestamp,
            tags=tags if tags is not None else {"host": "web-1"},
            fields=fields if fields is not None else {"value": 1.0},  # type: ignore[arg-type]
            identity=identity,
        )

    return _make


@pytest.fixture
def executor() -> InMemoryExecutor:
    """A fresh in-memory executor."""
    return InMemoryExecutor()


@pytest.fixture
def utc_config() -> CrateDBConfig:
    """Output config rendering timestamps in UTC with a short timeout."""
    return CrateDBConfig(table="metrics", timezone="UTC", timeout=0.5)
