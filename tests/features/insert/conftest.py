"""BDD step definitions for INSERT statement features."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from cratesink.core import errors
from cratesink.core.encoding.statements import build_insert
from cratesink.core.models import Metric


@dataclass
class PendingMetric:
    name: str
    identity: int
    timestamp: datetime
    tags: dict[str, str] = field(default_factory=dict)
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass
class InsertScenarioContext:
    """Mutable state shared between the steps of one scenario."""

    metrics: list[PendingMetric] = field(default_factory=list)
    statement: str | None = None
    error: Exception | None = None


@pytest.fixture
def ctx() -> InsertScenarioContext:
    """Fresh scenario context for each test."""
    return InsertScenarioContext()


# === Given ===


@given(parsers.parse('a metric "{name}" with identity {identity:d} at "{stamp}"'))
def given_metric(ctx: InsertScenarioContext, name: str, identity: int, stamp: str) -> None:
    ctx.metrics.append(
        PendingMetric(name=name, identity=identity, timestamp=datetime.fromisoformat(stamp))
    )


@given(parsers.parse('the metric has tag "{key}" set to "{value}"'))
def given_tag(ctx: InsertScenarioContext, key: str, value: str) -> None:
    ctx.metrics[-1].tags[key] = value


@given(parsers.parse('the metric has field "{key}" set to {value:g}'))
def given_field(ctx: InsertScenarioContext, key: str, value: float) -> None:
    ctx.metrics[-1].fields[key] = value


@given(parsers.parse('the metric has an unsupported list field "{key}"'))
def given_list_field(ctx: InsertScenarioContext, key: str) -> None:
    ctx.metrics[-1].fields[key] = [1, 2]


# === When ===


@when(parsers.parse('the batch is built for table "{table}" in UTC'))
def when_build(ctx: InsertScenarioContext, table: str) -> None:
    metrics = [
        Metric(
            name=m.name,
            timestamp=m.timestamp,
            tags=m.tags,
            fields=m.fields,
            identity=m.identity,
        )
        for m in ctx.metrics
    ]
    try:
        ctx.statement = build_insert(table, metrics, tz=timezone.utc)
    except errors.CrateSinkError as exc:
        ctx.error = exc


# === Then ===


@then(parsers.parse("the statement starts with: {prefix}"))
def then_starts_with(ctx: InsertScenarioContext, prefix: str) -> None:
    assert ctx.statement is not None
    assert ctx.statement.startswith(prefix)


@then(parsers.parse("the statement contains: {fragment}"))
def then_contains(ctx: InsertScenarioContext, fragment: str) -> None:
    assert ctx.statement is not None
    assert fragment in ctx.statement


@then(parsers.parse("the statement has {rows:d} rows of {columns:d} columns"))
def then_row_shape(ctx: InsertScenarioContext, rows: int, columns: int) -> None:
    assert ctx.statement is not None
    values = ctx.statement.split(" VALUES ", 1)[1].rstrip(";")
    tuples = values.split(",\n")
    assert len(tuples) == rows
    for row in tuples:
        assert re.fullmatch(r"\(.*\)", row)
        assert len(row[1:-1].split(", ")) == columns


@then(parsers.parse("building fails with {error_name}"))
def then_fails_with(ctx: InsertScenarioContext, error_name: str) -> None:
    assert isinstance(ctx.error, getattr(errors, error_name))


@then("no statement is produced")
def then_no_statement(ctx: InsertScenarioContext) -> None:
    assert ctx.statement is None
