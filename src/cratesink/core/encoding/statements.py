"""SQL statement builders for the metrics table."""

from collections.abc import Iterable
from datetime import tzinfo

from cratesink.core.encoding.literals import encode_value
from cratesink.core.errors import EmptyBatchError
from cratesink.core.models import Metric
from cratesink.core.values import Integer, to_signed64

COLUMNS = ("hash_id", "timestamp", "name", "tags", "fields")

_CREATE_TABLE = """CREATE TABLE IF NOT EXISTS {table} (
    "hash_id" LONG,
    "timestamp" TIMESTAMP NOT NULL,
    "name" STRING,
    "tags" OBJECT(DYNAMIC),
    "fields" OBJECT(DYNAMIC),
    PRIMARY KEY ("timestamp", "hash_id")
);"""

_CREATE_PARTITIONED_TABLE = """CREATE TABLE IF NOT EXISTS {table} (
    "hash_id" LONG,
    "timestamp" TIMESTAMP NOT NULL,
    "name" STRING,
    "tags" OBJECT(DYNAMIC),
    "fields" OBJECT(DYNAMIC),
    "day" TIMESTAMP GENERATED ALWAYS AS date_trunc('day', "timestamp"),
    PRIMARY KEY ("timestamp", "hash_id", "day")
) PARTITIONED BY ("day");"""


def build_create_table(table: str, partition_by_day: bool = False) -> str:
    """Return the CREATE TABLE IF NOT EXISTS statement for the metrics table.

    Args:
        table: Table identifier, inserted verbatim.
        partition_by_day: Add a generated ``day`` column and partition by it.
    """
    template = _CREATE_PARTITIONED_TABLE if partition_by_day else _CREATE_TABLE
    return template.format(table=table)


def _encode_row(metric: Metric, tz: tzinfo | None) -> str:
    columns = (
        Integer(to_signed64(metric.hash_id)),
        metric.timestamp,
        metric.name,
        metric.tags,
        metric.fields,
    )
    return "(" + ", ".join(encode_value(column, tz) for column in columns) + ")"


def build_insert(
    table: str, metrics: Iterable[Metric], tz: tzinfo | None = None
) -> str:
    """Build one multi-row INSERT statement for a batch of metrics.

    The statement is all-or-nothing: the first value that cannot be
    encoded aborts the build and no text is returned.

    Args:
        table: Table identifier, inserted verbatim. It must come from
            trusted configuration.
        metrics: The batch, in insertion order.
        tz: Zone used for every timestamp in the statement. None means the
            local system zone.

    Returns:
        The INSERT statement text.

    Raises:
        EmptyBatchError: If metrics is empty.
        EncodingError: If any column of any metric cannot be encoded.
    """
    # @tra: Core.Encoding.Statement.Insert
    rows = [_encode_row(metric, tz) for metric in metrics]
    if not rows:
        raise EmptyBatchError("cannot build an INSERT statement for zero metrics")

    columns = ", ".join(f'"{column}"' for column in COLUMNS)
    return f"INSERT INTO {table} ({columns}) VALUES " + ",\n".join(rows) + ";"
