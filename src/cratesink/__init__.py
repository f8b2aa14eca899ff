"""cratesink - write batches of metrics to CrateDB as SQL literals."""

from cratesink.adapters.output import CrateDBOutput
from cratesink.adapters.storage import AsyncpgExecutor, InMemoryExecutor
from cratesink.config import CrateDBConfig, parse_duration
from cratesink.core.encoding import (
    build_create_table,
    build_insert,
    encode_object,
    encode_value,
)
from cratesink.core.errors import (
    CrateSinkError,
    EmptyBatchError,
    EncodingError,
    ExecutionError,
    InvalidValueError,
    SinkConnectionError,
    StatementTimeoutError,
    UnsupportedTypeError,
)
from cratesink.core.models import Metric
from cratesink.core.ports import StatementExecutorPort
from cratesink.core.values import (
    Boolean,
    Encodable,
    Float,
    Integer,
    Object,
    Text,
    Timestamp,
    to_encodable,
    to_signed64,
)

__all__ = [
    "AsyncpgExecutor",
    "Boolean",
    "CrateDBConfig",
    "CrateDBOutput",
    "CrateSinkError",
    "EmptyBatchError",
    "Encodable",
    "EncodingError",
    "ExecutionError",
    "Float",
    "InMemoryExecutor",
    "Integer",
    "InvalidValueError",
    "Metric",
    "Object",
    "SinkConnectionError",
    "StatementExecutorPort",
    "StatementTimeoutError",
    "Text",
    "Timestamp",
    "UnsupportedTypeError",
    "build_create_table",
    "build_insert",
    "encode_object",
    "encode_value",
    "parse_duration",
    "to_encodable",
    "to_signed64",
]
