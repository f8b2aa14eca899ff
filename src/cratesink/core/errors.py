"""Exception hierarchy for the metrics sink."""

from typing import Any


class CrateSinkError(Exception):
    """Base class for all errors raised by cratesink."""


class EncodingError(CrateSinkError):
    """A value could not be rendered as a SQL literal.

    Recoverable at the statement level: the statement being built is
    abandoned, the process keeps running.
    """


class UnsupportedTypeError(EncodingError):
    """A value outside the encodable variant reached the encoder.

    Attributes:
        type_name: Descriptive name of the offending value's type.
        value: The offending value itself.
    """

    def __init__(self, value: Any) -> None:
        self.type_name = type(value).__name__
        self.value = value
        super().__init__(f"unexpected type: {self.type_name}: {value!r}")


class InvalidValueError(EncodingError):
    """A value of a supported type has no valid SQL literal form."""


class EmptyBatchError(CrateSinkError):
    """An INSERT statement was requested for zero metrics."""


class ExecutionError(CrateSinkError):
    """The datastore rejected or failed to execute a statement."""


class StatementTimeoutError(ExecutionError):
    """A statement did not complete within its deadline."""


class SinkConnectionError(CrateSinkError):
    """A handle to the datastore could not be established."""
