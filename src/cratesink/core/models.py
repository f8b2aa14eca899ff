"""Core domain models for metric data."""

from dataclasses import dataclass, field
from datetime import datetime

FieldValue = str | int | float | bool

_FNV64_OFFSET = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3
_UINT64_MASK = 0xFFFFFFFFFFFFFFFF


def fnv1a_64(data: bytes) -> int:
    """Return the 64-bit FNV-1a hash of data."""
    h = _FNV64_OFFSET
    for byte in data:
        h ^= byte
        h = (h * _FNV64_PRIME) & _UINT64_MASK
    return h


# @tra: Core.Metric.Immutable
@dataclass(frozen=True)
class Metric:
    """A single time-series metric record.

    Attributes:
        name: Measurement name (e.g., cpu).
        timestamp: Point in time the metric was taken.
        tags: Text key-value pairs identifying the series.
        fields: Measured values, keyed by field name.
        identity: Explicit identity hash. When omitted the hash is
            derived from the name and tags, see ``hash_id``.
    """

    name: str
    timestamp: datetime
    tags: dict[str, str] = field(default_factory=dict)
    fields: dict[str, FieldValue] = field(default_factory=dict)
    identity: int | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("metric name must not be empty")
        if self.identity is not None and not 0 <= self.identity <= _UINT64_MASK:
            raise ValueError(
                f"identity must fit in an unsigned 64-bit integer, got {self.identity}"
            )

    @property
    def hash_id(self) -> int:
        """Unsigned 64-bit identity hash of the series.

        Series with the same name and tag set hash the same regardless of
        tag insertion order.
        """
        # @tra: Core.Metric.HashId
        if self.identity is not None:
            return self.identity
        parts = [self.name, "\n"]
        for key in sorted(self.tags):
            parts.extend((key, "\n", self.tags[key], "\n"))
        return fnv1a_64("".join(parts).encode("utf-8"))
