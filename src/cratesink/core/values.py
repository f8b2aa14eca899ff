"""Closed set of value shapes that can be rendered as SQL literals.

Native Python data is converted into these variants by ``to_encodable``
before rendering. Each numeric variant carries its width and signedness so
that a single rendering rule can be applied to all of them.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from cratesink.core.errors import InvalidValueError, UnsupportedTypeError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Boolean:
    value: bool


@dataclass(frozen=True)
class Integer:
    """An integer of a fixed bit width and signedness."""

    value: int
    bits: int = 64
    signed: bool = True

    def __post_init__(self) -> None:
        if self.bits not in (8, 16, 32, 64):
            raise ValueError(f"unsupported integer width: {self.bits}")
        if self.signed:
            low, high = -(2 ** (self.bits - 1)), 2 ** (self.bits - 1) - 1
        else:
            low, high = 0, 2**self.bits - 1
        if not low <= self.value <= high:
            kind = "int" if self.signed else "uint"
            raise InvalidValueError(
                f"value {self.value} does not fit in {kind}{self.bits}"
            )


@dataclass(frozen=True)
class Float:
    value: float
    bits: int = 64

    def __post_init__(self) -> None:
        if self.bits not in (32, 64):
            raise ValueError(f"unsupported float width: {self.bits}")


@dataclass(frozen=True)
class Timestamp:
    value: datetime


@dataclass(frozen=True)
class Object:
    """A nested key-value mapping, keys are text."""

    items: Mapping[str, "Encodable"]


Encodable = Text | Boolean | Integer | Float | Timestamp | Object

ENCODABLE_TYPES = (Text, Boolean, Integer, Float, Timestamp, Object)


def to_signed64(value: int) -> int:
    """Reinterpret an unsigned 64-bit integer as signed 64-bit.

    This is a two's-complement bit reinterpretation, not a clamp: values
    at or above 2**63 come back negative.

    Raises:
        ValueError: If value is outside the unsigned 64-bit range.
    """
    if not 0 <= value <= UINT64_MAX:
        raise ValueError(f"{value} is not an unsigned 64-bit integer")
    if value > INT64_MAX:
        return value - 2**64
    return value


def _integer(value: int) -> Integer:
    if INT64_MIN <= value <= INT64_MAX:
        return Integer(value)
    if 0 <= value <= UINT64_MAX:
        return Integer(value, signed=False)
    raise InvalidValueError(f"integer {value} does not fit in 64 bits")


def to_encodable(value: Any) -> Encodable:
    """Convert native Python data into an Encodable variant.

    Args:
        value: A str, bool, int, float, datetime, mapping with text keys,
            or an Encodable variant (returned unchanged).

    Returns:
        The matching Encodable variant. Mappings are converted recursively.

    Raises:
        UnsupportedTypeError: If value, or anything nested inside it, has
            no Encodable counterpart.
        InvalidValueError: If an int is wider than 64 bits.
    """
    if isinstance(value, ENCODABLE_TYPES):
        return value
    if isinstance(value, str):
        return Text(value)
    # bool is a subclass of int and must be matched first
    if isinstance(value, bool):
        return Boolean(value)
    if isinstance(value, int):
        return _integer(value)
    if isinstance(value, float):
        return Float(value)
    if isinstance(value, datetime):
        return Timestamp(value)
    if isinstance(value, Mapping):
        items: dict[str, Encodable] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise UnsupportedTypeError(key)
            items[key] = to_encodable(item)
        return Object(items)
    raise UnsupportedTypeError(value)
