"""SQL literal encoder for metric values.

CrateDB does not support enough of the PostgreSQL wire protocol to bind
``$1``-style placeholders, so values are inlined into statements as
literals. Callers should not feed this encoder untrusted text without
validating it upstream.

Object literal syntax follows
https://crate.io/docs/crate/reference/sql/data_types.html#object
"""

import contextlib
import math
import struct
from collections.abc import Mapping
from datetime import datetime, timezone, tzinfo
from typing import Any

from cratesink.core.errors import InvalidValueError, UnsupportedTypeError
from cratesink.core.values import (
    Boolean,
    Float,
    Integer,
    Object,
    Text,
    Timestamp,
    to_encodable,
    to_signed64,
)


def quote(text: str, quote_char: str) -> str:
    """Wrap text in quote_char, doubling every quote_char inside it."""
    if "\x00" in text:
        raise InvalidValueError(f"text contains a NUL character: {text!r}")
    return quote_char + text.replace(quote_char, quote_char * 2) + quote_char


def format_timestamp(value: datetime, tz: tzinfo | None = None) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:MM:SS[.fff]+HHMM``.

    Milliseconds are truncated, trailing zeros of the fraction are trimmed
    and the fraction is left out when it is zero.

    Args:
        value: The instant to format. Naive datetimes are taken as UTC.
        tz: Zone to render the instant in. None means the local system zone.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    local = value.astimezone(tz)

    text = (
        f"{local.year:04d}-{local.month:02d}-{local.day:02d}"
        f"T{local.hour:02d}:{local.minute:02d}:{local.second:02d}"
    )
    millis = local.microsecond // 1000
    if millis:
        text += f".{millis:03d}".rstrip("0")

    offset = local.utcoffset()
    minutes = int(offset.total_seconds() // 60) if offset is not None else 0
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{text}{sign}{hours:02d}{minutes:02d}"


def _to_single(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def _format_float(value: float, bits: int) -> str:
    if not math.isfinite(value):
        raise InvalidValueError(f"{value} has no SQL numeric literal")
    if bits == 32:
        try:
            single = _to_single(value)
        except OverflowError as exc:
            raise InvalidValueError(f"{value} does not fit in float32") from exc
        for precision in range(1, 10):
            text = f"{single:.{precision}g}"
            # Rounding up near the float32 maximum can overflow
            with contextlib.suppress(OverflowError):
                if _to_single(float(text)) == single:
                    return text
    return repr(value)


def encode_object(items: Mapping[str, Any], tz: tzinfo | None = None) -> str:
    """Encode a mapping as a CrateDB object literal.

    Keys are emitted in ascending order so the output does not depend on
    the mapping's iteration order.
    """
    for key in items:
        if not isinstance(key, str):
            raise UnsupportedTypeError(key)
    pairs = [
        quote(key, '"') + " = " + encode_value(items[key], tz) for key in sorted(items)
    ]
    return "{" + ", ".join(pairs) + "}"


def encode_value(value: Any, tz: tzinfo | None = None) -> str:
    """Return value as a SQL literal suitable for a VALUES expression.

    Args:
        value: Native Python data or an Encodable variant.
        tz: Zone used for timestamps. None means the local system zone.

    Returns:
        The literal text.

    Raises:
        UnsupportedTypeError: If value, or anything nested in it, is not
            encodable.
        InvalidValueError: If value has no valid literal form.
    """
    # @tra: Core.Encoding.Literal.Dispatch
    encodable = to_encodable(value)

    if isinstance(encodable, Text):
        return quote(encodable.value, "'")
    if isinstance(encodable, Boolean):
        return "true" if encodable.value else "false"
    if isinstance(encodable, Integer):
        number = encodable.value
        if not encodable.signed and encodable.bits == 64:
            number = to_signed64(number)
        return str(number)
    if isinstance(encodable, Float):
        return _format_float(encodable.value, encodable.bits)
    if isinstance(encodable, Timestamp):
        return quote(format_timestamp(encodable.value, tz), "'")
    if isinstance(encodable, Object):
        return encode_object(encodable.items, tz)
    raise UnsupportedTypeError(value)
