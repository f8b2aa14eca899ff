"""Encoders turning metric data into SQL text."""

from cratesink.core.encoding.literals import encode_object, encode_value
from cratesink.core.encoding.statements import build_create_table, build_insert

__all__ = ["build_create_table", "build_insert", "encode_object", "encode_value"]
