"""Configuration for the CrateDB metrics output.

Settings are loaded with pydantic-settings. Anything not passed to the
constructor is read from environment variables:

    CRATESINK_URL=postgres://crate@db:5432/doc
    CRATESINK_TABLE=metrics
    CRATESINK_TABLE_CREATE=true
    CRATESINK_TIMEOUT=5s
    CRATESINK_TIMEZONE=UTC
    CRATESINK_PARTITION_BY_DAY=false
"""

import math
import re
from datetime import tzinfo as TzInfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_URL = "postgres://crate@localhost:5432/doc"
DEFAULT_TABLE = "metrics"
DEFAULT_TIMEOUT = 5.0

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(text: str) -> float:
    """Parse a duration string such as ``5s``, ``250ms`` or ``1m30s``.

    A bare number is taken as seconds.

    Returns:
        The duration in seconds.

    Raises:
        ValueError: If text is not a valid duration.
    """
    text = text.strip()
    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds):
            raise ValueError(f"invalid duration: {text!r}")
        return seconds

    position = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()
    if not text or position != len(text):
        raise ValueError(f"invalid duration: {text!r}")
    return total


def _resolve_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"unknown time zone: {name!r}") from exc


class CrateDBConfig(BaseSettings):
    """Settings for one CrateDB output.

    Keyword arguments take precedence over CRATESINK_* environment
    variables, which take precedence over the defaults. Empty variables
    are treated as unset.

    Attributes:
        url: PostgreSQL-protocol connection URL of the CrateDB cluster.
        table: Destination table. Inserted verbatim into statements, so it
            must come from trusted configuration.
        table_create: Create the table on connect if it does not exist.
        timeout: Seconds allowed for each statement. Strings are parsed
            with parse_duration().
        timezone: IANA zone name used to render timestamps. None uses the
            local system zone.
        partition_by_day: Partition a created table by a generated day column.
    """

    model_config = SettingsConfigDict(
        env_prefix="CRATESINK_",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    url: str = Field(default=DEFAULT_URL, description="CrateDB connection URL")
    table: str = Field(default=DEFAULT_TABLE, description="Destination table")
    table_create: bool = Field(default=False, description="Create the table on connect")
    timeout: float = Field(default=DEFAULT_TIMEOUT, description="Statement timeout in seconds")
    timezone: str | None = Field(default=None, description="Zone for rendered timestamps")
    partition_by_day: bool = Field(default=False, description="Partition a created table by day")

    @field_validator("table")
    @classmethod
    def check_table(cls, v: str) -> str:
        if not v:
            raise ValueError("table must not be empty")
        return v

    @field_validator("timeout", mode="before")
    @classmethod
    def parse_timeout(cls, v: object) -> object:
        """Accept duration strings such as ``5s`` or ``250ms``."""
        if isinstance(v, str):
            return parse_duration(v)
        return v

    @field_validator("timeout")
    @classmethod
    def check_timeout(cls, v: float) -> float:
        if not v > 0:
            raise ValueError(f"timeout must be positive, got {v}")
        return v

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: str | None) -> str | None:
        """Resolve the zone eagerly so a bad name fails at configuration time."""
        if v is not None:
            _resolve_zone(v)
        return v

    @property
    def tzinfo(self) -> TzInfo | None:
        """Zone used for timestamps, None for the local system zone."""
        if self.timezone is None:
            return None
        return _resolve_zone(self.timezone)
