"""Core utilities and shared functionality."""

from arena_feed.core.timezone import (
    now_utc,
    to_utc,
    parse_datetime_utc,
    UTC,
)
from arena_feed.core.exceptions import (
    AppError,
    ValidationError,
    SourceError,
    EventDecodeError,
)

__all__ = [
    "now_utc",
    "to_utc",
    "parse_datetime_utc",
    "UTC",
    "AppError",
    "ValidationError",
    "SourceError",
    "EventDecodeError",
]
