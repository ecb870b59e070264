"""Timezone utilities. All feed timestamps are held in UTC."""

from datetime import datetime
from typing import Optional

import pytz
from dateutil import parser as date_parser

UTC = pytz.utc


def now_utc() -> datetime:
    """Return current time in UTC."""
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """Convert a datetime to UTC."""
    if dt.tzinfo is None:
        # Server timestamps without an offset are UTC
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def parse_datetime_utc(value: str, default_tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """
    Parse a datetime string and return it in UTC.

    If no timezone is provided in the string, assumes UTC.
    """
    dt = date_parser.parse(value)
    if dt.tzinfo is None:
        tz = default_tz or UTC
        dt = tz.localize(dt)
    return to_utc(dt)
