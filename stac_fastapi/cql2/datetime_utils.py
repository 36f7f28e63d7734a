"""Utility functions to handle CQL2 temporal values."""

from datetime import date, datetime, timezone
from typing import Optional

from stac_fastapi.types.rfc3339 import rfc3339_str_to_datetime

from .errors import InvalidTimeFormat

OPEN_BOUND = ".."


def parse_timestamp(value: str, op: str = "timestamp") -> datetime:
    """Parse an RFC 3339 string into an aware datetime.

    Args:
        value (str): The string to parse, e.g. ``2020-01-01T00:00:00Z``.
        op (str): Operator or field reported if parsing fails.

    Returns:
        datetime: The parsed instant.

    Raises:
        InvalidTimeFormat: If the value is not a valid RFC 3339 string.
    """
    if not isinstance(value, str):
        raise InvalidTimeFormat(f"expected an RFC 3339 string, got {value!r}", op=op)
    try:
        return rfc3339_str_to_datetime(value)
    except ValueError as e:
        raise InvalidTimeFormat(f"invalid RFC 3339 timestamp {value!r}: {e}", op=op)


def parse_date(value: str, op: str = "date") -> date:
    """Parse a ``YYYY-MM-DD`` string into a date.

    Raises:
        InvalidTimeFormat: If the value is not a calendar date.
    """
    if not isinstance(value, str) or len(value) != 10:
        raise InvalidTimeFormat(f"expected a YYYY-MM-DD date, got {value!r}", op=op)
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidTimeFormat(f"invalid date {value!r}: {e}", op=op)


def parse_interval_bound(value, op: str = "interval") -> Optional[datetime]:
    """Parse one end of an interval; ``".."`` and ``None`` mean unbounded."""
    if value is None or value == OPEN_BOUND:
        return None
    return parse_timestamp(value, op=op)


# Borrowed from pystac - https://github.com/stac-utils/pystac/blob/f5e4cf4a29b62e9ef675d4a4dac7977b09f53c8f/pystac/utils.py#L370-L394
def datetime_to_str(dt: datetime, timespec: str = "auto") -> str:
    """Convert a :class:`datetime.datetime` instance to an ISO8601 string in the `RFC 3339, section 5.6.

    <https://datatracker.ietf.org/doc/html/rfc3339#section-5.6>`__ format.

    Args:
        dt : The datetime to convert.
        timespec: An optional argument that specifies the number of additional
            terms of the time to include. Valid options are 'auto', 'hours',
            'minutes', 'seconds', 'milliseconds' and 'microseconds'. The default value
            is 'auto'.
    Returns:
        str: The ISO8601 (RFC 3339) formatted string representing the datetime.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    timestamp = dt.isoformat(timespec=timespec)
    zulu = "+00:00"
    if timestamp.endswith(zulu):
        timestamp = f"{timestamp[: -len(zulu)]}Z"

    return timestamp


def interval_bound_to_str(dt: Optional[datetime]) -> str:
    """Render one end of an interval, using ``".."`` for an open end."""
    if dt is None:
        return OPEN_BOUND
    return datetime_to_str(dt)
