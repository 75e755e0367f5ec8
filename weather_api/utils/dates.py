"""
Date Helpers

All timestamps are stored as naive UTC datetimes.
"""

import calendar
from datetime import datetime, timedelta, timezone


def utcnow():
    """Current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value):
    """Convert an aware datetime to naive UTC; naive values are assumed UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def format_datetime(value):
    """Render a stored timestamp as ISO-8601 UTC, e.g. ``2024-08-25T12:30:00.000Z``."""
    if value is None:
        return None
    return to_naive_utc(value).isoformat(timespec='milliseconds') + 'Z'


def floor_to_hour(value):
    return value.replace(minute=0, second=0, microsecond=0)


def hour_bucket(value):
    """Return the ``[start, end)`` hour containing ``value``."""
    start = floor_to_hour(value)
    return start, start + timedelta(hours=1)


def subtract_months(value, months):
    """Step back ``months`` calendar months, clamping the day to the target month.

    >>> subtract_months(datetime(2024, 7, 31), 5)
    datetime.datetime(2024, 2, 29, 0, 0)
    """
    month_index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
