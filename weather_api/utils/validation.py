"""
Input Validation Utilities

Every value crossing the HTTP boundary is parsed here before any store
access. Failures raise ``InvalidArgument`` (HTTP 400).
"""

import re
import uuid
from datetime import datetime, time

from weather_api.errors import InvalidArgument
from weather_api.utils.dates import to_naive_utc

OBJECT_ID_PATTERN = re.compile(r'[0-9a-fA-F]{24}')
DAY_PATTERN = re.compile(r'[0-9]{8}')
DIGITS_PATTERN = re.compile(r'[0-9]+')

# Largest value an SQL integer (LIMIT, OFFSET) can hold
MAX_SQL_INTEGER = 2 ** 63 - 1


def is_object_id(value):
    """Check for a 24-character hexadecimal identifier."""
    return isinstance(value, str) and bool(OBJECT_ID_PATTERN.fullmatch(value))


def parse_object_id(value, label='ID'):
    """Validate an identifier and return its canonical (lower-case) form."""
    if not is_object_id(value):
        raise InvalidArgument(f'{label} must be a 24-character hexadecimal string.')
    return value.lower()


def parse_object_ids(values):
    """Validate a non-empty list of identifiers; one bad id rejects the whole list."""
    if not isinstance(values, list) or not values:
        raise InvalidArgument('Invalid input: IDs must be a non-empty array.')
    parsed = []
    for value in values:
        if not is_object_id(value):
            raise InvalidArgument(f'Invalid ID format: {value}')
        parsed.append(value.lower())
    return parsed


def parse_page(value):
    """Parse a page number; must be a non-negative integer."""
    if isinstance(value, int) and not isinstance(value, bool):
        page = value
    elif isinstance(value, str) and DIGITS_PATTERN.fullmatch(value):
        digits = value.lstrip('0') or '0'
        # anything longer is past any possible row count; the page is empty
        page = int(digits) if len(digits) <= 19 else MAX_SQL_INTEGER
    else:
        raise InvalidArgument('Invalid page number. Page must be a non-negative integer.')
    if page < 0:
        raise InvalidArgument('Invalid page number. Page must be a non-negative integer.')
    return page


def parse_limit(value, default=None):
    """Parse an optional positive ``limit`` query parameter."""
    if value is None or value == '':
        return default
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise InvalidArgument('Limit must be a positive integer.')
    if limit <= 0 or limit > MAX_SQL_INTEGER:
        raise InvalidArgument('Limit must be a positive integer.')
    return limit


def parse_datetime(value, label='dateTime'):
    """Parse an ISO-8601 timestamp into naive UTC.

    A trailing ``Z`` is accepted; timestamps without an offset are taken
    as UTC.
    """
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgument(f'{label} is required and must be an ISO-8601 date/time.')
    text = value.strip()
    if text.endswith('Z') or text.endswith('z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise InvalidArgument(f'Invalid date format for {label}: {value}')
    return to_naive_utc(parsed)


def _parse_day(value, label):
    if not isinstance(value, str) or not DAY_PATTERN.fullmatch(value):
        raise InvalidArgument(f'Invalid date format for {label}: expected YYYYMMDD.')
    try:
        return datetime.strptime(value, '%Y%m%d').date()
    except ValueError:
        raise InvalidArgument(f'Invalid date format for {label}: expected YYYYMMDD.')


def parse_day_range(start_value, end_value):
    """Expand two ``YYYYMMDD`` literals to an inclusive datetime range.

    The start becomes 00:00:00.000 and the end 23:59:59.999 of their days.
    """
    if not start_value or not end_value:
        raise InvalidArgument('Both startDate and endDate are required.')
    start = datetime.combine(_parse_day(start_value, 'startDate'), time.min)
    end = datetime.combine(_parse_day(end_value, 'endDate'), time(23, 59, 59, 999000))
    return start, end


def parse_authentication_key(value):
    """Validate an authentication key; must be a canonical UUID string."""
    if not value:
        raise InvalidArgument('Bad Request: Authentication key parameter required.')
    try:
        parsed = uuid.UUID(value)
    except (TypeError, ValueError):
        raise InvalidArgument('Invalid authentication key format. Must be a valid UUID.')
    if str(parsed) != value.lower():
        raise InvalidArgument('Invalid authentication key format. Must be a valid UUID.')
    return value


def require_fields(payload, *names):
    """Ensure a JSON object is present and every named field is non-empty."""
    if not isinstance(payload, dict):
        raise InvalidArgument('Request body must be a JSON object.')
    missing = [name for name in names if payload.get(name) in (None, '')]
    if missing:
        raise InvalidArgument(f"Missing required fields: {', '.join(missing)}.")
    return payload
