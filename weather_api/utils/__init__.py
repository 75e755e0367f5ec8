"""
Utilities Package

Exports the parsing and date helpers shared by the stores and routes.
"""

from weather_api.utils.dates import utcnow, format_datetime, floor_to_hour, subtract_months
from weather_api.utils.validation import (
    is_object_id,
    parse_object_id,
    parse_object_ids,
    parse_page,
    parse_limit,
    parse_datetime,
    parse_day_range,
    parse_authentication_key,
    require_fields,
)

__all__ = [
    'utcnow',
    'format_datetime',
    'floor_to_hour',
    'subtract_months',
    'is_object_id',
    'parse_object_id',
    'parse_object_ids',
    'parse_page',
    'parse_limit',
    'parse_datetime',
    'parse_day_range',
    'parse_authentication_key',
    'require_fields',
]
