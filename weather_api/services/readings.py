"""
Reading Store

Queries, aggregations and bulk mutations over weather readings.
"""

import logging
import math
from collections import namedtuple

from weather_api.errors import InvalidArgument, InvalidReading, NotFound, StoreFailure
from weather_api.extensions import db
from weather_api.models import WeatherReading, READING_FIELDS, MEASUREMENT_FIELDS
from weather_api.models.reading import MAX_HUMIDITY, MIN_TEMPERATURE, MAX_TEMPERATURE
from weather_api.services import deletion_log
from weather_api.services.store import store_operation
from weather_api.utils.dates import utcnow, format_datetime, hour_bucket, subtract_months
from weather_api.utils.validation import MAX_SQL_INTEGER, parse_datetime, parse_object_ids

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_MONTHS = 5

DeletionResult = namedtuple('DeletionResult', ['reading_id', 'logged', 'entry', 'error'])


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _is_number(value):
    if isinstance(value, bool):
        return False
    # NaN and infinities are not measurements
    return isinstance(value, int) or (isinstance(value, float) and math.isfinite(value))


def check_invariants(values):
    """Reject humidity above 100 % or temperature outside [-50, 60] deg C.

    ``values`` maps model attributes to values; missing or null
    measurements are not checked.
    """
    humidity = values.get('humidity')
    if humidity is not None and humidity > MAX_HUMIDITY:
        raise InvalidReading('Validation failed: Humidity cannot exceed 100%')
    temperature = values.get('temperature')
    if temperature is not None and not MIN_TEMPERATURE <= temperature <= MAX_TEMPERATURE:
        raise InvalidReading('Validation failed: Temperature cannot exceed 60°C or below -50°C.')


def _coerce_field(name, value):
    """Validate one JSON field and return the value to store."""
    if name == 'deviceName':
        if not isinstance(value, str) or not value.strip():
            raise InvalidArgument('deviceName must be a non-empty string.')
        return value
    if name == 'readingDateTime':
        return parse_datetime(value, 'readingDateTime')
    if value is not None and not _is_number(value):
        raise InvalidArgument(f'{name} must be a number.')
    return value


def build_reading_values(payload, device_name=None, default_time=None):
    """Turn a JSON reading into model attribute values.

    Fields outside the reading schema are ignored. ``device_name``
    overrides any name in the payload.
    """
    if not isinstance(payload, dict):
        raise InvalidArgument('Each reading must be a JSON object.')
    values = {}
    for name, attr in MEASUREMENT_FIELDS.items():
        values[attr] = _coerce_field(name, payload.get(name))
    values['device_name'] = _coerce_field('deviceName', device_name or payload.get('deviceName'))
    raw_time = payload.get('readingDateTime')
    values['reading_date_time'] = _coerce_field('readingDateTime', raw_time) if raw_time else (default_time or utcnow())
    check_invariants(values)
    return values


def build_patch(patch):
    """Validate a partial update; unknown field names are rejected."""
    if not isinstance(patch, dict) or not patch:
        raise InvalidArgument('Invalid input: Update data must be a non-empty object.')
    unknown = sorted(set(patch) - set(READING_FIELDS))
    if unknown:
        raise InvalidArgument(f"Unknown weather data fields: {', '.join(unknown)}.")
    values = {READING_FIELDS[name]: _coerce_field(name, value) for name, value in patch.items()}
    check_invariants(values)
    return values


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def get_all(limit=None):
    """All readings in storage order, optionally capped."""
    with store_operation('retrieve weather data'):
        query = WeatherReading.query.order_by(WeatherReading.id)
        if limit is not None:
            query = query.limit(limit)
        return query.all()


def get_page(page, page_size):
    """Readings ``[page * page_size, page * page_size + page_size)`` in storage order."""
    offset = page * page_size
    if offset > MAX_SQL_INTEGER:
        return []
    with store_operation('retrieve weather data'):
        return WeatherReading.query.order_by(WeatherReading.id)\
            .offset(offset).limit(page_size).all()


def get_by_id(reading_id):
    with store_operation('retrieve weather data'):
        return db.session.get(WeatherReading, reading_id)


def get_by_device_and_hour(device_name, timestamp):
    """Readings of a device within the hour containing ``timestamp``.

    Returns:
        List of dicts holding temperature, atmosphericPressure,
        solarRadiation, precipitation and readingDateTime
    """
    start, end = hour_bucket(timestamp)
    with store_operation('retrieve weather data'):
        readings = WeatherReading.query.filter(
            WeatherReading.device_name == device_name,
            WeatherReading.reading_date_time >= start,
            WeatherReading.reading_date_time < end,
        ).order_by(WeatherReading.id).all()

    return [
        {
            'temperature': r.temperature,
            'atmosphericPressure': r.atmospheric_pressure,
            'solarRadiation': r.solar_radiation,
            'precipitation': r.precipitation,
            'readingDateTime': format_datetime(r.reading_date_time),
        }
        for r in readings
    ]


def get_max_precipitation(device_name, window_end, months=DEFAULT_WINDOW_MONTHS):
    """Reading with the highest precipitation for a device in the months up to ``window_end``.

    Ties go to the earliest stored reading. Returns None when the device
    has no reading in the window.
    """
    window_start = subtract_months(window_end, months)
    with store_operation('retrieve max precipitation'):
        return WeatherReading.query.filter(
            WeatherReading.device_name == device_name,
            WeatherReading.reading_date_time >= window_start,
            WeatherReading.reading_date_time <= window_end,
        ).order_by(
            WeatherReading.precipitation.desc().nulls_last(),
            WeatherReading.id,
        ).first()


def get_max_temperature_per_device(start, end):
    """Hottest reading per device with a timestamp in ``[start, end]``.

    Returns:
        One dict per device (deviceName, readingDateTime, temperature),
        sorted by device name
    """
    position = db.func.row_number().over(
        partition_by=WeatherReading.device_name,
        order_by=(WeatherReading.temperature.desc().nulls_last(), WeatherReading.id),
    ).label('position')

    with store_operation('retrieve max temperature'):
        ranked = db.session.query(
            WeatherReading.device_name,
            WeatherReading.reading_date_time,
            WeatherReading.temperature,
            position,
        ).filter(
            WeatherReading.reading_date_time >= start,
            WeatherReading.reading_date_time <= end,
        ).subquery()

        rows = db.session.query(
            ranked.c.device_name,
            ranked.c.reading_date_time,
            ranked.c.temperature,
        ).filter(ranked.c.position == 1).order_by(ranked.c.device_name).all()

    return [
        {
            'deviceName': device_name,
            'readingDateTime': format_datetime(reading_date_time),
            'temperature': temperature,
        }
        for device_name, reading_date_time, temperature in rows
    ]


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def create_reading(payload, device_name=None):
    """Validate and insert one reading.

    Raises:
        InvalidReading: humidity or temperature out of range; nothing is stored.
    """
    values = build_reading_values(payload, device_name=device_name)
    reading = WeatherReading(**values)
    with store_operation('create weather data'):
        db.session.add(reading)
        db.session.commit()
    logger.info('Created reading %s for %s', reading.id, reading.device_name)
    return reading


def insert_batch(readings, device_name=None):
    """Insert many readings in one transaction.

    Every reading is validated first; a single invalid reading rejects the
    batch and nothing is stored.

    Returns:
        Number of readings inserted
    """
    if not isinstance(readings, list) or not readings:
        raise InvalidArgument('Request body must be a non-empty array of sensor readings.')

    now = utcnow()
    rows = []
    for index, payload in enumerate(readings):
        try:
            values = build_reading_values(payload, device_name=device_name, default_time=now)
        except InvalidArgument as e:
            raise e.__class__(f'Reading {index}: {e.message}') from e
        rows.append(WeatherReading(**values))

    with store_operation('insert sensor readings'):
        db.session.add_all(rows)
        db.session.commit()
    logger.info('Inserted %d readings for %s', len(rows), device_name or 'multiple devices')
    return len(rows)


def update_precipitation(reading_id, precipitation):
    if precipitation is not None and not _is_number(precipitation):
        raise InvalidArgument('precipitation must be a number.')
    with store_operation('update precipitation'):
        matched = WeatherReading.query.filter_by(id=reading_id)\
            .update({WeatherReading.precipitation: precipitation}, synchronize_session=False)
        db.session.commit()
    if not matched:
        raise NotFound('Weather data not found')
    logger.info('Updated precipitation of reading %s', reading_id)


def update_reading(reading_id, patch):
    """Merge ``patch`` into one stored reading."""
    values = build_patch(patch)
    with store_operation('update weather data'):
        reading = db.session.get(WeatherReading, reading_id)
        if reading is None:
            raise NotFound('Weather data not found')
        for attr, value in values.items():
            setattr(reading, attr, value)
        db.session.commit()
    logger.info('Updated reading %s (%s)', reading_id, ', '.join(sorted(patch)))
    return reading


def update_readings(reading_ids, patch):
    """Apply ``patch`` to every reading whose id is listed.

    Ids and patch are validated before anything is written. Returns the
    matched and modified counts reported by the store.
    """
    ids = parse_object_ids(reading_ids)
    values = build_patch(patch)
    with store_operation('update weather data'):
        matched = WeatherReading.query.filter(WeatherReading.id.in_(ids))\
            .update({getattr(WeatherReading, attr): value for attr, value in values.items()},
                    synchronize_session=False)
        db.session.commit()
    logger.info('Bulk update touched %d of %d readings', matched, len(ids))
    return {'matchedCount': matched, 'modifiedCount': matched}


def delete_reading(reading_id):
    with store_operation('delete weather data'):
        deleted = WeatherReading.query.filter_by(id=reading_id).delete()
        db.session.commit()
    if not deleted:
        raise NotFound('Weather data not found')
    logger.info('Deleted reading %s', reading_id)


def delete_readings(reading_ids):
    """Delete every listed reading; returns the number actually removed."""
    ids = parse_object_ids(reading_ids)
    with store_operation('delete weather data'):
        deleted = WeatherReading.query.filter(WeatherReading.id.in_(ids))\
            .delete(synchronize_session=False)
        db.session.commit()
    logger.info('Bulk delete removed %d of %d readings', deleted, len(ids))
    return deleted


def delete_reading_with_log(reading_id, account):
    """Delete a reading and record it in the deletion log.

    The deletion stands even when the log entry cannot be written; the
    failure is reported in the returned result.
    """
    reading = get_by_id(reading_id)
    if reading is None:
        raise NotFound('Weather data not found')
    snapshot = {attr: getattr(reading, attr) for attr in READING_FIELDS.values()}

    delete_reading(reading_id)

    try:
        entry = deletion_log.append_entry(reading_id, snapshot, account.email)
    except StoreFailure as e:
        logger.error('Reading %s deleted but the deletion could not be logged', reading_id)
        return DeletionResult(reading_id, False, None, e.message)
    return DeletionResult(reading_id, True, entry, None)
