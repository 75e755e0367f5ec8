"""
Weather Routes

Reading CRUD, bulk ingestion and aggregation endpoints.
"""

from flask import current_app, request, jsonify
from flask_login import current_user

from weather_api.auth.decorators import roles_required
from weather_api.errors import InvalidArgument, NotFound
from weather_api.services import readings
from weather_api.utils.validation import (
    parse_datetime,
    parse_day_range,
    parse_limit,
    parse_object_id,
    parse_page,
)
from weather_api.weather import weather_bp

ANY_ROLE = ('Teacher', 'User', 'Sensor')


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        raise InvalidArgument('Request body must be valid JSON.')
    return data


@weather_bp.route('', methods=['GET'])
@roles_required('Teacher')
def get_all_weather_data():
    limit = parse_limit(request.args.get('limit'))
    data = readings.get_all(limit)
    return jsonify({
        'status': 200,
        'message': 'All weather data retrieved successfully',
        'data': [r.to_dict() for r in data],
    })


@weather_bp.route('', methods=['POST'])
@roles_required('Teacher', 'Sensor')
def create_weather_data():
    reading = readings.create_reading(_json_body())
    return jsonify({
        'status': 201,
        'message': 'Weather data created successfully',
        'data': reading.to_dict(),
    }), 201


@weather_bp.route('', methods=['PATCH'])
@roles_required('Teacher')
def update_multiple_readings():
    data = _json_body()
    if not isinstance(data, dict):
        raise InvalidArgument('Request body must be a JSON object.')
    result = readings.update_readings(data.get('ids'), data.get('updateData'))
    if not result['matchedCount']:
        raise NotFound('No weather data records found to update.')
    return jsonify({
        'status': 200,
        'message': f"{result['modifiedCount']} weather data records updated successfully.",
        **result,
    })


@weather_bp.route('', methods=['DELETE'])
@roles_required('Teacher')
def delete_multiple_readings():
    data = _json_body()
    if not isinstance(data, dict):
        raise InvalidArgument('Request body must be a JSON object.')
    deleted = readings.delete_readings(data.get('ids'))
    if not deleted:
        raise NotFound('No weather data records found to delete.')
    return jsonify({
        'status': 200,
        'message': f'{deleted} weather data records deleted successfully.',
        'deletedCount': deleted,
    })


@weather_bp.route('/page/<page>', methods=['GET'])
def get_weather_data_by_page(page):
    """Ungated paginated scan."""
    page = parse_page(page)
    data = readings.get_page(page, current_app.config['WEATHER_PAGE_SIZE'])
    return jsonify({
        'status': 200,
        'message': f'Get paginated weatherData on page {page}',
        'weatherData': [r.to_dict() for r in data],
    })


@weather_bp.route('/readings/<device_name>', methods=['POST'])
@roles_required('Teacher', 'Sensor')
def insert_sensor_readings(device_name):
    """Bulk ingest for one device; the device name comes from the URL."""
    inserted = readings.insert_batch(_json_body(), device_name=device_name)
    return jsonify({
        'status': 201,
        'message': 'Sensor readings inserted successfully',
        'data': {'insertedCount': inserted},
    }), 201


@weather_bp.route('/max-prep/<device_name>/<last_day>', methods=['GET'])
@roles_required(*ANY_ROLE)
def get_max_precipitation(device_name, last_day):
    window_end = parse_datetime(last_day, 'lastDay')
    reading = readings.get_max_precipitation(
        device_name, window_end, current_app.config['MAX_PRECIPITATION_WINDOW_MONTHS'])
    if reading is None:
        raise NotFound('No data found for the specified device name in the specified 5 months.')
    data = reading.to_dict()
    return jsonify({
        'status': 200,
        'message': 'Max precipitation data retrieved successfully',
        'data': {
            'deviceName': data['deviceName'],
            'readingDateTime': data['readingDateTime'],
            'precipitation': data['precipitation'],
        },
    })


@weather_bp.route('/max-temp/<start_date>/<end_date>', methods=['GET'])
@roles_required(*ANY_ROLE)
def get_max_temperature(start_date, end_date):
    start, end = parse_day_range(start_date, end_date)
    result = readings.get_max_temperature_per_device(start, end)
    if not result:
        raise NotFound('No data found for the specified date range')
    return jsonify({
        'status': 200,
        'message': 'Data successfully retrieved',
        'result': result,
    })


@weather_bp.route('/<reading_id>', methods=['GET'])
@roles_required(*ANY_ROLE)
def get_weather_data(reading_id):
    reading = readings.get_by_id(parse_object_id(reading_id))
    if reading is None:
        raise NotFound('Weather data not found')
    return jsonify({
        'status': 200,
        'message': 'Weather data retrieved successfully',
        'data': reading.to_dict(),
    })


@weather_bp.route('/<reading_id>', methods=['PUT'])
@roles_required('Teacher')
def update_weather_data(reading_id):
    reading = readings.update_reading(parse_object_id(reading_id), _json_body())
    return jsonify({
        'status': 200,
        'message': 'Weather data updated successfully',
        'data': reading.to_dict(),
    })


@weather_bp.route('/<reading_id>/precipitation', methods=['PATCH'])
@roles_required('Teacher', 'Sensor')
def update_precipitation(reading_id):
    data = _json_body()
    if not isinstance(data, dict) or 'precipitation' not in data:
        raise InvalidArgument('precipitation is required.')
    readings.update_precipitation(parse_object_id(reading_id), data['precipitation'])
    return jsonify({
        'status': 200,
        'message': 'Precipitation updated successfully',
    })


@weather_bp.route('/<reading_id>', methods=['DELETE'])
@roles_required('Teacher')
def delete_weather_data(reading_id):
    """Delete a reading and write it to the deletion log."""
    result = readings.delete_reading_with_log(parse_object_id(reading_id), current_user)
    if not result.logged:
        return jsonify({
            'status': 200,
            'message': 'Weather data deleted, but the deletion could not be logged.',
            'deleted': True,
            'logged': False,
            'error': result.error,
        })
    return jsonify({
        'status': 200,
        'message': 'Weather data deleted successfully and logged.',
        'deleted': True,
        'logged': True,
    })


@weather_bp.route('/<device_name>/<date_time>', methods=['GET'])
@roles_required(*ANY_ROLE)
def get_data_by_device_and_hour(device_name, date_time):
    """Readings of a device in the hour containing ``date_time``.

    A ``dateTime`` query parameter takes precedence over the path segment.
    """
    timestamp = parse_datetime(request.args.get('dateTime') or date_time, 'dateTime')
    data = readings.get_by_device_and_hour(device_name, timestamp)
    return jsonify({
        'status': 200,
        'message': 'Retrieve data by date and time on the device is successful.',
        'data': data,
    })
