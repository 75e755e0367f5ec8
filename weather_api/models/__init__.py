"""
Models Package

Exports all models for easy importing.
"""

from weather_api.models.user import User, ROLES
from weather_api.models.reading import WeatherReading, READING_FIELDS, MEASUREMENT_FIELDS
from weather_api.models.deleted_reading import DeletedReading

__all__ = ['User', 'ROLES', 'WeatherReading', 'READING_FIELDS', 'MEASUREMENT_FIELDS', 'DeletedReading']
