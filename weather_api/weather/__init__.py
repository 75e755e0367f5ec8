"""
Weather Blueprint

Ingestion and queries over sensor readings.
"""

from flask import Blueprint

weather_bp = Blueprint('weather', __name__)

from weather_api.weather import routes  # noqa: E402, F401
