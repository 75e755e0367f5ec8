"""
Users Blueprint

Account administration, restricted to Teachers.
"""

from flask import Blueprint

users_bp = Blueprint('users', __name__)

from weather_api.users import routes  # noqa: E402, F401
