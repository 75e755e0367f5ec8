"""
Auth Blueprint

Registration, login and logout. Login issues the authentication key that
callers send in the ``X-AUTH-KEY`` header.
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from weather_api.auth import routes  # noqa: E402, F401
