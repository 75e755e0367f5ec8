"""
Authorization Gate

Each guarded route declares the roles allowed to call it. The caller is
resolved from the authentication key by the Flask-Login request loader.
"""

import logging
from functools import wraps

from flask import current_app, request
from flask_login import current_user

from weather_api.errors import Forbidden, Unauthenticated

logger = logging.getLogger(__name__)


def get_request_token():
    """Authentication key from the auth header, or ``Authorization: Bearer``."""
    token = request.headers.get(current_app.config.get('AUTH_HEADER', 'X-AUTH-KEY'))
    if not token:
        scheme, _, value = request.headers.get('Authorization', '').partition(' ')
        if scheme.lower() == 'bearer':
            token = value.strip()
    return token or None


def authorize(account, token, required_roles):
    """Decide whether ``account`` may call a route restricted to ``required_roles``.

    Returns:
        The account when allowed
    
    Raises:
        Unauthenticated: no token, or no account holds it
        Forbidden: the account's role is not in ``required_roles``
    """
    if not token:
        raise Unauthenticated('Authentication key is required.')
    if account is None or not account.is_authenticated:
        raise Unauthenticated('Invalid authentication key.')
    if account.role not in required_roles:
        logger.warning('Role %s denied for %s %s', account.role, request.method, request.path)
        raise Forbidden()
    return account


def roles_required(*roles):
    """Decorator restricting a route to accounts holding one of ``roles``.
    
    Security:
    - Missing or unknown key -> 401
    - Known key, role not listed -> 403
    """
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            account = current_user._get_current_object()
            authorize(account, get_request_token(), roles)
            return f(*args, **kwargs)
        wrapper.required_roles = roles
        return wrapper
    return decorator
