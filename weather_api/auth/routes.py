"""
Auth Routes

Account registration and authentication key issuance.
"""

from flask import request, jsonify

from weather_api.auth import auth_bp
from weather_api.auth.decorators import get_request_token
from weather_api.services import identity
from weather_api.utils.validation import require_fields


@auth_bp.route('/register', methods=['POST'])
def register():
    """Self-registration; new accounts always get the Teacher role."""
    data = require_fields(request.get_json(silent=True), 'email', 'password')
    user = identity.create_user(data['email'], data['password'], 'Teacher')
    return jsonify({
        'status': 201,
        'message': 'Registration successful',
        'user': user.to_dict(),
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = require_fields(request.get_json(silent=True), 'email', 'password')
    user = identity.login(data['email'], data['password'])
    return jsonify({
        'status': 200,
        'message': 'User logged in',
        'authenticationKey': user.authentication_key,
    })


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Clear the key given in the body, falling back to the request header."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    token = data.get('authenticationKey') or get_request_token()
    identity.logout(token)
    return jsonify({
        'status': 200,
        'message': 'User logged out',
    })
