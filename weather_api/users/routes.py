"""
User Routes

Account management endpoints. Every route except the key lookup is
restricted to Teachers.
"""

from flask import current_app, request, jsonify

from weather_api.auth.decorators import roles_required
from weather_api.errors import NotFound
from weather_api.services import identity
from weather_api.users import users_bp
from weather_api.utils.validation import (
    parse_authentication_key,
    parse_day_range,
    parse_limit,
    parse_object_id,
    require_fields,
)


@users_bp.route('', methods=['GET'])
@roles_required('Teacher')
def list_users():
    limit = parse_limit(request.args.get('limit'), current_app.config['USERS_LIST_LIMIT'])
    users = identity.list_users(limit)
    return jsonify({
        'status': 200,
        'message': 'Get all user data',
        'usersData': [u.to_dict() for u in users],
    })


@users_bp.route('', methods=['POST'])
@roles_required('Teacher')
def create_user():
    data = require_fields(request.get_json(silent=True), 'email', 'password', 'role')
    user = identity.create_user(
        data['email'],
        data['password'],
        data['role'],
        created_at=data.get('createdAt'),
        last_login=data.get('lastLogin'),
    )
    return jsonify({
        'status': 201,
        'message': 'User created successfully',
        'user': user.to_dict(),
    }), 201


@users_bp.route('', methods=['PATCH'])
@roles_required('Teacher')
def update_roles_by_date_range():
    """Promote accounts created within a YYYYMMDD date range (default role: Teacher)."""
    data = request.get_json(silent=True)
    data = data if isinstance(data, dict) else {}
    start, end = parse_day_range(data.get('startDate'), data.get('endDate'))
    result = identity.update_role_by_created_at(start, end, data.get('role') or 'Teacher')
    return jsonify({
        'status': 200,
        'message': f"{result['modifiedCount']} user roles updated.",
        **result,
    })


@users_bp.route('/deleteManyByDateRange', methods=['DELETE'])
@roles_required('Teacher')
def delete_many_by_date_range():
    """Delete accounts (default role: User) whose last login is within the range."""
    start, end = parse_day_range(request.args.get('startDate'), request.args.get('endDate'))
    role = request.args.get('role') or 'User'
    deleted = identity.delete_by_role_and_last_login(role, start, end)
    return jsonify({
        'status': 200,
        'message': f'{deleted} users deleted successfully.',
        'deletedCount': deleted,
    })


@users_bp.route('/key/<authentication_key>', methods=['GET'])
def get_user_by_authentication_key(authentication_key):
    """Ungated lookup of the account holding an authentication key."""
    key = parse_authentication_key(authentication_key)
    user = identity.get_by_token(key)
    return jsonify({
        'status': 200,
        'message': 'Get user by authentication key',
        'user': user.to_dict(),
    })


@users_bp.route('/<user_id>', methods=['GET'])
@roles_required('Teacher')
def get_user(user_id):
    user = identity.get_by_id(parse_object_id(user_id, 'User ID'))
    if user is None:
        raise NotFound('User not found')
    return jsonify({
        'status': 200,
        'message': 'User found',
        'user': user.to_dict(),
    })


@users_bp.route('/<user_id>', methods=['PUT'])
@roles_required('Teacher')
def update_user(user_id):
    user = identity.update_user(parse_object_id(user_id, 'User ID'), request.get_json(silent=True))
    return jsonify({
        'status': 200,
        'message': 'User updated successfully',
        'user': user.to_dict(),
    })


@users_bp.route('/<user_id>', methods=['DELETE'])
@roles_required('Teacher')
def delete_user(user_id):
    identity.delete_user(parse_object_id(user_id, 'User ID'))
    return jsonify({
        'status': 200,
        'message': 'User deleted successfully',
    })
