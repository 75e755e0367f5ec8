"""
Identity Store

Account persistence, credential checks and authentication key issuance.
"""

import logging
import uuid

from werkzeug.security import generate_password_hash, check_password_hash

from weather_api.errors import DuplicateEmail, InvalidArgument, InvalidCredentials, NotFound
from weather_api.extensions import db
from weather_api.models import User, ROLES
from weather_api.services.store import store_operation
from weather_api.utils.dates import utcnow
from weather_api.utils.validation import parse_datetime

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 10

# JSON field name -> model attribute for replaceable account fields
ACCOUNT_FIELDS = {
    'email': 'email',
    'password': 'password',
    'role': 'role',
    'createdAt': 'created_at',
    'authenticationKey': 'authentication_key',
    'lastLogin': 'last_login',
}


def hash_password(password):
    return generate_password_hash(password, method='pbkdf2:sha256')


def _check_credential(name, value):
    if not isinstance(value, str) or not value:
        raise InvalidArgument(f'{name} must be a non-empty string.')
    return value


def _check_role(role):
    if role not in ROLES:
        raise InvalidArgument(f"Role must be one of: {', '.join(ROLES)}.")
    return role


def create_user(email, password, role, created_at=None, last_login=None):
    """Register a new account.

    Raises:
        DuplicateEmail: an account with ``email`` already exists.
        InvalidArgument: non-string credentials, unknown role or malformed timestamps.
    """
    _check_credential('email', email)
    _check_credential('password', password)
    _check_role(role)
    created = parse_datetime(created_at, 'createdAt') if created_at else utcnow()
    last = parse_datetime(last_login, 'lastLogin') if last_login else utcnow()
    
    if get_by_email(email):
        raise DuplicateEmail()
    
    user = User(
        email=email,
        password=hash_password(password),
        role=role,
        created_at=created,
        authentication_key=None,
        last_login=last,
    )
    # a concurrent registration for the same email surfaces as a conflict
    with store_operation('create user', on_conflict=DuplicateEmail()):
        db.session.add(user)
        db.session.commit()
    logger.info('Created %s account %s', role, user.id)
    return user


def get_by_id(user_id):
    with store_operation('fetch user'):
        return db.session.get(User, user_id)


def get_by_email(email):
    with store_operation('fetch user'):
        return User.query.filter_by(email=email).first()


def find_by_token(token):
    """Resolve an authentication key to its account, or ``None``."""
    if not token:
        return None
    with store_operation('fetch user'):
        return User.query.filter_by(authentication_key=token).first()


def get_by_token(token):
    user = find_by_token(token)
    if user is None:
        raise NotFound('User not found with the provided authentication key.')
    return user


def list_users(limit=DEFAULT_LIST_LIMIT):
    """Accounts in insertion order, capped at ``limit``."""
    with store_operation('retrieve users'):
        return User.query.order_by(User.id).limit(limit).all()


def update_user(user_id, changes):
    """Merge ``changes`` into the stored account and replace it.

    Every field except the id may be replaced. A new password is hashed
    before it is stored.
    """
    user = get_by_id(user_id)
    if user is None:
        raise NotFound('User not found')
    
    if not isinstance(changes, dict):
        raise InvalidArgument('Request body must be a JSON object.')
    changes = dict(changes)
    supplied_id = changes.pop('_id', None)
    if supplied_id is not None and str(supplied_id).lower() != user.id:
        raise InvalidArgument('The user id cannot be changed.')
    unknown = sorted(set(changes) - set(ACCOUNT_FIELDS))
    if unknown:
        raise InvalidArgument(f"Unknown user fields: {', '.join(unknown)}.")
    
    values = {}
    for name, value in changes.items():
        if name in ('createdAt', 'role') and not value:
            raise InvalidArgument(f'{name} cannot be empty.')
        if name == 'email':
            value = _check_credential(name, value)
        elif name == 'role':
            value = _check_role(value)
        elif name == 'password':
            value = hash_password(_check_credential(name, value))
        elif name in ('createdAt', 'lastLogin'):
            value = parse_datetime(value, name) if value is not None else None
        values[ACCOUNT_FIELDS[name]] = value
    
    if values.get('email') and values['email'] != user.email and get_by_email(values['email']):
        raise DuplicateEmail()
    
    for attr, value in values.items():
        setattr(user, attr, value)
    with store_operation('update user', on_conflict=DuplicateEmail()):
        db.session.commit()
    logger.info('Updated user %s (%s)', user.id, ', '.join(sorted(changes)) or 'no fields')
    return user


def delete_user(user_id):
    with store_operation('delete user'):
        deleted = User.query.filter_by(id=user_id).delete()
        db.session.commit()
    if not deleted:
        raise NotFound('User not found')
    logger.info('Deleted user %s', user_id)


def delete_by_role_and_last_login(role, start, end):
    """Delete accounts of ``role`` whose last login falls in ``[start, end]``."""
    with store_operation('delete users'):
        deleted = User.query.filter(
            User.role == role,
            User.last_login >= start,
            User.last_login <= end,
        ).delete(synchronize_session=False)
        db.session.commit()
    logger.info('Deleted %d %s accounts last seen between %s and %s', deleted, role, start, end)
    return deleted


def update_role_by_created_at(start, end, new_role='Teacher'):
    """Set ``new_role`` on accounts created in ``[start, end]``."""
    _check_role(new_role)
    in_range = (User.created_at >= start, User.created_at <= end)
    with store_operation('update user roles'):
        matched = User.query.filter(*in_range).count()
        modified = User.query.filter(*in_range, User.role != new_role)\
            .update({User.role: new_role}, synchronize_session=False)
        db.session.commit()
    logger.info('Role update to %s: matched %d, modified %d', new_role, matched, modified)
    return {'matchedCount': matched, 'modifiedCount': modified}


def login(email, password):
    """Check credentials and issue a fresh authentication key.

    Unknown email and wrong password are reported identically.
    """
    _check_credential('email', email)
    _check_credential('password', password)
    user = get_by_email(email)
    if user is None or not check_password_hash(user.password, password):
        logger.warning('Failed login attempt')
        raise InvalidCredentials()
    
    user.authentication_key = str(uuid.uuid4())
    user.last_login = utcnow()
    with store_operation('log in'):
        db.session.commit()
    logger.info('User %s logged in', user.id)
    return user


def logout(token):
    """Clear the authentication key of the account holding ``token``."""
    user = find_by_token(token)
    if user is None:
        raise InvalidArgument('Invalid authentication key')
    user.authentication_key = None
    with store_operation('log out'):
        db.session.commit()
    logger.info('User %s logged out', user.id)
    return user
