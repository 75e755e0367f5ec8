"""
Store Access Helpers

Wraps database work so that backend errors roll the session back and
surface as ``StoreFailure``. Nothing is retried.
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from weather_api.errors import StoreFailure
from weather_api.extensions import db

logger = logging.getLogger(__name__)


@contextmanager
def store_operation(action, on_conflict=None):
    """Run a block of store calls, mapping ``SQLAlchemyError`` to ``StoreFailure``.

    Args:
        action: Short description used in the log line and error message,
            e.g. ``'delete weather data'``.
        on_conflict: Exception raised instead when a unique constraint
            is violated.
    """
    try:
        yield db.session
    except IntegrityError as e:
        db.session.rollback()
        if on_conflict is not None:
            raise on_conflict from e
        logger.exception('Store operation failed: %s', action)
        raise StoreFailure(f'Failed to {action}') from e
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Store operation failed: %s', action)
        raise StoreFailure(f'Failed to {action}') from e
