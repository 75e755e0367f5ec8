"""
Deletion Log

Append-only audit trail of readings removed through the logged-deletion
path.
"""

import logging

from weather_api.extensions import db
from weather_api.models import DeletedReading
from weather_api.services.store import store_operation
from weather_api.utils.dates import utcnow

logger = logging.getLogger(__name__)


def append_entry(original_id, snapshot, deleted_by, deleted_at=None):
    """Record a deleted reading.

    Args:
        original_id: Id the reading had before deletion
        snapshot: Reading attribute values captured before the delete
        deleted_by: Email of the account that performed the deletion
        deleted_at: Deletion time (default: now)
    
    Returns:
        The stored DeletedReading
    """
    entry = DeletedReading(
        original_id=original_id,
        deleted_by=deleted_by,
        deleted_at=deleted_at or utcnow(),
        **snapshot
    )
    with store_operation('log deleted data'):
        db.session.add(entry)
        db.session.commit()
    logger.info('Logged deletion of reading %s by %s', original_id, deleted_by)
    return entry


def list_entries(original_id=None):
    with store_operation('retrieve deleted data'):
        query = DeletedReading.query
        if original_id is not None:
            query = query.filter_by(original_id=original_id)
        return query.order_by(DeletedReading.id).all()
