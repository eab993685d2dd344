import logging
from contextlib import contextmanager

from blockforge.extensions import db

logger = logging.getLogger(__name__)


@contextmanager
def transactional():
    """
    Commit the session when the block completes; roll back if it raises.

    Option records and block instances are only flushed by the code inside
    the block, so a snapshot, its index and the active pointer land together.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        logger.debug("Transaction rolled back: %s", type(exc).__name__)
        raise
