import logging
from typing import Any, Dict, Optional

from flask import g

from blockforge.extensions import db
from blockforge.models.audit_log import AuditLog

logger = logging.getLogger(__name__)

# Settings instances, block instances and documents share the audit table
ENTITY_TYPES = ("settings", "block_instance", "document")


def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[Any],
    payload: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """
    Stage an audit row in the current session.

    The caller's transaction commits it together with the change it
    describes. Requests without a logged-in user (CLI, tests) are recorded
    with no actor.
    """
    if entity_type not in ENTITY_TYPES:
        raise ValueError(f"Unknown audit entity type: {entity_type!r}")

    user = getattr(g, "current_user", None)
    entry = AuditLog(
        actor_id=user.id if user is not None else None,
        action=action,
        entity_type=entity_type,
        entity_id="" if entity_id is None else str(entity_id),
        payload=payload or {},
    )
    db.session.add(entry)
    logger.debug("Audit %s on %s %s", action, entity_type, entry.entity_id)
    return entry
