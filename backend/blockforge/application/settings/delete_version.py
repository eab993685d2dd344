# blockforge/application/settings/delete_version.py
from flask import current_app

from blockforge.utils.audit import log_action
from blockforge.utils.transaction import transactional
from blockforge.versioning.options import SqlOptionRepository
from blockforge.versioning.store import VersioningStore


def delete_version(*, instance: str, timestamp: int) -> None:
    """
    Delete one snapshot.

    Raises VersionNotFound for unknown timestamps and VersionInvalidOperation
    for the active or the sole snapshot; nothing is written in either case.
    """
    store = VersioningStore(SqlOptionRepository(), instance)

    with transactional():
        store.delete(timestamp)

        log_action(
            action="settings.delete_version",
            entity_type="settings",
            entity_id=instance or "global",
            payload={"timestamp": int(timestamp)},
        )

    current_app.logger.info("Settings %s version %s deleted", instance or "global", timestamp)
