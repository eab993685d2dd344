# blockforge/application/settings/restore_version.py
from flask import current_app

from blockforge.utils.audit import log_action
from blockforge.utils.transaction import transactional
from blockforge.versioning.options import SqlOptionRepository
from blockforge.versioning.store import VersioningStore


def restore_version(*, instance: str, timestamp: int) -> int:
    """Point the instance at an existing snapshot. Snapshot contents are untouched."""
    store = VersioningStore(SqlOptionRepository(), instance)

    with transactional():
        previous = store.active_timestamp()
        store.restore(timestamp)

        log_action(
            action="settings.restore",
            entity_type="settings",
            entity_id=instance or "global",
            payload={"from": previous, "to": int(timestamp)},
        )

    current_app.logger.info("Settings %s restored to %s", instance or "global", timestamp)
    return int(timestamp)
