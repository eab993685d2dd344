# blockforge/application/settings/prune_versions.py
from typing import List

from flask import current_app

from blockforge.utils.audit import log_action
from blockforge.utils.transaction import transactional
from blockforge.versioning.options import SqlOptionRepository
from blockforge.versioning.store import VersioningStore


def prune_versions(*, instance: str) -> List[int]:
    """Clear history: keep only the active snapshot."""
    store = VersioningStore(SqlOptionRepository(), instance)

    with transactional():
        removed = store.prune_all_but_active()

        log_action(
            action="settings.prune",
            entity_type="settings",
            entity_id=instance or "global",
            payload={"removed": removed, "kept": store.active_timestamp()},
        )

    current_app.logger.info(
        "Settings %s history cleared (%d versions removed)",
        instance or "global",
        len(removed),
    )
    return removed
