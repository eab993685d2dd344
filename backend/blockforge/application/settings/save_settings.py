# blockforge/application/settings/save_settings.py
from typing import Any, Dict, Mapping, Optional

from flask import current_app

from blockforge.application.settings.sanitize import sanitize_options
from blockforge.schema.settings import SettingsPage
from blockforge.utils.audit import log_action
from blockforge.utils.transaction import transactional
from blockforge.versioning.options import SqlOptionRepository
from blockforge.versioning.store import VersioningStore


def save_settings(
    *,
    page: SettingsPage,
    submitted: Mapping[str, Any],
    author: str,
    tab: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Save a settings submission as a new snapshot.

    Responsibilities:
    - Sanitize against the page's field schemas (ValidationFailed on rejects)
    - Merge over the active values so omitted fields keep their value
    - Create the snapshot and move the active pointer, atomically
    - Audit logging
    """
    values = sanitize_options(page, submitted)
    store = VersioningStore(SqlOptionRepository(), page.instance)

    with transactional():
        merged = {**store.get_active_value(), **values}
        snapshot = store.save(merged, author=author)

        log_action(
            action="settings.save",
            entity_type="settings",
            entity_id=page.instance or "global",
            payload={
                "timestamp": snapshot.timestamp,
                "fields": sorted(values),
            },
        )

    current_app.logger.info(
        "Settings %s saved as version %s by %s",
        page.instance or "global",
        snapshot.timestamp,
        author,
    )

    tab = tab if tab and page.tab(tab) else page.default_tab
    return {
        "timestamp": snapshot.timestamp,
        "date": snapshot.date,
        "redirect": {"saved": 1, "tab": tab},
    }
