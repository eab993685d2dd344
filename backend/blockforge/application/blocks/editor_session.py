# blockforge/application/blocks/editor_session.py
import asyncio
from typing import MutableMapping, Optional, Tuple

from flask import current_app

from blockforge.application.blocks.rendering import render_context
from blockforge.application.blocks.update_block_instance import update_block_instance
from blockforge.editor.autosave import TIMESTAMP_KEY, LoopScheduler
from blockforge.editor.clients import LocalPreviewClient, LocalSchemaClient
from blockforge.editor.preview import UNSAVED_DOCUMENT
from blockforge.editor.session import BlockEditorSession
from blockforge.extensions import current_registry
from blockforge.models.block_instance import BlockInstance
from blockforge.rendering.hosts import HostContext
from blockforge.services.asset_registry import SqlAssetLookup


def open_editor_session(
    *,
    block_name: Optional[str] = None,
    instance_id: Optional[str] = None,
    host: HostContext = HostContext.EDITOR,
    storage: Optional[MutableMapping[str, str]] = None,
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> BlockEditorSession:
    """
    Build an editor session wired to this application.

    Responsibilities:
    - Load the persisted value map when ``instance_id`` names a stored block
    - Take debounce and status timings from config
    - Resolve schemas, previews and assets in-process

    The caller still awaits ``session.load()``.
    """
    persisted = None
    document_id, position = UNSAVED_DOCUMENT, 0
    if instance_id is not None:
        instance: BlockInstance = BlockInstance.query.filter_by(id=instance_id).first_or_404()
        block_name = instance.block_type
        persisted = instance.attributes
        document_id, position = instance.document_id, instance.position

    if not block_name:
        raise ValueError("block_name or instance_id is required")

    registry = current_registry()
    config = current_app.config
    return BlockEditorSession(
        block_name,
        schema_client=LocalSchemaClient(registry),
        preview_client=LocalPreviewClient(registry, render_context(is_preview=True)),
        asset_lookup=SqlAssetLookup(),
        scheduler=LoopScheduler(loop),
        storage=storage if storage is not None else {},
        persisted=persisted,
        document_id=document_id,
        position=position,
        host=host,
        debounce=config.get("AUTOSAVE_DEBOUNCE_SECONDS", 0.5),
        saved_display=config.get("AUTOSAVE_SAVED_DISPLAY_SECONDS", 2.0),
    )


def persist_editor_session(session: BlockEditorSession, instance_id: str) -> Tuple[bool, Optional[BlockInstance]]:
    """
    Write a session's values back to its block instance.

    Nothing is written unless the values changed or legacy rows were given
    ids on load. Returns whether a write happened and the instance.

    The auto-save flush timestamp belongs to the session and is not
    persisted; block instances only store declared fields and host keys.
    """
    if session.store is None or not (session.store.dirty or session.resaved):
        return False, None

    values = {k: v for k, v in session.store.values.items() if k != TIMESTAMP_KEY}
    instance, store = update_block_instance(instance_id=instance_id, partial=values)
    session.store.dirty = False
    session.resaved = False
    return True, instance
