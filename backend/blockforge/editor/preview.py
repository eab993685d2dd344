"""
Preview/edit toggle.

The mode is per block instance and per viewing session. It is remembered in
client-side storage under a key made of the document id and the block's
position, so it survives reloads of the same document without leaking to
other documents or positions. It is never part of the value map.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, MutableMapping, Optional, Union

from blockforge.editor.store import ValueStore

logger = logging.getLogger(__name__)

UNSAVED_DOCUMENT = "new"
EMPTY_PREVIEW_MESSAGE = "No preview available"


class Mode(str, Enum):
    EDIT = "edit"
    PREVIEW = "preview"


class PreviewState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


def storage_key(document_id: Union[int, str], position: int) -> str:
    return f"webtero_block_preview_{document_id}_{position}"


class ModeStore:
    """Mode persistence over a string key/value storage (browser localStorage)."""

    def __init__(self, storage: MutableMapping[str, str]):
        self.storage = storage

    def load(self, document_id, position) -> Mode:
        if not document_id or str(document_id) == UNSAVED_DOCUMENT:
            return Mode.EDIT
        saved = self.storage.get(storage_key(document_id, position))
        return Mode.PREVIEW if saved == "true" else Mode.EDIT

    def save(self, document_id, position, mode: Mode) -> None:
        self.storage[storage_key(document_id, position)] = "true" if mode is Mode.PREVIEW else "false"


PreviewRequest = Callable[[str, Mapping[str, Any]], Awaitable[str]]


class PreviewToggle:
    def __init__(
        self,
        block_name: str,
        store: ValueStore,
        request_preview: PreviewRequest,
        modes: ModeStore,
        *,
        document_id: Union[int, str] = UNSAVED_DOCUMENT,
        position: int = 0,
    ):
        self.block_name = block_name
        self.store = store
        self.request_preview = request_preview
        self.modes = modes
        self.document_id = document_id
        self.position = position

        self.mode = modes.load(document_id, position)
        self.state = PreviewState.IDLE
        self.html = ""
        self.error: Optional[str] = None

    @property
    def message(self) -> str:
        if self.state is PreviewState.EMPTY:
            return EMPTY_PREVIEW_MESSAGE
        if self.state is PreviewState.ERROR:
            return self.error or "Preview failed"
        return ""

    async def set_mode(self, mode: Mode) -> None:
        self.mode = Mode(mode)
        self.modes.save(self.document_id, self.position, self.mode)
        if self.mode is Mode.PREVIEW:
            await self.refresh()

    async def refresh(self) -> PreviewState:
        """Render the current values server-side. The value map is only read."""
        self.state = PreviewState.LOADING
        try:
            html = await self.request_preview(self.block_name, self.store.serialize())
        except Exception as exc:
            logger.warning("Preview of %s failed: %s", self.block_name, exc)
            self.error = str(exc) or "Preview failed"
            self.html = ""
            self.state = PreviewState.ERROR
            return self.state

        self.error = None
        self.html = html or ""
        self.state = PreviewState.READY if self.html.strip() else PreviewState.EMPTY
        return self.state
