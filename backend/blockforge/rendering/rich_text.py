"""
Embedded rich text editor lifecycle.

The formatted text is opaque: it is handed to the editor on mount and every
serialized update the editor reports is forwarded unchanged. Each mount
constructs one editor and each unmount destroys it exactly once.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class TextEditor(Protocol):
    def set_content(self, html: str) -> None: ...

    def destroy(self) -> None: ...


EditorFactory = Callable[[str, str, Callable[[str], None]], TextEditor]


class RichTextBinding:
    def __init__(
        self,
        field_id: str,
        factory: EditorFactory,
        on_change: Callable[[Any], Any],
    ):
        self.field_id = field_id
        self.factory = factory
        self.on_change = on_change
        self.editor: Optional[TextEditor] = None
        self.container_id: Optional[str] = None
        self.mounts = 0

    @property
    def mounted(self) -> bool:
        return self.editor is not None

    def mount(self, container_id: str, content: str) -> TextEditor:
        if self.editor is not None:
            # Remounting into a new container replaces the old editor
            self.unmount()

        self.container_id = container_id
        self.editor = self.factory(container_id, content or "", self._handle_update)
        self.mounts += 1
        return self.editor

    def unmount(self) -> bool:
        editor, self.editor = self.editor, None
        if editor is None:
            return False
        editor.destroy()
        self.container_id = None
        return True

    def set_content(self, content: str) -> None:
        """Push a value change made elsewhere into the mounted editor."""
        if self.editor is not None:
            self.editor.set_content(content or "")

    def _handle_update(self, html: str) -> None:
        if self.editor is None:
            logger.debug("Dropping update for unmounted editor %s", self.field_id)
            return
        self.on_change({self.field_id: html})
