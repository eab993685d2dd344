"""
Block editor session.

Owns everything one block instance needs while it is open: the value store,
repeater engines, the auto-save coordinator (modal host), asset views, rich
text editors and the preview toggle. Nothing here is shared between
instances.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, MutableMapping, Optional, Sequence, Union

from markupsafe import Markup

from blockforge.domain.exceptions import SchemaUnavailable
from blockforge.editor.autosave import AutosaveCoordinator, Scheduler
from blockforge.editor.clients import PreviewClient, SchemaClient
from blockforge.editor.preview import Mode, ModeStore, PreviewState, PreviewToggle, UNSAVED_DOCUMENT
from blockforge.editor.repeater import RepeaterEngine, new_row_id
from blockforge.editor.store import ValueStore
from blockforge.rendering.assets import (
    FIELD_ASSET_KINDS,
    AssetLookup,
    AssetMetadata,
    AssetView,
    AssetViews,
    LatestRequestGate,
)
from blockforge.rendering.hosts import HostContext
from blockforge.rendering.renderer import FieldRenderer, RenderedForm
from blockforge.rendering.rich_text import EditorFactory, RichTextBinding
from blockforge.rendering.widgets import move_image, remove_image, widget_for
from blockforge.schema.field import FieldSchema, FieldType, find_field

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load block fields"
NO_FIELDS_MESSAGE = "No fields configured"


class SessionState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


class BlockEditorSession:
    def __init__(
        self,
        block_name: str,
        *,
        schema_client: SchemaClient,
        preview_client: PreviewClient,
        asset_lookup: AssetLookup,
        scheduler: Scheduler,
        storage: MutableMapping[str, str],
        persisted: Any = None,
        document_id: Union[int, str] = UNSAVED_DOCUMENT,
        position: int = 0,
        host: HostContext = HostContext.EDITOR,
        debounce: float = 0.5,
        saved_display: float = 2.0,
        id_factory: Callable[[], str] = new_row_id,
    ):
        self.block_name = block_name
        self.schema_client = schema_client
        self.preview_client = preview_client
        self.scheduler = scheduler
        self.storage = storage
        self.persisted = persisted
        self.document_id = document_id
        self.position = position
        self.host = HostContext(host)
        self.debounce = debounce
        self.saved_display = saved_display
        self.id_factory = id_factory

        self.state = SessionState.LOADING
        self.error: Optional[str] = None
        self.store: Optional[ValueStore] = None
        self.preview: Optional[PreviewToggle] = None
        self.autosave: Optional[AutosaveCoordinator] = None
        self.assets = AssetViews(asset_lookup)
        self.search_gate = LatestRequestGate()
        self.resaved = False

        self._repeaters: Dict[str, RepeaterEngine] = {}
        self._rich_text: Dict[str, RichTextBinding] = {}
        # Raw input currently held by autosaving inputs, read at flush time
        self._inputs: Dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @property
    def fields(self) -> Sequence[FieldSchema]:
        return self.store.fields if self.store is not None else ()

    async def load(self) -> SessionState:
        self.state = SessionState.LOADING
        try:
            schema = await self.schema_client.fetch(self.block_name)
        except SchemaUnavailable as exc:
            logger.warning("Schema for %s unavailable: %s", self.block_name, exc)
            return self._fail(str(exc) or LOAD_FAILED_MESSAGE)
        except Exception:
            logger.exception("Schema fetch for %s failed", self.block_name)
            return self._fail(LOAD_FAILED_MESSAGE)

        self.store = ValueStore.from_persisted(
            schema.fields,
            schema.encoding,
            self.persisted,
            instance_id=f"{self.document_id}:{self.position}",
        )
        self.preview = PreviewToggle(
            self.block_name,
            self.store,
            self.preview_client.render,
            ModeStore(self.storage),
            document_id=self.document_id,
            position=self.position,
        )
        if self.host is HostContext.MODAL:
            self.autosave = AutosaveCoordinator(
                self.store,
                self.scheduler,
                debounce=self.debounce,
                saved_display=self.saved_display,
            )

        # Legacy rows get ids on first load; that change must be saved back
        for schema_field in schema.fields:
            if schema_field.type == FieldType.REPEATER.value:
                if self.repeater(schema_field.id).ensure_row_ids():
                    self.resaved = True

        await self.resolve_assets()

        self.state = SessionState.READY if schema.fields else SessionState.EMPTY
        if self.preview.mode is Mode.PREVIEW:
            await self.preview.refresh()
        return self.state

    def _fail(self, message: str) -> SessionState:
        self.error = message
        self.state = SessionState.ERROR
        return self.state

    async def resolve_assets(self) -> None:
        """Look up display metadata for every id the current values reference."""
        for schema_field in self.fields:
            kind = FIELD_ASSET_KINDS.get(schema_field.type)
            if kind is None:
                continue
            value = self.store.get(schema_field.id)
            ids = value if isinstance(value, list) else [value]
            for asset_id in ids:
                if asset_id:
                    await self.assets.select(
                        f"{schema_field.id}:{asset_id}",
                        kind,
                        int(asset_id),
                        types=self._lookup_filter(schema_field),
                    )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def renderer(self) -> FieldRenderer:
        collapsed = {field_id: engine.collapsed for field_id, engine in self._repeaters.items()}
        return FieldRenderer(assets=self.assets.get, collapsed=collapsed)

    def form(self) -> RenderedForm:
        if self.store is None:
            raise RuntimeError("Session is not loaded")
        return self.renderer().render_form(self.store, self.host)

    def render(self) -> Markup:
        if self.state is SessionState.LOADING:
            return Markup('<div class="webtero-block-loading"><span class="spinner"></span><p>Loading block...</p></div>')
        if self.state is SessionState.ERROR:
            return Markup('<div class="webtero-block-error"><strong>Error: </strong>{}</div>').format(self.error)

        if self.preview.mode is Mode.PREVIEW:
            if self.preview.state is PreviewState.READY:
                return Markup('<div class="webtero-block-preview">{}</div>').format(Markup(self.preview.html))
            return Markup('<div class="webtero-block-preview webtero-block-preview--{}"><p>{}</p></div>').format(
                self.preview.state.value, self.preview.message or "Loading preview..."
            )

        if self.state is SessionState.EMPTY:
            return Markup("<p>{}</p>").format(NO_FIELDS_MESSAGE)

        status = Markup("")
        if self.autosave is not None and self.autosave.label:
            status = Markup('<span class="webtero-autosave-status is-{}">{}</span>').format(
                self.autosave.status.value, self.autosave.label
            )
        return Markup('<div class="webtero-block-fields">{}{}</div>').format(status, self.form().html)

    # ------------------------------------------------------------------
    # Changes
    # ------------------------------------------------------------------
    def change(self, field_id: str, raw: Any) -> bool:
        """Apply user input to one top-level field."""
        schema_field = self._field(field_id)
        if self.autosave is not None:
            return self._input(schema_field, raw)

        rendered = self.renderer().render(schema_field, self.store.get(field_id), self.host, self.store.set)
        return rendered.change(raw)

    def _input(self, schema_field: FieldSchema, raw: Any) -> bool:
        widget = widget_for(schema_field)
        try:
            widget.coerce(schema_field, raw)
        except ValueError as exc:
            logger.debug("Rejected input for %s: %s", schema_field.id, exc)
            return False

        field_id = schema_field.id
        if field_id not in self._inputs:
            self.autosave.observe(field_id, lambda: widget.coerce(schema_field, self._inputs[field_id]))
        self._inputs[field_id] = raw
        self.autosave.notify_change(field_id)
        return True

    def detach_input(self, field_id: str) -> None:
        """The input left the form; a pending flush skips it."""
        self._inputs.pop(field_id, None)

    def repeater(self, field_id: str) -> RepeaterEngine:
        engine = self._repeaters.get(field_id)
        if engine is None:
            engine = RepeaterEngine(self._field(field_id), self.store, id_factory=self.id_factory)
            self._repeaters[field_id] = engine
        return engine

    async def select_asset(self, field_id: str, asset_id: Any) -> Optional[AssetView]:
        """Store the chosen id right away, then resolve its display metadata."""
        schema_field = self._field(field_id)
        kind = FIELD_ASSET_KINDS.get(schema_field.type)
        if kind is None or schema_field.type == FieldType.GALLERY.value:
            raise ValueError(f"Field '{field_id}' does not hold a single asset id")

        value = widget_for(schema_field).coerce(schema_field, asset_id)
        self.store.set({field_id: value})
        if not value:
            return None
        return await self.assets.select(field_id, kind, value, types=self._lookup_filter(schema_field))

    async def add_images(self, field_id: str, image_ids: Sequence[int]) -> List[int]:
        schema_field = self._field(field_id)
        ids = list(self.store.get(field_id) or [])
        added = widget_for(schema_field).coerce(schema_field, list(image_ids))
        ids.extend(added)
        self.store.set({field_id: ids})
        for image_id in dict.fromkeys(added):
            await self.assets.select(f"{field_id}:{image_id}", FIELD_ASSET_KINDS["gallery"], image_id)
        return ids

    def remove_image(self, field_id: str, index: int) -> List[int]:
        ids = remove_image(self.store.get(field_id) or [], index)
        self.store.set({field_id: ids})
        return ids

    def move_image(self, field_id: str, index: int, direction: str) -> List[int]:
        ids = move_image(self.store.get(field_id) or [], index, direction)
        self.store.set({field_id: ids})
        return ids

    async def search_posts(self, field_id: str, query: str, limit: int = 20) -> Optional[List[AssetMetadata]]:
        """Autocomplete for a post_object field. None means a newer search superseded this one."""
        schema_field = self._field(field_id)
        result = await self.search_gate.run(
            field_id,
            self.assets.lookup.search(query, post_types=schema_field.post_types, limit=limit),
        )
        return None if result.stale else result.value

    def mount_rich_text(self, field_id: str, factory: EditorFactory) -> RichTextBinding:
        schema_field = self._field(field_id)
        binding = self._rich_text.get(field_id)
        if binding is None:
            if self.autosave is not None:
                on_change = lambda partial: self._input(schema_field, partial[field_id])
            else:
                on_change = self.store.set
            binding = RichTextBinding(field_id, factory, on_change)
            self._rich_text[field_id] = binding

        binding.mount(f"tiptap-editor-{field_id}", self.store.get(field_id))
        return binding

    def unmount_rich_text(self, field_id: str) -> bool:
        binding = self._rich_text.get(field_id)
        return binding.unmount() if binding is not None else False

    async def set_mode(self, mode: Mode) -> None:
        await self.preview.set_mode(mode)

    def close(self) -> None:
        if self.autosave is not None:
            self.autosave.close()
        for binding in self._rich_text.values():
            binding.unmount()

    # ------------------------------------------------------------------
    def _field(self, field_id: str) -> FieldSchema:
        schema_field = find_field(self.fields, field_id)
        if schema_field is None:
            raise KeyError(f"Unknown field: {field_id}")
        return schema_field

    @staticmethod
    def _lookup_filter(schema_field: FieldSchema) -> Sequence[str]:
        if schema_field.type == FieldType.POST_OBJECT.value:
            return schema_field.post_types
        return schema_field.allowed_types
