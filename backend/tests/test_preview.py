"""Tests for the preview/edit toggle."""

import pytest

from blockforge.editor.preview import (
    EMPTY_PREVIEW_MESSAGE,
    Mode,
    ModeStore,
    PreviewState,
    PreviewToggle,
    storage_key,
)
from blockforge.editor.store import ValueStore


class RecordingPreview:
    def __init__(self, html="<div>rendered</div>", error=None):
        self.html = html
        self.error = error
        self.requests = []

    async def __call__(self, block_name, values):
        self.requests.append((block_name, dict(values)))
        if self.error is not None:
            raise self.error
        return self.html


def make_toggle(storage, request_preview, *, document_id=12, position=3, values=None):
    store = ValueStore(values=values or {"title": "Hello"})
    toggle = PreviewToggle(
        "wt/text-content",
        store,
        request_preview,
        ModeStore(storage),
        document_id=document_id,
        position=position,
    )
    return toggle, store


class TestModeStore:
    def test_defaults_to_edit(self):
        assert ModeStore({}).load(12, 0) is Mode.EDIT

    def test_key_is_document_and_position(self):
        storage = {}
        ModeStore(storage).save(12, 3, Mode.PREVIEW)

        assert storage == {storage_key(12, 3): "true"}
        assert storage_key(12, 3) == "webtero_block_preview_12_3"
        assert ModeStore(storage).load(12, 3) is Mode.PREVIEW
        assert ModeStore(storage).load(12, 4) is Mode.EDIT
        assert ModeStore(storage).load(13, 3) is Mode.EDIT

    def test_unsaved_documents_always_edit(self):
        storage = {storage_key("new", 0): "true"}
        assert ModeStore(storage).load("new", 0) is Mode.EDIT


class TestToggle:
    @pytest.mark.asyncio
    async def test_preview_renders_current_values(self):
        storage = {}
        preview = RecordingPreview()
        toggle, store = make_toggle(storage, preview)
        before = store.values

        await toggle.set_mode(Mode.PREVIEW)

        assert toggle.state is PreviewState.READY
        assert toggle.html == "<div>rendered</div>"
        assert preview.requests == [("wt/text-content", {"title": "Hello"})]
        assert store.values is before
        assert not store.dirty
        assert storage[storage_key(12, 3)] == "true"

    @pytest.mark.asyncio
    async def test_mode_survives_reload(self):
        storage = {}
        toggle, _ = make_toggle(storage, RecordingPreview())
        await toggle.set_mode(Mode.PREVIEW)

        reloaded, _ = make_toggle(storage, RecordingPreview())
        other_position, _ = make_toggle(storage, RecordingPreview(), position=4)

        assert reloaded.mode is Mode.PREVIEW
        assert other_position.mode is Mode.EDIT

    @pytest.mark.asyncio
    async def test_back_to_edit_does_not_request(self):
        storage = {}
        preview = RecordingPreview()
        toggle, _ = make_toggle(storage, preview)

        await toggle.set_mode(Mode.EDIT)

        assert preview.requests == []
        assert storage[storage_key(12, 3)] == "false"

    @pytest.mark.asyncio
    async def test_empty_output_has_empty_state(self):
        toggle, _ = make_toggle({}, RecordingPreview(html="  \n"))
        await toggle.set_mode(Mode.PREVIEW)

        assert toggle.state is PreviewState.EMPTY
        assert toggle.message == EMPTY_PREVIEW_MESSAGE

    @pytest.mark.asyncio
    async def test_failure_has_error_state(self):
        toggle, _ = make_toggle({}, RecordingPreview(error=RuntimeError("Server returned 500")))
        await toggle.set_mode(Mode.PREVIEW)

        assert toggle.state is PreviewState.ERROR
        assert toggle.message == "Server returned 500"
        assert toggle.html == ""
