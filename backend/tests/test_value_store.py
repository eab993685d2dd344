"""Tests for the per-instance value store and its two encodings."""

import json

import pytest

from blockforge.editor.store import (
    BLOB_KEY,
    Encoding,
    ValueStore,
    decode_blob,
    encode_blob,
)
from blockforge.schema.field import parse_fields

FIELDS = parse_fields([
    {"id": "title", "type": "text", "default": ""},
    {"id": "content", "type": "rich_text", "default": ""},
    {"id": "columns", "type": "select", "default": "3", "options": {"2": "2", "3": "3"}},
    {
        "id": "items",
        "type": "repeater",
        "default": [],
        "fields": [{"id": "label", "type": "text"}],
    },
])

SAMPLE = {
    "title": "Hello",
    "content": "<p>Some <strong>text</strong></p>",
    "columns": "2",
    "gallery": [5, 7, 2],
    "items": [
        {"label": "First", "_rowId": "row_a", "_width": 50},
        {"label": "Second", "_rowId": "row_b", "_width": 100},
    ],
}


class TestDecodeBlob:
    def test_valid_blob_keeps_raw(self):
        decoded = decode_blob('{"a":"b"}')
        assert decoded.values == {"a": "b"}
        assert decoded.raw == '{"a":"b"}'
        assert not decoded.malformed

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '"text"', 42])
    def test_malformed_blob_is_empty(self, raw):
        decoded = decode_blob(raw)
        assert decoded.values == {}
        assert decoded.malformed

    def test_absent_blob(self):
        assert decode_blob(None).values == {}
        assert not decode_blob("").malformed

    def test_encode_keeps_unicode(self):
        assert encode_blob({"title": "Grüße"}) == '{"title": "Grüße"}'


class TestReads:
    def test_get_falls_back_to_default(self):
        store = ValueStore(FIELDS, values={"title": "Hello"})
        assert store.get("title") == "Hello"
        assert store.get("content") == ""
        assert store.get("columns") == "3"
        assert store.get("unknown", "fallback") == "fallback"

    def test_resolved_has_every_field(self):
        store = ValueStore(FIELDS, values={"title": "Hello", "extra": 1})
        assert store.resolved() == {
            "title": "Hello",
            "content": "",
            "columns": "3",
            "items": [],
            "extra": 1,
        }

    def test_values_are_read_only(self):
        store = ValueStore(FIELDS, values={"title": "Hello"})
        with pytest.raises(TypeError):
            store.values["title"] = "changed"


class TestSet:
    def test_merges_partial_map(self):
        store = ValueStore(FIELDS, values={"title": "Hello", "columns": "2"})
        store.set({"columns": "3", "content": "<p>x</p>"})
        assert dict(store.values) == {"title": "Hello", "columns": "3", "content": "<p>x</p>"}
        assert store.dirty

    def test_listeners_see_whole_merge(self):
        store = ValueStore(FIELDS, values={"title": "a", "content": "a"})
        seen = []
        store.subscribe(lambda new, old: seen.append((dict(new), dict(old))))

        store.set({"title": "b", "content": "b"})

        assert seen == [({"title": "b", "content": "b"}, {"title": "a", "content": "a"})]

    def test_previous_view_is_not_modified(self):
        store = ValueStore(FIELDS, values={"title": "a"})
        before = store.values
        store.set({"title": "b"})
        assert before["title"] == "a"
        assert store.values["title"] == "b"

    def test_empty_partial_does_nothing(self):
        store = ValueStore(FIELDS)
        calls = []
        store.subscribe(lambda new, old: calls.append(new))
        store.set({})
        assert calls == []
        assert not store.dirty

    def test_unsubscribe(self):
        store = ValueStore(FIELDS)
        calls = []
        unsubscribe = store.subscribe(lambda new, old: calls.append(new))
        unsubscribe()
        store.set({"title": "x"})
        assert calls == []

    def test_stored_values_are_copies(self):
        rows = [{"label": "one"}]
        store = ValueStore(FIELDS)
        store.set({"items": rows})
        rows[0]["label"] = "changed"
        assert store.get("items") == [{"label": "one"}]


class TestAttributeEncoding:
    def test_one_key_per_field(self):
        store = ValueStore(FIELDS, Encoding.ATTRIBUTES, {"title": "Hello"})
        assert store.serialize() == {"title": "Hello"}

    def test_host_keys_are_not_values(self):
        store = ValueStore.from_persisted(
            FIELDS, Encoding.ATTRIBUTES, {"title": "Hello", "className": "wide", "anchor": "intro"}
        )
        assert dict(store.values) == {"title": "Hello"}

    def test_reads_legacy_blob_under_per_key_values(self):
        store = ValueStore.from_persisted(
            FIELDS,
            Encoding.ATTRIBUTES,
            {BLOB_KEY: '{"title": "Old", "content": "<p>old</p>"}', "title": "New"},
        )
        assert dict(store.values) == {"title": "New", "content": "<p>old</p>"}
        # Written back one key per field only
        assert store.serialize() == {"title": "New", "content": "<p>old</p>"}

    def test_round_trip(self):
        store = ValueStore(FIELDS, Encoding.ATTRIBUTES, SAMPLE)
        assert store.deserialize(store.serialize()) == SAMPLE


class TestBlobEncoding:
    def test_legacy_blob_merges_new_values(self):
        store = ValueStore.from_persisted(FIELDS, Encoding.BLOB, '{"a":"b"}')
        assert dict(store.values) == {"a": "b"}

        store.set({"c": "d"})
        serialized = store.serialize()

        assert list(serialized) == [BLOB_KEY]
        assert json.loads(serialized[BLOB_KEY]) == {"a": "b", "c": "d"}

    def test_raw_string_is_exposed(self):
        store = ValueStore.from_persisted(FIELDS, Encoding.BLOB, {BLOB_KEY: '{"title":"Hi"}'})
        assert store.raw == '{"title":"Hi"}'
        assert store.get("title") == "Hi"

    def test_settings_key_is_read(self):
        store = ValueStore.from_persisted(FIELDS, Encoding.BLOB, {"webteroSettings": '{"title":"Hi"}'})
        assert store.get("title") == "Hi"

    def test_malformed_blob_loads_empty(self, caplog):
        store = ValueStore.from_persisted(
            FIELDS, Encoding.BLOB, {BLOB_KEY: "{not json"}, instance_id="doc:1"
        )
        assert dict(store.values) == {}
        assert store.malformed
        assert store.raw == "{not json"
        assert not store.dirty
        assert "treating as empty" in caplog.text

    def test_deserialize_never_raises(self):
        store = ValueStore(FIELDS, Encoding.BLOB)
        assert store.deserialize("{oops") == {}
        assert store.deserialize(None) == {}
        assert store.deserialize(12) == {}

    def test_round_trip(self):
        store = ValueStore(FIELDS, Encoding.BLOB, SAMPLE)
        assert store.deserialize(store.serialize()) == SAMPLE
