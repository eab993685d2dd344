"""Tests for the block registry and the bundled block types."""

import json

import pytest

from blockforge.blocks.globalblock import max_depth_message
from blockforge.domain.exceptions import SchemaUnavailable
from blockforge.editor.store import Encoding
from blockforge.extensions import current_registry
from blockforge.schema.block import BlockType, RenderContext
from blockforge.schema.registry import BlockRegistry

from conftest import image


def blob(**values):
    return {"webteroOptions": json.dumps(values)}


@pytest.fixture
def registry(app):
    return current_registry()


def context(registry, **kwargs):
    return RenderContext(registry=registry, **kwargs)


class TestRegistry:
    def test_discovers_bundled_blocks(self, registry):
        assert [b.name for b in registry.all()] == [
            "wt/faq",
            "wt/gallery",
            "wt/globalblock",
            "wt/text-content",
        ]

    def test_require(self, registry):
        assert registry.require("wt/faq").title == "FAQ"

        with pytest.raises(SchemaUnavailable, match="Not a custom block"):
            registry.require("core/paragraph")
        with pytest.raises(SchemaUnavailable, match="Block not found: wt/missing"):
            registry.require("wt/missing")

    def test_first_registration_wins(self):
        class First(BlockType):
            name = "wt/sample"
            title = "First"

        class Second(BlockType):
            name = "wt/sample"
            title = "Second"

        registry = BlockRegistry()
        assert registry.register(First())
        assert not registry.register(Second())
        assert registry.get("wt/sample").title == "First"

    def test_namespace_is_required(self):
        class Foreign(BlockType):
            name = "core/sample"

        with pytest.raises(ValueError):
            BlockRegistry().register(Foreign())

    def test_default_encoding_for_undeclared_types(self):
        class Plain(BlockType):
            name = "wt/plain"

        class Declared(BlockType):
            name = "wt/declared"
            encoding = Encoding.ATTRIBUTES

        registry = BlockRegistry(default_encoding=Encoding.BLOB)
        registry.register(Plain())
        registry.register(Declared())

        assert registry.get("wt/plain").encoding is Encoding.BLOB
        assert registry.get("wt/declared").encoding is Encoding.ATTRIBUTES

    def test_unknown_type_renders_comment(self, registry):
        html = registry.render_instance("wt/nope", {})
        assert html == "<!-- Unknown block type: wt/nope -->"

    def test_attribute_declarations(self, registry):
        faq = registry.require("wt/faq").to_dict()
        text = registry.require("wt/text-content").to_dict()

        assert faq["attributes"]["faq_items"] == {"type": "array", "default": []}
        assert set(text["attributes"]) == {"webteroOptions"}
        assert text["encoding"] == "blob"


class TestFaq:
    def test_preview_of_empty_instance_shows_placeholder(self, registry):
        html = registry.render_instance("wt/faq", {}, context(registry, is_preview=True))
        assert "What is your return policy?" in html

    def test_published_empty_instance_shows_nothing(self, registry):
        html = registry.render_instance("wt/faq", {}, context(registry))
        assert html.strip() == ""

    def test_stored_rows(self, registry):
        attributes = {
            "faq_items": [
                {"heading": "Open on Sundays?", "text_content": "<p>No.</p>", "_rowId": "row_1"},
                {"heading": "", "text_content": "", "_rowId": "row_2"},
            ]
        }
        html = registry.render_instance("wt/faq", attributes, context(registry, is_preview=True))

        assert "Open on Sundays?" in html
        assert "<p>No.</p>" in html
        assert html.count("webtero-faq__item") == 1
        assert "return policy" not in html


class TestTextContent:
    def test_blob_values(self, registry):
        html = registry.render_instance("wt/text-content", blob(title="Hello", content="<p>Body</p>"))
        assert "<h2>Hello</h2>" in html
        assert '<div class="ptc"><p>Body</p></div>' in html

    def test_title_is_escaped(self, registry):
        html = registry.render_instance("wt/text-content", blob(title="<b>x</b>"))
        assert "<h2>&lt;b&gt;x&lt;/b&gt;</h2>" in html

    def test_placeholder_only_in_preview(self, registry):
        preview = registry.render_instance("wt/text-content", {}, context(registry, is_preview=True))
        published = registry.render_instance("wt/text-content", {}, context(registry))

        assert "Sample Title" in preview
        assert "Sample Title" not in published


class TestGallery:
    def test_images_in_stored_order(self, registry):
        media = {12: image(12, "Logo"), 7: image(7, "Team")}
        ctx = context(registry, resolve_media=media.get)

        html = registry.render_instance(
            "wt/gallery", {"gallery_images": [7, 99, 12], "columns": "4"}, ctx
        )

        assert "webtero-gallery--columns-4" in html
        assert html.index("/uploads/7.jpg") < html.index("/uploads/12.jpg")
        assert "99" not in html

    def test_empty_preview(self, registry):
        html = registry.render_instance("wt/gallery", {}, context(registry, is_preview=True))
        assert "No images selected" in html


class TestGlobalBlock:
    def test_embeds_published_document(self, registry):
        documents = {5: [("wt/text-content", blob(title="Footer"))]}
        ctx = context(registry, resolve_document=lambda post_id, post_types: documents.get(post_id))

        html = registry.render_instance("wt/globalblock", {"global_block_id": 5}, ctx)

        assert 'data-global-block-id="5"' in html
        assert "<h2>Footer</h2>" in html

    def test_nesting_is_bounded(self, registry):
        documents = {
            5: [("wt/globalblock", {"global_block_id": 6})],
            6: [("wt/text-content", blob(title="Too deep"))],
        }
        ctx = context(registry, resolve_document=lambda post_id, post_types: documents.get(post_id))

        html = registry.render_instance("wt/globalblock", {"global_block_id": 5}, ctx)

        assert max_depth_message(1) in html
        assert "more than 1 level deep" in html
        assert "Too deep" not in html

    def test_notice_names_configured_depth(self, registry):
        documents = {
            5: [("wt/globalblock", {"global_block_id": 6})],
            6: [("wt/globalblock", {"global_block_id": 7})],
            7: [("wt/text-content", blob(title="Too deep"))],
        }
        ctx = context(
            registry,
            max_depth=2,
            resolve_document=lambda post_id, post_types: documents.get(post_id),
        )

        html = registry.render_instance("wt/globalblock", {"global_block_id": 5}, ctx)

        assert 'data-global-block-id="6"' in html
        assert "more than 2 levels deep" in html
        assert "Too deep" not in html

    def test_missing_document_preview(self, registry):
        html = registry.render_instance(
            "wt/globalblock", {"global_block_id": 5}, context(registry, is_preview=True)
        )
        assert "Selected global block not found or is not published." in html

    def test_nothing_selected_preview(self, registry):
        html = registry.render_instance("wt/globalblock", {}, context(registry, is_preview=True))
        assert "No global block selected" in html
