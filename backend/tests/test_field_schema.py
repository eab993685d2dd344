"""Tests for field schema parsing and authoring rules."""

import pytest

from blockforge.domain.exceptions import InvariantViolation
from blockforge.schema.field import (
    NO_DEFAULT,
    FieldSchema,
    FieldType,
    parse_fields,
)
from blockforge.schema.settings import SettingsPage


class TestFromDict:
    def test_tiptap_is_rich_text(self):
        schema = FieldSchema.from_dict({"id": "body", "type": "tiptap"})
        assert schema.type == FieldType.RICH_TEXT.value

    def test_help_becomes_description(self):
        schema = FieldSchema.from_dict({"id": "title", "help": "Shown above the content"})
        assert schema.description == "Shown above the content"
        assert schema.type == "text"

    def test_post_types_from_comma_list(self):
        schema = FieldSchema.from_dict({"id": "ref", "type": "post_object", "post_types": "page, global_blocks"})
        assert schema.post_types == ("page", "global_blocks")

    def test_missing_default_is_not_none(self):
        schema = FieldSchema.from_dict({"id": "title"})
        assert schema.default is NO_DEFAULT
        assert not schema.has_default

        explicit = FieldSchema.from_dict({"id": "title", "default": None})
        assert explicit.has_default

    def test_options_keep_authoring_order(self):
        schema = FieldSchema.from_dict({
            "id": "size",
            "type": "select",
            "options": {"l": "Large", "s": "Small", "m": "Medium"},
        })
        assert [value for value, _ in schema.option_items()] == ["l", "s", "m"]
        assert list(schema.to_dict()["options"]) == ["l", "s", "m"]


class TestInitialValue:
    @pytest.mark.parametrize(
        "field_type, expected",
        [
            ("text", ""),
            ("rich_text", ""),
            ("number", 0),
            ("range", 0),
            ("checkbox", False),
            ("toggle", False),
            ("media", 0),
            ("post_object", 0),
            ("gallery", []),
            ("repeater", []),
        ],
    )
    def test_type_empty_value(self, field_type, expected):
        assert FieldSchema(id="f", type=field_type).initial_value() == expected

    def test_multiple_enhanced_select_is_a_list(self):
        schema = FieldSchema(id="fonts", type="enhanced_select", multiple=True)
        assert schema.initial_value() == []

    def test_default_is_copied(self):
        schema = FieldSchema(id="ids", type="gallery", default=[1, 2])
        value = schema.initial_value()
        value.append(3)
        assert schema.default == [1, 2]


class TestParseFields:
    def test_duplicate_top_level_id(self):
        with pytest.raises(InvariantViolation, match="Duplicate field id 'title'"):
            parse_fields([{"id": "title"}, {"id": "title", "type": "textarea"}])

    def test_duplicate_inside_repeater(self):
        with pytest.raises(InvariantViolation, match="repeater 'items'"):
            parse_fields([
                {"id": "items", "type": "repeater", "fields": [{"id": "a"}, {"id": "a"}]},
            ])

    def test_ids_are_unique_per_scope(self):
        fields = parse_fields([
            {"id": "name"},
            {"id": "items", "type": "repeater", "fields": [{"id": "name"}]},
        ])
        assert [f.id for f in fields] == ["name", "items"]
        assert fields[1].sub_field("name") is not None

    def test_width_must_be_allowed(self):
        with pytest.raises(InvariantViolation, match="width 40"):
            parse_fields([{"id": "title", "width": 40}])

    def test_repeater_default_must_be_rows(self):
        with pytest.raises(InvariantViolation):
            parse_fields([{"id": "items", "type": "repeater", "default": "nope"}])
        with pytest.raises(InvariantViolation):
            parse_fields([{"id": "items", "type": "repeater", "default": ["a"]}])

    def test_repeater_empty_map_default_is_accepted(self):
        (schema,) = parse_fields([{"id": "items", "type": "repeater", "default": {}}])
        assert schema.initial_value() == []

    def test_boolean_default_shape(self):
        with pytest.raises(InvariantViolation):
            parse_fields([{"id": "flag", "type": "checkbox", "default": "yes"}])

    def test_only_repeaters_have_sub_fields(self):
        with pytest.raises(InvariantViolation, match="Only repeaters"):
            parse_fields([{"id": "title", "fields": [{"id": "x"}]}])

    def test_unknown_types_parse(self):
        (schema,) = parse_fields([{"id": "css", "type": "code"}])
        assert not schema.is_known_type


class TestAttributeDeclarations:
    @pytest.mark.parametrize(
        "field_type, expected",
        [
            ("number", "number"),
            ("toggle", "boolean"),
            ("gallery", "array"),
            ("repeater", "array"),
            ("media", "string"),
            ("select", "string"),
        ],
    )
    def test_attribute_type(self, field_type, expected):
        assert FieldSchema(id="f", type=field_type).attribute_type() == expected


class TestSettingsPage:
    def test_ids_unique_across_tabs(self):
        with pytest.raises(InvariantViolation, match="settings 'global'"):
            SettingsPage.from_layout("", "Options", {
                "one": {"fields": [{"id": "color", "type": "color"}]},
                "two": {"fields": [{"id": "color", "type": "text"}]},
            })

    def test_tabs_keep_order_and_group_metaboxes(self):
        page = SettingsPage.from_layout("", "Options", {
            "b": {"label": "B", "fields": [
                {"id": "x"},
                {"id": "y", "metabox": "extra"},
                {"id": "z"},
            ]},
            "a": {"label": "A", "fields": []},
        })
        assert [tab.id for tab in page.tabs] == ["b", "a"]
        assert page.default_tab == "b"

        groups = page.tab("b").metaboxes()
        assert [(name, [f.id for f in fields]) for name, fields in groups] == [
            ("default", ["x", "z"]),
            ("extra", ["y"]),
        ]

    def test_field_type_finds_sub_fields(self):
        page = SettingsPage.from_layout("", "Options", {
            "colors": {"fields": [
                {"id": "custom", "type": "repeater", "fields": [{"id": "value", "type": "color"}]},
            ]},
        })
        assert page.field_type("custom") == "repeater"
        assert page.field_type("value") == "color"
        assert page.field_type("missing") is None
