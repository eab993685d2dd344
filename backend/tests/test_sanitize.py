"""Tests for settings form parsing and value sanitizing."""

import pytest

from blockforge.application.settings.sanitize import sanitize_options, sanitize_values
from blockforge.domain.exceptions import ValidationFailed
from blockforge.schema.field import parse_fields
from blockforge.schema.settings import SettingsPage
from blockforge.schema.theme_options import GLOBAL_LAYOUT
from blockforge.utils.form import parse_nested_form, split_key


@pytest.fixture
def page():
    return SettingsPage.from_layout("", "General Options", GLOBAL_LAYOUT)


class TestSanitize:
    def test_undeclared_keys_are_dropped(self, page):
        clean = sanitize_options(page, {"text_color": "#000000", "favourite_food": "soup"})
        assert clean == {"text_color": "#000000"}

    def test_values_are_coerced(self, page):
        clean = sanitize_options(page, {
            "text_color": "#ABCDEF",
            "base_font_size": "18",
            "disable_comments": "0",
            "loaded_font_families": ["system"],
        })
        assert clean == {
            "text_color": "#abcdef",
            "base_font_size": 18,
            "disable_comments": False,
            "loaded_font_families": ["system"],
        }

    def test_all_rejections_are_reported(self, page):
        with pytest.raises(ValidationFailed) as exc:
            sanitize_options(page, {"base_font_size": "30", "text_color": "red", "primary_color": "#123456"})

        assert exc.value.errors == {
            "base_font_size": "Must be at most 24",
            "text_color": "Not a hex color: 'red'",
        }

    def test_unsupported_type_kept_as_text(self, page):
        clean = sanitize_options(page, {"custom_css": "body { color: red; }"})
        assert clean == {"custom_css": "body { color: red; }"}

    def test_repeater_rows(self):
        fields = parse_fields([
            {
                "id": "custom_colors",
                "type": "repeater",
                "fields": [{"id": "name", "type": "text"}, {"id": "value", "type": "color"}],
            }
        ])
        clean = sanitize_values(fields, {
            "custom_colors": {"0": {"name": "Brand", "value": "#FF0000", "_rowId": "row_a"}},
        })
        assert clean["custom_colors"][0]["value"] == "#ff0000"
        assert clean["custom_colors"][0]["_rowId"] == "row_a"


class TestNestedForm:
    def test_split_key(self):
        assert split_key("webtero_options[custom_colors][0][name]") == (
            "webtero_options",
            ["custom_colors", "0", "name"],
        )
        assert split_key("plain") == ("plain", [])

    def test_rebuilds_nested_values(self):
        data = parse_nested_form([
            ("webtero_action", "save_options"),
            ("webtero_options[text_color]", "#000000"),
            ("webtero_options[custom_colors][0][name]", "Brand"),
            ("webtero_options[custom_colors][0][value]", "#ff0000"),
            ("webtero_options[custom_colors][1][name]", "Accent"),
            ("webtero_options[loaded_font_families][]", "system"),
            ("webtero_options[loaded_font_families][]", "serif"),
        ], "webtero_options")

        assert data == {
            "text_color": "#000000",
            "custom_colors": {"0": {"name": "Brand", "value": "#ff0000"}, "1": {"name": "Accent"}},
            "loaded_font_families": ["system", "serif"],
        }

    def test_later_value_wins(self):
        data = parse_nested_form([
            ("webtero_options[disable_comments]", "0"),
            ("webtero_options[disable_comments]", "1"),
        ], "webtero_options")
        assert data == {"disable_comments": "1"}

    def test_other_roots_are_ignored(self):
        assert parse_nested_form([("other[x]", "1"), ("webtero_options", "2")], "webtero_options") == {}
