"""Field layouts of the built-in settings instances."""
from typing import Iterable, List

from blockforge.schema.settings import SettingsPage

FONT_OPTIONS = {
    "system": "System UI",
    "inter": "Inter",
    "roboto": "Roboto",
    "open-sans": "Open Sans",
    "lora": "Lora",
    "playfair-display": "Playfair Display",
}

GLOBAL_LAYOUT = {
    "colors": {
        "label": "Colors scheme",
        "fields": [
            {"type": "color", "id": "site_background_color", "label": "Site background", "default": "#ffffff", "width": 50},
            {"type": "color", "id": "text_color", "label": "Text color", "default": "#1d2327", "width": 50},
            {"type": "color", "id": "primary_color", "label": "Primary color", "default": "#2271b1", "width": 50},
            {"type": "color", "id": "primary_color_contrast", "label": "Primary color contrast", "default": "#ffffff", "width": 50},
            {"type": "color", "id": "secondary_color", "label": "Secondary color", "default": "#50575e", "width": 50},
            {"type": "color", "id": "secondary_color_contrast", "label": "Secondary color contrast", "default": "#ffffff", "width": 50},
            {
                "type": "repeater",
                "id": "custom_colors",
                "label": "Custom colors",
                "default": [],
                "fields": [
                    {"type": "text", "id": "name", "label": "Name", "width": 50},
                    {"type": "color", "id": "value", "label": "Color", "width": 50},
                ],
            },
        ],
    },
    "header": {
        "label": "Header",
        "fields": [
            {
                "type": "button_group",
                "id": "header_position",
                "label": "Header position",
                "default": "absolute",
                "options": {"absolute": "Absolute", "fixed": "Fixed"},
                "width": 50,
            },
            {"type": "toggle", "id": "overlap_first_block", "label": "Overlap the first block", "default": False, "width": 50},
            {
                "type": "button_group",
                "id": "header_size",
                "label": "Header size",
                "default": "normal",
                "options": {"small": "Small", "normal": "Normal", "large": "Large"},
                "width": 50,
            },
            {
                "type": "button_group",
                "id": "header_color_scheme",
                "label": "Header color scheme",
                "default": "default",
                "options": {"default": "Default", "primary": "Primary", "secondary": "Secondary", "custom": "Custom"},
                "width": 50,
            },
            {"type": "color", "id": "header_custom_text_color", "label": "Text color", "width": 50, "metabox": "custom_colors"},
            {"type": "color", "id": "header_custom_background_color", "label": "Background color", "width": 50, "metabox": "custom_colors"},
        ],
    },
    "buttons": {
        "label": "Buttons",
        "fields": [
            {"type": "range", "id": "button_border_radius", "label": "Border radius", "default": 60, "min": 0, "max": 100, "step": 1, "width": 50},
            {"type": "range", "id": "button_font_size", "label": "Font size", "default": 16, "min": 10, "max": 30, "step": 1, "width": 50},
            {
                "type": "enhanced_select",
                "id": "button_font_family",
                "label": "Font family",
                "default": "system",
                "options": FONT_OPTIONS,
                "placeholder": "Select a font",
            },
        ],
    },
    "typography": {
        "label": "Typography",
        "fields": [
            {
                "type": "enhanced_select",
                "id": "loaded_font_families",
                "label": "Loaded font families",
                "description": "Fonts served locally to every page",
                "multiple": True,
                "default": ["system"],
                "options": FONT_OPTIONS,
            },
            {"type": "number", "id": "base_font_size", "label": "Base font size", "default": 16, "min": 12, "max": 24, "width": 50},
            {
                "type": "radio",
                "id": "heading_weight",
                "label": "Heading weight",
                "default": "600",
                "options": {"400": "Regular", "600": "Semi bold", "700": "Bold"},
                "width": 50,
            },
        ],
    },
    "advanced": {
        "label": "Advanced",
        "fields": [
            {"type": "checkbox", "id": "disable_comments", "label": "Disable comments", "default": True},
            {"type": "textarea", "id": "head_scripts", "label": "Head scripts", "rows": 6, "description": "Plain text added to the document head"},
            {"type": "code", "id": "custom_css", "label": "Custom CSS"},
        ],
    },
}

LANGUAGE_LAYOUT = {
    "header": {
        "label": "Header",
        "fields": [
            {"type": "media", "id": "logo", "label": "Logo", "description": "Upload your site logo", "allowed_types": ["image"]},
        ],
    },
    "special-header-message": {
        "label": "Special header message",
        "fields": [
            {"type": "tiptap", "id": "special_header_message", "label": "Message"},
        ],
    },
    "scroll-top-button": {
        "label": "Scroll top button",
        "fields": [
            {
                "type": "button_group",
                "id": "scroll_top_button_type",
                "label": "Scroll top button",
                "default": "disable",
                "options": {"disable": "Disable", "image": "Image", "text": "Text"},
            },
            {"type": "media", "id": "scroll_top_button_image", "label": "Button image", "width": 50},
            {"type": "text", "id": "scroll_top_button_text", "label": "Button text", "width": 50},
        ],
    },
    "footer": {
        "label": "Footer",
        "fields": [
            {
                "type": "post_object",
                "id": "footer_global_block",
                "label": "Footer global block",
                "post_types": "global_blocks",
            },
            {"type": "file", "id": "footer_terms_file", "label": "Terms document", "allowed_types": ["application"]},
        ],
    },
}


def default_settings_pages(instances: Iterable[str]) -> List[SettingsPage]:
    pages = [SettingsPage.from_layout("", "General Options", GLOBAL_LAYOUT, kind="global")]
    for instance in instances:
        if not instance:
            continue
        pages.append(SettingsPage.from_layout(instance, instance, LANGUAGE_LAYOUT, kind="language"))
    return pages
