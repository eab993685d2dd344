"""
Declarative field schemas.

A field schema describes one form input: its type tag, identifier, label,
default and constraints. Schemas are authored as plain dicts next to block
types and settings pages, parsed once at startup and never mutated.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple


class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    RANGE = "range"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    TOGGLE = "toggle"
    BUTTON_GROUP = "button_group"
    COLOR = "color"
    SELECT = "select"
    ENHANCED_SELECT = "enhanced_select"
    MEDIA = "media"
    FILE = "file"
    GALLERY = "gallery"
    POST_OBJECT = "post_object"
    RICH_TEXT = "rich_text"
    REPEATER = "repeater"


KNOWN_TYPES = frozenset(t.value for t in FieldType)

# "tiptap" is the rich text editor's name in older block definitions
TYPE_ALIASES = {"tiptap": FieldType.RICH_TEXT.value}

ALLOWED_WIDTHS = (25, 33, 50, 66, 100)

NUMERIC_TYPES = frozenset({FieldType.NUMBER.value, FieldType.RANGE.value})
BOOLEAN_TYPES = frozenset({FieldType.CHECKBOX.value, FieldType.TOGGLE.value})
ID_TYPES = frozenset({FieldType.MEDIA.value, FieldType.FILE.value, FieldType.POST_OBJECT.value})
LIST_TYPES = frozenset({FieldType.GALLERY.value, FieldType.REPEATER.value})
CHOICE_TYPES = frozenset({
    FieldType.RADIO.value,
    FieldType.BUTTON_GROUP.value,
    FieldType.SELECT.value,
    FieldType.ENHANCED_SELECT.value,
})
MULTI_CAPABLE_TYPES = frozenset({FieldType.BUTTON_GROUP.value, FieldType.ENHANCED_SELECT.value})


class _NoDefault:
    def __repr__(self):
        return "NO_DEFAULT"


NO_DEFAULT = _NoDefault()


@dataclass(frozen=True)
class FieldSchema:
    id: str
    type: str = FieldType.TEXT.value
    label: str = ""
    description: str = ""
    default: Any = NO_DEFAULT
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    options: Dict[str, Any] = field(default_factory=dict)
    multiple: bool = False
    allowed_types: Tuple[str, ...] = ()
    post_types: Tuple[str, ...] = ("global_blocks",)
    width: int = 100
    fields: Tuple["FieldSchema", ...] = ()
    placeholder: str = ""
    rows: int = 5
    css_class: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    label_on: str = "Yes"
    label_off: str = "No"
    searchable: bool = True
    metabox: str = "default"

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    @property
    def is_known_type(self) -> bool:
        return self.type in KNOWN_TYPES

    @property
    def is_multiple(self) -> bool:
        return self.multiple and self.type in MULTI_CAPABLE_TYPES

    def initial_value(self) -> Any:
        """Declared default, or the type's empty value when there is none."""
        if self.has_default:
            if self.type == FieldType.REPEATER.value and not isinstance(self.default, list):
                return []
            return copy.deepcopy(self.default)
        return empty_value(self)

    def option_items(self) -> Sequence[Tuple[str, str]]:
        """(value, label) pairs in authoring order."""
        items = []
        for value, label in self.options.items():
            if isinstance(label, Mapping):
                label = label.get("label", value)
            items.append((str(value), str(label)))
        return items

    def option_icon(self, value: str) -> str:
        config = self.options.get(value)
        if isinstance(config, Mapping):
            return str(config.get("icon", ""))
        return ""

    def sub_field(self, field_id: str) -> Optional["FieldSchema"]:
        for sub in self.fields:
            if sub.id == field_id:
                return sub
        return None

    def attribute_type(self) -> str:
        """Attribute type used when values are stored one key per field."""
        if self.type in NUMERIC_TYPES:
            return "number"
        if self.type in BOOLEAN_TYPES:
            return "boolean"
        if self.type in LIST_TYPES:
            return "array"
        return "string"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "label": self.label,
            "width": self.width,
        }
        if self.description:
            data["description"] = self.description
        if self.has_default:
            data["default"] = copy.deepcopy(self.default)
        for key in ("min", "max", "step"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.options:
            data["options"] = copy.deepcopy(self.options)
        if self.type in MULTI_CAPABLE_TYPES:
            data["multiple"] = self.multiple
        if self.allowed_types:
            data["allowed_types"] = list(self.allowed_types)
        if self.type == FieldType.POST_OBJECT.value:
            data["post_types"] = list(self.post_types)
        if self.placeholder:
            data["placeholder"] = self.placeholder
        if self.type == FieldType.REPEATER.value:
            data["fields"] = [sub.to_dict() for sub in self.fields]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldSchema":
        field_type = str(data.get("type") or FieldType.TEXT.value)
        field_type = TYPE_ALIASES.get(field_type, field_type)

        post_types = data.get("post_types", "global_blocks")
        if isinstance(post_types, str):
            post_types = [p.strip() for p in post_types.split(",") if p.strip()]

        allowed_types = data.get("allowed_types") or ()
        if isinstance(allowed_types, str):
            allowed_types = [allowed_types]

        return cls(
            id=str(data.get("id") or ""),
            type=field_type,
            label=str(data.get("label") or ""),
            description=str(data.get("description") or data.get("help") or ""),
            default=data["default"] if "default" in data else NO_DEFAULT,
            min=data.get("min"),
            max=data.get("max"),
            step=data.get("step"),
            options=dict(data.get("options") or {}),
            multiple=bool(data.get("multiple", False)),
            allowed_types=tuple(allowed_types),
            post_types=tuple(post_types),
            width=int(data.get("width", 100)),
            fields=tuple(cls.from_dict(sub) for sub in data.get("fields") or ()),
            placeholder=str(data.get("placeholder") or ""),
            rows=int(data.get("rows", 5)),
            css_class=str(data.get("class") or ""),
            attributes={str(k): str(v) for k, v in (data.get("attributes") or {}).items()},
            label_on=str(data.get("label_on") or "Yes"),
            label_off=str(data.get("label_off") or "No"),
            searchable=bool(data.get("searchable", True)),
            metabox=str(data.get("metabox") or "default"),
        )


def empty_value(schema: FieldSchema) -> Any:
    if schema.type in NUMERIC_TYPES:
        return 0
    if schema.type in BOOLEAN_TYPES:
        return False
    if schema.type in ID_TYPES:
        return 0
    if schema.type in LIST_TYPES or schema.is_multiple:
        return []
    return ""


def parse_fields(raw_fields: Sequence[Mapping[str, Any]]) -> Tuple[FieldSchema, ...]:
    """Parse authored field dicts and enforce schema invariants."""
    from blockforge.domain.invariants.schema import assert_fields

    fields = tuple(FieldSchema.from_dict(raw) for raw in raw_fields)
    assert_fields(fields)
    return fields


def find_field(fields: Sequence[FieldSchema], field_id: str) -> Optional[FieldSchema]:
    for schema in fields:
        if schema.id == field_id:
            return schema
    return None
