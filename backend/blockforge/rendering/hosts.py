"""
Host contexts.

A field renders the same widget in every host. The host decides the input
names and ids (``Binding``) and the markup around the widget (``chrome``).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from markupsafe import Markup, escape

from blockforge.schema.field import FieldSchema

SETTINGS_INPUT_NAME = "webtero_options"


class HostContext(str, Enum):
    EDITOR = "editor"
    MODAL = "modal"
    SETTINGS = "settings"


def html_attrs(attrs: Mapping[str, Any]) -> Markup:
    """Render attributes. None and False are skipped, True renders bare."""
    parts = []
    for name, value in attrs.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(Markup(" {}").format(name))
        else:
            parts.append(Markup(' {}="{}"').format(name, value))
    return Markup("").join(parts)


def _segment(value: Union[int, str]) -> str:
    return str(value).replace("[", "-").replace("]", "")


@dataclass(frozen=True)
class Binding:
    """Where one field's inputs point inside its host."""

    host: HostContext
    field_id: str
    path: str
    dom_id: str

    @classmethod
    def for_field(cls, host: HostContext, schema: FieldSchema) -> "Binding":
        host = HostContext(host)
        if host is HostContext.SETTINGS:
            dom_id = schema.id
        elif host is HostContext.MODAL:
            dom_id = f"webtero-option-{schema.id}"
        else:
            dom_id = f"webtero-editor-{schema.id}"
        return cls(host=host, field_id=schema.id, path=schema.id, dom_id=dom_id)

    @property
    def autosave(self) -> bool:
        return self.host is HostContext.MODAL

    @property
    def name(self) -> Optional[str]:
        """Form input name; only settings pages post a classic form."""
        if self.host is not HostContext.SETTINGS:
            return None
        head, sep, rest = self.path.partition("[")
        return f"{SETTINGS_INPUT_NAME}[{head}]" + (sep + rest if sep else "")

    def child(self, index: Union[int, str], sub_field_id: str) -> "Binding":
        """Binding of a repeater sub-field in row ``index``."""
        return Binding(
            host=self.host,
            field_id=sub_field_id,
            path=f"{self.path}[{index}][{sub_field_id}]",
            dom_id=f"{self.dom_id}-{_segment(index)}-{sub_field_id}",
        )

    def input_attrs(self, *, multiple: bool = False, with_id: bool = True, css_class: str = "") -> Markup:
        classes = [c for c in (css_class, "webtero-autosave" if self.autosave else "") if c]
        name = self.name
        if name is not None and multiple:
            name += "[]"
        return html_attrs({
            "id": self.dom_id if with_id else None,
            "name": name,
            "class": " ".join(classes) or None,
            "data-option": self.path if self.autosave else None,
            "data-field-id": self.path if self.host is HostContext.EDITOR else None,
        })


def description_html(schema: FieldSchema) -> Markup:
    if not schema.description:
        return Markup("")
    return Markup('<p class="description">{}</p>').format(schema.description)


def chrome(schema: FieldSchema, binding: Binding, widget_html: Markup) -> Markup:
    """Wrap a rendered widget in the host's field markup."""
    label = schema.label
    description = description_html(schema)

    if binding.host is HostContext.SETTINGS:
        label_html = (
            Markup('<label for="{}">{}</label>').format(binding.dom_id, label) if label else Markup("")
        )
        return Markup(
            '<tr data-field-width="{width}"><th scope="row">{label}</th>'
            "<td>{widget}{description}</td></tr>"
        ).format(width=schema.width, label=label_html, widget=widget_html, description=description)

    if binding.host is HostContext.MODAL:
        label_html = (
            Markup('<label for="{}">{}</label>').format(binding.dom_id, label) if label else Markup("")
        )
        return Markup(
            '<div class="webtero-field" data-field-width="{width}">{label}{widget}{description}</div>'
        ).format(width=schema.width, label=label_html, widget=widget_html, description=description)

    label_html = (
        Markup('<label class="webtero-editor-label" for="{}">{}</label>').format(binding.dom_id, label)
        if label
        else Markup("")
    )
    return Markup(
        '<div class="webtero-editor-field" data-field-id="{id}" data-field-type="{type}" '
        'style="width: {width}%">{label}{widget}{description}</div>'
    ).format(
        id=binding.path,
        type=schema.type,
        width=schema.width,
        label=label_html,
        widget=widget_html,
        description=description,
    )


def repeater_chrome(schema: FieldSchema, binding: Binding, widget_html: Markup) -> Markup:
    """Repeaters span the full host width and label themselves."""
    if binding.host is HostContext.SETTINGS:
        return Markup(
            '<tr class="webtero-repeater-row" data-field-width="{}"><td colspan="2">{}{}</td></tr>'
        ).format(schema.width, widget_html, description_html(schema))
    return Markup('<div class="webtero-field webtero-repeater-field">{}{}</div>').format(
        widget_html, description_html(schema)
    )


def escape_text(value: Any) -> Markup:
    return escape("" if value is None else value)
