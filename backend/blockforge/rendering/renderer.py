"""
Field renderer.

``FieldRenderer.render(schema, value, context, on_change)`` resolves the
value (falling back to the schema default), picks the widget for the type,
draws it through the host's binding and chrome, and returns a
``RenderedField`` whose ``change()`` feeds coerced values back through
``on_change({field_id: value})``. Rendering problems are turned into inline
diagnostics; nothing raised by a widget escapes to the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Sequence

from markupsafe import Markup

from blockforge.domain.exceptions import UnsupportedFieldType
from blockforge.editor.store import ValueStore
from blockforge.rendering.assets import AssetKind, AssetView
from blockforge.rendering.hosts import Binding, HostContext, chrome, repeater_chrome
from blockforge.rendering.widgets import (
    UNSUPPORTED,
    WIDGETS,
    FieldWidget,
    RenderEnv,
    _unresolved_asset,
)
from blockforge.schema.field import FieldSchema, FieldType

logger = logging.getLogger(__name__)

OnChange = Callable[[Mapping[str, Any]], Any]


class _Missing:
    def __repr__(self):
        return "MISSING"


MISSING = _Missing()


def _ignore_change(partial):
    return None


@dataclass
class RenderedField:
    schema: FieldSchema
    binding: Binding
    widget: FieldWidget
    value: Any
    html: Markup
    on_change: OnChange = _ignore_change
    error: Optional[str] = None

    @property
    def supported(self) -> bool:
        return self.widget is not UNSUPPORTED

    def __html__(self):
        return self.html

    def change(self, raw: Any) -> bool:
        """Coerce raw input and report it. Returns False when the input was rejected."""
        try:
            value = self.widget.coerce(self.schema, raw)
        except ValueError as exc:
            self.error = str(exc)
            logger.debug("Rejected input for %s: %s", self.schema.id, exc)
            return False

        self.error = None
        self.value = value
        self.on_change({self.binding.field_id: value})
        return True


@dataclass
class FieldRenderer:
    widgets: Mapping[str, FieldWidget] = field(default_factory=lambda: dict(WIDGETS))
    assets: Callable[[AssetKind, int], AssetView] = _unresolved_asset
    collapsed: Mapping[str, FrozenSet[int]] = field(default_factory=dict)

    def widget_for(self, schema: FieldSchema) -> FieldWidget:
        widget = self.widgets.get(schema.type)
        if widget is None:
            logger.warning("%s (field %s)", UnsupportedFieldType(schema.type), schema.id)
            return UNSUPPORTED
        return widget

    def render(
        self,
        schema: FieldSchema,
        value: Any = MISSING,
        context: HostContext = HostContext.EDITOR,
        on_change: OnChange = _ignore_change,
        *,
        binding: Optional[Binding] = None,
    ) -> RenderedField:
        binding = binding or Binding.for_field(HostContext(context), schema)
        if value is MISSING or value is None:
            value = schema.initial_value()

        widget = self.widget_for(schema)
        env = RenderEnv(renderer=self, assets=self.assets, collapsed=self.collapsed)

        try:
            widget_html = widget.render(schema, value, binding, env)
        except Exception:
            logger.exception("Widget for field %s (%s) failed to render", schema.id, schema.type)
            widget_html = Markup(
                '<div class="webtero-field-error notice notice-error" data-field-id="{}">'
                "This field could not be displayed.</div>"
            ).format(schema.id)

        wrap = repeater_chrome if schema.type == FieldType.REPEATER.value else chrome
        return RenderedField(
            schema=schema,
            binding=binding,
            widget=widget,
            value=value,
            html=wrap(schema, binding, widget_html),
            on_change=on_change,
        )

    def render_fields(
        self,
        fields: Sequence[FieldSchema],
        values: Mapping[str, Any],
        context: HostContext,
        on_change: OnChange = _ignore_change,
    ) -> List[RenderedField]:
        return [
            self.render(schema, values.get(schema.id, MISSING), context, on_change)
            for schema in fields
        ]

    def render_form(self, store: ValueStore, context: HostContext) -> "RenderedForm":
        """Render every field of a store, wired to ``store.set``."""
        rendered = self.render_fields(store.fields, store.values, context, store.set)
        return RenderedForm(fields=rendered, context=HostContext(context))


@dataclass
class RenderedForm:
    fields: List[RenderedField]
    context: HostContext

    @property
    def by_id(self) -> Dict[str, RenderedField]:
        return {f.schema.id: f for f in self.fields}

    def __getitem__(self, field_id: str) -> RenderedField:
        return self.by_id[field_id]

    def __html__(self):
        return self.html

    @property
    def html(self) -> Markup:
        inner = Markup("").join(f.html for f in self.fields)
        if self.context is HostContext.SETTINGS:
            return Markup('<table class="form-table">{}</table>').format(inner)
        if self.context is HostContext.MODAL:
            return Markup('<div class="webtero-modal-fields">{}</div>').format(inner)
        return Markup('<div class="webtero-editor-fields">{}</div>').format(inner)
