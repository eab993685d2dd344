"""
Field widgets.

One widget per field type, looked up through ``WIDGETS``. A widget knows how
to draw its inputs for a binding, how to turn raw input into a stored value
(``coerce``) and which stored values its schema rejects (``validate``).
Widgets never decide names, ids or wrapping markup; the binding and the
host chrome do.
"""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    FrozenSet,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

from markupsafe import Markup

from blockforge.editor.repeater import ROW_ID_KEY, ROW_WIDTH_KEY
from blockforge.rendering.assets import FIELD_ASSET_KINDS, AssetKind, AssetState, AssetView
from blockforge.rendering.hosts import Binding, html_attrs
from blockforge.schema.field import ALLOWED_WIDTHS, FieldSchema, FieldType

if TYPE_CHECKING:
    from blockforge.rendering.renderer import FieldRenderer

logger = logging.getLogger(__name__)

TAG_RE = re.compile(r"<[^>]*>")
HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")
TRUE_STRINGS = frozenset({"1", "true", "on", "yes"})
FALSE_STRINGS = frozenset({"", "0", "false", "off", "no"})

REPEATER_INDEX_PLACEHOLDER = "{{INDEX}}"


def _unresolved_asset(kind: AssetKind, asset_id: int) -> AssetView:
    return AssetView.unresolved(asset_id)


@dataclass
class RenderEnv:
    """Everything a widget may consult besides its own schema and value."""

    renderer: "FieldRenderer"
    assets: Callable[[AssetKind, int], AssetView] = _unresolved_asset
    collapsed: Mapping[str, FrozenSet[int]] = field(default_factory=dict)

    def asset(self, schema: FieldSchema, asset_id: int) -> AssetView:
        return self.assets(FIELD_ASSET_KINDS[schema.type], asset_id)


# ----------------------------------------------------------------------
# Coercion helpers
# ----------------------------------------------------------------------
def strip_tags(value: Any) -> str:
    return TAG_RE.sub("", "" if value is None else str(value))


def to_text(value: Any) -> str:
    return " ".join(strip_tags(value).split())


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value if value is not None else "").strip().lower()
    if text in TRUE_STRINGS:
        return True
    if text in FALSE_STRINGS:
        return False
    raise ValueError(f"Not a boolean: {value!r}")


def to_id(value: Any) -> int:
    if value is None or value == "" or value is False:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"Not an id: {value!r}")
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValueError(f"Not an id: {value!r}") from None
    if number < 0:
        raise ValueError(f"Ids cannot be negative: {number}")
    return number


def _is_fractional(step) -> bool:
    return step is not None and float(step) != int(float(step))


def _as_list(value: Any) -> List[Any]:
    if value is None or value == "":
        return []
    if isinstance(value, Mapping):
        return [value[k] for k in sorted(value, key=_index_key)]
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _index_key(key):
    try:
        return (0, int(key))
    except (TypeError, ValueError):
        return (1, str(key))


# ----------------------------------------------------------------------
# Gallery and enhanced select operations
# ----------------------------------------------------------------------
def remove_image(ids: Sequence[int], index: int) -> List[int]:
    ids = list(ids)
    if 0 <= index < len(ids):
        del ids[index]
    return ids


def move_image(ids: Sequence[int], index: int, direction: str) -> List[int]:
    ids = list(ids)
    target = index - 1 if direction == "up" else index + 1
    if 0 <= index < len(ids) and 0 <= target < len(ids):
        ids[index], ids[target] = ids[target], ids[index]
    return ids


def filter_options(schema: FieldSchema, query: str) -> List[Tuple[str, str]]:
    """Options whose label or value contains ``query``, case-insensitively."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(schema.option_items())
    return [
        (value, label)
        for value, label in schema.option_items()
        if needle in label.lower() or needle in value.lower()
    ]


def toggle_option(current: Sequence[str], value: str) -> List[str]:
    """Select or deselect ``value``; selection order is kept."""
    selected = [str(v) for v in current]
    if value in selected:
        selected.remove(value)
    else:
        selected.append(value)
    return selected


# ----------------------------------------------------------------------
# Widgets
# ----------------------------------------------------------------------
class FieldWidget:
    type: str = ""

    def render(self, schema: FieldSchema, value: Any, binding: Binding, env: RenderEnv) -> Markup:
        raise NotImplementedError

    def coerce(self, schema: FieldSchema, raw: Any) -> Any:
        return to_text(raw)

    def validate(self, schema: FieldSchema, value: Any) -> Optional[str]:
        return None

    def extra_attrs(self, schema: FieldSchema) -> Markup:
        return html_attrs(schema.attributes)


class TextWidget(FieldWidget):
    type = FieldType.TEXT.value

    def render(self, schema, value, binding, env):
        return Markup("<input{}{}{}{}>").format(
            html_attrs({"type": "text"}),
            binding.input_attrs(css_class=schema.css_class or "regular-text"),
            html_attrs({"value": value, "placeholder": schema.placeholder or None}),
            self.extra_attrs(schema),
        )


class TextareaWidget(FieldWidget):
    type = FieldType.TEXTAREA.value

    def render(self, schema, value, binding, env):
        return Markup("<textarea{}{}{}>{}</textarea>").format(
            binding.input_attrs(css_class=schema.css_class or "large-text"),
            html_attrs({"rows": schema.rows, "placeholder": schema.placeholder or None}),
            self.extra_attrs(schema),
            value,
        )

    def coerce(self, schema, raw):
        lines = strip_tags(raw).replace("\r\n", "\n").split("\n")
        return "\n".join(line.strip() for line in lines).strip()


class NumberWidget(FieldWidget):
    type = FieldType.NUMBER.value
    input_type = "number"

    def render(self, schema, value, binding, env):
        return Markup("<input{}{}{}{}>").format(
            html_attrs({"type": self.input_type}),
            binding.input_attrs(css_class=schema.css_class or "small-text"),
            html_attrs({
                "value": value,
                "min": schema.min,
                "max": schema.max,
                "step": schema.step if schema.step is not None else 1,
            }),
            self.extra_attrs(schema),
        )

    def coerce(self, schema, raw):
        if isinstance(raw, bool):
            raise ValueError(f"Not a number: {raw!r}")
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return schema.initial_value()
        try:
            number = float(str(raw).strip())
        except ValueError:
            raise ValueError(f"Not a number: {raw!r}") from None
        # float() accepts "inf", "nan" and overflowing literals like "1e400"
        if not math.isfinite(number):
            raise ValueError(f"Not a number: {raw!r}")
        if _is_fractional(schema.step):
            return number
        return int(number)

    def validate(self, schema, value):
        if schema.min is not None and value < schema.min:
            return f"Must be at least {schema.min}"
        if schema.max is not None and value > schema.max:
            return f"Must be at most {schema.max}"
        return None


class RangeWidget(NumberWidget):
    type = FieldType.RANGE.value
    input_type = "range"

    def render(self, schema, value, binding, env):
        slider = Markup("<input{}{}{}{}>").format(
            html_attrs({"type": "range"}),
            binding.input_attrs(css_class=schema.css_class),
            html_attrs({
                "value": value,
                "min": schema.min if schema.min is not None else 0,
                "max": schema.max if schema.max is not None else 100,
                "step": schema.step if schema.step is not None else 1,
            }),
            self.extra_attrs(schema),
        )
        return Markup(
            '<div class="webtero-range-wrapper">{}<span class="webtero-range-value" data-range-id="{}">{}</span></div>'
        ).format(slider, binding.dom_id, value)


class ChoiceWidget(FieldWidget):
    def coerce(self, schema, raw):
        if schema.is_multiple:
            return [to_text(v) for v in _as_list(raw) if to_text(v) != ""]
        if isinstance(raw, (list, tuple)):
            raw = raw[-1] if raw else ""
        return to_text(raw)

    def validate(self, schema, value):
        allowed = {v for v, _ in schema.option_items()}
        values = value if isinstance(value, list) else [value]
        unknown = [v for v in values if v != "" and v not in allowed]
        if unknown:
            return f"Unknown option: {', '.join(unknown)}"
        return None

    @staticmethod
    def selected_values(schema, value) -> List[str]:
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return [] if value is None else [str(value)]


class RadioWidget(ChoiceWidget):
    type = FieldType.RADIO.value

    def render(self, schema, value, binding, env):
        selected = self.selected_values(schema, value)
        items = []
        for index, (option_value, label) in enumerate(schema.option_items()):
            items.append(Markup('<label class="webtero-radio"><input{}{}{}> {}</label>').format(
                html_attrs({"type": "radio"}),
                binding.input_attrs(with_id=index == 0),
                html_attrs({"value": option_value, "checked": option_value in selected}),
                label,
            ))
        return Markup('<fieldset class="webtero-radio-group">{}</fieldset>').format(Markup("").join(items))


class SelectWidget(ChoiceWidget):
    type = FieldType.SELECT.value

    def render(self, schema, value, binding, env):
        selected = self.selected_values(schema, value)
        options = Markup("").join(
            Markup("<option{}>{}</option>").format(
                html_attrs({"value": option_value, "selected": option_value in selected}),
                label,
            )
            for option_value, label in schema.option_items()
        )
        return Markup("<select{}{}>{}</select>").format(
            binding.input_attrs(css_class=schema.css_class),
            self.extra_attrs(schema),
            options,
        )


class EnhancedSelectWidget(ChoiceWidget):
    type = FieldType.ENHANCED_SELECT.value

    def render(self, schema, value, binding, env):
        selected = self.selected_values(schema, value)
        placeholder = schema.placeholder or "Select..."
        options = []
        if not schema.is_multiple:
            options.append(Markup('<option value="">{}</option>').format(schema.placeholder or "Select..."))
        for option_value, label in schema.option_items():
            options.append(Markup("<option{}>{}</option>").format(
                html_attrs({"value": option_value, "selected": option_value in selected}),
                label,
            ))
        return Markup("<select{}{}>{}</select>").format(
            binding.input_attrs(multiple=schema.is_multiple, css_class="webtero-enhanced-select"),
            html_attrs({
                "multiple": schema.is_multiple,
                "data-placeholder": placeholder,
                "data-searchable": "1" if schema.searchable else "0",
                "data-selected": ",".join(selected) if schema.is_multiple else None,
            }),
            Markup("").join(options),
        )


class ButtonGroupWidget(ChoiceWidget):
    type = FieldType.BUTTON_GROUP.value

    def render(self, schema, value, binding, env):
        selected = self.selected_values(schema, value)
        input_type = "checkbox" if schema.is_multiple else "radio"
        items = []
        for option_value, label in schema.option_items():
            checked = option_value in selected
            icon = schema.option_icon(option_value)
            icon_html = (
                Markup('<span class="webtero-button-icon">{}</span>').format(Markup(icon))
                if icon else Markup("")
            )
            items.append(Markup(
                '<label class="webtero-button-group-item{}"><input{}{}{}>{}'
                '<span class="webtero-button-text">{}</span></label>'
            ).format(
                " active" if checked else "",
                html_attrs({"type": input_type}),
                binding.input_attrs(multiple=schema.is_multiple, with_id=False),
                html_attrs({"value": option_value, "checked": checked}),
                icon_html,
                label,
            ))
        return Markup('<div class="webtero-button-group" id="{}" data-multiple="{}">{}</div>').format(
            binding.dom_id,
            "1" if schema.is_multiple else "0",
            Markup("").join(items),
        )


class CheckboxWidget(FieldWidget):
    type = FieldType.CHECKBOX.value

    def hidden_off(self, binding) -> Markup:
        # Unchecked boxes post nothing; the hidden input posts the "off" value
        if binding.name is None:
            return Markup("")
        return Markup('<input type="hidden" name="{}" value="0">').format(binding.name)

    def render(self, schema, value, binding, env):
        return Markup("{}<label><input{}{}{}> {}</label>").format(
            self.hidden_off(binding),
            html_attrs({"type": "checkbox"}),
            binding.input_attrs(),
            html_attrs({"value": "1", "checked": bool(value)}),
            schema.placeholder,
        )

    def coerce(self, schema, raw):
        if isinstance(raw, (list, tuple)):
            raw = raw[-1] if raw else False
        return to_bool(raw)


class ToggleWidget(CheckboxWidget):
    type = FieldType.TOGGLE.value

    def render(self, schema, value, binding, env):
        longest = max(len(schema.label_on), len(schema.label_off))
        width = max(60, longest * 8 + 30)
        return Markup(
            '<div class="webtero-toggle-wrapper">{}<label class="webtero-toggle" style="--toggle-width: {}px;">'
            "<input{}{}{}>"
            '<span class="webtero-toggle-track"><span class="webtero-toggle-handle"></span>'
            '<span class="webtero-toggle-labels"><span class="webtero-toggle-label-off">{}</span>'
            '<span class="webtero-toggle-label-on">{}</span></span></span></label></div>'
        ).format(
            self.hidden_off(binding),
            width,
            html_attrs({"type": "checkbox"}),
            binding.input_attrs(),
            html_attrs({"value": "1", "checked": bool(value)}),
            schema.label_off,
            schema.label_on,
        )


class ColorWidget(FieldWidget):
    type = FieldType.COLOR.value

    def render(self, schema, value, binding, env):
        return Markup("<input{}{}{}>").format(
            html_attrs({"type": "text"}),
            binding.input_attrs(css_class="webtero-color-picker"),
            html_attrs({"value": value, "data-default-color": schema.default if schema.has_default else None}),
        )

    def coerce(self, schema, raw):
        color = str(raw or "").strip()
        if not color:
            return ""
        if not HEX_COLOR_RE.match(color):
            raise ValueError(f"Not a hex color: {raw!r}")
        return color.lower()


class AssetWidget(FieldWidget):
    """Shared rendering of id-valued fields whose display needs a lookup."""

    select_label = "Select"

    def coerce(self, schema, raw):
        if isinstance(raw, Mapping) and "id" in raw:
            raw = raw["id"]
        return to_id(raw)

    def asset_html(self, schema, view: AssetView) -> Markup:
        if view.state is AssetState.LOADING:
            return Markup('<span class="webtero-asset webtero-asset--loading" data-asset-id="{}">Loading…</span>').format(view.id)
        if view.state is AssetState.UNRESOLVED:
            return Markup(
                '<span class="webtero-asset webtero-asset--unresolved" data-asset-id="{0}">#{0} (unresolved)</span>'
            ).format(view.id)
        meta = view.metadata
        if meta.is_image:
            return Markup('<img class="webtero-asset" data-asset-id="{}" src="{}" alt="{}">').format(
                meta.id, meta.thumbnail_url or meta.url, meta.title
            )
        return Markup('<span class="webtero-asset" data-asset-id="{}">{}</span>').format(
            meta.id, meta.title or meta.filename
        )

    def render(self, schema, value, binding, env):
        asset_id = to_id(value) if not isinstance(value, (list, tuple)) else 0
        preview = self.asset_html(schema, env.asset(schema, asset_id)) if asset_id else Markup("")
        return Markup(
            '<div class="webtero-media-field" data-field-type="{type}"{types}>'
            "<input{hidden}{attrs}{value}>"
            '<div class="webtero-media-preview">{preview}</div>'
            '<button type="button" class="button webtero-media-upload">{select}</button>'
            '<button type="button" class="button webtero-media-remove"{hide}>Remove</button></div>'
        ).format(
            type=schema.type,
            types=html_attrs({"data-allowed-types": ",".join(schema.allowed_types) or None}),
            hidden=html_attrs({"type": "hidden"}),
            attrs=binding.input_attrs(css_class="webtero-media-id"),
            value=html_attrs({"value": asset_id}),
            preview=preview,
            select=self.select_label,
            hide=html_attrs({"style": None if asset_id else "display:none;"}),
        )


class MediaWidget(AssetWidget):
    type = FieldType.MEDIA.value
    select_label = "Select Image"


class FileWidget(AssetWidget):
    type = FieldType.FILE.value
    select_label = "Select File"


class PostObjectWidget(AssetWidget):
    type = FieldType.POST_OBJECT.value

    def render(self, schema, value, binding, env):
        post_id = to_id(value) if not isinstance(value, (list, tuple)) else 0
        current = Markup("")
        if post_id:
            view = env.asset(schema, post_id)
            if view.state is AssetState.RESOLVED:
                current = Markup('<span class="webtero-post-object-title" data-post-id="{}">{}</span>').format(
                    post_id, view.metadata.title
                )
            else:
                current = self.asset_html(schema, view)
        return Markup(
            '<div class="webtero-post-object" data-post-types="{}">'
            "<input{}{}{}>"
            '<input type="search" class="webtero-post-object-search" placeholder="{}" autocomplete="off">'
            '<div class="webtero-post-object-current">{}</div>'
            '<ul class="webtero-post-object-results" role="listbox"></ul></div>'
        ).format(
            ",".join(schema.post_types),
            html_attrs({"type": "hidden"}),
            binding.input_attrs(),
            html_attrs({"value": post_id}),
            schema.placeholder or "Search…",
            current,
        )


class GalleryWidget(AssetWidget):
    type = FieldType.GALLERY.value

    def coerce(self, schema, raw):
        if isinstance(raw, str):
            raw = [part for part in raw.split(",") if part.strip()]
        ids = [to_id(item["id"] if isinstance(item, Mapping) else item) for item in _as_list(raw)]
        return [i for i in ids if i]

    def render(self, schema, value, binding, env):
        ids = self.coerce(schema, value) if value else []
        last = len(ids) - 1
        items = []
        for index, image_id in enumerate(ids):
            items.append(Markup(
                '<li class="webtero-gallery-item" data-image-id="{id}">{preview}'
                '<div class="webtero-gallery-item-actions">'
                '<button type="button" data-action="move-up" data-image-id="{id}"{first}>←</button>'
                '<button type="button" data-action="move-down" data-image-id="{id}"{last}>→</button>'
                '<button type="button" data-action="remove" data-image-id="{id}">×</button>'
                "</div></li>"
            ).format(
                id=image_id,
                preview=self.asset_html(schema, env.asset(schema, image_id)),
                first=html_attrs({"disabled": index == 0}),
                last=html_attrs({"disabled": index == last}),
            ))
        return Markup(
            '<div class="webtero-gallery-field"><input{}{}{}>'
            '<ul class="webtero-gallery-items">{}</ul>'
            '<button type="button" class="button webtero-gallery-add">Add Images</button></div>'
        ).format(
            html_attrs({"type": "hidden"}),
            binding.input_attrs(css_class="webtero-gallery-ids"),
            html_attrs({"value": ",".join(str(i) for i in ids)}),
            Markup("").join(items),
        )


class RichTextWidget(FieldWidget):
    type = FieldType.RICH_TEXT.value

    def render(self, schema, value, binding, env):
        # The value is opaque formatted text handed to the embedded editor as-is
        hidden = Markup("")
        if binding.name is not None:
            hidden = Markup('<input type="hidden" name="{}" value="{}" data-tiptap-input="{}">').format(
                binding.name, value or "", binding.dom_id
            )
        return Markup("<div{}{}></div>{}").format(
            html_attrs({
                "id": f"tiptap-editor-{binding.dom_id}",
                "class": "webtero-tiptap-container",
                "data-tiptap-field": binding.path,
                "data-tiptap-content": value or "",
                "data-option": binding.path if binding.autosave else None,
            }),
            html_attrs({"data-placeholder": schema.placeholder or None}),
            hidden,
        )

    def coerce(self, schema, raw):
        return "" if raw is None else str(raw)


class RepeaterWidget(FieldWidget):
    type = FieldType.REPEATER.value

    def coerce(self, schema, raw):
        rows = []
        for raw_row in _as_list(raw):
            if not isinstance(raw_row, Mapping):
                raise ValueError(f"Repeater rows must be maps, got {raw_row!r}")
            row: Dict[str, Any] = {}
            for sub in schema.fields:
                widget = widget_for(sub)
                row[sub.id] = widget.coerce(sub, raw_row[sub.id]) if sub.id in raw_row else sub.initial_value()
            if raw_row.get(ROW_ID_KEY):
                row[ROW_ID_KEY] = str(raw_row[ROW_ID_KEY])
            try:
                width = int(raw_row.get(ROW_WIDTH_KEY, 100))
            except (TypeError, ValueError):
                width = 100
            row[ROW_WIDTH_KEY] = width if width in ALLOWED_WIDTHS else 100
            rows.append(row)
        return rows

    def validate(self, schema, value):
        count = len(value)
        if schema.min is not None and count < schema.min:
            return f"Minimum {int(schema.min)} items required"
        if schema.max is not None and count > schema.max:
            return f"Maximum {int(schema.max)} items allowed"
        for index, row in enumerate(value):
            for sub in schema.fields:
                error = widget_for(sub).validate(sub, row.get(sub.id))
                if error:
                    return f"Row {index + 1}, {sub.label or sub.id}: {error}"
        return None

    def render_row(self, schema, row, index, binding, env, collapsed=False) -> Markup:
        width = row.get(ROW_WIDTH_KEY, 100)
        sub_fields = Markup("").join(
            env.renderer.render(
                sub,
                row.get(sub.id),
                binding.host,
                binding=binding.child(index, sub.id),
            ).html
            for sub in schema.fields
        )
        widths = Markup("").join(
            Markup("<option{}>{}%</option>").format(
                html_attrs({"value": w, "selected": w == width}), w
            )
            for w in ALLOWED_WIDTHS
        )
        return Markup(
            '<div class="webtero-repeater-item{collapsed}"{attrs}>'
            '<div class="webtero-repeater-handle"><span class="dashicons dashicons-menu"></span>'
            '<button type="button" data-action="toggle">{toggle}</button></div>'
            '<div class="webtero-repeater-content"{hidden}>{fields}</div>'
            '<div class="webtero-repeater-actions">'
            '<select data-action="width">{widths}</select>'
            '<button type="button" data-action="move-up">↑</button>'
            '<button type="button" data-action="move-down">↓</button>'
            '<button type="button" data-action="insert-before">+↑</button>'
            '<button type="button" data-action="insert-after">+↓</button>'
            '<button type="button" data-action="remove">Remove</button>'
            "</div></div>"
        ).format(
            collapsed=" is-collapsed" if collapsed else "",
            attrs=html_attrs({
                "data-index": index,
                "data-row-id": row.get(ROW_ID_KEY) or None,
                "data-width": width,
            }),
            toggle="Expand" if collapsed else "Collapse",
            hidden=html_attrs({"hidden": collapsed}),
            fields=sub_fields,
            widths=widths,
        )

    def render(self, schema, value, binding, env):
        rows = [row if isinstance(row, Mapping) else {} for row in (value or [])]
        collapsed = env.collapsed.get(binding.path, frozenset())
        max_rows = int(schema.max) if schema.max is not None else None
        min_rows = int(schema.min or 0)

        label = Markup("<label><strong>{}</strong></label>").format(schema.label) if schema.label else Markup("")
        items = Markup("").join(
            self.render_row(schema, row, index, binding, env, collapsed=index in collapsed)
            for index, row in enumerate(rows)
        )
        count = (
            Markup(' <span class="webtero-repeater-count">({}/{})</span>').format(len(rows), max_rows)
            if max_rows is not None else Markup("")
        )
        minimum = (
            Markup('<p class="description">Minimum {} items required</p>').format(min_rows)
            if min_rows > 0 else Markup("")
        )
        template_row = {sub.id: sub.initial_value() for sub in schema.fields}
        template_row[ROW_WIDTH_KEY] = 100

        return Markup(
            '{label}<div class="webtero-repeater" data-field-id="{path}"{bounds}>'
            '<div class="webtero-repeater-items">{items}</div>'
            '<button type="button" class="button webtero-repeater-add"{disabled}>Add Row{count}</button>'
            "{minimum}</div>"
            '<script type="text/html" id="webtero-repeater-template-{dom_id}">{template}</script>'
        ).format(
            label=label,
            path=binding.path,
            bounds=html_attrs({"data-min": min_rows, "data-max": max_rows}),
            items=items,
            disabled=html_attrs({"disabled": max_rows is not None and len(rows) >= max_rows}),
            count=count,
            minimum=minimum,
            dom_id=binding.dom_id,
            template=self.render_row(schema, template_row, REPEATER_INDEX_PLACEHOLDER, binding, env),
        )


class UnsupportedWidget(FieldWidget):
    """Diagnostic placeholder for types without a widget."""

    def render(self, schema, value, binding, env):
        return Markup(
            '<div class="webtero-field-unsupported notice notice-warning" data-field-type="{0}">'
            "Unsupported field type: {0}</div>"
        ).format(schema.type)

    def coerce(self, schema, raw):
        return raw


WIDGETS: Dict[str, FieldWidget] = {
    widget.type: widget
    for widget in (
        TextWidget(),
        TextareaWidget(),
        NumberWidget(),
        RangeWidget(),
        RadioWidget(),
        CheckboxWidget(),
        ToggleWidget(),
        ButtonGroupWidget(),
        ColorWidget(),
        SelectWidget(),
        EnhancedSelectWidget(),
        MediaWidget(),
        FileWidget(),
        GalleryWidget(),
        PostObjectWidget(),
        RichTextWidget(),
        RepeaterWidget(),
    )
}

UNSUPPORTED = UnsupportedWidget()


def widget_for(schema: FieldSchema, widgets: Mapping[str, FieldWidget] = WIDGETS) -> FieldWidget:
    return widgets.get(schema.type, UNSUPPORTED)
