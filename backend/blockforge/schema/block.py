"""
Block types.

A block type bundles a field schema list with a display template. Subclasses
set the class attributes and override ``placeholder_data`` or
``prepare_render_data`` when the template needs more than the stored values.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from functools import cached_property
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

from flask import render_template
from jinja2 import TemplateNotFound
from markupsafe import Markup, escape

from blockforge.editor.store import (
    BLOB_KEY,
    RAW_KEY,
    Encoding,
    ValueStore,
    decode_blob,
)
from blockforge.schema.field import FieldSchema, parse_fields

if TYPE_CHECKING:
    from blockforge.rendering.assets import AssetMetadata
    from blockforge.schema.registry import BlockRegistry

logger = logging.getLogger(__name__)

BLOCK_NAMESPACE = "wt/"

# Keys ignored when deciding whether an instance has any content
EMPTINESS_IGNORED_KEYS = frozenset({BLOB_KEY, RAW_KEY, "className", "anchor"})

EmbeddedBlocks = Sequence[Tuple[str, Mapping[str, Any]]]


def _no_document(post_id: int, post_types: Sequence[str]) -> Optional[EmbeddedBlocks]:
    return None


def _no_media(asset_id: int) -> Optional["AssetMetadata"]:
    return None


@dataclass(frozen=True)
class RenderContext:
    """
    Per-call render state.

    ``depth`` counts how many embedded documents enclose the block being
    rendered. It is threaded through every nested render call, never stored
    on a class.
    """

    registry: Optional["BlockRegistry"] = None
    depth: int = 0
    max_depth: int = 1
    is_preview: bool = False
    resolve_document: Callable[[int, Sequence[str]], Optional[EmbeddedBlocks]] = _no_document
    resolve_media: Callable[[int], Optional["AssetMetadata"]] = _no_media

    @property
    def depth_exceeded(self) -> bool:
        return self.depth >= self.max_depth

    def nested(self) -> "RenderContext":
        # Embedded documents are rendered as published content, not previews
        return replace(self, depth=self.depth + 1, is_preview=False)


def is_empty(attributes: Mapping[str, Any]) -> bool:
    return not any(
        value for key, value in attributes.items() if key not in EMPTINESS_IGNORED_KEYS
    )


class BlockType:
    name: str = ""
    title: str = ""
    description: str = ""
    icon: str = "block-default"
    category: str = "webtero"
    encoding: Encoding = Encoding.ATTRIBUTES
    template: Optional[str] = None

    # Authored field dicts; parsed once into FieldSchema objects
    field_definitions: Sequence[Mapping[str, Any]] = ()

    def fields(self) -> Sequence[Mapping[str, Any]]:
        return self.field_definitions

    @cached_property
    def field_schemas(self) -> Tuple[FieldSchema, ...]:
        return parse_fields(self.fields())

    @property
    def slug(self) -> str:
        return self.name[len(BLOCK_NAMESPACE):] if self.name.startswith(BLOCK_NAMESPACE) else self.name

    @property
    def template_name(self) -> str:
        return self.template or f"blocks/{self.slug}.html"

    def placeholder_data(self) -> Dict[str, Any]:
        return {}

    def attributes(self) -> Dict[str, Dict[str, Any]]:
        """Attribute declarations for the per-key encoding."""
        declared: Dict[str, Dict[str, Any]] = {
            BLOB_KEY: {"type": "string", "default": ""},
        }
        if self.encoding is Encoding.BLOB:
            return declared

        for schema in self.field_schemas:
            declared[schema.id] = {
                "type": schema.attribute_type(),
                "default": schema.initial_value(),
            }
        return declared

    def new_store(self, persisted: Any = None, *, instance_id: Optional[str] = None) -> ValueStore:
        return ValueStore.from_persisted(
            self.field_schemas,
            self.encoding,
            persisted,
            instance_id=instance_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "category": self.category,
            "encoding": self.encoding.value,
            "attributes": self.attributes(),
        }

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def prepare_render_data(self, values: Dict[str, Any], ctx: RenderContext) -> Dict[str, Any]:
        return values

    def render_data(self, attributes: Mapping[str, Any], ctx: RenderContext) -> Dict[str, Any]:
        stored = dict(attributes or {})
        blob = decode_blob(stored.get(BLOB_KEY))

        stored_values = self.new_store(stored).values

        values = {schema.id: schema.initial_value() for schema in self.field_schemas}
        values.update(stored_values)
        values[BLOB_KEY] = blob.values
        if blob.raw is not None and not blob.malformed:
            values[RAW_KEY] = blob.raw

        if ctx.is_preview and is_empty(stored_values):
            placeholder = self.placeholder_data()
            if placeholder:
                filled = {key: value for key, value in values.items() if value}
                values = {**values, **placeholder, **filled}

        data = self.prepare_render_data(values, ctx)
        data["is_preview"] = ctx.is_preview
        return data

    def render(self, attributes: Mapping[str, Any], ctx: Optional[RenderContext] = None) -> str:
        ctx = ctx or RenderContext()
        data = self.render_data(attributes, ctx)

        try:
            return render_template(self.template_name, block=data)
        except TemplateNotFound:
            logger.warning("Template %s missing for block %s", self.template_name, self.name)
            return Markup("<!-- Block render template not found: {} -->").format(
                escape(self.template_name)
            )
