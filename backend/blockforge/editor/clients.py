"""
Collaborators of an editor session.

The session only talks to these protocols. The local implementations call
the registry and the renderer in-process; they must run inside an app
context.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Protocol, Tuple

from blockforge.domain.exceptions import SchemaUnavailable
from blockforge.editor.store import Encoding
from blockforge.schema.block import RenderContext
from blockforge.schema.field import FieldSchema
from blockforge.schema.registry import BlockRegistry


@dataclass(frozen=True)
class BlockSchema:
    name: str
    fields: Tuple[FieldSchema, ...]
    encoding: Encoding = Encoding.ATTRIBUTES


class SchemaClient(Protocol):
    async def fetch(self, block_name: str) -> BlockSchema: ...


class PreviewClient(Protocol):
    async def render(self, block_name: str, values: Mapping[str, Any]) -> str: ...


class LocalSchemaClient:
    def __init__(self, registry: Optional[BlockRegistry]):
        self.registry = registry

    async def fetch(self, block_name):
        if self.registry is None:
            raise SchemaUnavailable(
                "Block registry not initialized",
                SchemaUnavailable.REGISTRY_UNAVAILABLE,
            )
        block_type = self.registry.require(block_name)
        return BlockSchema(
            name=block_type.name,
            fields=block_type.field_schemas,
            encoding=block_type.encoding,
        )


class LocalPreviewClient:
    def __init__(self, registry: BlockRegistry, context: Optional[RenderContext] = None):
        self.registry = registry
        self.context = context or RenderContext(registry=registry)

    async def render(self, block_name, values):
        block_type = self.registry.require(block_name)
        ctx = replace(self.context, registry=self.registry, is_preview=True)
        return str(block_type.render(values, ctx))
