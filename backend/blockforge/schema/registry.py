"""
Block type registry.

Built once by ``create_app`` and stored on ``app.extensions``. Components
that need a lookup receive the registry explicitly, or fetch the app's
instance through ``current_registry()``.
"""
from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from markupsafe import Markup, escape

from blockforge.domain.exceptions import SchemaUnavailable
from blockforge.editor.store import Encoding
from blockforge.schema.block import BLOCK_NAMESPACE, BlockType, RenderContext
from blockforge.schema.field import FieldSchema

logger = logging.getLogger(__name__)


def _declares_encoding(block_type: BlockType) -> bool:
    return any("encoding" in vars(cls) for cls in type(block_type).__mro__ if cls is not BlockType)


class BlockRegistry:
    def __init__(self, default_encoding: Optional[Encoding] = None):
        self._types: Dict[str, BlockType] = {}
        # Applied to block types that don't declare an encoding themselves
        self.default_encoding = default_encoding

    def __contains__(self, name):
        return name in self._types

    def __len__(self):
        return len(self._types)

    def register(self, block_type: BlockType) -> bool:
        """Register a block type. The first registration of a name wins."""
        if not block_type.name.startswith(BLOCK_NAMESPACE):
            raise ValueError(f"Block names must start with '{BLOCK_NAMESPACE}': {block_type.name!r}")

        if block_type.name in self._types:
            logger.debug("Block %s already registered; ignoring %r", block_type.name, block_type)
            return False

        if self.default_encoding is not None and not _declares_encoding(block_type):
            block_type.encoding = self.default_encoding

        # Parse the schemas now so authoring errors surface at startup
        block_type.field_schemas
        self._types[block_type.name] = block_type
        return True

    def discover(self, package: str) -> List[str]:
        """Import every module of ``package`` and register the block types it defines."""
        registered = []
        module = importlib.import_module(package)

        modules = [module]
        if hasattr(module, "__path__"):
            for info in sorted(pkgutil.iter_modules(module.__path__), key=lambda i: i.name):
                modules.append(importlib.import_module(f"{package}.{info.name}"))

        for mod in modules:
            for _, cls in inspect.getmembers(mod, inspect.isclass):
                if cls is BlockType or not issubclass(cls, BlockType):
                    continue
                if cls.__module__ != mod.__name__ or not cls.name:
                    continue
                if self.register(cls()):
                    registered.append(cls.name)

        logger.info("Discovered %d block types in %s", len(registered), package)
        return registered

    def get(self, name: str) -> Optional[BlockType]:
        return self._types.get(name)

    def require(self, name: str) -> BlockType:
        if not name.startswith(BLOCK_NAMESPACE):
            raise SchemaUnavailable("Not a custom block")

        block_type = self._types.get(name)
        if block_type is None:
            raise SchemaUnavailable(f"Block not found: {name}")
        return block_type

    def all(self) -> List[BlockType]:
        return sorted(self._types.values(), key=lambda b: b.name)

    def fields_for(self, name: str) -> Tuple[FieldSchema, ...]:
        return self.require(name).field_schemas

    def render_instance(
        self,
        name: str,
        attributes: Mapping,
        ctx: Optional[RenderContext] = None,
    ) -> str:
        ctx = ctx or RenderContext(registry=self)
        block_type = self.get(name)
        if block_type is None:
            return Markup("<!-- Unknown block type: {} -->").format(escape(name))
        return block_type.render(attributes, ctx)

    def render_blocks(self, blocks: Sequence[Tuple[str, Mapping]], ctx: RenderContext) -> str:
        return Markup("\n").join(
            Markup(self.render_instance(name, attributes, ctx)) for name, attributes in blocks
        )
