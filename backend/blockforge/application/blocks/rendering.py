# blockforge/application/blocks/rendering.py
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from flask import current_app

from blockforge.extensions import current_registry
from blockforge.models.document import Document
from blockforge.schema.block import RenderContext
from blockforge.services.asset_registry import asset_metadata, find_media, find_post


def document_blocks(post_id: int, post_types: Sequence[str] = ()) -> Optional[List[Tuple[str, Any]]]:
    """Blocks of a published document, or None when it can't be embedded."""
    document = find_post(post_id, post_types)
    if document is None or document.status != "publish":
        return None
    return [(block.block_type, block.attributes) for block in document.blocks]


def media_metadata(asset_id: int):
    asset = find_media(asset_id)
    return asset_metadata(asset) if asset is not None else None


def render_context(*, is_preview: bool = False) -> RenderContext:
    return RenderContext(
        registry=current_registry(),
        max_depth=current_app.config.get("MAX_EMBED_DEPTH", 1),
        is_preview=is_preview,
        resolve_document=document_blocks,
        resolve_media=media_metadata,
    )


def render_preview(*, block_name: str, values: Mapping[str, Any]) -> str:
    """
    Render a block type with unsaved values.

    Empty value maps get the block's placeholder data. Nothing is persisted.
    """
    block_type = current_registry().require(block_name)
    return str(block_type.render(values or {}, render_context(is_preview=True)))


def render_document(*, document_id: str) -> str:
    document: Document = Document.query.filter_by(id=document_id).first_or_404()

    ctx = render_context()
    html = ctx.registry.render_blocks(
        [(block.block_type, block.attributes) for block in document.blocks],
        ctx,
    )
    current_app.logger.debug("Rendered document %s (%d blocks)", document.id, len(document.blocks))
    return str(html)
