from typing import List, Optional, Sequence

from flask import current_app

from blockforge.models.asset import Asset
from blockforge.models.document import Document
from blockforge.rendering.assets import AssetKind, AssetMetadata, AssetView

DEFAULT_POST_TYPES = ("global_blocks",)


def asset_metadata(asset: Asset, kind: AssetKind = AssetKind.MEDIA) -> AssetMetadata:
    return AssetMetadata(
        id=asset.attachment_id,
        kind=kind,
        title=asset.title,
        url=asset.url,
        filename=asset.filename,
        mime_type=asset.mime_type,
        thumbnail_url=asset.thumbnail_url or "",
    )


def post_metadata(document: Document) -> AssetMetadata:
    return AssetMetadata(
        id=document.post_id,
        kind=AssetKind.POST,
        title=document.title,
        post_type=document.post_type,
        edit_link=f"/admin/documents/{document.post_id}/edit",
    )


def find_media(attachment_id: int, types: Sequence[str] = ()) -> Optional[Asset]:
    """
    Look up one media item.

    ``types`` filters on the MIME group (``image``) or the full MIME type
    (``application/pdf``); an item matching neither is treated as missing.
    """
    asset = Asset.query.filter_by(attachment_id=attachment_id).first()
    if asset is None:
        return None

    if types and asset.media_type not in types and asset.mime_type not in types:
        return None
    return asset


def find_post(post_id: int, post_types: Sequence[str] = ()) -> Optional[Document]:
    query = Document.query.filter_by(post_id=post_id)
    if post_types:
        query = query.filter(Document.post_type.in_(list(post_types)))
    return query.first()


def autocomplete_posts(
    *,
    search: str = "",
    post_types: Sequence[str] = DEFAULT_POST_TYPES,
    per_page: int = 20,
) -> List[Document]:
    """
    Published documents whose title contains ``search``.

    Responsibilities:
    - restrict to published documents of the given post types
    - order by title
    - cap the page size at AUTOCOMPLETE_MAX_RESULTS
    """
    limit = min(max(int(per_page), 1), current_app.config.get("AUTOCOMPLETE_MAX_RESULTS", 50))

    query = Document.query.filter(
        Document.status == "publish",
        Document.post_type.in_(list(post_types or DEFAULT_POST_TYPES)),
    )
    if search:
        query = query.filter(Document.title.ilike(f"%{search}%"))

    return query.order_by(Document.title.asc()).limit(limit).all()


class SqlAssetLookup:
    """Asset lookup backed by the database, for in-process editor sessions."""

    def resolve_now(self, kind, asset_id, *, types=()):
        kind = AssetKind(kind)
        if kind is AssetKind.POST:
            document = find_post(asset_id, types)
            return post_metadata(document) if document else None

        asset = find_media(asset_id, types)
        return asset_metadata(asset, kind) if asset else None

    async def resolve(self, kind, asset_id, *, types=()):
        return self.resolve_now(kind, asset_id, types=types)

    async def search(self, query, *, post_types=DEFAULT_POST_TYPES, limit=20):
        return [
            post_metadata(doc)
            for doc in autocomplete_posts(search=query, post_types=post_types, per_page=limit)
        ]


def asset_view(kind, asset_id) -> AssetView:
    """Resolved or unresolved view of one id, for server-rendered forms."""
    metadata = SqlAssetLookup().resolve_now(kind, asset_id)
    if metadata is None:
        current_app.logger.info("Asset %s %s could not be resolved", AssetKind(kind).value, asset_id)
        return AssetView.unresolved(asset_id)
    return AssetView.resolved(metadata)
