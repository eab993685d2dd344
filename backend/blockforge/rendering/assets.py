"""
Asset metadata for media, file, gallery and post_object fields.

Lookups are asynchronous. A field that is re-selected while an earlier
lookup is still running must show the newest selection, so every lookup runs
through a ``LatestRequestGate``: the last request started wins, whatever
order the responses arrive in.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Awaitable,
    Dict,
    Generic,
    Hashable,
    List,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    TypeVar,
)

from blockforge.domain.exceptions import AssetUnresolved

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AssetKind(str, Enum):
    MEDIA = "media"
    FILE = "file"
    POST = "post"


# Field type -> lookup kind
FIELD_ASSET_KINDS = {
    "media": AssetKind.MEDIA,
    "gallery": AssetKind.MEDIA,
    "file": AssetKind.FILE,
    "post_object": AssetKind.POST,
}


@dataclass(frozen=True)
class AssetMetadata:
    id: int
    kind: AssetKind
    title: str = ""
    url: str = ""
    filename: str = ""
    mime_type: str = ""
    thumbnail_url: str = ""
    post_type: str = ""
    edit_link: str = ""

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "kind": self.kind.value, "title": self.title}
        if self.kind is AssetKind.POST:
            data.update(post_type=self.post_type, edit_link=self.edit_link)
        else:
            data.update(
                url=self.url,
                filename=self.filename,
                mime_type=self.mime_type,
                thumbnail_url=self.thumbnail_url,
            )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssetMetadata":
        return cls(
            id=int(data["id"]),
            kind=AssetKind(data.get("kind", AssetKind.MEDIA.value)),
            title=str(data.get("title") or ""),
            url=str(data.get("url") or ""),
            filename=str(data.get("filename") or ""),
            mime_type=str(data.get("mime_type") or ""),
            thumbnail_url=str(data.get("thumbnail_url") or ""),
            post_type=str(data.get("post_type") or ""),
            edit_link=str(data.get("edit_link") or ""),
        )


class AssetState(str, Enum):
    LOADING = "loading"
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class AssetView:
    """What a widget shows for one referenced id."""

    id: int
    state: AssetState
    metadata: Optional[AssetMetadata] = None

    @classmethod
    def loading(cls, asset_id: int) -> "AssetView":
        return cls(asset_id, AssetState.LOADING)

    @classmethod
    def unresolved(cls, asset_id: int) -> "AssetView":
        return cls(asset_id, AssetState.UNRESOLVED)

    @classmethod
    def resolved(cls, metadata: AssetMetadata) -> "AssetView":
        return cls(metadata.id, AssetState.RESOLVED, metadata)


class AssetLookup(Protocol):
    async def resolve(
        self,
        kind: AssetKind,
        asset_id: int,
        *,
        types: Sequence[str] = (),
    ) -> Optional[AssetMetadata]: ...

    async def search(
        self,
        query: str,
        *,
        post_types: Sequence[str] = ("global_blocks",),
        limit: int = 20,
    ) -> List[AssetMetadata]: ...


@dataclass(frozen=True)
class GateResult(Generic[T]):
    value: Optional[T]
    stale: bool


class LatestRequestGate:
    """Flags results of requests superseded by a newer one for the same key as stale."""

    def __init__(self):
        self._generations: Dict[Hashable, int] = {}

    def begin(self, key: Hashable) -> int:
        token = self._generations.get(key, 0) + 1
        self._generations[key] = token
        return token

    def is_current(self, key: Hashable, token: int) -> bool:
        return self._generations.get(key) == token

    async def run(self, key: Hashable, request: Awaitable[T]) -> GateResult[T]:
        token = self.begin(key)
        value = await request
        if not self.is_current(key, token):
            logger.debug("Stale response for %r", key)
            return GateResult(value=value, stale=True)
        return GateResult(value=value, stale=False)


@dataclass
class AssetViews:
    """Per-session cache of what each referenced asset currently shows."""

    lookup: AssetLookup
    gate: LatestRequestGate = field(default_factory=LatestRequestGate)
    views: Dict[Tuple[AssetKind, int], AssetView] = field(default_factory=dict)

    def get(self, kind: AssetKind, asset_id: int) -> AssetView:
        return self.views.get((kind, asset_id), AssetView.loading(asset_id))

    async def select(
        self,
        field_id: str,
        kind: AssetKind,
        asset_id: int,
        *,
        types: Sequence[str] = (),
    ) -> Optional[AssetView]:
        """
        Resolve ``asset_id`` for ``field_id``.

        Returns the new view, or None when a newer selection for the same
        field started while this lookup was running.
        """
        key = (kind, asset_id)
        self.views[key] = AssetView.loading(asset_id)

        result = await self.gate.run(field_id, self._resolve(kind, asset_id, types))
        # The asset itself resolved either way; only the field ignores it
        self.views[key] = result.value
        if result.stale:
            return None
        return result.value

    async def _resolve(self, kind, asset_id, types) -> AssetView:
        try:
            metadata = await self.lookup.resolve(kind, asset_id, types=types)
            if metadata is None:
                raise AssetUnresolved(asset_id, kind.value)
        except AssetUnresolved as exc:
            logger.info("%s", exc)
            return AssetView.unresolved(asset_id)
        except Exception:
            logger.warning("Lookup for %s %s failed", kind.value, asset_id, exc_info=True)
            return AssetView.unresolved(asset_id)
        return AssetView.resolved(metadata)
