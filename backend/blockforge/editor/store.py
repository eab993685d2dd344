"""
Per-instance value store.

One store holds the field-id -> value map of a single block or settings
instance. Two persisted encodings are read: one attribute per field id, and
a legacy JSON blob under ``webteroOptions``. Writes use whichever encoding
the instance's block type declares.
"""
from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from blockforge.domain.exceptions import MalformedPersistedValue
from blockforge.schema.field import FieldSchema, find_field

logger = logging.getLogger(__name__)

BLOB_KEY = "webteroOptions"
RAW_KEY = "webteroOptionsRaw"
SETTINGS_KEY = "webteroSettings"

# Host-managed attributes that never belong to the value map
RESERVED_KEYS = frozenset({BLOB_KEY, RAW_KEY, SETTINGS_KEY, "className", "anchor"})


class Encoding(str, Enum):
    ATTRIBUTES = "attributes"
    BLOB = "blob"


@dataclass(frozen=True)
class DecodedBlob:
    values: Dict[str, Any]
    raw: Optional[str]
    malformed: bool = False


def decode_blob(raw: Any) -> DecodedBlob:
    """Decode the single-blob encoding. Never raises."""
    if raw is None or raw == "":
        return DecodedBlob(values={}, raw=None)

    if isinstance(raw, Mapping):
        return DecodedBlob(values=copy.deepcopy(dict(raw)), raw=None)

    if not isinstance(raw, str):
        return DecodedBlob(values={}, raw=repr(raw), malformed=True)

    try:
        decoded = json.loads(raw)
    except ValueError:
        return DecodedBlob(values={}, raw=raw, malformed=True)

    if not isinstance(decoded, dict):
        return DecodedBlob(values={}, raw=raw, malformed=True)

    return DecodedBlob(values=decoded, raw=raw)


def encode_blob(values: Mapping[str, Any]) -> str:
    return json.dumps(dict(values), ensure_ascii=False)


Listener = Callable[[Mapping[str, Any], Mapping[str, Any]], None]


class ValueStore:
    def __init__(
        self,
        fields: Sequence[FieldSchema] = (),
        encoding: Encoding = Encoding.ATTRIBUTES,
        values: Optional[Mapping[str, Any]] = None,
        *,
        instance_id: Optional[str] = None,
    ):
        self.fields = tuple(fields)
        self.encoding = Encoding(encoding)
        self.instance_id = instance_id
        self.raw: Optional[str] = None
        self.malformed = False
        self.dirty = False
        self._values: Mapping[str, Any] = MappingProxyType(copy.deepcopy(dict(values or {})))
        self._listeners: List[Listener] = []

    @classmethod
    def from_persisted(
        cls,
        fields: Sequence[FieldSchema],
        encoding: Encoding,
        persisted: Any,
        *,
        instance_id: Optional[str] = None,
    ) -> "ValueStore":
        store = cls(fields, encoding, instance_id=instance_id)
        store.load(persisted)
        return store

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    @property
    def values(self) -> Mapping[str, Any]:
        """Read-only view of the current map. Replaced, never edited, on set()."""
        return self._values

    def get(self, field_id: str, default: Any = None) -> Any:
        values = self._values
        if field_id in values:
            return values[field_id]

        schema = find_field(self.fields, field_id)
        if schema is not None:
            return schema.initial_value()
        return default

    def resolved(self) -> Dict[str, Any]:
        """Every schema field with its value or default, plus extra stored keys."""
        values = self._values
        resolved = {schema.id: self.get(schema.id) for schema in self.fields}
        for key, value in values.items():
            resolved.setdefault(key, value)
        return copy.deepcopy(resolved)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def set(self, partial: Mapping[str, Any]) -> Mapping[str, Any]:
        """Merge field-id -> value pairs into the map in one swap."""
        if not partial:
            return self._values

        previous = self._values
        merged = dict(previous)
        merged.update(copy.deepcopy(dict(partial)))
        self._values = MappingProxyType(merged)
        self.dirty = True

        for listener in list(self._listeners):
            listener(self._values, previous)

        return self._values

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Encodings
    # ------------------------------------------------------------------
    def serialize(self) -> Dict[str, Any]:
        values = copy.deepcopy(dict(self._values))
        if self.encoding is Encoding.BLOB:
            return {BLOB_KEY: encode_blob(values)}
        return values

    def deserialize(self, raw: Any) -> Dict[str, Any]:
        """Decode either encoding into a plain map. Never raises."""
        return self._decode(raw)[0]

    def load(self, raw: Any) -> None:
        values, blob = self._decode(raw)
        self._values = MappingProxyType(values)
        self.raw = blob.raw
        self.malformed = blob.malformed
        self.dirty = False

        if blob.malformed:
            logger.warning(
                "%s (instance %s); treating as empty",
                MalformedPersistedValue(blob.raw),
                self.instance_id,
            )

    def _decode(self, raw: Any):
        if isinstance(raw, str):
            blob = decode_blob(raw)
            return dict(blob.values), blob

        if not isinstance(raw, Mapping):
            return {}, DecodedBlob(values={}, raw=None)

        blob_source = raw.get(BLOB_KEY)
        if blob_source is None:
            blob_source = raw.get(SETTINGS_KEY)
        blob = decode_blob(blob_source)

        values = dict(blob.values)
        for key, value in raw.items():
            if key in RESERVED_KEYS:
                continue
            values[key] = copy.deepcopy(value)

        return values, blob
