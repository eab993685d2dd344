# blockforge/normalizers/block_instance.py
from typing import Any, Dict, Optional

from blockforge.editor.store import Encoding, ValueStore
from blockforge.models.block_instance import BlockInstance
from blockforge.schema.block import BlockType


def normalize_block_type(block_type: BlockType) -> Dict[str, Any]:
    data = block_type.to_dict()
    data["fields"] = [schema.to_dict() for schema in block_type.field_schemas]
    return data


def normalize_block_instance(instance: BlockInstance, store: Optional[ValueStore] = None) -> Dict[str, Any]:
    data = {
        "id": instance.id,
        "document_id": instance.document_id,
        "position": instance.position,
        "block_type": instance.block_type,
        "encoding": instance.encoding,
        "updated_at": instance.updated_at.isoformat() if instance.updated_at else None,
    }
    if store is None:
        return data

    data["values"] = store.resolved()
    data["malformed"] = store.malformed
    if store.encoding is Encoding.BLOB or store.raw is not None:
        data["raw"] = store.raw
    return data
