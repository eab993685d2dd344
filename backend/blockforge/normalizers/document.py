# blockforge/normalizers/document.py
from typing import Any, Dict

from blockforge.models.document import Document


def normalize_document(document: Document, *, with_blocks: bool = False) -> Dict[str, Any]:
    data = {
        "id": document.id,
        "post_id": document.post_id,
        "title": document.title,
        "post_type": document.post_type,
        "status": document.status,
    }
    if with_blocks:
        data["blocks"] = [
            {"id": block.id, "position": block.position, "block_type": block.block_type}
            for block in document.blocks
        ]
    return data
