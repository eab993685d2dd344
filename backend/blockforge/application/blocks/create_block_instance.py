# blockforge/application/blocks/create_block_instance.py
from typing import Any, Mapping, Optional

from flask import current_app

from blockforge.application.settings.sanitize import sanitize_values
from blockforge.domain.exceptions import InvariantViolation
from blockforge.extensions import current_registry, db
from blockforge.models.block_instance import BlockInstance
from blockforge.models.document import Document
from blockforge.utils.audit import log_action
from blockforge.utils.transaction import transactional


def create_block_instance(
    *,
    document_id: str,
    block_name: str,
    position: Optional[int] = None,
    values: Optional[Mapping[str, Any]] = None,
) -> BlockInstance:
    """
    Add a block to a document.

    Responsibilities:
    - Resolve the block type (SchemaUnavailable when unknown)
    - Append at the end unless a free position is given
    - Persist the initial values in the block type's encoding
    - Audit logging
    """
    block_type = current_registry().require(block_name)
    document: Document = Document.query.filter_by(id=document_id).first_or_404()

    taken = {block.position for block in document.blocks}
    if position is None:
        position = max(taken) + 1 if taken else 0
    elif position < 0 or position in taken:
        raise InvariantViolation(f"Position {position} is not free in document {document.id}")

    store = block_type.new_store()
    store.set(sanitize_values(block_type.field_schemas, values or {}))

    instance = BlockInstance()
    instance.document_id = document.id
    instance.position = position
    instance.block_type = block_type.name
    instance.encoding = block_type.encoding.value
    instance.attributes = store.serialize()

    with transactional():
        db.session.add(instance)
        db.session.flush()

        log_action(
            action="block.create",
            entity_type="block_instance",
            entity_id=instance.id,
            payload={
                "document_id": document.id,
                "block_type": block_type.name,
                "position": position,
            },
        )

    current_app.logger.info("Block %s added to document %s at %s", block_type.name, document.id, position)
    return instance
