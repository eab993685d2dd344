# blockforge/application/blocks/update_block_instance.py
from typing import Any, Mapping, Tuple

from flask import current_app

from blockforge.application.settings.sanitize import sanitize_values
from blockforge.editor.store import ValueStore
from blockforge.extensions import current_registry, db
from blockforge.models.block_instance import BlockInstance
from blockforge.utils.audit import log_action
from blockforge.utils.transaction import transactional

# Host attributes kept as they are across value writes
HOST_KEYS = ("className", "anchor")


def load_block_instance(instance_id: str) -> Tuple[BlockInstance, ValueStore]:
    instance: BlockInstance = BlockInstance.query.filter_by(id=instance_id).first_or_404()
    block_type = current_registry().require(instance.block_type)
    store = block_type.new_store(instance.attributes, instance_id=instance.id)
    return instance, store


def update_block_instance(
    *,
    instance_id: str,
    partial: Mapping[str, Any],
) -> Tuple[BlockInstance, ValueStore]:
    """
    Merge a partial value map into a block instance.

    Responsibilities:
    - Coerce the submitted values with their field widgets
    - Merge through the value store (fields not submitted keep their value)
    - Write back in the block type's encoding, keeping host attributes
    - Audit logging
    """
    instance, store = load_block_instance(instance_id)
    block_type = current_registry().require(instance.block_type)

    values = sanitize_values(block_type.field_schemas, partial)
    if store.malformed:
        current_app.logger.warning(
            "Overwriting malformed value map of block instance %s", instance.id
        )
    store.set(values)

    previous = dict(instance.attributes or {})
    attributes = {key: previous[key] for key in HOST_KEYS if key in previous}
    attributes.update(store.serialize())

    with transactional():
        instance.attributes = attributes
        instance.encoding = block_type.encoding.value
        db.session.add(instance)

        log_action(
            action="block.update",
            entity_type="block_instance",
            entity_id=instance.id,
            payload={"fields": sorted(values)},
        )

    return instance, store
