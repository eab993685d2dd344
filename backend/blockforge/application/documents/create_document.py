# blockforge/application/documents/create_document.py
from typing import Any, Dict

from sqlalchemy import func

from blockforge.domain.exceptions import InvariantViolation
from blockforge.extensions import db
from blockforge.models.document import DOCUMENT_STATUSES, Document
from blockforge.utils.audit import log_action
from blockforge.utils.transaction import transactional


def next_post_id() -> int:
    current = db.session.query(func.max(Document.post_id)).scalar()
    return (current or 0) + 1


def create_document(*, data: Dict[str, Any]) -> Document:
    """
    Create a document that block instances can be added to.

    Edge cases handled:
    - Missing title
    - Unknown status
    """
    title = (data.get("title") or "").strip()
    if not title:
        raise InvariantViolation("Document title is required")

    status = data.get("status", "draft")
    if status not in DOCUMENT_STATUSES:
        raise InvariantViolation(f"Invalid document status: {status}")

    document = Document()
    document.title = title
    document.post_type = data.get("post_type") or "page"
    document.status = status

    with transactional():
        document.post_id = next_post_id()
        db.session.add(document)
        db.session.flush()

        log_action(
            action="document.create",
            entity_type="document",
            entity_id=document.id,
            payload={"post_id": document.post_id, "post_type": document.post_type},
        )

    return document
