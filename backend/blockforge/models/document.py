from blockforge.extensions import db
from .base import BaseModel

DOCUMENT_STATUSES = ("draft", "publish")


class Document(BaseModel):
    __tablename__ = "documents"

    post_id = db.Column(db.Integer, nullable=False, unique=True, index=True)  # numeric id used by post_object fields
    title = db.Column(db.String(200), nullable=False)
    post_type = db.Column(db.String(50), nullable=False, default="page", index=True)
    status = db.Column(db.String(20), nullable=False, default="draft", index=True)

    # Block instances in document order
    blocks = db.relationship(
        "BlockInstance",
        back_populates="document",
        order_by="BlockInstance.position",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.Index("idx_document_type_status_title", "post_type", "status", "title"),
    )
