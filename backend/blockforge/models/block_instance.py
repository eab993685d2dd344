from blockforge.extensions import db
from .base import BaseModel


class BlockInstance(BaseModel):
    __tablename__ = "block_instances"

    document_id = db.Column(db.String(36), db.ForeignKey("documents.id"), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)
    block_type = db.Column(db.String(100), nullable=False)  # wt/faq, wt/gallery, ...
    encoding = db.Column(db.String(20), nullable=False, default="attributes")
    attributes = db.Column(db.JSON, nullable=False, default=dict)  # persisted value map

    document = db.relationship("Document", back_populates="blocks")

    __table_args__ = (
        db.UniqueConstraint("document_id", "position", name="uq_document_block_position"),
        db.Index("idx_block_document_position", "document_id", "position"),
    )
