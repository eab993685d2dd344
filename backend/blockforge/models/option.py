from blockforge.extensions import db
from .base import BaseModel


class Option(BaseModel):
    """Named option record. Settings snapshots, their index and pointer live here."""

    __tablename__ = "options"

    name = db.Column(db.String(191), nullable=False, unique=True, index=True)
    value = db.Column(db.JSON(none_as_null=True), nullable=True)
