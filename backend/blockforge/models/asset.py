from blockforge.extensions import db
from .base import BaseModel


class Asset(BaseModel):
    """Uploaded media item addressed by a numeric attachment id."""

    __tablename__ = "assets"

    attachment_id = db.Column(db.Integer, nullable=False, unique=True, index=True)
    title = db.Column(db.String(200), nullable=False, default="")
    filename = db.Column(db.String(255), nullable=False)
    url = db.Column(db.String(512), nullable=False)
    mime_type = db.Column(db.String(100), nullable=False, default="application/octet-stream")
    thumbnail_url = db.Column(db.String(512), nullable=True)

    @property
    def media_type(self):
        """Top-level MIME group (image, video, application, ...)."""
        return (self.mime_type or "").split("/", 1)[0]
