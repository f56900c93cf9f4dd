# models/photo_event.py

from sqlalchemy import Column, String, DateTime, Enum, ForeignKey
from sqlalchemy.sql import func

from .base import Base

EVENT_TYPES = ("view", "click", "expand")


class PhotoEvent(Base):
    __tablename__ = "photo_analytics"

    id = Column(String(36), primary_key=True)
    photo_id = Column(
        String(36),
        ForeignKey("photos.id", ondelete="CASCADE"),
        index=True,
        nullable=False
    )
    profile_id = Column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        index=True,
        nullable=False
    )
    event_type = Column(
        Enum(*EVENT_TYPES, name="photo_event_type"),
        nullable=False
    )
    viewer_id = Column(String(36), nullable=True)
    viewer_ip_hash = Column(String(16), nullable=True)
    user_agent = Column(String(500), nullable=True)
    referrer = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<PhotoEvent photo={self.photo_id} type={self.event_type}>"
