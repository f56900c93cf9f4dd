# models/photo.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .base import Base


class Photo(Base):
    __tablename__ = "photos"

    id = Column(String(36), primary_key=True, index=True)
    profile_id = Column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False
    )
    s3_key = Column(String(length=255), nullable=False)
    url = Column(String(length=1024), nullable=False)
    thumbnail_key = Column(String(length=255), nullable=True)
    thumbnail_url = Column(String(length=1024), nullable=True)

    is_visible = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    caption = Column(Text, nullable=True)
    size_bytes = Column(Integer, nullable=True)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)

    view_count = Column(Integer, default=0, nullable=False)
    click_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    profile = relationship("Profile", back_populates="photos")

    def __repr__(self):
        return f"<Photo id={self.id} key={self.s3_key} order={self.sort_order}>"
