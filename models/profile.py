# models/profile.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .base import Base


class Profile(Base):
    __tablename__ = "profiles"

    # совпадает с id пользователя у auth-провайдера
    id = Column(String(36), primary_key=True, index=True)
    email = Column(String(255), nullable=True)
    username = Column(String(20), unique=True, index=True, nullable=True)
    display_name = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(1024), nullable=True)
    location = Column(String(100), nullable=True)

    agency = Column(String(100), nullable=True)
    agency_email = Column(String(255), nullable=True)
    agency_phone = Column(String(32), nullable=True)
    agency_instagram = Column(String(64), nullable=True)

    height_cm = Column(Integer, nullable=True)
    bust_cm = Column(Integer, nullable=True)
    waist_cm = Column(Integer, nullable=True)
    hips_cm = Column(Integer, nullable=True)
    shoe_size = Column(String(16), nullable=True)
    hair_color = Column(String(32), nullable=True)
    eye_color = Column(String(32), nullable=True)

    instagram = Column(String(64), nullable=True)
    tiktok = Column(String(64), nullable=True)
    website = Column(String(255), nullable=True)
    accent_color = Column(String(16), nullable=True)

    is_public = Column(Boolean, default=False, nullable=False)
    selected_template = Column(String(32), nullable=True)
    subscription_tier = Column(String(32), default="free", nullable=False)
    onboarding_completed = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    photos = relationship("Photo", back_populates="profile", cascade="all, delete-orphan")
    services = relationship("Service", back_populates="profile", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Profile id={self.id} username={self.username}>"
