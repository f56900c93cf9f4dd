# schemas/profile.py
from typing import Optional, List
from datetime import datetime

from pydantic import BaseModel, Field


class MeasurementsMixin(BaseModel):
    height_cm: Optional[int] = Field(None, ge=0, le=300, description="Рост, см")
    bust_cm: Optional[int] = Field(None, ge=0, le=300)
    waist_cm: Optional[int] = Field(None, ge=0, le=300)
    hips_cm: Optional[int] = Field(None, ge=0, le=300)
    shoe_size: Optional[str] = Field(None, max_length=16)
    hair_color: Optional[str] = Field(None, max_length=32)
    eye_color: Optional[str] = Field(None, max_length=32)


class ProfileRead(MeasurementsMixin):
    id: str
    email: Optional[str] = None
    username: Optional[str] = None
    display_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    location: Optional[str] = None
    agency: Optional[str] = None
    agency_email: Optional[str] = None
    agency_phone: Optional[str] = None
    agency_instagram: Optional[str] = None
    instagram: Optional[str] = None
    tiktok: Optional[str] = None
    website: Optional[str] = None
    accent_color: Optional[str] = None
    is_public: bool
    selected_template: Optional[str] = None
    subscription_tier: str
    onboarding_completed: bool
    portfolio_url: Optional[str] = Field(None, description="Адрес публичного портфолио")
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileUpdate(MeasurementsMixin):
    username: Optional[str] = Field(None, max_length=20)
    display_name: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    agency: Optional[str] = Field(None, max_length=100)
    agency_email: Optional[str] = Field(None, max_length=255)
    agency_phone: Optional[str] = Field(None, max_length=32)
    agency_instagram: Optional[str] = Field(None, max_length=64)
    instagram: Optional[str] = Field(None, max_length=64)
    tiktok: Optional[str] = Field(None, max_length=64)
    website: Optional[str] = Field(None, max_length=255)
    accent_color: Optional[str] = Field(None, max_length=16)


class VisibilityUpdate(BaseModel):
    is_public: bool


class UsernameAvailability(BaseModel):
    username: str
    available: bool


class OnboardingStatus(BaseModel):
    is_logged_in: bool
    onboarding_completed: Optional[bool] = None
    display_name: Optional[str] = None


class ServiceItem(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: Optional[str] = None
    sort_order: Optional[int] = Field(None, ge=0)


class ServiceRead(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    price: Optional[str] = None
    sort_order: int

    class Config:
        from_attributes = True


class ServicesUpdate(BaseModel):
    services: List[ServiceItem] = Field(default_factory=list)
