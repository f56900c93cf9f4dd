from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.profile import ServiceRead


class PublicPhoto(BaseModel):
    id: str
    url: str
    thumbnail_url: str = Field(..., description="Превью, либо сам url если превью нет")
    caption: Optional[str] = None
    sort_order: int
    width: Optional[int] = None
    height: Optional[int] = None


class PublicStats(BaseModel):
    height_cm: Optional[int] = None
    bust_cm: Optional[int] = None
    waist_cm: Optional[int] = None
    hips_cm: Optional[int] = None
    shoe_size: Optional[str] = None
    hair_color: Optional[str] = None
    eye_color: Optional[str] = None


class PublicSocial(BaseModel):
    instagram: Optional[str] = None
    tiktok: Optional[str] = None
    website: Optional[str] = None


class PublicProfileRead(BaseModel):
    """Публичная проекция профиля: только то, что видит посетитель портфолио."""
    username: str
    display_name: str = ""
    bio: str = ""
    avatar_url: str = ""
    agency: Optional[str] = None
    location: Optional[str] = None
    stats: PublicStats
    social: PublicSocial
    photos: List[PublicPhoto]
    services: List[ServiceRead] = Field(default_factory=list)
    template: str
    accent_color: Optional[str] = None
    is_public: bool
    is_owner: bool = False
    preview_banner: bool = Field(False, description="Владелец смотрит закрытое портфолио")
    section: Optional[str] = None
