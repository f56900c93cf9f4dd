from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, Field


class PhotoRead(BaseModel):
    id: str = Field(..., description="PK в базе данных")
    profile_id: str = Field(..., description="ID профиля-владельца")
    url: str = Field(..., description="URL изображения")
    thumbnail_url: Optional[str] = Field(None, description="URL превью")
    caption: Optional[str] = None
    is_visible: bool = Field(..., description="Показывается ли фото в публичном портфолио")
    sort_order: int = Field(..., description="Порядок показа")
    size_bytes: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    view_count: int = 0
    click_count: int = 0
    created_at: datetime = Field(..., description="Дата и время добавления фотографии")

    class Config:
        from_attributes = True


class PhotoPatch(BaseModel):
    caption: Optional[str] = Field(None, max_length=500)
    is_visible: Optional[bool] = None


class PhotoOrderUpdate(BaseModel):
    photo_ids: List[str] = Field(..., description="ID фото в новом порядке")


class PhotoBulkItem(BaseModel):
    id: str
    sort_order: int = Field(..., ge=0)
    is_visible: bool


class PhotoBulkUpdate(BaseModel):
    updates: List[PhotoBulkItem]
