from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field


class PhotoEventCreate(BaseModel):
    photo_id: str = Field(..., min_length=1)
    event_type: str = Field(..., description="view, click или expand")


class PhotoEventResponse(BaseModel):
    success: Literal[True] = True
    tracked: bool
    reason: Optional[str] = None


class DailyStats(BaseModel):
    views: int = 0
    clicks: int = 0


class PhotoStats(BaseModel):
    photo_id: str
    view_count: int
    click_count: int
    unique_viewers: int = 0
    daily: Dict[str, DailyStats] = Field(default_factory=dict)
