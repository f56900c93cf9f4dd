import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Request
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from core.config import settings
from core.database import get_db
from core.security import get_current_profile_id, get_optional_viewer_id
from models.photo import Photo
from models.photo_event import PhotoEvent
from schemas.analytics import PhotoEventCreate, PhotoEventResponse, PhotoStats
from services.analytics import (
    VALID_EVENT_TYPES,
    client_ip,
    daily_breakdown,
    hash_ip,
    truncate_header,
)

router = APIRouter(prefix="/analytics", tags=["analytics"])
logger = logging.getLogger(__name__)

COUNTER_COLUMNS = {
    "view": Photo.view_count,
    "click": Photo.click_count,
}


@router.post(
    "/photo-event",
    response_model=PhotoEventResponse,
    summary="Записать просмотр/клик по фото портфолио",
)
async def track_photo_event(
    payload: PhotoEventCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    viewer_id: Optional[str] = Depends(get_optional_viewer_id),
) -> PhotoEventResponse:
    if payload.event_type not in VALID_EVENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"event_type must be one of: {', '.join(VALID_EVENT_TYPES)}",
        )

    owner_id = (await db.execute(
        select(Photo.profile_id).where(Photo.id == payload.photo_id)
    )).scalar_one_or_none()
    if owner_id is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Photo not found")

    # Владелец, листающий своё портфолио, статистику не накручивает
    if viewer_id == owner_id:
        return PhotoEventResponse(tracked=False, reason="Owner views not tracked")

    ip = client_ip(
        request.headers.get("x-forwarded-for"),
        request.client.host if request.client else None,
    )
    event = PhotoEvent(
        photo_id=payload.photo_id,
        profile_id=owner_id,
        event_type=payload.event_type,
        viewer_id=viewer_id,
        viewer_ip_hash=hash_ip(ip, settings.ANALYTICS_SALT),
        user_agent=truncate_header(request.headers.get("user-agent")),
        referrer=truncate_header(request.headers.get("referer")),
    )

    # Аналитика не должна ломать просмотр портфолио
    try:
        db.add(event)
        counter = COUNTER_COLUMNS.get(payload.event_type)
        if counter is not None:
            await db.execute(
                update(Photo)
                .where(Photo.id == payload.photo_id)
                .values({counter: counter + 1})
            )
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.warning("Photo event for %s was not stored: %s", payload.photo_id, exc)
        return PhotoEventResponse(tracked=False, reason="Database error")

    return PhotoEventResponse(tracked=True)


@router.get(
    "/photo-event/{photo_id}",
    response_model=PhotoStats,
    summary="Статистика по фото (только для владельца)",
)
async def photo_stats(
    photo_id: str = Path(..., description="ID фотографии"),
    db: AsyncSession = Depends(get_db),
    profile_id: str = Depends(get_current_profile_id),
) -> PhotoStats:
    photo = await db.get(Photo, photo_id)
    if photo is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Photo not found")
    if photo.profile_id != profile_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to view these stats",
        )

    unique_viewers = (await db.execute(
        select(func.count(func.distinct(PhotoEvent.viewer_ip_hash)))
        .where(PhotoEvent.photo_id == photo_id, PhotoEvent.event_type == "view")
    )).scalar_one()

    since = datetime.now(timezone.utc) - timedelta(days=7)
    recent = (await db.execute(
        select(PhotoEvent.event_type, PhotoEvent.created_at)
        .where(PhotoEvent.photo_id == photo_id, PhotoEvent.created_at >= since)
        .order_by(PhotoEvent.created_at.desc())
        .limit(100)
    )).all()

    return PhotoStats(
        photo_id=photo_id,
        view_count=photo.view_count or 0,
        click_count=photo.click_count or 0,
        unique_viewers=unique_viewers or 0,
        daily=daily_breakdown((row[0], row[1]) for row in recent),
    )
