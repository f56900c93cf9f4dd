import logging
from typing import List, Any

from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File, Path
from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from core.config import settings
from core.database import get_db
from core.security import get_current_profile
from models.photo import Photo
from models.profile import Profile
from schemas.photo import PhotoBulkUpdate, PhotoOrderUpdate, PhotoPatch, PhotoRead
from utils.s3 import delete_file_from_s3_quietly, upload_photo_to_s3
from utils.sanitize import clean_text

router = APIRouter(prefix="/photos", tags=["photos"])
logger = logging.getLogger(__name__)

PHOTO_TYPES = {"image/jpeg", "image/png", "image/webp"}
MAX_PHOTO_BYTES = 10 * 1024 * 1024


async def _get_own_photo(db: AsyncSession, photo_id: str, profile_id: str) -> Photo:
    res = await db.execute(
        select(Photo).where(Photo.id == photo_id, Photo.profile_id == profile_id)
    )
    photo = res.scalar_one_or_none()
    if not photo:
        raise HTTPException(status_code=404, detail="Photo not found")
    return photo


async def _list_own_photos(db: AsyncSession, profile_id: str) -> List[Photo]:
    res = await db.execute(
        select(Photo)
        .where(Photo.profile_id == profile_id)
        .order_by(Photo.sort_order.asc(), Photo.created_at.asc())
    )
    return list(res.scalars().all())


@router.post("", response_model=PhotoRead, status_code=status.HTTP_201_CREATED, include_in_schema=False)
@router.post(
    "/",
    response_model=PhotoRead,
    status_code=status.HTTP_201_CREATED,
    summary="Загрузить фото в портфолио",
)
async def upload_photo(
    photo: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
) -> Any:
    if photo.content_type not in PHOTO_TYPES:
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Please upload JPEG, PNG, or WebP.",
        )
    if photo.size is not None and photo.size > MAX_PHOTO_BYTES:
        raise HTTPException(status_code=400, detail="File too large. Maximum size is 10MB.")

    # Проверяем лимит по числу фото
    total = (await db.execute(
        select(func.count(Photo.id)).where(Photo.profile_id == current_profile.id)
    )).scalar_one()
    if total >= settings.MAX_PHOTOS:
        raise HTTPException(status_code=400, detail=f"Cannot have more than {settings.MAX_PHOTOS} photos")

    # Загружаем файл в S3 (не блокируя loop)
    try:
        stored = await run_in_threadpool(
            upload_photo_to_s3,
            photo.file,
            current_profile.id,
            settings.AWS_S3_BUCKET_NAME,
        )
    except ValueError as ve:
        # неподдерживаемый формат / не изображение
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception as e:
        logger.exception("Photo upload failed for %s", current_profile.id)
        raise HTTPException(status_code=500, detail=str(e))

    max_order = (await db.execute(
        select(func.max(Photo.sort_order)).where(Photo.profile_id == current_profile.id)
    )).scalar_one_or_none()
    next_order = 0 if max_order is None else max_order + 1

    new_photo = Photo(
        profile_id=current_profile.id,
        s3_key=stored.s3_key,
        url=stored.url,
        thumbnail_key=stored.thumbnail_key,
        thumbnail_url=stored.thumbnail_url,
        width=stored.width,
        height=stored.height,
        size_bytes=stored.size_bytes,
        sort_order=next_order,
        is_visible=True,
    )
    db.add(new_photo)
    try:
        await db.commit()
    except SQLAlchemyError:
        # запись не сохранилась - убираем загруженные файлы
        logger.exception("Photo for %s was not saved", current_profile.id)
        await db.rollback()
        for key in (stored.s3_key, stored.thumbnail_key):
            await run_in_threadpool(delete_file_from_s3_quietly, key, settings.AWS_S3_BUCKET_NAME)
        raise HTTPException(status_code=500, detail="Failed to save photo")
    await db.refresh(new_photo)

    return PhotoRead.model_validate(new_photo)


@router.get("", response_model=List[PhotoRead], include_in_schema=False)
@router.get(
    "/",
    response_model=List[PhotoRead],
    summary="Все мои фото, включая скрытые",
)
async def list_photos(
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
) -> List[PhotoRead]:
    photos = await _list_own_photos(db, current_profile.id)
    return [PhotoRead.model_validate(p) for p in photos]


@router.patch(
    "/{photo_id}",
    response_model=PhotoRead,
    summary="Изменить подпись или видимость фото",
)
async def patch_photo(
    payload: PhotoPatch,
    photo_id: str = Path(..., description="ID фотографии"),
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
) -> PhotoRead:
    photo = await _get_own_photo(db, photo_id, current_profile.id)

    data = payload.model_dump(exclude_unset=True)
    if "caption" in data:
        photo.caption = clean_text(data["caption"])
    if data.get("is_visible") is not None:
        photo.is_visible = data["is_visible"]

    await db.commit()
    await db.refresh(photo)
    return PhotoRead.model_validate(photo)


@router.put(
    "/order",
    response_model=List[PhotoRead],
    summary="Сохранить новый порядок фото",
)
async def reorder_photos(
    payload: PhotoOrderUpdate,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
) -> List[PhotoRead]:
    photos = {p.id: p for p in await _list_own_photos(db, current_profile.id)}

    unknown = [pid for pid in payload.photo_ids if pid not in photos]
    if unknown:
        raise HTTPException(status_code=404, detail=f"Photo not found: {unknown[0]}")
    if len(set(payload.photo_ids)) != len(payload.photo_ids):
        raise HTTPException(status_code=400, detail="Duplicate photo ids in order")

    for index, photo_id in enumerate(payload.photo_ids):
        photos[photo_id].sort_order = index
    # не перечисленные фото идут следом, сохраняя прежний порядок
    listed = set(payload.photo_ids)
    rest = [p for p in photos.values() if p.id not in listed]
    for index, photo in enumerate(rest, start=len(payload.photo_ids)):
        photo.sort_order = index
    await db.commit()

    return [PhotoRead.model_validate(p) for p in await _list_own_photos(db, current_profile.id)]


@router.put(
    "/bulk",
    response_model=List[PhotoRead],
    summary="Сохранить порядок и видимость сразу для нескольких фото",
)
async def bulk_update_photos(
    payload: PhotoBulkUpdate,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
) -> List[PhotoRead]:
    photos = {p.id: p for p in await _list_own_photos(db, current_profile.id)}

    for item in payload.updates:
        photo = photos.get(item.id)
        if photo is None:
            raise HTTPException(status_code=404, detail=f"Photo not found: {item.id}")
        photo.sort_order = item.sort_order
        photo.is_visible = item.is_visible
    await db.commit()

    return [PhotoRead.model_validate(p) for p in await _list_own_photos(db, current_profile.id)]


@router.delete(
    "/{photo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить фото и файлы из хранилища",
)
async def delete_photo(
    photo_id: str = Path(..., description="ID фотографии"),
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
):
    photo = await _get_own_photo(db, photo_id, current_profile.id)
    keys = (photo.s3_key, photo.thumbnail_key)

    await db.execute(delete(Photo).where(Photo.id == photo.id))
    await db.commit()

    # Файлы удаляем по возможности: запись в БД уже удалена
    for key in keys:
        await run_in_threadpool(delete_file_from_s3_quietly, key, settings.AWS_S3_BUCKET_NAME)
    return
