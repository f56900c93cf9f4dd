import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status, UploadFile, File
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from core.config import settings
from core.database import get_db
from core.routing import RoutingConfig, get_routing_config
from core.security import get_current_profile, get_optional_viewer_id
from models.profile import Profile
from models.service import Service
from schemas.profile import (
    OnboardingStatus,
    ProfileRead,
    ProfileUpdate,
    ServiceRead,
    ServicesUpdate,
    UsernameAvailability,
    VisibilityUpdate,
)
from schemas.template import TemplateSelect
from services.templates import get_template
from utils.profile_helpers import (
    ProfileValidationError,
    build_profile_changes,
    is_reserved_username,
    normalize_username,
    to_profile_read,
)
from utils.s3 import delete_file_from_s3_quietly, public_url, upload_avatar_to_s3
from utils.sanitize import clean_text, sanitize_html

router = APIRouter(prefix="/profile", tags=["profile"])
logger = logging.getLogger(__name__)

AVATAR_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}
MAX_AVATAR_BYTES = 5 * 1024 * 1024


async def _username_taken(db: AsyncSession, username: str, profile_id: str) -> bool:
    res = await db.execute(
        select(Profile.id).where(Profile.username == username, Profile.id != profile_id)
    )
    return res.scalar_one_or_none() is not None


@router.get(
    "/me",
    response_model=ProfileRead,
    summary="Получить свой профиль",
)
async def read_my_profile(
    current_profile: Profile = Depends(get_current_profile),
    routing: RoutingConfig = Depends(get_routing_config),
) -> ProfileRead:
    return to_profile_read(current_profile, routing)


@router.put(
    "/me",
    response_model=ProfileRead,
    summary="Обновить свой профиль",
)
async def update_my_profile(
    payload: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
    routing: RoutingConfig = Depends(get_routing_config),
) -> ProfileRead:
    try:
        changes = build_profile_changes(payload)
    except ProfileValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    # username - ключ роутинга: у открытого портфолио его не меняем
    if (
        "username" in changes
        and current_profile.is_public
        and changes["username"] != current_profile.username
    ):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username cannot be changed while the portfolio is public",
        )

    username = changes.get("username")
    if username and await _username_taken(db, username, current_profile.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username is already taken")

    for field, value in changes.items():
        setattr(current_profile, field, value)

    db.add(current_profile)
    try:
        await db.commit()
    except IntegrityError:
        # username заняли между проверкой и коммитом
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username is already taken")
    await db.refresh(current_profile)
    return to_profile_read(current_profile, routing)


@router.get(
    "/username-available",
    response_model=UsernameAvailability,
    summary="Проверить, свободен ли username",
)
async def check_username_available(
    username: str = Query(..., description="Желаемый username"),
    db: AsyncSession = Depends(get_db),
    viewer_id: Optional[str] = Depends(get_optional_viewer_id),
) -> UsernameAvailability:
    normalized = normalize_username(username) or ""
    if len(normalized) < 3 or is_reserved_username(normalized):
        return UsernameAvailability(username=normalized, available=False)

    res = await db.execute(select(Profile.id).where(Profile.username == normalized))
    owner_id = res.scalar_one_or_none()
    # свой собственный username считается свободным
    available = owner_id is None or owner_id == viewer_id
    return UsernameAvailability(username=normalized, available=available)


@router.put(
    "/me/visibility",
    response_model=ProfileRead,
    summary="Открыть или закрыть портфолио",
)
async def update_visibility(
    payload: VisibilityUpdate,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
    routing: RoutingConfig = Depends(get_routing_config),
) -> ProfileRead:
    if payload.is_public and not current_profile.username:
        raise HTTPException(status_code=400, detail="Choose a username before publishing")

    current_profile.is_public = payload.is_public
    db.add(current_profile)
    await db.commit()
    await db.refresh(current_profile)
    return to_profile_read(current_profile, routing)


@router.put(
    "/me/template",
    response_model=ProfileRead,
    summary="Выбрать шаблон портфолио",
)
async def select_template(
    payload: TemplateSelect,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
    routing: RoutingConfig = Depends(get_routing_config),
) -> ProfileRead:
    template = get_template(payload.template_id)
    if template is None:
        raise HTTPException(status_code=400, detail=f"Unknown template: {payload.template_id}")

    current_profile.selected_template = template.id
    db.add(current_profile)
    await db.commit()
    await db.refresh(current_profile)
    return to_profile_read(current_profile, routing)


@router.put(
    "/me/services",
    response_model=List[ServiceRead],
    summary="Заменить список услуг",
)
async def replace_services(
    payload: ServicesUpdate,
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
) -> List[ServiceRead]:
    await db.execute(delete(Service).where(Service.profile_id == current_profile.id))

    services = [
        Service(
            profile_id=current_profile.id,
            title=item.title.strip()[:100],
            description=sanitize_html(clean_text(item.description)),
            price=clean_text(item.price, max_length=50),
            sort_order=item.sort_order if item.sort_order is not None else index,
        )
        for index, item in enumerate(payload.services)
    ]
    db.add_all(services)
    await db.commit()

    res = await db.execute(
        select(Service)
        .where(Service.profile_id == current_profile.id)
        .order_by(Service.sort_order.asc())
    )
    return [ServiceRead.model_validate(s) for s in res.scalars().all()]


@router.post(
    "/me/avatar",
    response_model=ProfileRead,
    summary="Загрузить аватар",
)
async def upload_avatar(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
    routing: RoutingConfig = Depends(get_routing_config),
) -> ProfileRead:
    if file.content_type not in AVATAR_TYPES:
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Please upload a JPEG, PNG, WebP, or GIF.",
        )
    if file.size is not None and file.size > MAX_AVATAR_BYTES:
        raise HTTPException(status_code=400, detail="File too large. Maximum size is 5MB.")

    try:
        s3_key = await run_in_threadpool(
            upload_avatar_to_s3,
            file.file,
            current_profile.id,
            settings.AWS_S3_BUCKET_NAME,
        )
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception as e:
        logger.exception("Avatar upload failed for %s", current_profile.id)
        raise HTTPException(status_code=500, detail=str(e))

    current_profile.avatar_url = public_url(s3_key)
    db.add(current_profile)
    try:
        await db.commit()
    except SQLAlchemyError:
        logger.exception("Avatar for %s was not saved", current_profile.id)
        await db.rollback()
        await run_in_threadpool(delete_file_from_s3_quietly, s3_key, settings.AWS_S3_BUCKET_NAME)
        raise HTTPException(status_code=500, detail="Failed to save avatar")
    await db.refresh(current_profile)
    return to_profile_read(current_profile, routing)


@router.get(
    "/onboarding-status",
    response_model=OnboardingStatus,
    summary="Статус онбординга текущего пользователя",
)
async def onboarding_status(
    db: AsyncSession = Depends(get_db),
    viewer_id: Optional[str] = Depends(get_optional_viewer_id),
) -> OnboardingStatus:
    if viewer_id is None:
        return OnboardingStatus(is_logged_in=False)

    profile = await db.get(Profile, viewer_id)
    return OnboardingStatus(
        is_logged_in=True,
        onboarding_completed=bool(profile and profile.onboarding_completed),
        display_name=profile.display_name if profile else None,
    )


@router.post(
    "/onboarding/complete",
    response_model=OnboardingStatus,
    summary="Завершить онбординг",
)
async def complete_onboarding(
    db: AsyncSession = Depends(get_db),
    current_profile: Profile = Depends(get_current_profile),
) -> OnboardingStatus:
    if not current_profile.username:
        raise HTTPException(status_code=400, detail="Username is required to finish onboarding")

    current_profile.onboarding_completed = True
    db.add(current_profile)
    await db.commit()
    return OnboardingStatus(
        is_logged_in=True,
        onboarding_completed=True,
        display_name=current_profile.display_name,
    )
