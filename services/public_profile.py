"""
Сборка публичной проекции портфолио по username.

Одинаково обслуживает /{username} на основном домене и
{username}.<base-domain> после rewrite в middleware.
"""
import logging
from typing import List, Optional, Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models.photo import Photo
from models.profile import Profile
from models.service import Service
from schemas.portfolio import PublicPhoto, PublicProfileRead, PublicSocial, PublicStats
from schemas.profile import ServiceRead
from services.templates import resolve_template_id

logger = logging.getLogger(__name__)


class ProfileNotFound(Exception):
    """Нет такого профиля ИЛИ профиль закрыт для этого посетителя. Снаружи не различаются."""


class DataStoreUnavailable(Exception):
    """Хранилище не ответило во время сборки проекции."""


class ProfileSource(Protocol):
    async def get_by_username(self, username: str) -> Optional[Profile]: ...

    async def list_photos(self, profile_id: str) -> Sequence[Photo]: ...

    async def list_services(self, profile_id: str) -> Sequence[Service]: ...


class ProfileRepository:
    """Чтение профиля, фото и услуг из БД."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_username(self, username: str) -> Optional[Profile]:
        result = await self.session.execute(
            select(Profile).where(Profile.username == username)
        )
        return result.scalar_one_or_none()

    async def list_photos(self, profile_id: str) -> Sequence[Photo]:
        result = await self.session.execute(
            select(Photo)
            .where(Photo.profile_id == profile_id)
            .order_by(Photo.sort_order.asc(), Photo.created_at.asc(), Photo.id.asc())
        )
        return result.scalars().all()

    async def list_services(self, profile_id: str) -> Sequence[Service]:
        result = await self.session.execute(
            select(Service)
            .where(Service.profile_id == profile_id)
            .order_by(Service.sort_order.asc())
        )
        return result.scalars().all()


def normalize_username(username: Optional[str]) -> str:
    return (username or "").strip().lower()


def visible_photos(photos: Sequence[Photo]) -> List[Photo]:
    """Только is_visible, по возрастанию sort_order (сортировка стабильная)."""
    shown = [p for p in photos if p.is_visible]
    return sorted(shown, key=lambda p: p.sort_order)


def build_projection(
    profile: Profile,
    photos: Sequence[Photo],
    services: Sequence[Service],
    is_owner: bool,
) -> PublicProfileRead:
    return PublicProfileRead(
        username=profile.username,
        display_name=profile.display_name or "",
        bio=profile.bio or "",
        avatar_url=profile.avatar_url or "",
        agency=profile.agency,
        location=profile.location,
        stats=PublicStats(
            height_cm=profile.height_cm,
            bust_cm=profile.bust_cm,
            waist_cm=profile.waist_cm,
            hips_cm=profile.hips_cm,
            shoe_size=profile.shoe_size,
            hair_color=profile.hair_color,
            eye_color=profile.eye_color,
        ),
        social=PublicSocial(
            instagram=profile.instagram,
            tiktok=profile.tiktok,
            website=profile.website,
        ),
        photos=[
            PublicPhoto(
                id=p.id,
                url=p.url,
                thumbnail_url=p.thumbnail_url or p.url,
                caption=p.caption,
                sort_order=p.sort_order,
                width=p.width,
                height=p.height,
            )
            for p in visible_photos(photos)
        ],
        services=[ServiceRead.model_validate(s) for s in services],
        template=resolve_template_id(profile.selected_template),
        accent_color=profile.accent_color,
        is_public=bool(profile.is_public),
        is_owner=is_owner,
        preview_banner=is_owner and not profile.is_public,
    )


async def resolve_public_profile(
    source: ProfileSource,
    username: str,
    viewer_id: Optional[str] = None,
) -> PublicProfileRead:
    """
    Бросает ProfileNotFound, если профиля нет или он закрыт для посетителя,
    и DataStoreUnavailable, если хранилище не ответило. Частичных ответов нет:
    ошибка при чтении фото валит всю сборку.
    """
    normalized = normalize_username(username)
    if not normalized:
        raise ProfileNotFound(username)

    try:
        profile = await source.get_by_username(normalized)
        if profile is None:
            raise ProfileNotFound(normalized)

        is_owner = viewer_id is not None and viewer_id == profile.id
        if not profile.is_public and not is_owner:
            raise ProfileNotFound(normalized)

        photos = await source.list_photos(profile.id)
        services = await source.list_services(profile.id)
    except SQLAlchemyError as exc:
        logger.exception("Portfolio lookup for %r failed", normalized)
        raise DataStoreUnavailable(normalized) from exc

    return build_projection(profile, photos, services, is_owner)
