from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from core.database import get_db
from core.security import get_optional_viewer_id
from schemas.portfolio import PublicProfileRead
from services.public_profile import (
    DataStoreUnavailable,
    ProfileNotFound,
    ProfileRepository,
    ProfileSource,
    resolve_public_profile,
)

# Подключается последним: /{username} перехватывает всё, что не занято другими роутерами
router = APIRouter(tags=["portfolio"])

NOT_FOUND_DETAIL = "Profile not found"


def get_profile_source(db: AsyncSession = Depends(get_db)) -> ProfileSource:
    return ProfileRepository(db)


async def _resolve(
    username: str,
    source: ProfileSource,
    viewer_id: Optional[str],
) -> PublicProfileRead:
    try:
        return await resolve_public_profile(source, username, viewer_id)
    except ProfileNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)
    except DataStoreUnavailable:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Portfolio temporarily unavailable",
        )


@router.get(
    "/{username}",
    response_model=PublicProfileRead,
    summary="Публичное портфолио по username",
)
async def read_portfolio(
    username: str = Path(..., description="Username модели"),
    source: ProfileSource = Depends(get_profile_source),
    viewer_id: Optional[str] = Depends(get_optional_viewer_id),
) -> PublicProfileRead:
    return await _resolve(username, source, viewer_id)


@router.get(
    "/{username}/{section:path}",
    response_model=PublicProfileRead,
    summary="Раздел публичного портфолио (about, services, contact...)",
)
async def read_portfolio_section(
    username: str = Path(..., description="Username модели"),
    section: str = Path(..., description="Раздел портфолио"),
    source: ProfileSource = Depends(get_profile_source),
    viewer_id: Optional[str] = Depends(get_optional_viewer_id),
) -> PublicProfileRead:
    projection = await _resolve(username, source, viewer_id)
    projection.section = section.strip("/") or None
    return projection
