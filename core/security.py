# core/security.py
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException, Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from core.config import settings
from core.database import get_db
from models.profile import Profile

# Токены выдаёт внешний auth-провайдер, здесь мы их только проверяем
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


def create_access_token(subject: str, expires_minutes: int = 60) -> str:
    """Выпускает токен в формате провайдера. Нужен для тестов и локальной разработки."""
    expires = datetime.utcnow() + timedelta(minutes=expires_minutes)
    payload = {"sub": subject, "exp": expires}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_subject(token: str) -> Optional[str]:
    """Возвращает sub из токена или None, если токен невалиден."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    if not subject:
        return None
    return str(subject)


async def get_current_profile_id(token: str = Depends(oauth2_scheme)) -> str:
    profile_id = decode_subject(token)
    if profile_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return profile_id


async def get_optional_viewer_id(
    token: Optional[str] = Depends(optional_oauth2_scheme),
) -> Optional[str]:
    """Анонимный посетитель допустим: тогда None."""
    if not token:
        return None
    return decode_subject(token)


async def get_current_profile(
    profile_id: str = Depends(get_current_profile_id),
    db: AsyncSession = Depends(get_db),
) -> Profile:
    result = await db.execute(select(Profile).where(Profile.id == profile_id))
    profile = result.scalar_one_or_none()
    if not profile:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Profile not found")
    return profile
