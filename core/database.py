import logging
from typing import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from .config import settings

logger = logging.getLogger(__name__)

# pool_pre_ping: после рестарта Postgres первый запрос не должен падать на мёртвом соединении
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Сессия на один запрос: Depends(get_db) в роутерах.
    Незакоммиченная транзакция откатывается, если обработчик упал на ошибке БД.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except SQLAlchemyError:
            logger.warning("Rolling back session after database error")
            await session.rollback()
            raise
