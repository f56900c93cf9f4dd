from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from core.routing import RoutingConfig
from factories import FakeProfileSource, make_photo, make_profile


@pytest.fixture
def routing() -> RoutingConfig:
    return RoutingConfig(base_domain="example.com", site_url="https://example.com")


@pytest.fixture
def local_routing() -> RoutingConfig:
    return RoutingConfig(
        base_domain="example.com",
        site_url="http://localhost:3000",
        local_development=True,
    )


@pytest.fixture
def source() -> FakeProfileSource:
    return FakeProfileSource(
        profiles=[make_profile()],
        photos=[
            make_photo("p-a", sort_order=2, is_visible=True),
            make_photo("p-b", sort_order=0, is_visible=False),
            make_photo("p-c", sort_order=1, is_visible=True),
        ],
    )


@pytest.fixture
def mock_db_session() -> AsyncMock:
    session = AsyncMock(spec=AsyncSession)
    return session


@pytest.fixture
def app(routing, source, mock_db_session):
    from core.database import get_db
    from main import create_app
    from routers.portfolio import get_profile_source

    application = create_app(routing, create_tables=False)
    application.dependency_overrides[get_profile_source] = lambda: source

    async def _db():
        yield mock_db_session

    application.dependency_overrides[get_db] = _db
    return application


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://example.com") as c:
        yield c
