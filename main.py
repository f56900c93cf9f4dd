import logging
import re
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.database import engine
from core.middleware import PortfolioSubdomainMiddleware
from core.routing import RoutingConfig
from models.base import Base
# модели должны быть зарегистрированы до create_all
from models import photo, photo_event, profile, service  # noqa: F401

from routers.health import router as health_router
from routers.profile import router as profile_router
from routers.photos import router as photos_router
from routers.templates import router as templates_router
from routers.analytics import router as analytics_router
from routers.portfolio import router as portfolio_router

logger = logging.getLogger("uvicorn.error")


def create_app(routing: Optional[RoutingConfig] = None, create_tables: bool = True) -> FastAPI:
    routing = routing or RoutingConfig.from_settings(settings)

    app = FastAPI(
        title="Model Portfolio Backend",
        version="0.1.0",
        description="Backend портфолио для моделей: профили, фото, шаблоны, публичные поддомены",
    )
    app.state.routing_config = routing

    @app.middleware("http")
    async def log_request_time(request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{request.method} {request.url.path} completed in {process_time:.2f} ms"
        )
        return response

    # Снаружи логирования: rewrite делается до роутинга
    app.add_middleware(PortfolioSubdomainMiddleware, config=routing)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[routing.site_url],
        allow_origin_regex=r"https://[a-z0-9_-]+\." + re.escape(routing.base_domain),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", summary="Основной домен")
    async def root():
        return {"message": "Model Portfolio Backend"}

    app.include_router(health_router)
    app.include_router(profile_router)
    app.include_router(photos_router)
    app.include_router(templates_router)
    app.include_router(analytics_router)
    # /{username} ловит всё остальное, поэтому строго последним
    app.include_router(portfolio_router)

    if create_tables:
        @app.on_event("startup")
        async def on_startup():
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Portfolio routing on base domain %s", routing.base_domain)

        @app.on_event("shutdown")
        async def shutdown():
            # Закрываем все соединения пула
            await engine.dispose()

    return app


app = create_app()
