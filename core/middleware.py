import logging
from typing import Tuple
from urllib.parse import quote

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from core.routing import RoutingConfig, TenantDomain, classify_host, rewrite_path

logger = logging.getLogger(__name__)

PORTFOLIO_USERNAME_HEADER = "x-portfolio-username"

# Разделы основного приложения: с поддомена портфолио уводим на основной домен
MAIN_DOMAIN_PATHS: Tuple[str, ...] = (
    "/dashboard",
    "/settings",
    "/onboarding",
    "/login",
    "/signup",
    "/auth",
    "/pricing",
    "/api",
    "/profile",
    "/photos",
    "/analytics",
    "/templates",
)


def belongs_to_main_domain(path: str) -> bool:
    return any(path == prefix or path.startswith(prefix + "/") for prefix in MAIN_DOMAIN_PATHS)


class PortfolioSubdomainMiddleware(BaseHTTPMiddleware):
    """
    username.<base-domain>/<path> обслуживается так же, как /<username>/<path>
    на основном домене. Это внутренний rewrite: адрес у клиента не меняется.
    """

    def __init__(self, app: ASGIApp, config: RoutingConfig):
        super().__init__(app)
        self.config = config

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        host = request.headers.get("host", "")
        decision = classify_host(host, self.config)
        if not isinstance(decision, TenantDomain):
            return await call_next(request)

        username = decision.username
        path = request.scope["path"]

        if belongs_to_main_domain(path):
            target = self.config.site_url.rstrip("/") + path
            query = request.scope.get("query_string", b"").decode("latin-1")
            if query:
                target = f"{target}?{query}"
            return RedirectResponse(target, status_code=307)

        new_path = rewrite_path(path, username)
        logger.debug("Rewriting %s%s -> %s", host, path, new_path)

        request.scope["path"] = new_path
        request.scope["raw_path"] = quote(new_path).encode("ascii")
        headers = [
            (name, value)
            for name, value in request.scope["headers"]
            if name != PORTFOLIO_USERNAME_HEADER.encode("latin-1")
        ]
        headers.append((PORTFOLIO_USERNAME_HEADER.encode("latin-1"), username.encode("latin-1")))
        request.scope["headers"] = headers
        request.state.portfolio_username = username

        response = await call_next(request)
        response.headers[PORTFOLIO_USERNAME_HEADER] = username
        return response
