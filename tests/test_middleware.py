from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route

from core.middleware import (
    PORTFOLIO_USERNAME_HEADER,
    PortfolioSubdomainMiddleware,
    belongs_to_main_domain,
)
from core.security import create_access_token
from factories import FakeProfileSource, make_photo, make_profile
from main import create_app
from routers.portfolio import get_profile_source


class UnavailableSource(FakeProfileSource):
    async def get_by_username(self, username):
        raise OperationalError("SELECT profiles", {}, Exception("pool exhausted"))


async def test_subdomain_root_serves_portfolio(client):
    resp = await client.get("/", headers={"host": "jane.example.com"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["username"] == "jane"
    assert [p["id"] for p in body["photos"]] == ["p-c", "p-a"]
    assert body["section"] is None
    assert resp.headers[PORTFOLIO_USERNAME_HEADER] == "jane"


async def test_subdomain_matches_main_domain_path(client):
    via_subdomain = await client.get("/", headers={"host": "JANE.example.com:443"})
    via_path = await client.get("/jane", headers={"host": "example.com"})

    assert via_subdomain.status_code == via_path.status_code == 200
    assert via_subdomain.json() == via_path.json()
    assert PORTFOLIO_USERNAME_HEADER not in via_path.headers


async def test_subdomain_path_becomes_section(client):
    resp = await client.get("/gallery", headers={"host": "jane.example.com"})

    assert resp.status_code == 200
    assert resp.json()["section"] == "gallery"


async def test_reserved_subdomain_passes_through(client):
    resp = await client.get("/", headers={"host": "www.example.com"})

    assert resp.status_code == 200
    assert resp.json() == {"message": "Model Portfolio Backend"}
    assert PORTFOLIO_USERNAME_HEADER not in resp.headers


async def test_bare_domain_passes_through(client):
    resp = await client.get("/health", headers={"host": "example.com"})

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "portfolio_domain": "example.com"}


async def test_main_app_path_on_subdomain_redirects(client):
    resp = await client.get("/dashboard?tab=photos", headers={"host": "jane.example.com"})

    assert resp.status_code == 307
    assert resp.headers["location"] == "https://example.com/dashboard?tab=photos"


async def test_client_cannot_inject_username_header(client, source):
    resp = await client.get(
        "/",
        headers={"host": "jane.example.com", PORTFOLIO_USERNAME_HEADER: "mallory"},
    )

    assert resp.status_code == 200
    assert resp.headers[PORTFOLIO_USERNAME_HEADER] == "jane"
    assert source.lookups == ["jane"]


async def test_unknown_subdomain_is_404(client):
    resp = await client.get("/", headers={"host": "ghost.example.com"})

    assert resp.status_code == 404
    assert resp.json() == {"detail": "Profile not found"}


async def test_private_and_missing_profiles_look_identical(app, client):
    app.dependency_overrides[get_profile_source] = lambda: FakeProfileSource(
        profiles=[make_profile(is_public=False)]
    )

    private = await client.get("/", headers={"host": "jane.example.com"})
    missing = await client.get("/", headers={"host": "ghost.example.com"})

    assert private.status_code == missing.status_code == 404
    assert private.json() == missing.json()


async def test_owner_sees_private_preview(app, client):
    app.dependency_overrides[get_profile_source] = lambda: FakeProfileSource(
        profiles=[make_profile(is_public=False)],
        photos=[make_photo("p-1", 0)],
    )
    token = create_access_token("owner-1")

    resp = await client.get(
        "/",
        headers={"host": "jane.example.com", "Authorization": f"Bearer {token}"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["is_owner"] is True
    assert body["preview_banner"] is True


async def test_store_outage_is_503(app, client):
    app.dependency_overrides[get_profile_source] = lambda: UnavailableSource()

    resp = await client.get("/", headers={"host": "jane.example.com"})

    assert resp.status_code == 503
    assert resp.json() == {"detail": "Portfolio temporarily unavailable"}


async def test_cors_allows_portfolio_subdomain(client):
    resp = await client.get(
        "/health",
        headers={"host": "example.com", "origin": "https://jane.example.com"},
    )

    assert resp.headers["access-control-allow-origin"] == "https://jane.example.com"


async def test_localhost_subdomain_in_local_development(local_routing):
    app = create_app(local_routing, create_tables=False)
    app.dependency_overrides[get_profile_source] = lambda: FakeProfileSource(
        profiles=[make_profile(username="studio")]
    )

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost:3000") as c:
        resp = await c.get("/about", headers={"host": "studio.localhost:3000"})

    assert resp.status_code == 200
    assert resp.json()["username"] == "studio"
    assert resp.json()["section"] == "about"


def test_belongs_to_main_domain():
    assert belongs_to_main_domain("/dashboard")
    assert belongs_to_main_domain("/profile/me")
    assert not belongs_to_main_domain("/")
    assert not belongs_to_main_domain("/dashboards-archive")
    assert not belongs_to_main_domain("/gallery")


async def test_rewritten_raw_path_stays_percent_encoded(routing):
    async def echo(request):
        return JSONResponse({
            "path": request.scope["path"],
            "raw_path": request.scope["raw_path"].decode("ascii"),
        })

    inner = Starlette(routes=[Route("/{rest:path}", echo)])
    inner.add_middleware(PortfolioSubdomainMiddleware, config=routing)

    async with AsyncClient(transport=ASGITransport(app=inner), base_url="http://example.com") as c:
        resp = await c.get("/caf%C3%A9%20menu", headers={"host": "jane.example.com"})

    assert resp.json() == {
        "path": "/jane/café menu",
        "raw_path": "/jane/caf%C3%A9%20menu",
    }
