"""
Классификация хоста запроса: основной домен или поддомен портфолио.

janemodel.example.com -> TenantDomain("janemodel")
example.com, www.example.com, 127.0.0.1 -> MainDomain
"""
import re
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Union
from urllib.parse import urlparse

from starlette.requests import Request

RESERVED_SUBDOMAINS: FrozenSet[str] = frozenset({
    "www",
    "api",
    "app",
    "dashboard",
    "admin",
    "mail",
    "ftp",
    "staging",
    "dev",
})

LOCAL_SUFFIX = "localhost"

_LABEL_RE = re.compile(r"^[a-z0-9_-]+$")
_HAS_ALNUM_RE = re.compile(r"[a-z0-9]")


@dataclass(frozen=True)
class MainDomain:
    pass


@dataclass(frozen=True)
class TenantDomain:
    username: str


HostClassification = Union[MainDomain, TenantDomain]


@dataclass(frozen=True)
class RoutingConfig:
    base_domain: str
    site_url: str = "http://localhost:8000"
    local_development: bool = False
    reserved: FrozenSet[str] = field(default=RESERVED_SUBDOMAINS)

    def __post_init__(self):
        base = (self.base_domain or "").strip().lower().rstrip(".")
        if not base or not all(split_labels(base)):
            raise ValueError(f"Invalid portfolio base domain: {self.base_domain!r}")
        object.__setattr__(self, "base_domain", base)
        object.__setattr__(self, "reserved", frozenset(r.lower() for r in self.reserved))

    @classmethod
    def from_settings(cls, settings) -> "RoutingConfig":
        """PORTFOLIO_DOMAIN, а если не задан - хост из SITE_URL."""
        base = settings.PORTFOLIO_DOMAIN or urlparse(settings.SITE_URL).hostname or ""
        return cls(
            base_domain=base,
            site_url=settings.SITE_URL,
            local_development=settings.is_local_development,
        )


def strip_port(hostname: str) -> Optional[str]:
    """
    Убирает порт и завершающую точку, приводит к нижнему регистру.
    Для IPv6-литералов ([::1]:3000) возвращает None.
    """
    host = (hostname or "").strip().lower()
    if host.startswith("["):
        return None
    host = host.split(":", 1)[0]
    if host.endswith("."):
        host = host[:-1]
    return host


def split_labels(host: str) -> List[str]:
    if not host:
        return []
    return host.split(".")


def is_valid_label(label: str) -> bool:
    return bool(_LABEL_RE.match(label)) and bool(_HAS_ALNUM_RE.search(label))


def classify_host(hostname: str, config: RoutingConfig) -> HostClassification:
    host = strip_port(hostname)
    if not host:
        return MainDomain()

    labels = split_labels(host)
    # пустая метка где угодно (a..b, .example.com) - хост некорректен
    if not all(labels):
        return MainDomain()

    # локальная разработка: username.localhost:3000
    matches_local = (
        config.local_development
        and len(labels) >= 2
        and host.endswith("." + LOCAL_SUFFIX)
    )

    if not matches_local:
        base_labels = split_labels(config.base_domain)
        if len(labels) <= len(base_labels):
            return MainDomain()
        if ".".join(labels[1:]) != config.base_domain:
            return MainDomain()

    candidate = labels[0]
    if candidate in config.reserved or not is_valid_label(candidate):
        return MainDomain()

    return TenantDomain(username=candidate)


def rewrite_path(path: str, username: str) -> str:
    """/ -> /{username}, /gallery -> /{username}/gallery"""
    if not path or path == "/":
        return f"/{username}"
    if not path.startswith("/"):
        path = "/" + path
    return f"/{username}{path}"


def get_routing_config(request: Request) -> RoutingConfig:
    """Depends(): конфиг кладётся в app.state при создании приложения."""
    return request.app.state.routing_config
