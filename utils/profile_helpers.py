"""Утилиты для профиля: валидация полей и преобразование модели в схему."""
import re
from typing import Any, Dict, FrozenSet, Optional

from core.middleware import MAIN_DOMAIN_PATHS
from core.routing import RESERVED_SUBDOMAINS, RoutingConfig
from models.profile import Profile
from schemas.profile import ProfileRead, ProfileUpdate
from utils.portfolio_url import portfolio_url
from utils.sanitize import clean_text, sanitize_html

USERNAME_RE = re.compile(r"^[a-z0-9_-]{3,20}$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+1\s\(\d{3}\)\s\d{3}-\d{4}$")

USERNAME_ERROR = (
    "Username must be 3-20 characters, lowercase letters, numbers, "
    "hyphens, or underscores only"
)
RESERVED_USERNAME_ERROR = "This username is reserved"

# Такие имена не открыть ни как поддомен, ни как /{username}: их занимают роуты приложения
RESERVED_USERNAMES: FrozenSet[str] = (
    RESERVED_SUBDOMAINS
    | frozenset(path.strip("/") for path in MAIN_DOMAIN_PATHS)
    | frozenset({"health", "docs", "redoc"})
)

# Поля, которые просто чистятся strip() и пустое -> None
PLAIN_TEXT_FIELDS = (
    "shoe_size", "hair_color", "eye_color",
    "agency", "agency_email", "agency_phone", "agency_instagram",
    "instagram", "tiktok", "website", "accent_color",
)
NUMERIC_FIELDS = ("height_cm", "bust_cm", "waist_cm", "hips_cm")


class ProfileValidationError(ValueError):
    pass


def normalize_username(username: Optional[str]) -> Optional[str]:
    if username is None:
        return None
    cleaned = username.strip().lower()
    return cleaned or None


def is_valid_username(username: str) -> bool:
    return bool(USERNAME_RE.match(username))


def is_reserved_username(username: str) -> bool:
    return username in RESERVED_USERNAMES


def build_profile_changes(payload: ProfileUpdate) -> Dict[str, Any]:
    """
    Превращает ProfileUpdate в словарь изменений для модели.
    Учитываются только явно переданные поля. Бросает ProfileValidationError.
    """
    data = payload.model_dump(exclude_unset=True)
    changes: Dict[str, Any] = {}

    if "username" in data:
        username = normalize_username(data["username"])
        if username is not None and not is_valid_username(username):
            raise ProfileValidationError(USERNAME_ERROR)
        if username is not None and is_reserved_username(username):
            raise ProfileValidationError(RESERVED_USERNAME_ERROR)
        changes["username"] = username

    if "display_name" in data:
        changes["display_name"] = clean_text(data["display_name"], max_length=100)
    if "location" in data:
        changes["location"] = clean_text(data["location"], max_length=100)
    if "bio" in data:
        changes["bio"] = sanitize_html(clean_text(data["bio"]))

    for field in PLAIN_TEXT_FIELDS:
        if field in data:
            changes[field] = clean_text(data[field])

    for field in NUMERIC_FIELDS:
        if field in data:
            changes[field] = data[field]

    email = changes.get("agency_email")
    if email and not EMAIL_RE.match(email):
        raise ProfileValidationError("Please enter a valid agency email address")

    phone = changes.get("agency_phone")
    if phone and not PHONE_RE.match(phone):
        raise ProfileValidationError("Agency phone must be in format: +1 (555) 123-4567")

    return changes


def to_profile_read(profile: Profile, config: RoutingConfig) -> ProfileRead:
    read = ProfileRead.model_validate(profile)
    if profile.username:
        read.portfolio_url = portfolio_url(profile.username, config)
    return read
