from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from models import photo_event  # noqa: F401
from models.photo import Photo
from models.profile import Profile
from models.service import Service

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_profile(**overrides) -> Profile:
    data = dict(
        id="owner-1",
        username="jane",
        display_name="Jane Doe",
        bio="<p>Hi</p>",
        is_public=True,
        selected_template=None,
        subscription_tier="free",
        onboarding_completed=True,
        created_at=NOW,
        updated_at=NOW,
    )
    data.update(overrides)
    return Profile(**data)


def make_photo(photo_id: str, sort_order: int, is_visible: bool = True, **overrides) -> Photo:
    data = dict(
        id=photo_id,
        profile_id="owner-1",
        s3_key=f"owner-1/{photo_id}.jpg",
        url=f"https://cdn.example.com/owner-1/{photo_id}.jpg",
        thumbnail_url=None,
        is_visible=is_visible,
        sort_order=sort_order,
        view_count=0,
        click_count=0,
        created_at=NOW,
    )
    data.update(overrides)
    return Photo(**data)


class FakeProfileSource:
    """Хранилище в памяти с тем же интерфейсом, что и ProfileRepository."""

    def __init__(
        self,
        profiles: Sequence[Profile] = (),
        photos: Sequence[Photo] = (),
        services: Sequence[Service] = (),
    ):
        self.profiles: Dict[str, Profile] = {p.username: p for p in profiles if p.username}
        self.photos: List[Photo] = list(photos)
        self.services: List[Service] = list(services)
        self.lookups: List[str] = []

    async def get_by_username(self, username: str) -> Optional[Profile]:
        self.lookups.append(username)
        return self.profiles.get(username)

    async def list_photos(self, profile_id: str) -> Sequence[Photo]:
        return [p for p in self.photos if p.profile_id == profile_id]

    async def list_services(self, profile_id: str) -> Sequence[Service]:
        return [s for s in self.services if s.profile_id == profile_id]

