import pytest

from schemas.profile import ProfileUpdate
from services.templates import DEFAULT_TEMPLATE, is_known_template, resolve_template_id
from utils.portfolio_url import portfolio_display_url, portfolio_url
from utils.profile_helpers import (
    RESERVED_USERNAMES,
    ProfileValidationError,
    build_profile_changes,
    is_reserved_username,
    is_valid_username,
    normalize_username,
)


@pytest.mark.parametrize("username", ["abc", "jane_doe", "model-01", "a" * 20])
def test_valid_usernames(username):
    assert is_valid_username(username)


@pytest.mark.parametrize("username", ["ab", "a" * 21, "jane doe", "jane.doe", "Jane"])
def test_invalid_usernames(username):
    assert not is_valid_username(username)


def test_normalize_username():
    assert normalize_username("  JaneDoe ") == "janedoe"
    assert normalize_username("   ") is None
    assert normalize_username(None) is None


def test_only_sent_fields_change():
    changes = build_profile_changes(ProfileUpdate(location="  Paris  "))
    assert changes == {"location": "Paris"}


def test_empty_text_becomes_none():
    changes = build_profile_changes(ProfileUpdate(instagram="   ", agency=""))
    assert changes == {"instagram": None, "agency": None}


def test_display_name_is_truncated():
    changes = build_profile_changes(ProfileUpdate(display_name="x" * 150))
    assert len(changes["display_name"]) == 100


def test_username_is_lowercased():
    changes = build_profile_changes(ProfileUpdate(username="JaneDoe"))
    assert changes["username"] == "janedoe"


def test_bad_username_raises():
    with pytest.raises(ProfileValidationError):
        build_profile_changes(ProfileUpdate(username="no"))


def test_agency_email_is_validated():
    with pytest.raises(ProfileValidationError):
        build_profile_changes(ProfileUpdate(agency_email="booking-at-agency"))
    assert build_profile_changes(ProfileUpdate(agency_email="book@agency.com"))["agency_email"] == "book@agency.com"


def test_agency_phone_format():
    with pytest.raises(ProfileValidationError):
        build_profile_changes(ProfileUpdate(agency_phone="555-1234"))
    changes = build_profile_changes(ProfileUpdate(agency_phone="+1 (555) 123-4567"))
    assert changes["agency_phone"] == "+1 (555) 123-4567"


def test_bio_links_keep_safe_schemes():
    changes = build_profile_changes(
        ProfileUpdate(bio='<a href="javascript:alert(1)">x</a><a href="https://ok.example">y</a>')
    )
    assert "javascript" not in changes["bio"]
    assert 'href="https://ok.example"' in changes["bio"]


def test_portfolio_url(routing, local_routing):
    assert portfolio_url("Jane", routing) == "https://jane.example.com"
    assert portfolio_url("jane", local_routing) == "/jane"
    assert portfolio_url("", routing) == ""


def test_portfolio_display_url(routing, local_routing):
    assert portfolio_display_url("jane", routing) == "jane.example.com"
    assert portfolio_display_url("jane", local_routing) == "jane.localhost"


def test_template_lookup():
    assert is_known_template("ALTAR")
    assert not is_known_template("vaporwave")
    assert resolve_template_id(None) == DEFAULT_TEMPLATE
    assert resolve_template_id("solstice") == "solstice"


def test_reserved_usernames_cover_app_routes():
    for name in ("health", "docs", "redoc", "profile", "photos", "templates", "analytics", "www", "api"):
        assert is_reserved_username(name)
    assert not is_reserved_username("jane")
    assert "jane" not in RESERVED_USERNAMES


def test_reserved_username_raises():
    with pytest.raises(ProfileValidationError):
        build_profile_changes(ProfileUpdate(username="Health"))


def test_clearing_username_is_allowed_by_helper():
    assert build_profile_changes(ProfileUpdate(username=None)) == {"username": None}
