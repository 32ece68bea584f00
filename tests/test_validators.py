"""Tests for input validators and settings parsing."""

from borohub.config import Settings
from borohub.utils.validators import is_allowed_image, is_valid_handle, is_valid_url


def test_allowed_image_extensions():
    assert is_allowed_image("holiday.JPG")
    assert is_allowed_image("a.webp")
    assert not is_allowed_image("script.sh")
    assert not is_allowed_image("noextension")
    assert not is_allowed_image(None)


def test_valid_url():
    assert is_valid_url("https://cdn.borohub.io/a.png")
    assert is_valid_url("http://example.org")
    assert not is_valid_url("ftp://example.org/file")
    assert not is_valid_url("just text")


def test_valid_handle():
    assert is_valid_handle("alice_92")
    assert is_valid_handle("a.b")
    assert not is_valid_handle("ab")
    assert not is_valid_handle("has space")
    assert not is_valid_handle("x" * 31)


def test_database_url_gets_async_driver():
    base = {"SECRET_KEY": "a", "REFRESH_SECRET_KEY": "b"}

    pg = Settings(DATABASE_URL="postgresql://u:p@db:5432/borohub", **base)
    assert pg.DATABASE_URL == "postgresql+asyncpg://u:p@db:5432/borohub"

    lite = Settings(DATABASE_URL="sqlite:///./local.db", **base)
    assert lite.DATABASE_URL == "sqlite+aiosqlite:///./local.db"


def test_cors_origins_split():
    settings = Settings(
        SECRET_KEY="a",
        REFRESH_SECRET_KEY="b",
        DATABASE_URL="sqlite+aiosqlite:///x.db",
        CORS_ALLOW_ORIGINS="http://localhost:3000, https://borohub.io",
    )
    assert settings.cors_origins == ["http://localhost:3000", "https://borohub.io"]
