"""Unit tests for configuration management."""

from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from vidtube.core.config import Settings
from vidtube.infrastructure.persistence.database import sqlite_file


def test_defaults(monkeypatch):
    for name in ("VIDTUBE_ACCESS_TOKEN_SECRET", "VIDTUBE_REFRESH_TOKEN_SECRET"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None, environment="development")

    assert settings.access_token_expire_minutes == 15
    assert settings.refresh_token_expire_days == 10
    assert settings.api_prefix == "/api/v1"
    assert settings.access_token_secret is None
    assert settings.refresh_token_secret is None
    assert settings.is_development


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("VIDTUBE_ACCESS_TOKEN_EXPIRE_MINUTES", "5")
    monkeypatch.setenv("VIDTUBE_CORS_ORIGINS", '["https://a.example.com"]')

    settings = Settings(_env_file=None)

    assert settings.access_token_expire_minutes == 5
    assert settings.cors_origins == ["https://a.example.com"]


def test_comma_separated_lists():
    settings = Settings(
        _env_file=None,
        cors_origins="https://a.example.com, https://b.example.com",
        allowed_image_types="image/png,image/jpeg",
    )

    assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]
    assert settings.allowed_image_types == ["image/png", "image/jpeg"]


def test_blank_secret_is_unset(monkeypatch):
    monkeypatch.setenv("VIDTUBE_ACCESS_TOKEN_SECRET", "   ")
    assert Settings(_env_file=None).access_token_secret is None


def test_token_lifetimes_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, access_token_expire_minutes=0)


def test_sqlite_rejects_multiple_workers():
    with pytest.raises(ValidationError, match="SQLite does not support multiple worker"):
        Settings(_env_file=None, database_url="sqlite+aiosqlite:///./x.db", workers=4)


def test_settings_are_immutable(settings):
    with pytest.raises(ValidationError):
        settings.debug = True


@pytest.mark.parametrize(
    "url, expected",
    [
        ("sqlite+aiosqlite:///./vt_data/vidtube.db", Path("vt_data/vidtube.db")),
        ("sqlite+aiosqlite:///:memory:", None),
        ("postgresql+asyncpg://u:p@localhost/vidtube", None),
    ],
)
def test_sqlite_file(url, expected):
    assert sqlite_file(url) == expected


def test_derived_values():
    settings = Settings(
        _env_file=None,
        access_token_expire_minutes=15,
        refresh_token_expire_days=10,
        media_base_url="https://cdn.example.com/files/",
    )

    assert settings.access_token_ttl == timedelta(minutes=15)
    assert settings.refresh_token_ttl == timedelta(days=10)
    assert settings.media_mount_path == "/files"


def test_secrets_are_not_shown_in_repr(settings):
    assert "test-access-secret" not in repr(settings)
    assert settings.access_token_secret.get_secret_value() == "test-access-secret"
