"""Application settings.

Values come from ``VIDTUBE_*`` environment variables or a ``.env`` file and
are validated once at startup. The resulting ``Settings`` object is frozen.

Token secrets are optional here: a missing secret is only an error when a
token of that class is issued or verified (and at application startup,
where both are checked).
"""

from datetime import timedelta
from functools import lru_cache
from typing import Literal
from urllib.parse import urlparse

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "production", "testing"]


class Settings(BaseSettings):
    """VidTube configuration."""

    model_config = SettingsConfigDict(
        env_prefix="VIDTUBE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    app_name: str = "VidTube"
    app_version: str = "0.1.0"
    environment: Environment = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"

    # uvicorn
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = Field(default=1, ge=1)

    # Persistence; pool settings are ignored for SQLite
    database_url: str = "sqlite+aiosqlite:///./vt_data/vidtube.db"
    db_echo: bool = False
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600

    # Sessions
    access_token_secret: SecretStr | None = None
    refresh_token_secret: SecretStr | None = None
    access_token_expire_minutes: int = Field(default=15, gt=0)
    refresh_token_expire_days: int = Field(default=10, gt=0)
    cookie_samesite: Literal["lax", "strict", "none"] = "lax"

    cors_origins: list[str] = Field(default=["http://localhost:3000", "http://localhost:5173"])
    cors_allow_credentials: bool = True

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Avatars and cover images
    storage_path: str = "./vt_data/media"
    media_base_url: str = "http://localhost:8000/media"
    max_file_size: int = Field(default=5 * 1024 * 1024, gt=0, description="Bytes")
    allowed_image_types: list[str] = Field(
        default=["image/jpeg", "image/png", "image/gif", "image/webp"]
    )

    @field_validator("cors_origins", "allowed_image_types", mode="before")
    @classmethod
    def split_csv(cls, v: str | list[str]) -> list[str]:
        """Accept ``a,b,c`` as well as a list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("access_token_secret", "refresh_token_secret", mode="before")
    @classmethod
    def blank_secret_is_unset(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def check_sqlite_workers(self) -> "Settings":
        """SQLite cannot be shared by several uvicorn worker processes."""
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                f"SQLite does not support multiple worker processes (workers={self.workers})"
            )
        return self

    @property
    def access_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.access_token_expire_minutes)

    @property
    def refresh_token_ttl(self) -> timedelta:
        return timedelta(days=self.refresh_token_expire_days)

    @property
    def media_mount_path(self) -> str:
        """URL path under which stored media is served, e.g. ``/media``."""
        return urlparse(self.media_base_url).path.rstrip("/") or "/media"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first call."""
    return Settings()
