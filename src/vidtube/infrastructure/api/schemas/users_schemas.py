"""Pydantic schemas for user profile endpoints."""

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from vidtube.infrastructure.api.schemas.common import CamelModel


class UserPublic(CamelModel):
    """A user as returned to clients.

    Carries no password hash or refresh token field.
    """

    id: str = Field(..., description="User ID")
    username: str = Field(..., description="Unique lower-case username")
    email: str = Field(..., description="User's email address")
    full_name: str = Field(..., description="Display name")
    avatar: str = Field(..., description="Avatar image URL")
    cover_image: str | None = Field(None, description="Cover image URL")
    created_at: datetime = Field(..., description="When the user was created")
    updated_at: datetime = Field(..., description="When the user was last updated")


class UpdateAccountRequest(CamelModel):
    """Request body for updating account details."""

    full_name: str = Field(..., min_length=1, max_length=255, description="New display name")
    email: EmailStr = Field(..., description="New email address")

    @field_validator("full_name")
    @classmethod
    def strip_full_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Full name must not be blank")
        return v


class ChannelProfileResponse(CamelModel):
    """Public channel profile with subscription counts."""

    id: str
    username: str
    full_name: str
    email: str
    avatar: str
    cover_image: str | None = None
    subscribers_count: int = Field(..., description="Users subscribed to this channel")
    channels_subscribed_to_count: int = Field(..., description="Channels this user follows")
    is_subscribed: bool = Field(..., description="Whether the caller is subscribed")


class VideoOwnerSummary(CamelModel):
    """Compact owner info embedded in watch history entries."""

    username: str
    full_name: str
    avatar: str


class WatchedVideoResponse(CamelModel):
    """A video in the user's watch history."""

    id: str
    video_file: str
    thumbnail: str
    title: str
    description: str
    duration: float
    views: int
    owner: VideoOwnerSummary
    created_at: datetime
