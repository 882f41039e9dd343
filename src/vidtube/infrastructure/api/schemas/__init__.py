"""Pydantic schemas for API requests and responses."""

from vidtube.infrastructure.api.schemas.auth_schemas import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    TokenPairResponse,
)
from vidtube.infrastructure.api.schemas.common import ApiResponse, CamelModel, ErrorResponse
from vidtube.infrastructure.api.schemas.users_schemas import (
    ChannelProfileResponse,
    UpdateAccountRequest,
    UserPublic,
    VideoOwnerSummary,
    WatchedVideoResponse,
)

__all__ = [
    "ApiResponse",
    "CamelModel",
    "ChangePasswordRequest",
    "ChannelProfileResponse",
    "ErrorResponse",
    "LoginRequest",
    "LoginResponse",
    "RefreshTokenRequest",
    "TokenPairResponse",
    "UpdateAccountRequest",
    "UserPublic",
    "VideoOwnerSummary",
    "WatchedVideoResponse",
]
