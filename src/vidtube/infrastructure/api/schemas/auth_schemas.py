"""Pydantic schemas for authentication endpoints."""

from pydantic import Field

from vidtube.infrastructure.api.schemas.common import CamelModel
from vidtube.infrastructure.api.schemas.users_schemas import UserPublic


class LoginRequest(CamelModel):
    """Request body for login.

    Either ``email`` or ``username`` identifies the user.
    """

    email: str | None = Field(None, description="User's email address")
    username: str | None = Field(None, description="User's username")
    password: str | None = Field(None, description="User's password")

    @property
    def identifier(self) -> str | None:
        return self.username or self.email


class RefreshTokenRequest(CamelModel):
    """Optional body for token refresh when no cookie is sent."""

    refresh_token: str | None = Field(None, description="Refresh token")


class ChangePasswordRequest(CamelModel):
    """Request body for changing the current user's password."""

    old_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=1, description="New password")


class TokenPairResponse(CamelModel):
    """Access and refresh tokens."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")


class LoginResponse(TokenPairResponse):
    """Tokens plus the logged-in user."""

    user: UserPublic = Field(..., description="User information")
