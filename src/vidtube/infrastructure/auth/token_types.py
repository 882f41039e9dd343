"""Token types and claim models for VidTube authentication.

Defines the claim sets carried by access and refresh tokens and the typed
result returned by token verification.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TokenClass(str, Enum):
    """Token classes, each signed with its own secret."""

    ACCESS = "access"
    REFRESH = "refresh"


class AccessClaims(BaseModel):
    """Identity claims embedded in an access token."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1, description="User ID")
    email: str = Field(..., description="User's email address")
    username: str = Field(..., description="User's username")
    display_name: str = Field(..., alias="displayName", description="User's full name")


class RefreshClaims(BaseModel):
    """Identity claim embedded in a refresh token."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="User ID")


class VerificationStatus(str, Enum):
    """Outcome of verifying a presented token."""

    VALID = "valid"
    EXPIRED = "expired"
    INVALID = "invalid"


@dataclass(frozen=True)
class VerificationResult:
    """Typed result of token verification.

    ``claims`` holds the decoded payload only when ``status`` is VALID.
    """

    status: VerificationStatus
    claims: dict[str, Any] | None = None
    reason: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.status is VerificationStatus.VALID

    @property
    def is_expired(self) -> bool:
        return self.status is VerificationStatus.EXPIRED
