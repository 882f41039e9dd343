"""JWT token services.

Provides issuance and verification of access tokens (short-lived, full
identity claims) and refresh tokens (long-lived, identity id only). Each
token class is signed with its own secret.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from pydantic import ValidationError as PydanticValidationError

from vidtube.core.config import Settings
from vidtube.domain.exceptions import ConfigurationError
from vidtube.infrastructure.auth.token_types import (
    AccessClaims,
    RefreshClaims,
    TokenClass,
    VerificationResult,
    VerificationStatus,
)

ALGORITHM = "HS256"

_REQUIRED_CLAIMS = ["id", "iat", "exp", "jti"]


@dataclass(frozen=True)
class TokenConfig:
    """Immutable signing configuration shared by issuer and verifier."""

    access_secret: str | None
    refresh_secret: str | None
    access_ttl: timedelta
    refresh_ttl: timedelta

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenConfig":
        """Build the token configuration from application settings."""
        access = settings.access_token_secret
        refresh = settings.refresh_token_secret
        return cls(
            access_secret=access.get_secret_value() if access else None,
            refresh_secret=refresh.get_secret_value() if refresh else None,
            access_ttl=settings.access_token_ttl,
            refresh_ttl=settings.refresh_token_ttl,
        )

    def secret_for(self, token_class: TokenClass) -> str:
        """Return the signing secret for a token class.

        Raises:
            ConfigurationError: If the secret is not configured.
        """
        secret = (
            self.access_secret if token_class is TokenClass.ACCESS else self.refresh_secret
        )
        if not secret:
            raise ConfigurationError(f"The {token_class.value} token secret is not configured")
        return secret

    def ttl_for(self, token_class: TokenClass) -> timedelta:
        return self.access_ttl if token_class is TokenClass.ACCESS else self.refresh_ttl

    def validate(self) -> None:
        """Check that both secrets are set and distinct.

        Raises:
            ConfigurationError: If a secret is missing or both are equal.
        """
        access = self.secret_for(TokenClass.ACCESS)
        refresh = self.secret_for(TokenClass.REFRESH)
        if access == refresh:
            raise ConfigurationError("Access and refresh token secrets must differ")


class TokenIssuer:
    """Creates signed, time-bound access and refresh tokens."""

    def __init__(self, config: TokenConfig) -> None:
        self._config = config

    def _encode(self, token_class: TokenClass, claims: dict[str, Any]) -> str:
        secret = self._config.secret_for(token_class)
        now = datetime.now(timezone.utc)
        payload = {
            **claims,
            "iat": now,
            "exp": now + self._config.ttl_for(token_class),
            # iat has one-second resolution; jti keeps tokens issued in the
            # same second distinct
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, secret, algorithm=ALGORITHM)

    def issue_access(self, claims: AccessClaims) -> str:
        """Create an access token carrying the user's identity claims.

        Args:
            claims: Identity claims (id, email, username, displayName).

        Returns:
            Encoded JWT access token.

        Raises:
            ConfigurationError: If the access token secret is unset.
        """
        return self._encode(TokenClass.ACCESS, claims.model_dump(by_alias=True))

    def issue_refresh(self, identity_id: str) -> str:
        """Create a refresh token carrying only the user id.

        Raises:
            ConfigurationError: If the refresh token secret is unset.
        """
        return self._encode(TokenClass.REFRESH, RefreshClaims(id=identity_id).model_dump())


class TokenVerifier:
    """Validates signature and expiry of presented tokens.

    ``verify`` never raises for untrusted input; it always returns a
    ``VerificationResult`` distinguishing valid, expired and invalid tokens.
    """

    def __init__(self, config: TokenConfig) -> None:
        self._config = config

    def verify(self, token: str | None, token_class: TokenClass) -> VerificationResult:
        """Verify a token against the secret of its class.

        Args:
            token: The encoded JWT presented by the client.
            token_class: Which class (and therefore which secret) to check.

        Returns:
            VerificationResult with claims when valid.

        Raises:
            ConfigurationError: If the secret for ``token_class`` is unset.
        """
        secret = self._config.secret_for(token_class)
        if not token or not isinstance(token, str):
            return VerificationResult(VerificationStatus.INVALID, reason="Token is missing")

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[ALGORITHM],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            return VerificationResult(VerificationStatus.EXPIRED, reason="Token has expired")
        except jwt.PyJWTError as e:
            return VerificationResult(VerificationStatus.INVALID, reason=str(e) or "Invalid token")

        model = AccessClaims if token_class is TokenClass.ACCESS else RefreshClaims
        try:
            model.model_validate(payload)
        except PydanticValidationError:
            return VerificationResult(VerificationStatus.INVALID, reason="Token claims are malformed")

        return VerificationResult(VerificationStatus.VALID, claims=payload)
