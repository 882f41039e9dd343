"""Domain services for VidTube."""

from vidtube.domain.services.auth_service import AuthResult, AuthService, TokenPair

__all__ = [
    "AuthResult",
    "AuthService",
    "TokenPair",
]
