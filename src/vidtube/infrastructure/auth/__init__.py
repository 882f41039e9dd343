"""Authentication infrastructure components.

This module provides password hashing and the JWT issuer/verifier pair.
"""

from vidtube.infrastructure.auth.jwt_service import (
    ALGORITHM,
    TokenConfig,
    TokenIssuer,
    TokenVerifier,
)
from vidtube.infrastructure.auth.password_hasher import (
    hash_password,
    needs_rehash,
    verify_password,
)
from vidtube.infrastructure.auth.token_types import (
    AccessClaims,
    RefreshClaims,
    TokenClass,
    VerificationResult,
    VerificationStatus,
)

__all__ = [
    "ALGORITHM",
    "AccessClaims",
    "RefreshClaims",
    "TokenClass",
    "TokenConfig",
    "TokenIssuer",
    "TokenVerifier",
    "VerificationResult",
    "VerificationStatus",
    "hash_password",
    "needs_rehash",
    "verify_password",
]
