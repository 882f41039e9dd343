"""Password hashing utility using Argon2.

Provides salted one-way password hashing and verification using the Argon2id
algorithm, which is the winner of the Password Hashing Competition and
recommended by OWASP.

Work factor (fixed, RFC 9106 low-memory profile):
    time_cost=3, memory_cost=64 MiB, parallelism=4, hash_len=32, salt_len=16.
"""

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError

TIME_COST = 3
MEMORY_COST_KIB = 64 * 1024
PARALLELISM = 4
HASH_LEN = 32
SALT_LEN = 16

_hasher = PasswordHasher(
    time_cost=TIME_COST,
    memory_cost=MEMORY_COST_KIB,
    parallelism=PARALLELISM,
    hash_len=HASH_LEN,
    salt_len=SALT_LEN,
    type=Type.ID,
)


def hash_password(password: str) -> str:
    """Hash a password using Argon2id with a random salt.

    Args:
        password: The plaintext password to hash. Must be non-empty.

    Returns:
        The encoded hash string (algorithm, parameters, salt and digest).

    Raises:
        ValueError: If the password is empty.

    Example:
        >>> hashed = hash_password("Secret1")
        >>> hashed.startswith("$argon2id$")
        True
    """
    if not password:
        raise ValueError("Password must not be empty")
    return _hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a hash.

    Never raises: a mismatch, an empty input or a malformed hash all
    return False.

    Args:
        password: The plaintext password to verify.
        hashed: The hashed password to verify against.

    Returns:
        True if the password matches, False otherwise.
    """
    if not password or not hashed:
        return False
    try:
        return _hasher.verify(hashed, password)
    except (VerificationError, InvalidHashError):
        return False


def needs_rehash(hashed: str) -> bool:
    """Check if a password hash was produced with outdated parameters.

    This should be called after successful password verification.
    If True, the password should be rehashed with the current parameters.

    Args:
        hashed: The hashed password to check.

    Returns:
        True if the hash should be updated, False otherwise.
    """
    return _hasher.check_needs_rehash(hashed)
