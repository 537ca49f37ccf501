"""Password hashing for locally stored identities, using Argon2id."""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password using Argon2id.

    Example:
        >>> hash_password("AB1234").startswith("$argon2id$")
        True
    """
    return _hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a hash.

    Returns:
        True if the password matches, False otherwise (including malformed hashes).
    """
    try:
        _hasher.verify(hashed, password)
        return True
    except (VerificationError, InvalidHashError):
        return False


def needs_rehash(hashed: str) -> bool:
    """Check if a hash was produced with outdated parameters."""
    return _hasher.check_needs_rehash(hashed)
