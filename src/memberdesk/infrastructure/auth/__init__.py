"""Authentication infrastructure components.

Password hashing, JWT tokens and the two identity provider implementations.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.core.config import Settings, get_settings
from memberdesk.domain.collaborators import IdentityProvider
from memberdesk.infrastructure.auth.hosted_identity_client import HostedIdentityClient
from memberdesk.infrastructure.auth.jwt_service import (
    InvalidTokenError,
    JWTError,
    JWTService,
    TokenExpiredError,
    jwt_service,
)
from memberdesk.infrastructure.auth.local_identity_provider import LocalIdentityProvider
from memberdesk.infrastructure.auth.password_hasher import (
    hash_password,
    needs_rehash,
    verify_password,
)


def build_identity_provider(
    session: AsyncSession, settings: Settings | None = None
) -> IdentityProvider:
    """Create the identity provider selected by ``identity_backend``."""
    settings = settings or get_settings()
    if settings.identity_backend == "hosted":
        return HostedIdentityClient(settings)
    return LocalIdentityProvider(session)


__all__ = [
    "HostedIdentityClient",
    "InvalidTokenError",
    "JWTError",
    "JWTService",
    "LocalIdentityProvider",
    "TokenExpiredError",
    "build_identity_provider",
    "hash_password",
    "jwt_service",
    "needs_rehash",
    "verify_password",
]
