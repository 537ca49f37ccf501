"""Identity provider that stores identities in the application database.

Used in development, tests and single-node deployments that do not run a
hosted identity service. Passwords are hashed with Argon2id and sessions are
HS256 JWTs carrying the same claims as the hosted service issues.
"""

import uuid
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.core.logging import get_logger
from memberdesk.domain.collaborators import (
    IdentityAlreadyExistsError,
    IdentityCredentialsRejectedError,
    IdentityNotFoundError,
    IdentityProvider,
    IdentityServiceError,
)
from memberdesk.domain.entities import AccountIdentity, AuthSession
from memberdesk.infrastructure.auth.jwt_service import (
    InvalidTokenError,
    JWTService,
    TokenExpiredError,
    jwt_service,
)
from memberdesk.infrastructure.auth.password_hasher import (
    hash_password,
    needs_rehash,
    verify_password,
)
from memberdesk.infrastructure.persistence.models import AccountIdentityModel
from memberdesk.infrastructure.persistence.repositories import AccountIdentityRepository

logger = get_logger(__name__)


class LocalIdentityProvider(IdentityProvider):
    """Email/password identities kept in the ``auth_identities`` table."""

    def __init__(self, session: AsyncSession, tokens: JWTService | None = None) -> None:
        """Initialize the provider.

        Args:
            session: SQLAlchemy async session.
            tokens: JWT service used to issue sessions. Defaults to the shared instance.
        """
        self.session = session
        self.identity_repo = AccountIdentityRepository(session)
        self.tokens = tokens or jwt_service

    async def sign_in(self, email: str, credential: str) -> AuthSession:
        try:
            identity = await self.identity_repo.get_by_email(email)
        except SQLAlchemyError as e:
            raise IdentityServiceError(f"Identity lookup failed: {e}") from e

        if identity is None:
            raise IdentityNotFoundError(f"No identity for {email}")
        if not verify_password(credential, identity.password_hash):
            raise IdentityCredentialsRejectedError("Invalid login credentials")

        try:
            if needs_rehash(identity.password_hash):
                await self.identity_repo.update_password_hash(
                    identity.id, hash_password(credential)
                )
            await self.identity_repo.update_last_sign_in(identity.id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise IdentityServiceError(f"Recording sign-in failed: {e}") from e

        return AuthSession(
            access_token=self.tokens.create_access_token(
                user_id=identity.id,
                email=identity.email,
                metadata=identity.user_metadata,
            ),
            refresh_token=self.tokens.create_refresh_token(),
            expires_in=self.tokens.get_expires_in(),
            user_id=identity.id,
            email=identity.email,
        )

    async def sign_up(
        self, email: str, credential: str, metadata: dict[str, Any]
    ) -> AccountIdentity:
        identity = AccountIdentityModel(
            id=str(uuid.uuid4()),
            email=email.lower(),
            password_hash=hash_password(credential),
            user_metadata=dict(metadata),
        )
        try:
            await self.identity_repo.create(identity)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise IdentityAlreadyExistsError("User already registered", status_code=422) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise IdentityServiceError(f"Identity creation failed: {e}") from e

        logger.info("Local identity created", user_id=identity.id, email=identity.email)
        return AccountIdentity(id=identity.id, email=identity.email, metadata=dict(metadata))

    async def update_password(self, session: AuthSession, new_credential: str) -> None:
        await self._set_password(self._session_user_id(session), new_credential)

    async def update_email(self, session: AuthSession, new_email: str) -> None:
        user_id = self._session_user_id(session)
        try:
            updated = await self.identity_repo.update_email(user_id, new_email)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise IdentityAlreadyExistsError(
                "Email address already registered", status_code=422
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise IdentityServiceError(f"Email update failed: {e}") from e
        if not updated:
            raise IdentityNotFoundError(f"No identity with id {user_id}", status_code=404)
        logger.info("Local identity email updated", user_id=user_id)

    async def admin_set_password(self, user_id: str, new_credential: str) -> None:
        await self._set_password(user_id, new_credential)

    async def _set_password(self, user_id: str, new_credential: str) -> None:
        try:
            updated = await self.identity_repo.update_password_hash(
                user_id, hash_password(new_credential)
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise IdentityServiceError(f"Password update failed: {e}") from e
        if not updated:
            raise IdentityNotFoundError(f"No identity with id {user_id}", status_code=404)

    def _session_user_id(self, session: AuthSession) -> str:
        try:
            claims = self.tokens.validate_access_token(session.access_token)
        except (TokenExpiredError, InvalidTokenError) as e:
            raise IdentityCredentialsRejectedError(f"Session rejected: {e}", status_code=401) from e
        return claims["sub"]
