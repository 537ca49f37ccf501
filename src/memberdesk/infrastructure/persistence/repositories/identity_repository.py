"""Account identity repository used by the local identity provider."""

from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.infrastructure.persistence.models import AccountIdentityModel


class AccountIdentityRepository:
    """Repository for locally stored account identities."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, identity: AccountIdentityModel) -> AccountIdentityModel:
        self.session.add(identity)
        await self.session.flush()
        return identity

    async def get_by_email(self, email: str) -> AccountIdentityModel | None:
        """Get an identity by email (case-insensitive, stored lower-case).

        Args:
            email: Identity email.

        Returns:
            Identity model if found, None otherwise.
        """
        result = await self.session.execute(
            select(AccountIdentityModel).where(
                AccountIdentityModel.email == email.lower()
            )
        )
        return result.scalar_one_or_none()

    async def update_password_hash(self, identity_id: str, password_hash: str) -> bool:
        result = await self.session.execute(
            update(AccountIdentityModel)
            .where(AccountIdentityModel.id == identity_id)
            .values(password_hash=password_hash)
        )
        return result.rowcount > 0

    async def update_last_sign_in(self, identity_id: str) -> None:
        await self.session.execute(
            update(AccountIdentityModel)
            .where(AccountIdentityModel.id == identity_id)
            .values(last_sign_in_at=datetime.now(timezone.utc))
        )

    async def update_email(self, identity_id: str, email: str) -> bool:
        result = await self.session.execute(
            update(AccountIdentityModel)
            .where(AccountIdentityModel.id == identity_id)
            .values(email=email.lower())
        )
        return result.rowcount > 0
