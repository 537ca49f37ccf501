"""User role repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.infrastructure.persistence.models import UserRoleModel


class UserRoleRepository:
    """Repository for role assignments on account identities."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def list_roles(self, user_id: str) -> list[str]:
        """List role names assigned to an identity.

        Args:
            user_id: Account identity ID.

        Returns:
            Role names, empty if the identity has none.
        """
        result = await self.session.execute(
            select(UserRoleModel.role).where(UserRoleModel.user_id == user_id)
        )
        return list(result.scalars().all())

    async def has_role(self, user_id: str, role: str) -> bool:
        result = await self.session.execute(
            select(UserRoleModel.id)
            .where(UserRoleModel.user_id == user_id, UserRoleModel.role == role)
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def assign(self, user_id: str, role: str) -> bool:
        """Assign a role if the identity does not already hold it.

        Args:
            user_id: Account identity ID.
            role: Role name.

        Returns:
            True if a new assignment was created.
        """
        if await self.has_role(user_id, role):
            return False
        self.session.add(UserRoleModel(user_id=user_id, role=role))
        await self.session.flush()
        return True
