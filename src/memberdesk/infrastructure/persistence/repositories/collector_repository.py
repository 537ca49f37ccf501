"""Collector repository for database operations."""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.infrastructure.persistence.models import CollectorModel


class CollectorRepository:
    """Repository for collector database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, collector: CollectorModel) -> CollectorModel:
        self.session.add(collector)
        await self.session.flush()
        return collector

    async def get_by_id(self, collector_id: str) -> CollectorModel | None:
        result = await self.session.execute(
            select(CollectorModel).where(CollectorModel.id == collector_id)
        )
        return result.scalar_one_or_none()

    async def list_collectors(self, active_only: bool = False) -> Sequence[CollectorModel]:
        """List collectors ordered by name.

        Args:
            active_only: Leave out deactivated collectors.

        Returns:
            Collector models.
        """
        query = select(CollectorModel)
        if active_only:
            query = query.where(CollectorModel.active.is_(True))
        result = await self.session.execute(query.order_by(CollectorModel.name))
        return result.scalars().all()

    async def is_active_collector(self, member_number: str) -> bool:
        """Check whether a member number belongs to an active collector.

        Args:
            member_number: Member number to check.

        Returns:
            True if an active collector row references the member number.
        """
        result = await self.session.execute(
            select(CollectorModel.id)
            .where(
                CollectorModel.member_number == member_number,
                CollectorModel.active.is_(True),
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None
