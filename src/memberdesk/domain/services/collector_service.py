"""Collector management."""

import re
import uuid
from typing import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.core.logging import get_logger
from memberdesk.domain.exceptions import CollectorConflictError
from memberdesk.domain.services.credential_policy import normalize_member_number
from memberdesk.infrastructure.persistence.models import CollectorModel
from memberdesk.infrastructure.persistence.repositories import (
    AuditLogRepository,
    CollectorRepository,
)

logger = get_logger(__name__)

PREFIX_PATTERN = re.compile(r"^[A-Z]{1,8}$")
NUMBER_PATTERN = re.compile(r"^[0-9]{1,8}$")


class CollectorService:
    """Creates and lists collectors.

    A collector is addressed by a letter prefix plus a number, e.g. ``TM`` and
    ``01``. The pair is unique.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.collector_repo = CollectorRepository(session)
        self.audit_repo = AuditLogRepository(session)

    async def create(
        self,
        name: str,
        prefix: str,
        number: str,
        member_number: str | None = None,
        actor_user_id: str | None = None,
    ) -> CollectorModel:
        """Create an active collector.

        Args:
            name: Display name.
            prefix: Letter prefix, upper-cased here.
            number: Digits identifying the collector within the prefix.
            member_number: Member acting as this collector, if any.
            actor_user_id: Identity performing the change.

        Returns:
            The created collector.

        Raises:
            ValueError: If a field is blank or malformed.
            CollectorConflictError: If the prefix and number are taken.
        """
        name = name.strip()
        prefix = prefix.strip().upper()
        number = number.strip()
        if not name:
            raise ValueError("Collector name is required")
        if not PREFIX_PATTERN.match(prefix):
            raise ValueError("Collector prefix must be 1 to 8 letters")
        if not NUMBER_PATTERN.match(number):
            raise ValueError("Collector number must be 1 to 8 digits")
        if member_number:
            member_number = normalize_member_number(member_number)

        collector = CollectorModel(
            id=str(uuid.uuid4()),
            name=name,
            prefix=prefix,
            number=number,
            member_number=member_number or None,
            active=True,
        )
        try:
            await self.collector_repo.create(collector)
        except IntegrityError as e:
            await self.session.rollback()
            raise CollectorConflictError(prefix, number) from e

        await self.audit_repo.record(
            operation="create",
            table_name="collectors",
            record_id=collector.id,
            user_id=actor_user_id,
            new_values={
                "name": name,
                "prefix": prefix,
                "number": number,
                "member_number": collector.member_number,
            },
        )
        await self.session.commit()
        await self.session.refresh(collector)

        logger.info(
            "Collector created",
            collector_id=collector.id,
            prefix=prefix,
            number=number,
        )
        return collector

    async def list_collectors(self, active_only: bool = False) -> Sequence[CollectorModel]:
        return await self.collector_repo.list_collectors(active_only=active_only)
