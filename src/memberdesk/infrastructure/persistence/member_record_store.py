"""SQLAlchemy-backed member record store.

Adapts MemberRepository to the MemberRecordStore interface used by the login
workflow. Every write is committed immediately so that the unique constraint
on ``member_number`` is what arbitrates concurrent first logins.
"""

import uuid

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.core.logging import get_logger
from memberdesk.domain.collaborators import (
    MemberRecordStore,
    RecordConflictError,
    RecordStoreError,
)
from memberdesk.domain.entities import MemberRecord
from memberdesk.infrastructure.persistence.models import MemberModel
from memberdesk.infrastructure.persistence.repositories import MemberRepository

logger = get_logger(__name__)


def to_member_record(model: MemberModel) -> MemberRecord:
    """Convert a MemberModel row into a MemberRecord entity."""
    return MemberRecord(
        id=model.id,
        member_number=model.member_number,
        email=model.email,
        full_name=model.full_name,
        verified=model.verified,
        email_verified=model.email_verified,
        profile_updated=model.profile_updated,
        password_changed=model.password_changed,
        first_time_login=model.first_time_login,
        registration_completed=model.registration_completed,
        password_reset_required=model.password_reset_required,
        failed_login_attempts=model.failed_login_attempts,
        locked_until=model.locked_until,
        status=model.status,
        collector_id=model.collector_id,
        auth_user_id=model.auth_user_id,
        created_at=model.created_at,
    )


class SqlMemberRecordStore(MemberRecordStore):
    """Member record store over an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.member_repo = MemberRepository(session)

    async def find_by_identifier(self, member_number: str) -> MemberRecord | None:
        try:
            model = await self.member_repo.get_by_member_number(member_number)
        except SQLAlchemyError as e:
            raise RecordStoreError(f"Member lookup failed: {e}") from e
        return to_member_record(model) if model is not None else None

    async def insert(self, record: MemberRecord) -> MemberRecord:
        model = MemberModel(
            id=record.id or str(uuid.uuid4()),
            member_number=record.member_number,
            email=record.email,
            full_name=record.full_name,
            status=record.status,
            verified=record.verified,
            email_verified=record.email_verified,
            profile_updated=record.profile_updated,
            password_changed=record.password_changed,
            first_time_login=record.first_time_login,
            registration_completed=record.registration_completed,
            password_reset_required=record.password_reset_required,
            failed_login_attempts=record.failed_login_attempts,
            locked_until=record.locked_until,
            collector_id=record.collector_id,
            auth_user_id=record.auth_user_id,
        )
        try:
            await self.member_repo.create(model)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise RecordConflictError(
                f"Member {record.member_number} already exists"
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise RecordStoreError(f"Member insert failed: {e}") from e

        await self.session.refresh(model)
        return to_member_record(model)

    async def link_identity(self, member_number: str, auth_user_id: str) -> None:
        try:
            linked = await self.member_repo.link_auth_user(member_number, auth_user_id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise RecordStoreError(f"Linking identity failed: {e}") from e
        if not linked:
            logger.warning(
                "Identity link skipped, member missing or already linked",
                member_number=member_number,
            )
