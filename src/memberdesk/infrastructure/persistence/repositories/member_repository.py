"""Member repository for database operations."""

from datetime import datetime, timezone

from sqlalchemy import and_, case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.infrastructure.persistence.models import MemberModel


class MemberRepository:
    """Repository for member database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, member: MemberModel) -> MemberModel:
        """Create a new member.

        Args:
            member: Member model to create.

        Returns:
            Created member model.
        """
        self.session.add(member)
        await self.session.flush()
        return member

    async def get_by_id(self, member_id: str) -> MemberModel | None:
        result = await self.session.execute(
            select(MemberModel).where(MemberModel.id == member_id)
        )
        return result.scalar_one_or_none()

    async def get_by_member_number(self, member_number: str) -> MemberModel | None:
        """Get a member by member number.

        Args:
            member_number: Normalized (upper-case) member number.

        Returns:
            Member model if found, None otherwise.
        """
        result = await self.session.execute(
            select(MemberModel).where(MemberModel.member_number == member_number)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> MemberModel | None:
        result = await self.session.execute(
            select(MemberModel).where(MemberModel.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_by_auth_user_id(self, auth_user_id: str) -> MemberModel | None:
        result = await self.session.execute(
            select(MemberModel).where(MemberModel.auth_user_id == auth_user_id)
        )
        return result.scalars().first()

    async def link_auth_user(self, member_number: str, auth_user_id: str) -> bool:
        """Link a member to an account identity if not already linked.

        The update is conditional on ``auth_user_id IS NULL`` so a concurrent
        link never overwrites an existing one.

        Args:
            member_number: Member to link.
            auth_user_id: Account identity ID.

        Returns:
            True if the row was updated, False if it was already linked or missing.
        """
        result = await self.session.execute(
            update(MemberModel)
            .where(
                MemberModel.member_number == member_number,
                MemberModel.auth_user_id.is_(None),
            )
            .values(auth_user_id=auth_user_id)
        )
        return result.rowcount > 0

    async def record_failed_login(
        self,
        member_number: str,
        max_attempts: int,
        lockout_until: datetime,
        now: datetime | None = None,
    ) -> MemberModel | None:
        """Increment the failed login counter and lock when the limit is hit.

        The counter is incremented in a single UPDATE so concurrent failures
        are all counted. A lock that has already expired is cleared and the
        count starts again from zero.

        Args:
            member_number: Member whose login was rejected.
            max_attempts: Attempts allowed before locking.
            lockout_until: Lock expiry applied when the limit is reached.
            now: Reference time for lock expiry, defaults to the current UTC time.

        Returns:
            Updated member model, None if the member does not exist.
        """
        now = now or datetime.now(timezone.utc)
        lock_expired = and_(
            MemberModel.locked_until.is_not(None),
            MemberModel.locked_until <= now,
        )
        attempts = case((lock_expired, 0), else_=MemberModel.failed_login_attempts) + 1

        result = await self.session.execute(
            update(MemberModel)
            .where(MemberModel.member_number == member_number)
            .values(
                failed_login_attempts=attempts,
                locked_until=case(
                    (attempts >= max_attempts, lockout_until),
                    (lock_expired, None),
                    else_=MemberModel.locked_until,
                ),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None

        refreshed = await self.session.execute(
            select(MemberModel)
            .where(MemberModel.member_number == member_number)
            .execution_options(populate_existing=True)
        )
        return refreshed.scalar_one()

    async def reset_failed_login(self, member_number: str) -> None:
        """Clear the failed login counter and any lock."""
        await self.session.execute(
            update(MemberModel)
            .where(MemberModel.member_number == member_number)
            .values(failed_login_attempts=0, locked_until=None)
        )

    async def mark_logged_in(self, member_number: str) -> None:
        """Clear the first-time flag after a successful login."""
        await self.session.execute(
            update(MemberModel)
            .where(MemberModel.member_number == member_number)
            .values(first_time_login=False, failed_login_attempts=0, locked_until=None)
        )

    async def mark_password_changed(self, member_number: str) -> None:
        """Record that the member replaced their default or temporary password."""
        await self.session.execute(
            update(MemberModel)
            .where(MemberModel.member_number == member_number)
            .values(
                password_changed=True,
                password_reset_required=False,
                first_time_login=False,
                password_set_at=datetime.now(timezone.utc),
            )
        )

    async def mark_password_reset(self, member_number: str) -> None:
        """Flag the member as holding an administrator-issued temporary password."""
        await self.session.execute(
            update(MemberModel)
            .where(MemberModel.member_number == member_number)
            .values(
                password_reset_required=True,
                failed_login_attempts=0,
                locked_until=None,
                password_set_at=datetime.now(timezone.utc),
            )
        )

    async def update_profile(
        self,
        member_number: str,
        full_name: str,
        email: str,
        phone: str | None,
        email_verified: bool,
    ) -> None:
        """Store member-supplied profile details and close out first-login state."""
        await self.session.execute(
            update(MemberModel)
            .where(MemberModel.member_number == member_number)
            .values(
                full_name=full_name,
                email=email,
                phone=phone,
                email_verified=email_verified,
                profile_updated=True,
                first_time_login=False,
            )
        )

    async def activate(self, member_id: str, collector_id: str) -> None:
        """Assign a member to a collector and mark the membership active."""
        await self.session.execute(
            update(MemberModel)
            .where(MemberModel.id == member_id)
            .values(collector_id=collector_id, status="active", verified=True)
        )
