"""Failed-login bookkeeping and temporary lockout."""

from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.core.config import Settings, get_settings
from memberdesk.core.logging import get_logger
from memberdesk.domain.entities import MemberRecord
from memberdesk.domain.exceptions import AccountLockedError
from memberdesk.infrastructure.persistence.repositories import MemberRepository

logger = get_logger(__name__)


class LoginLockoutService:
    """Locks a member out after too many consecutive rejected credentials."""

    def __init__(self, session: AsyncSession, settings: Settings | None = None) -> None:
        """Initialize the lockout service.

        Args:
            session: SQLAlchemy async session.
            settings: Application settings. Defaults to the cached settings.
        """
        self.session = session
        self.settings = settings or get_settings()
        self.member_repo = MemberRepository(session)

    def ensure_not_locked(self, member: MemberRecord, now: datetime | None = None) -> None:
        """Raise if the member is currently locked out.

        Raises:
            AccountLockedError: If ``locked_until`` lies in the future.
        """
        if member.is_locked(now):
            logger.warning(
                "Login refused, member locked",
                member_number=member.member_number,
                locked_until=member.locked_until.isoformat() if member.locked_until else None,
            )
            raise AccountLockedError(
                f"Member {member.member_number} is locked",
                locked_until=member.locked_until,
            )

    async def record_failure(self, member_number: str) -> datetime | None:
        """Count a rejected credential and lock the member when the limit is reached.

        Args:
            member_number: Member whose credential was rejected.

        Returns:
            The lock expiry if this failure locked the member, None otherwise.
        """
        lockout_until = datetime.now(timezone.utc) + timedelta(
            minutes=self.settings.lockout_minutes
        )
        member = await self.member_repo.record_failed_login(
            member_number,
            max_attempts=self.settings.max_failed_login_attempts,
            lockout_until=lockout_until,
        )
        await self.session.commit()

        if member is None:
            return None
        logger.info(
            "Failed login recorded",
            member_number=member_number,
            failed_login_attempts=member.failed_login_attempts,
        )
        if member.failed_login_attempts >= self.settings.max_failed_login_attempts:
            logger.warning(
                "Member locked after repeated failures",
                member_number=member_number,
                locked_until=lockout_until.isoformat(),
            )
            return lockout_until
        return None

    async def unlock(self, member_number: str) -> None:
        """Clear the failed login counter and any active lock."""
        await self.member_repo.reset_failed_login(member_number)
        await self.session.commit()
        logger.info("Member unlocked", member_number=member_number)
