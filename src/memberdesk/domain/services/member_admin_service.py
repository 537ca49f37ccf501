"""Administrative operations on members."""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.core.config import Settings, get_settings
from memberdesk.core.logging import get_logger
from memberdesk.domain.collaborators import IdentityProvider
from memberdesk.domain.entities import MemberRecord, MemberStatus
from memberdesk.domain.exceptions import (
    CollectorNotFoundError,
    MemberNotFoundError,
    PasswordChangeError,
)
from memberdesk.domain.services.credential_policy import (
    CredentialPolicy,
    normalize_member_number,
)
from memberdesk.domain.services.login_lockout_service import LoginLockoutService
from memberdesk.infrastructure.persistence.member_record_store import to_member_record
from memberdesk.infrastructure.persistence.repositories import (
    AuditLogRepository,
    CollectorRepository,
    MemberRepository,
)

logger = get_logger(__name__)


@dataclass
class PasswordResetResult:
    member: MemberRecord
    temporary_password: str


class MemberAdminService:
    """Activates and unlocks members and issues temporary passwords."""

    def __init__(
        self,
        session: AsyncSession,
        identity_provider: IdentityProvider,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the admin service.

        Args:
            session: SQLAlchemy async session.
            identity_provider: Identity service used to overwrite passwords.
            settings: Application settings. Defaults to the cached settings.
        """
        self.session = session
        self.identity_provider = identity_provider
        self.settings = settings or get_settings()
        self.credential_policy = CredentialPolicy(self.settings.placeholder_email_domain)
        self.lockout = LoginLockoutService(session, self.settings)
        self.member_repo = MemberRepository(session)
        self.collector_repo = CollectorRepository(session)
        self.audit_repo = AuditLogRepository(session)

    async def _get_member(self, member_number: str) -> MemberRecord:
        try:
            normalized = normalize_member_number(member_number)
        except ValueError as e:
            raise MemberNotFoundError(member_number) from e
        model = await self.member_repo.get_by_member_number(normalized)
        if model is None:
            raise MemberNotFoundError(normalized)
        return to_member_record(model)

    async def unlock(self, member_number: str, actor_user_id: str | None) -> MemberRecord:
        """Clear a member's lockout and failed login counter.

        Raises:
            MemberNotFoundError: If no member has this number.
        """
        member = await self._get_member(member_number)
        await self.audit_repo.record(
            operation="update",
            table_name="members",
            record_id=member.id,
            user_id=actor_user_id,
            old_values={
                "failed_login_attempts": member.failed_login_attempts,
                "locked_until": member.locked_until.isoformat() if member.locked_until else None,
            },
            new_values={"failed_login_attempts": 0, "locked_until": None},
        )
        await self.lockout.unlock(member.member_number)

        member.failed_login_attempts = 0
        member.locked_until = None
        return member

    async def reset_password(
        self, member_number: str, actor_user_id: str | None
    ) -> PasswordResetResult:
        """Replace a member's password with a generated temporary one.

        The member must change it on their next login.

        Raises:
            MemberNotFoundError: If no member has this number.
            PasswordChangeError: If the member has never signed in.
            IdentityServiceError: If the identity service fails.
        """
        member = await self._get_member(member_number)
        if member.auth_user_id is None:
            raise PasswordChangeError(
                f"Member {member.member_number} has not signed in yet; "
                "the member number is still their password"
            )

        temporary = self.credential_policy.generate_temporary_credential(member.member_number)
        await self.identity_provider.admin_set_password(member.auth_user_id, temporary)

        await self.member_repo.mark_password_reset(member.member_number)
        await self.audit_repo.record(
            operation="update",
            table_name="members",
            record_id=member.id,
            user_id=actor_user_id,
            old_values={"password_reset_required": member.password_reset_required},
            new_values={"password_reset_required": True},
            severity="warning",
        )
        await self.session.commit()

        member.password_reset_required = True
        member.failed_login_attempts = 0
        member.locked_until = None
        logger.info(
            "Temporary password issued",
            member_number=member.member_number,
            actor_user_id=actor_user_id,
        )
        return PasswordResetResult(member=member, temporary_password=temporary)

    async def activate(
        self, member_id: str, collector_id: str, actor_user_id: str | None
    ) -> MemberRecord:
        """Activate a member and assign them to a collector.

        Raises:
            MemberNotFoundError: If no member has this ID.
            CollectorNotFoundError: If the collector is unknown or inactive.
        """
        model = await self.member_repo.get_by_id(member_id)
        if model is None:
            raise MemberNotFoundError(member_id)
        collector = await self.collector_repo.get_by_id(collector_id)
        if collector is None or not collector.active:
            raise CollectorNotFoundError(collector_id)

        member = to_member_record(model)
        await self.member_repo.activate(member_id, collector_id)
        await self.audit_repo.record(
            operation="update",
            table_name="members",
            record_id=member_id,
            user_id=actor_user_id,
            old_values={"status": member.status, "collector_id": member.collector_id},
            new_values={"status": MemberStatus.ACTIVE.value, "collector_id": collector_id},
        )
        await self.session.commit()

        member.status = MemberStatus.ACTIVE.value
        member.collector_id = collector_id
        member.verified = True
        logger.info(
            "Member activated",
            member_number=member.member_number,
            collector_id=collector_id,
            actor_user_id=actor_user_id,
        )
        return member
