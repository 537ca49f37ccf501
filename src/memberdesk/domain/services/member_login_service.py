"""Member login orchestration.

Wraps identity reconciliation with the policies around it: lockout checks,
failed-attempt bookkeeping, first-login flags, default role assignment and
audit entries.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.core.config import Settings, get_settings
from memberdesk.core.logging import LoggingContext, get_logger
from memberdesk.domain.collaborators import IdentityProvider, RecordStoreError
from memberdesk.domain.entities import AuthSession, MemberRecord
from memberdesk.domain.exceptions import (
    AccountLockedError,
    InvalidCredentialsError,
    MemberLookupError,
)
from memberdesk.domain.services.credential_policy import (
    CredentialPolicy,
    normalize_member_number,
)
from memberdesk.domain.services.login_lockout_service import LoginLockoutService
from memberdesk.domain.services.member_identity_reconciler import MemberIdentityReconciler
from memberdesk.domain.services.role_resolver import MemberRole, RoleResolver
from memberdesk.infrastructure.persistence.member_record_store import SqlMemberRecordStore
from memberdesk.infrastructure.persistence.repositories import (
    AuditLogRepository,
    MemberRepository,
    UserRoleRepository,
)

logger = get_logger(__name__)


@dataclass
class MemberLoginResult:
    """Result of a successful member login."""

    session: AuthSession
    member: MemberRecord
    role: MemberRole
    password_change_required: bool
    member_created: bool = False


class MemberLoginService:
    """Service for logging members in by member number."""

    def __init__(
        self,
        session: AsyncSession,
        identity_provider: IdentityProvider,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the login service.

        Args:
            session: SQLAlchemy async session.
            identity_provider: Identity service used for sign-in and sign-up.
            settings: Application settings. Defaults to the cached settings.
        """
        self.session = session
        self.settings = settings or get_settings()
        self.record_store = SqlMemberRecordStore(session)
        self.credential_policy = CredentialPolicy(self.settings.placeholder_email_domain)
        self.reconciler = MemberIdentityReconciler(
            record_store=self.record_store,
            identity_provider=identity_provider,
            credential_policy=self.credential_policy,
        )
        self.lockout = LoginLockoutService(session, self.settings)
        self.roles = RoleResolver(session)
        self.member_repo = MemberRepository(session)
        self.role_repo = UserRoleRepository(session)
        self.audit_repo = AuditLogRepository(session)

    async def login(self, identifier: str, password: str) -> MemberLoginResult:
        """Log a member in, creating their record and identity on first use.

        Args:
            identifier: Member number as typed.
            password: Password as typed.

        Returns:
            MemberLoginResult with the session, member, role and whether a
            password change is required before using the application.

        Raises:
            InvalidCredentialsError: Malformed member number or rejected credential.
            AccountLockedError: The member is locked, or this failure locked them.
            MemberLookupError, AccountCreationError, SessionEstablishmentError:
                Propagated from reconciliation.
        """
        try:
            member_number = normalize_member_number(identifier)
        except ValueError as e:
            raise InvalidCredentialsError(str(e)) from e

        try:
            existing = await self.record_store.find_by_identifier(member_number)
        except RecordStoreError as e:
            raise MemberLookupError(f"Member lookup failed: {e.message}") from e
        if existing is not None:
            self.lockout.ensure_not_locked(existing)

        try:
            with LoggingContext(member_number=member_number):
                result = await self.reconciler.reconcile(member_number, password)
        except InvalidCredentialsError as e:
            locked_until = await self.lockout.record_failure(member_number)
            if locked_until is not None:
                await self._audit_lockout(member_number, existing)
                raise AccountLockedError(
                    f"Member {member_number} locked after repeated failures",
                    locked_until=locked_until,
                ) from e
            raise

        member = result.member
        auth_session = result.session
        # Evaluate before flags are cleared below.
        password_change_required = self.credential_policy.requires_password_change(member)

        await self.member_repo.mark_logged_in(member_number)
        if await self.role_repo.assign(auth_session.user_id, MemberRole.MEMBER.value):
            logger.info(
                "Default role assigned",
                member_number=member_number,
                user_id=auth_session.user_id,
            )
        if result.member_created:
            await self.audit_repo.record(
                operation="create",
                table_name="members",
                record_id=member.id,
                user_id=auth_session.user_id,
                new_values={
                    "member_number": member.member_number,
                    "email": member.email,
                    "source": "first_login",
                },
            )
        await self.session.commit()

        member.first_time_login = False
        member.failed_login_attempts = 0
        member.locked_until = None
        role = await self.roles.resolve(auth_session.user_id, member_number)

        logger.info(
            "Member logged in",
            member_number=member_number,
            user_id=auth_session.user_id,
            role=role.value,
            password_change_required=password_change_required,
        )
        return MemberLoginResult(
            session=auth_session,
            member=member,
            role=role,
            password_change_required=password_change_required,
            member_created=result.member_created,
        )

    async def _audit_lockout(self, member_number: str, member: MemberRecord | None) -> None:
        await self.audit_repo.record(
            operation="update",
            table_name="members",
            record_id=member.id if member else member_number,
            new_values={
                "member_number": member_number,
                "locked": True,
                "max_failed_login_attempts": self.settings.max_failed_login_attempts,
            },
            severity="warning",
        )
        await self.session.commit()
