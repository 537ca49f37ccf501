"""Password changes requested by signed-in members."""

from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.core.config import Settings, get_settings
from memberdesk.core.logging import get_logger
from memberdesk.domain.collaborators import (
    IdentityCredentialsRejectedError,
    IdentityNotFoundError,
    IdentityProvider,
)
from memberdesk.domain.entities import AuthSession, MemberRecord
from memberdesk.domain.exceptions import PasswordChangeError
from memberdesk.domain.services.credential_policy import CredentialPolicy, CredentialStage
from memberdesk.domain.services.password_validator import PasswordValidator
from memberdesk.infrastructure.persistence.repositories import (
    AuditLogRepository,
    MemberRepository,
)

logger = get_logger(__name__)


class PasswordChangeService:
    """Service for member-initiated password changes.

    Members still on their default or a temporary password change it without
    re-entering it. Members with a self-chosen password must supply it.
    """

    def __init__(
        self,
        session: AsyncSession,
        identity_provider: IdentityProvider,
        settings: Settings | None = None,
    ) -> None:
        self.session = session
        self.identity_provider = identity_provider
        self.settings = settings or get_settings()
        self.credential_policy = CredentialPolicy(self.settings.placeholder_email_domain)
        self.validator = PasswordValidator(min_length=self.settings.password_min_length)
        self.member_repo = MemberRepository(session)
        self.audit_repo = AuditLogRepository(session)

    async def change_password(
        self,
        member: MemberRecord,
        auth_session: AuthSession,
        new_password: str,
        confirm_password: str,
        current_password: str | None = None,
    ) -> None:
        """Change the signed-in member's password.

        Args:
            member: The member changing their password.
            auth_session: Session of the signed-in identity.
            new_password: Replacement password.
            confirm_password: Must equal ``new_password``.
            current_password: Required once the member has chosen a password.

        Raises:
            PasswordChangeError: If validation or re-authentication fails.
            IdentityServiceError: If the identity service fails.
        """
        if new_password != confirm_password:
            raise PasswordChangeError(
                "Passwords do not match",
                details=[
                    {
                        "field": "confirm_password",
                        "message": "Passwords do not match",
                        "code": "password_mismatch",
                    }
                ],
            )

        errors = self.validator.validate(new_password)
        if errors:
            raise PasswordChangeError(
                "Password does not meet requirements",
                details=[
                    {"field": err.field, "message": err.message, "code": err.code}
                    for err in errors
                ],
            )

        stage = self.credential_policy.stage(member)
        if stage is CredentialStage.ESTABLISHED:
            await self._reauthenticate(member, auth_session, current_password)
            if new_password == current_password:
                raise PasswordChangeError("New password must differ from the current password")
        elif new_password == self.credential_policy.default_credential(member):
            raise PasswordChangeError("New password must differ from your member number")

        try:
            await self.identity_provider.update_password(auth_session, new_password)
        except (IdentityCredentialsRejectedError, IdentityNotFoundError) as e:
            raise PasswordChangeError("Session is no longer valid, please sign in again") from e

        await self.member_repo.mark_password_changed(member.member_number)
        await self.audit_repo.record(
            operation="update",
            table_name="members",
            record_id=member.id,
            user_id=auth_session.user_id,
            old_values={
                "password_changed": member.password_changed,
                "password_reset_required": member.password_reset_required,
            },
            new_values={"password_changed": True, "password_reset_required": False},
        )
        await self.session.commit()

        member.password_changed = True
        member.password_reset_required = False
        member.first_time_login = False
        logger.info(
            "Member password changed",
            member_number=member.member_number,
            previous_stage=stage.value,
        )

    async def _reauthenticate(
        self,
        member: MemberRecord,
        auth_session: AuthSession,
        current_password: str | None,
    ) -> None:
        if not current_password:
            raise PasswordChangeError(
                "Current password is required",
                details=[
                    {
                        "field": "current_password",
                        "message": "Current password is required",
                        "code": "required",
                    }
                ],
            )
        email = member.email or auth_session.email
        try:
            await self.identity_provider.sign_in(email, current_password)
        except (IdentityCredentialsRejectedError, IdentityNotFoundError) as e:
            logger.info("Password change refused, current password rejected",
                        member_number=member.member_number)
            raise PasswordChangeError("Current password is incorrect") from e
