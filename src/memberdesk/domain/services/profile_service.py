"""Profile completion for signed-in members.

Members created at first login carry a placeholder email. Completing the
profile replaces it with a real address in both the member record and the
account identity, so later logins by member number keep working.
"""

from dataclasses import replace

from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.core.config import Settings, get_settings
from memberdesk.core.logging import get_logger
from memberdesk.domain.collaborators import IdentityAlreadyExistsError, IdentityProvider
from memberdesk.domain.entities import AuthSession, MemberRecord
from memberdesk.domain.exceptions import ProfileUpdateError
from memberdesk.domain.services.credential_policy import CredentialPolicy
from memberdesk.infrastructure.persistence.repositories import (
    AuditLogRepository,
    MemberRepository,
)

logger = get_logger(__name__)


class ProfileService:
    """Service for member-initiated profile updates."""

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
        self.member_repo = MemberRepository(session)
        self.audit_repo = AuditLogRepository(session)

    async def update_profile(
        self,
        member: MemberRecord,
        auth_session: AuthSession,
        full_name: str,
        email: str,
        phone: str | None = None,
    ) -> MemberRecord:
        """Update the signed-in member's name, email and phone.

        A changed email is pushed to the identity service first and marked
        unverified on the member record.

        Args:
            member: The member updating their profile.
            auth_session: Session of the signed-in identity.
            full_name: Display name.
            email: Real email address replacing the current one.
            phone: Optional phone number.

        Returns:
            The updated member record.

        Raises:
            ProfileUpdateError: If a field is rejected or the email is taken.
            IdentityServiceError: If the identity service fails.
        """
        full_name = full_name.strip()
        email = email.strip().lower()
        phone = phone.strip() if phone and phone.strip() else None
        if not full_name:
            raise ProfileUpdateError("Full name is required")
        if self.credential_policy.is_placeholder_email(email):
            raise ProfileUpdateError("Please enter your own email address")

        email_changed = email != (member.email or "").lower()
        if email_changed:
            other = await self.member_repo.get_by_email(email)
            if other is not None and other.member_number != member.member_number:
                raise ProfileUpdateError("Email address is already in use")
            try:
                await self.identity_provider.update_email(auth_session, email)
            except IdentityAlreadyExistsError as e:
                raise ProfileUpdateError("Email address is already in use") from e

        email_verified = False if email_changed else member.email_verified
        await self.member_repo.update_profile(
            member.member_number,
            full_name=full_name,
            email=email,
            phone=phone,
            email_verified=email_verified,
        )
        await self.audit_repo.record(
            operation="update",
            table_name="members",
            record_id=member.id,
            user_id=auth_session.user_id,
            old_values={"full_name": member.full_name, "email": member.email},
            new_values={"full_name": full_name, "email": email, "profile_updated": True},
        )
        await self.session.commit()

        logger.info(
            "Member profile updated",
            member_number=member.member_number,
            email_changed=email_changed,
        )
        return replace(
            member,
            full_name=full_name,
            email=email,
            email_verified=email_verified,
            profile_updated=True,
            first_time_login=False,
        )
