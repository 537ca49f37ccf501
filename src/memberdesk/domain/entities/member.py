"""Member entity.

A member is identified by a human-facing member number (e.g. ``AB1234``).
Members who log in with that number before completing their profile get a
synthesized placeholder email so the identity service has an email-shaped key.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class MemberStatus(str, Enum):
    """Membership status values stored on the member record."""

    ACTIVE = "active"
    PENDING = "pending"
    INACTIVE = "inactive"


@dataclass
class MemberRecord:
    """Business record for a single member.

    Attributes:
        member_number: Unique human-facing identifier, always upper-case.
        email: Email used as the identity key (placeholder for new members).
        full_name: Display name; equals the member number until the profile is updated.
        id: Store-assigned primary key, None until persisted.
        verified: Whether an administrator verified the member.
        email_verified: Whether the email is known to be deliverable/owned.
        profile_updated: Whether the member completed their profile.
        password_changed: Whether the member replaced the default credential.
        first_time_login: True until the member's first successful login.
        registration_completed: Whether registration paperwork is complete.
        password_reset_required: Set when an administrator issued a temporary password.
        failed_login_attempts: Consecutive rejected credentials.
        locked_until: Lockout expiry, None when not locked.
        status: Membership status.
        collector_id: Collector the member is assigned to, if any.
        auth_user_id: Link to the external account identity, None until linked.
    """

    member_number: str
    email: str | None
    full_name: str
    id: str | None = None
    verified: bool = False
    email_verified: bool = False
    profile_updated: bool = False
    password_changed: bool = False
    first_time_login: bool = True
    registration_completed: bool = False
    password_reset_required: bool = False
    failed_login_attempts: int = 0
    locked_until: datetime | None = None
    status: str = MemberStatus.ACTIVE.value
    collector_id: str | None = None
    auth_user_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.member_number or not self.member_number.strip():
            raise ValueError("Member number is required")

    @property
    def has_identity(self) -> bool:
        """Whether the record is linked to an account identity."""
        return self.auth_user_id is not None

    def is_locked(self, now: datetime | None = None) -> bool:
        """Check whether the member is currently locked out.

        Args:
            now: Reference time, defaults to the current UTC time.
        """
        if self.locked_until is None:
            return False
        now = now or datetime.now(timezone.utc)
        locked_until = self.locked_until
        # SQLite hands back naive datetimes; they are stored as UTC.
        if locked_until.tzinfo is None:
            locked_until = locked_until.replace(tzinfo=timezone.utc)
        return locked_until > now
