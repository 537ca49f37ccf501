"""Credential lifecycle rules for members identified by member number.

A member moves through three stages:

- FIRST_TIME: never changed their password; the default credential is the
  member number itself.
- RESET: an administrator issued a temporary password that must be changed.
- ESTABLISHED: the member chose their own password.
"""

import re
import secrets
import string
from enum import Enum

from memberdesk.domain.entities import MemberRecord

_TEMP_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
_MEMBER_NUMBER_PATTERN = re.compile(r"^[A-Z0-9][A-Z0-9-]*$")


class CredentialStage(str, Enum):
    """Lifecycle stage of a member's credential."""

    FIRST_TIME = "first_time"
    RESET = "reset"
    ESTABLISHED = "established"


def normalize_member_number(identifier: str) -> str:
    """Trim and upper-case a member number as typed into the login form.

    Raises:
        ValueError: If the identifier is blank or contains unsupported characters.
    """
    normalized = (identifier or "").strip().upper()
    if not normalized:
        raise ValueError("Member number is required")
    if not _MEMBER_NUMBER_PATTERN.match(normalized):
        raise ValueError(f"Invalid member number: {identifier!r}")
    return normalized


class CredentialPolicy:
    """Derives placeholder emails and default credentials."""

    TEMPORARY_SUFFIX_LENGTH = 4

    def __init__(self, placeholder_domain: str) -> None:
        """Initialize the policy.

        Args:
            placeholder_domain: Domain for synthesized member emails.
        """
        self.placeholder_domain = placeholder_domain

    def placeholder_email(self, member_number: str) -> str:
        """Return ``<lowercased member number>@<placeholder domain>``."""
        return f"{member_number.lower()}@{self.placeholder_domain}"

    def is_placeholder_email(self, email: str | None) -> bool:
        """Check whether an email was synthesized rather than supplied by the member."""
        return bool(email) and email.lower().endswith(f"@{self.placeholder_domain}")

    def stage(self, member: MemberRecord) -> CredentialStage:
        """Determine which credential stage the member is in."""
        if member.password_reset_required:
            return CredentialStage.RESET
        if member.password_changed:
            return CredentialStage.ESTABLISHED
        return CredentialStage.FIRST_TIME

    def default_credential(self, member: MemberRecord) -> str | None:
        """Return the credential a member is expected to use before choosing one.

        Only first-time members have a derivable default; temporary and
        member-chosen passwords are never reconstructed.
        """
        if self.stage(member) is CredentialStage.FIRST_TIME:
            return member.member_number
        return None

    def requires_password_change(self, member: MemberRecord) -> bool:
        """Whether a successful login must be followed by a forced password change."""
        return self.stage(member) is not CredentialStage.ESTABLISHED

    def generate_temporary_credential(self, member_number: str) -> str:
        """Generate an administrator-issued temporary password.

        Format: the member number followed by four random lower-case
        alphanumerics, e.g. ``AB1234x7k2``.
        """
        suffix = "".join(
            secrets.choice(_TEMP_SUFFIX_ALPHABET)
            for _ in range(self.TEMPORARY_SUFFIX_LENGTH)
        )
        return f"{member_number}{suffix}"
