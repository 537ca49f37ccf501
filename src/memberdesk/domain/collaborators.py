"""Interfaces for the two stores the login workflow depends on.

The member record store owns MemberRecord rows; the identity service owns
account identities. Implementations live under ``memberdesk.infrastructure``.
"""

from abc import ABC, abstractmethod
from typing import Any

from memberdesk.domain.entities import AccountIdentity, AuthSession, MemberRecord


class RecordStoreError(Exception):
    """Raised when the member record store cannot be reached or fails."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RecordConflictError(RecordStoreError):
    """Raised when an insert violates the member number uniqueness constraint."""


class IdentityServiceError(Exception):
    """Raised when the identity service fails for reasons other than a rejection."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class IdentityNotFoundError(IdentityServiceError):
    """Raised by sign-in when no identity exists for the email."""


class IdentityCredentialsRejectedError(IdentityServiceError):
    """Raised by sign-in when the credential does not match.

    Some identity services report a missing identity this way too.
    """


class IdentityAlreadyExistsError(IdentityServiceError):
    """Raised by sign-up when an identity with the email already exists."""


class MemberRecordStore(ABC):
    """Store of member records keyed by member number."""

    @abstractmethod
    async def find_by_identifier(self, member_number: str) -> MemberRecord | None:
        """Return the member with this number, or None if there is none.

        Raises:
            RecordStoreError: If the store cannot be queried.
        """
        ...

    @abstractmethod
    async def insert(self, record: MemberRecord) -> MemberRecord:
        """Persist a new member record.

        Raises:
            RecordConflictError: If the member number already exists.
            RecordStoreError: For any other failure.
        """
        ...

    @abstractmethod
    async def link_identity(self, member_number: str, auth_user_id: str) -> None:
        """Attach an account identity ID to the member record."""
        ...


class IdentityProvider(ABC):
    """Email/password identity service."""

    @abstractmethod
    async def sign_in(self, email: str, credential: str) -> AuthSession:
        """Authenticate and return a session.

        Raises:
            IdentityNotFoundError: If no identity exists for the email.
            IdentityCredentialsRejectedError: If the credential is wrong.
            IdentityServiceError: For transport or server failures.
        """
        ...

    @abstractmethod
    async def sign_up(
        self, email: str, credential: str, metadata: dict[str, Any]
    ) -> AccountIdentity:
        """Create a new identity.

        Raises:
            IdentityAlreadyExistsError: If the email is already registered.
            IdentityServiceError: For any other failure.
        """
        ...

    @abstractmethod
    async def update_password(self, session: AuthSession, new_credential: str) -> None:
        """Change the password of the identity that owns ``session``."""
        ...

    @abstractmethod
    async def update_email(self, session: AuthSession, new_email: str) -> None:
        """Change the email of the identity that owns ``session``.

        Raises:
            IdentityAlreadyExistsError: If another identity uses the email.
            IdentityServiceError: For any other failure.
        """
        ...

    @abstractmethod
    async def admin_set_password(self, user_id: str, new_credential: str) -> None:
        """Overwrite an identity's password without its current session."""
        ...
