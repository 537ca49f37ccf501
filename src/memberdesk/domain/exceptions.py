"""Errors surfaced by member login and password workflows.

Every error carries a ``message`` meant for logs. User-facing responses use
``public_message`` so that a failure never tells the caller whether a member
number exists.
"""

from datetime import datetime

GENERIC_LOGIN_FAILURE = "Invalid Member ID or password"


class MemberLoginError(Exception):
    """Base class for member login failures."""

    public_message = GENERIC_LOGIN_FAILURE

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MemberLookupError(MemberLoginError, LookupError):
    """The member record store could not be read."""

    public_message = "Login is temporarily unavailable, please try again"


class AccountCreationError(MemberLoginError):
    """A member record or identity could not be created."""


class InvalidCredentialsError(MemberLoginError):
    """The identity service rejected the credential."""


class SessionEstablishmentError(MemberLoginError):
    """Sign-in succeeded nominally but produced no usable session."""


class AccountLockedError(MemberLoginError):
    """Too many failed attempts; the member is locked out until ``locked_until``."""

    public_message = "Account temporarily locked, please try again later"

    def __init__(self, message: str, locked_until: datetime | None = None) -> None:
        super().__init__(message)
        self.locked_until = locked_until


class PasswordChangeError(Exception):
    """A password change request was rejected.

    Attributes:
        message: Reason shown to the member.
        details: Field-level validation errors, if any.
    """

    def __init__(self, message: str, details: list[dict[str, str]] | None = None) -> None:
        self.message = message
        self.details = details or []
        super().__init__(message)


class MemberNotFoundError(Exception):
    """Raised by administrative operations that target an unknown member."""

    def __init__(self, member_number: str) -> None:
        self.member_number = member_number
        super().__init__(f"Member '{member_number}' not found")


class CollectorNotFoundError(Exception):
    """Raised when a collector is unknown or no longer active."""

    def __init__(self, collector_id: str) -> None:
        self.collector_id = collector_id
        super().__init__(f"Active collector '{collector_id}' not found")


class CollectorConflictError(Exception):
    """Raised when a collector prefix and number are already taken."""

    def __init__(self, prefix: str, number: str) -> None:
        self.prefix = prefix
        self.number = number
        super().__init__(f"Collector {prefix}{number} already exists")


class ProfileUpdateError(Exception):
    """A profile update request was rejected.

    Attributes:
        message: Reason shown to the member.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
