"""Account identity and session entities.

Both are owned by the identity service. MemberDesk only keeps the identity's
ID on the member record and hands sessions back to the caller.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class AccountIdentity:
    """An email/password identity managed by the identity service.

    Attributes:
        id: Identity ID assigned by the identity service.
        email: Email the identity signs in with.
        metadata: Key/value data attached at sign-up (includes member_number).
    """

    id: str
    email: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class AuthSession:
    """Authenticated session returned by a successful sign-in.

    Attributes:
        access_token: Bearer token for API calls.
        refresh_token: Token to obtain a new access token.
        expires_in: Access token lifetime in seconds.
        user_id: ID of the signed-in account identity.
        email: Email the identity signed in with.
    """

    access_token: str
    refresh_token: str | None
    expires_in: int
    user_id: str
    email: str
    token_type: str = "bearer"

    @property
    def is_usable(self) -> bool:
        """A session is usable only if it carries a token and an identity."""
        return bool(self.access_token) and bool(self.user_id)
