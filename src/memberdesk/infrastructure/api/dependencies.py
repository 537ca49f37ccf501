"""FastAPI dependencies for authentication and authorization.

Bearer tokens are verified locally with the shared JWT secret, whichever
identity backend issued them.
"""

from dataclasses import dataclass, field
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.core.logging import get_logger
from memberdesk.domain.collaborators import IdentityProvider
from memberdesk.domain.entities import AuthSession, MemberRecord
from memberdesk.domain.services import MemberRole, RoleResolver
from memberdesk.infrastructure.auth import (
    InvalidTokenError,
    TokenExpiredError,
    build_identity_provider,
    jwt_service,
)
from memberdesk.infrastructure.persistence.database import get_db_session
from memberdesk.infrastructure.persistence.member_record_store import to_member_record
from memberdesk.infrastructure.persistence.repositories import MemberRepository

logger = get_logger(__name__)


@dataclass
class CurrentMember:
    """The authenticated member behind a request.

    Extracted from a valid access token and the linked member record.
    """

    user_id: str
    email: str
    access_token: str
    member: MemberRecord
    role: MemberRole
    expires_in: int = 0
    claims: dict = field(default_factory=dict)

    @property
    def auth_session(self) -> AuthSession:
        """Rebuild the identity session from the bearer token."""
        return AuthSession(
            access_token=self.access_token,
            refresh_token=None,
            expires_in=self.expires_in,
            user_id=self.user_id,
            email=self.email,
        )


async def get_identity_provider(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> IdentityProvider:
    """Provide the configured identity provider."""
    return build_identity_provider(session)


async def get_current_member(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentMember:
    """Extract and validate the current member from the Authorization header.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired, 403 if
            no member record is linked to the identity.
    """
    if authorization is None:
        logger.info("Authentication failed: missing Authorization header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.info("Authentication failed: invalid Authorization header format")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = parts[1]

    try:
        payload = jwt_service.validate_access_token(token)
    except TokenExpiredError:
        logger.info("Authentication failed: token expired")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except InvalidTokenError as e:
        logger.info("Authentication failed: invalid token", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload["sub"]
    model = await MemberRepository(session).get_by_auth_user_id(user_id)
    if model is None:
        logger.info("Authentication failed: no member linked", user_id=user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No member record is linked to this account",
        )

    member = to_member_record(model)
    role = await RoleResolver(session).resolve(user_id, member.member_number)
    exp = payload.get("exp")
    iat = payload.get("iat")
    return CurrentMember(
        user_id=user_id,
        email=payload.get("email") or member.email or "",
        access_token=token,
        member=member,
        role=role,
        expires_in=int(exp - iat) if exp and iat else 0,
        claims=payload,
    )


AuthenticatedMember = Annotated[CurrentMember, Depends(get_current_member)]


async def require_admin(current: AuthenticatedMember) -> CurrentMember:
    """Ensure the current member holds the admin role.

    Raises:
        HTTPException: 403 if the member is not an admin.
    """
    if current.role is not MemberRole.ADMIN:
        logger.info(
            "Admin access denied",
            user_id=current.user_id,
            member_number=current.member.member_number,
            role=current.role.value,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required",
        )
    return current


AdminMember = Annotated[CurrentMember, Depends(require_admin)]
