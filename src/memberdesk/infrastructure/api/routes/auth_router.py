"""Member authentication API routes.

Provides member login by member number, password change, profile update
and the current member endpoint.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.core.config import get_settings
from memberdesk.core.logging import get_logger
from memberdesk.domain.collaborators import IdentityProvider, IdentityServiceError
from memberdesk.domain.exceptions import (
    GENERIC_LOGIN_FAILURE,
    AccountLockedError,
    MemberLoginError,
    MemberLookupError,
    PasswordChangeError,
    ProfileUpdateError,
)
from memberdesk.domain.services import (
    CredentialPolicy,
    MemberLoginService,
    PasswordChangeService,
    ProfileService,
    accessible_tabs,
)
from memberdesk.infrastructure.api.dependencies import (
    AuthenticatedMember,
    get_identity_provider,
)
from memberdesk.infrastructure.api.schemas import (
    ChangePasswordRequest,
    CurrentMemberResponse,
    MemberLoginRequest,
    MemberLoginResponse,
    MemberSummary,
    MessageResponse,
    SessionResponse,
    UpdateProfileRequest,
    UpdateProfileResponse,
)
from memberdesk.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)

router = APIRouter()

UNAVAILABLE_MESSAGE = "Login is temporarily unavailable, please try again"


@router.post(
    "/member-login",
    status_code=status.HTTP_200_OK,
    response_model=MemberLoginResponse,
    responses={
        401: {"description": "Invalid member number or password"},
        423: {"description": "Account temporarily locked"},
        503: {"description": "Record store or identity service unavailable"},
    },
)
async def member_login(
    request: MemberLoginRequest,
    session: AsyncSession = Depends(get_db_session),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> MemberLoginResponse | JSONResponse:
    """Log a member in with their member number and password.

    First-time members are created on the fly: their record gets a
    placeholder email and their identity is registered with the member
    number as the initial password.

    Security:
    - Credential, creation and session failures all return the same 401 so
      the response never reveals whether a member number exists.
    """
    service = MemberLoginService(session, identity_provider)
    try:
        result = await service.login(request.member_number, request.password)
    except AccountLockedError as e:
        logger.info("Member login refused: locked", error=e.message)
        return JSONResponse(
            status_code=status.HTTP_423_LOCKED,
            content={"error": "Account locked", "message": e.public_message},
        )
    except MemberLookupError as e:
        logger.error("Member login failed: record store unavailable", error=e.message)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": "Service unavailable", "message": e.public_message},
        )
    except MemberLoginError as e:
        logger.info(
            "Member login failed",
            error_type=type(e).__name__,
            error=e.message,
        )
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Authentication failed", "message": GENERIC_LOGIN_FAILURE},
        )
    except IdentityServiceError as e:
        logger.error(
            "Member login failed: identity service unavailable",
            error=e.message,
            status_code=e.status_code,
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": "Service unavailable", "message": UNAVAILABLE_MESSAGE},
        )

    return MemberLoginResponse(
        session=SessionResponse(
            access_token=result.session.access_token,
            refresh_token=result.session.refresh_token,
            token_type=result.session.token_type,
            expires_in=result.session.expires_in,
            user_id=result.session.user_id,
        ),
        member=MemberSummary.model_validate(result.member),
        role=result.role.value,
        password_change_required=result.password_change_required,
    )


@router.post(
    "/change-password",
    status_code=status.HTTP_200_OK,
    response_model=MessageResponse,
    responses={
        400: {"description": "Validation error or wrong current password"},
        401: {"description": "Not authenticated"},
    },
)
async def change_password(
    request: ChangePasswordRequest,
    current: AuthenticatedMember,
    session: AsyncSession = Depends(get_db_session),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> MessageResponse | JSONResponse:
    """Change the signed-in member's password."""
    service = PasswordChangeService(session, identity_provider)
    try:
        await service.change_password(
            member=current.member,
            auth_session=current.auth_session,
            new_password=request.new_password,
            confirm_password=request.confirm_password,
            current_password=request.current_password,
        )
    except PasswordChangeError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Password change failed",
                "message": e.message,
                "details": e.details or None,
            },
        )
    except IdentityServiceError as e:
        logger.error("Password change failed: identity service unavailable", error=e.message)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "error": "Service unavailable",
                "message": "Password change is temporarily unavailable, please try again",
            },
        )

    return MessageResponse(message="Password changed successfully")


@router.put(
    "/profile",
    status_code=status.HTTP_200_OK,
    response_model=UpdateProfileResponse,
    responses={
        400: {"description": "Profile rejected or email already in use"},
        401: {"description": "Not authenticated"},
    },
)
async def update_profile(
    request: UpdateProfileRequest,
    current: AuthenticatedMember,
    session: AsyncSession = Depends(get_db_session),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> UpdateProfileResponse | JSONResponse:
    """Complete or edit the signed-in member's profile."""
    service = ProfileService(session, identity_provider)
    try:
        member = await service.update_profile(
            member=current.member,
            auth_session=current.auth_session,
            full_name=request.full_name,
            email=str(request.email),
            phone=request.phone,
        )
    except ProfileUpdateError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Profile update failed", "message": e.message},
        )
    except IdentityServiceError as e:
        logger.error("Profile update failed: identity service unavailable", error=e.message)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "error": "Service unavailable",
                "message": "Profile update is temporarily unavailable, please try again",
            },
        )

    return UpdateProfileResponse(
        member=MemberSummary.model_validate(member),
        email_verification_required=not member.email_verified,
    )


@router.get(
    "/me",
    status_code=status.HTTP_200_OK,
    response_model=CurrentMemberResponse,
)
async def get_me(current: AuthenticatedMember) -> CurrentMemberResponse:
    """Return the signed-in member, their role and the tabs they may open."""
    policy = CredentialPolicy(get_settings().placeholder_email_domain)
    return CurrentMemberResponse(
        member=MemberSummary.model_validate(current.member),
        role=current.role.value,
        tabs=accessible_tabs(current.role),
        password_change_required=policy.requires_password_change(current.member),
    )
