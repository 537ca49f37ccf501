"""Member administration API routes (admin only)."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.core.logging import get_logger
from memberdesk.domain.collaborators import IdentityProvider, IdentityServiceError
from memberdesk.domain.exceptions import (
    CollectorNotFoundError,
    MemberNotFoundError,
    PasswordChangeError,
)
from memberdesk.domain.services import MemberAdminService
from memberdesk.infrastructure.api.dependencies import AdminMember, get_identity_provider
from memberdesk.infrastructure.api.schemas import (
    ActivateMemberRequest,
    ActivateMemberResponse,
    MemberSummary,
    ResetPasswordResponse,
    UnlockMemberResponse,
)
from memberdesk.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)

router = APIRouter()


def _not_found(e: MemberNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "Not found", "message": str(e)},
    )


@router.post(
    "/{member_number}/unlock",
    status_code=status.HTTP_200_OK,
    response_model=UnlockMemberResponse,
    responses={404: {"description": "Member not found"}},
)
async def unlock_member(
    member_number: str,
    admin: AdminMember,
    session: AsyncSession = Depends(get_db_session),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> UnlockMemberResponse | JSONResponse:
    """Clear a member's lockout and failed login counter."""
    service = MemberAdminService(session, identity_provider)
    try:
        member = await service.unlock(member_number, actor_user_id=admin.user_id)
    except MemberNotFoundError as e:
        return _not_found(e)

    logger.info(
        "Member unlocked by admin",
        member_number=member.member_number,
        admin_user_id=admin.user_id,
    )
    return UnlockMemberResponse(
        member=MemberSummary.model_validate(member),
        failed_login_attempts=member.failed_login_attempts,
        locked_until=member.locked_until,
    )


@router.post(
    "/{member_number}/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=ResetPasswordResponse,
    responses={
        404: {"description": "Member not found"},
        409: {"description": "Member has not signed in yet"},
        503: {"description": "Identity service unavailable"},
    },
)
async def reset_member_password(
    member_number: str,
    admin: AdminMember,
    session: AsyncSession = Depends(get_db_session),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> ResetPasswordResponse | JSONResponse:
    """Issue a temporary password the member must change on next login."""
    service = MemberAdminService(session, identity_provider)
    try:
        result = await service.reset_password(member_number, actor_user_id=admin.user_id)
    except MemberNotFoundError as e:
        return _not_found(e)
    except PasswordChangeError as e:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"error": "Conflict", "message": e.message},
        )
    except IdentityServiceError as e:
        logger.error("Admin password reset failed", error=e.message, status_code=e.status_code)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "error": "Service unavailable",
                "message": "Identity service is unavailable, please try again",
            },
        )

    return ResetPasswordResponse(
        member=MemberSummary.model_validate(result.member),
        temporary_password=result.temporary_password,
    )


@router.post(
    "/{member_id}/activate",
    status_code=status.HTTP_200_OK,
    response_model=ActivateMemberResponse,
    responses={404: {"description": "Member or collector not found"}},
)
async def activate_member(
    member_id: str,
    request: ActivateMemberRequest,
    admin: AdminMember,
    session: AsyncSession = Depends(get_db_session),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> ActivateMemberResponse | JSONResponse:
    """Activate a member and assign them to an active collector."""
    service = MemberAdminService(session, identity_provider)
    try:
        member = await service.activate(
            member_id, request.collector_id, actor_user_id=admin.user_id
        )
    except MemberNotFoundError as e:
        return _not_found(e)
    except CollectorNotFoundError as e:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Not found", "message": str(e)},
        )

    return ActivateMemberResponse(member=MemberSummary.model_validate(member))
