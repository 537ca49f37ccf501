"""Collector API routes (admin only)."""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.domain.exceptions import CollectorConflictError
from memberdesk.domain.services import CollectorService
from memberdesk.infrastructure.api.dependencies import AdminMember
from memberdesk.infrastructure.api.schemas import (
    CollectorListResponse,
    CollectorResponse,
    CreateCollectorRequest,
)
from memberdesk.infrastructure.persistence.database import get_db_session

router = APIRouter()


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=CollectorListResponse,
    responses={403: {"description": "Admin access required"}},
)
async def list_collectors(
    admin: AdminMember,
    active_only: bool = Query(False, description="Only return active collectors"),
    session: AsyncSession = Depends(get_db_session),
) -> CollectorListResponse:
    """List collectors ordered by name."""
    collectors = await CollectorService(session).list_collectors(active_only=active_only)
    return CollectorListResponse(
        items=[CollectorResponse.model_validate(c) for c in collectors],
        total=len(collectors),
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=CollectorResponse,
    responses={
        400: {"description": "Invalid collector fields"},
        403: {"description": "Admin access required"},
        409: {"description": "Prefix and number already taken"},
    },
)
async def create_collector(
    request: CreateCollectorRequest,
    admin: AdminMember,
    session: AsyncSession = Depends(get_db_session),
) -> CollectorResponse | JSONResponse:
    """Create an active collector."""
    service = CollectorService(session)
    try:
        collector = await service.create(
            name=request.name,
            prefix=request.prefix,
            number=request.number,
            member_number=request.member_number,
            actor_user_id=admin.user_id,
        )
    except ValueError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Validation error", "message": str(e)},
        )
    except CollectorConflictError as e:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"error": "Conflict", "message": str(e)},
        )

    return CollectorResponse.model_validate(collector)
