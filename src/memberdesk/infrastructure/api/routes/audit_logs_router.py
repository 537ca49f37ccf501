"""Audit log API routes (admin only)."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.infrastructure.api.dependencies import AdminMember
from memberdesk.infrastructure.api.schemas import AuditLogListResponse, AuditLogResponse
from memberdesk.infrastructure.persistence.database import get_db_session
from memberdesk.infrastructure.persistence.repositories import AuditLogRepository

router = APIRouter()


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=AuditLogListResponse,
    responses={403: {"description": "Admin access required"}},
)
async def list_audit_logs(
    admin: AdminMember,
    table_name: str | None = Query(None, description="Filter by table name"),
    record_id: str | None = Query(None, description="Filter by record ID"),
    user_id: str | None = Query(None, description="Filter by acting identity"),
    operation: str | None = Query(
        None, pattern="^(create|update|delete)$", description="Filter by operation"
    ),
    severity: str | None = Query(
        None, pattern="^(info|warning|error|critical)$", description="Filter by severity"
    ),
    skip: int = Query(0, ge=0, description="Number of entries to skip"),
    limit: int = Query(100, ge=1, le=500, description="Maximum number of entries to return"),
    session: AsyncSession = Depends(get_db_session),
) -> AuditLogListResponse:
    """List audit log entries, newest first."""
    logs, total = await AuditLogRepository(session).list_logs(
        table_name=table_name,
        record_id=record_id,
        user_id=user_id,
        operation=operation,
        severity=severity,
        skip=skip,
        limit=limit,
    )
    return AuditLogListResponse(
        items=[AuditLogResponse.model_validate(log) for log in logs],
        total=total,
        skip=skip,
        limit=limit,
    )
