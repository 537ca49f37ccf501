"""Audit log repository for write-only audit trail operations."""

from typing import Any, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.infrastructure.persistence.models import AuditLogModel


class AuditLogRepository:
    """Repository for audit log database operations.

    Entries can be created and listed. Update and delete are not provided so
    the trail stays append-only.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def record(
        self,
        operation: str,
        table_name: str,
        record_id: str | None,
        user_id: str | None = None,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
        severity: str = "info",
    ) -> AuditLogModel:
        """Append an audit log entry.

        Args:
            operation: create, update or delete.
            table_name: Table the change applies to.
            record_id: Primary key of the changed row.
            user_id: Identity that made the change, None for system actions.
            old_values: Column values before the change.
            new_values: Column values after the change.
            severity: info, warning, error or critical.

        Returns:
            Created audit log model.
        """
        entry = AuditLogModel(
            operation=operation,
            table_name=table_name,
            record_id=record_id,
            user_id=user_id,
            old_values=old_values,
            new_values=new_values,
            severity=severity,
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def list_logs(
        self,
        table_name: str | None = None,
        record_id: str | None = None,
        user_id: str | None = None,
        operation: str | None = None,
        severity: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[Sequence[AuditLogModel], int]:
        """List audit log entries, newest first, with optional filters.

        Args:
            table_name: Optional filter by table.
            record_id: Optional filter by changed row.
            user_id: Optional filter by acting identity.
            operation: Optional filter by create, update or delete.
            severity: Optional filter by severity.
            skip: Number of entries to skip.
            limit: Maximum number of entries to return.

        Returns:
            Tuple of (entries, total count matching the filters).
        """
        query = select(AuditLogModel)

        if table_name is not None:
            query = query.where(AuditLogModel.table_name == table_name)
        if record_id is not None:
            query = query.where(AuditLogModel.record_id == record_id)
        if user_id is not None:
            query = query.where(AuditLogModel.user_id == user_id)
        if operation is not None:
            query = query.where(AuditLogModel.operation == operation)
        if severity is not None:
            query = query.where(AuditLogModel.severity == severity)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.session.execute(count_query)).scalar_one()

        query = query.order_by(AuditLogModel.id.desc()).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return result.scalars().all(), total
