"""SQLAlchemy model for the audit_logs table.

Audit entries record who changed which member-related row and how. Entries
are append-only; the repository exposes no update or delete.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from memberdesk.infrastructure.persistence.database import Base


class AuditLogModel(Base):
    """SQLAlchemy model for the audit_logs table.

    Attributes:
        id: Primary key (auto-incrementing).
        timestamp: When the change happened.
        user_id: Identity that made the change, None for system actions.
        operation: create, update or delete.
        table_name: Table the change applies to.
        record_id: Primary key of the changed row.
        old_values: Column values before the change.
        new_values: Column values after the change.
        severity: info, warning, error or critical.
    """

    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    operation: Mapped[str] = mapped_column(String(10), nullable=False)
    table_name: Mapped[str] = mapped_column(String(64), nullable=False)
    record_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    old_values: Mapped[dict[str, Any] | None] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=True,
    )
    new_values: Mapped[dict[str, Any] | None] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=True,
    )
    severity: Mapped[str] = mapped_column(String(10), nullable=False, default="info")

    __table_args__ = (
        CheckConstraint(
            "operation IN ('create', 'update', 'delete')",
            name="ck_audit_logs_operation",
        ),
        CheckConstraint(
            "severity IN ('info', 'warning', 'error', 'critical')",
            name="ck_audit_logs_severity",
        ),
        Index("ix_audit_logs_table_record", "table_name", "record_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<AuditLog(id={self.id}, operation={self.operation}, "
            f"table={self.table_name}, record={self.record_id})>"
        )
