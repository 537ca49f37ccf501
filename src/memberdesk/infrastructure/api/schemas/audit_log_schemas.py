"""Pydantic schemas for audit log endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuditLogResponse(BaseModel):
    """Response for a single audit log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Sequence number")
    timestamp: datetime = Field(..., description="When the change was recorded")
    user_id: str | None = Field(None, description="Identity that made the change")
    operation: str = Field(..., description="create, update or delete")
    table_name: str = Field(..., description="Table the change applies to")
    record_id: str | None = Field(None, description="ID of the affected row")
    old_values: dict[str, Any] | None = Field(None, description="Values before the change")
    new_values: dict[str, Any] | None = Field(None, description="Values after the change")
    severity: str = Field(..., description="info, warning, error or critical")


class AuditLogListResponse(BaseModel):
    """Response for listing audit logs."""

    items: list[AuditLogResponse] = Field(..., description="Audit log entries, newest first")
    total: int = Field(..., description="Total number of entries matching filters")
    skip: int = Field(..., description="Number of entries skipped")
    limit: int = Field(..., description="Maximum number of entries requested")
