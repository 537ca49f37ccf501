"""Pydantic schemas for member administration endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from memberdesk.infrastructure.api.schemas.auth_schemas import MemberSummary


class UnlockMemberResponse(BaseModel):
    """Response after clearing a member's lockout."""

    member: MemberSummary
    failed_login_attempts: int = Field(..., description="Always 0 after unlocking")
    locked_until: datetime | None = None


class ResetPasswordResponse(BaseModel):
    """Response after issuing a temporary password."""

    member: MemberSummary
    temporary_password: str = Field(
        ..., description="Temporary password to hand to the member; shown only once"
    )


class ActivateMemberRequest(BaseModel):
    """Request body for activating a member."""

    collector_id: str = Field(..., min_length=1, description="Collector the member pays through")


class ActivateMemberResponse(BaseModel):
    """Response after activating a member."""

    member: MemberSummary
