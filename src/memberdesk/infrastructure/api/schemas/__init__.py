"""Pydantic schemas for the MemberDesk API."""

from memberdesk.infrastructure.api.schemas.audit_log_schemas import (
    AuditLogListResponse,
    AuditLogResponse,
)
from memberdesk.infrastructure.api.schemas.auth_schemas import (
    ChangePasswordRequest,
    CurrentMemberResponse,
    ErrorResponse,
    MemberLoginRequest,
    MemberLoginResponse,
    MemberSummary,
    MessageResponse,
    SessionResponse,
    UpdateProfileRequest,
    UpdateProfileResponse,
    ValidationErrorDetail,
)
from memberdesk.infrastructure.api.schemas.collector_schemas import (
    CollectorListResponse,
    CollectorResponse,
    CreateCollectorRequest,
)
from memberdesk.infrastructure.api.schemas.member_schemas import (
    ActivateMemberRequest,
    ActivateMemberResponse,
    ResetPasswordResponse,
    UnlockMemberResponse,
)

__all__ = [
    "ActivateMemberRequest",
    "ActivateMemberResponse",
    "AuditLogListResponse",
    "AuditLogResponse",
    "ChangePasswordRequest",
    "CollectorListResponse",
    "CollectorResponse",
    "CreateCollectorRequest",
    "CurrentMemberResponse",
    "ErrorResponse",
    "MemberLoginRequest",
    "MemberLoginResponse",
    "MemberSummary",
    "MessageResponse",
    "ResetPasswordResponse",
    "SessionResponse",
    "UnlockMemberResponse",
    "UpdateProfileRequest",
    "UpdateProfileResponse",
    "ValidationErrorDetail",
]
