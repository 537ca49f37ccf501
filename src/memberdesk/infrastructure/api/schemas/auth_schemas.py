"""Pydantic schemas for member authentication endpoints."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class MemberLoginRequest(BaseModel):
    """Request body for member login."""

    member_number: str = Field(
        ..., min_length=1, max_length=32, description="Member number, e.g. AB1234"
    )
    password: str = Field(..., min_length=1, description="Member's password")


class MemberSummary(BaseModel):
    """Member information in auth responses."""

    id: str | None = Field(None, description="Member ID")
    member_number: str = Field(..., description="Member number")
    email: str | None = Field(None, description="Email used to sign in")
    full_name: str = Field(..., description="Display name")
    status: str = Field(..., description="Membership status")
    collector_id: str | None = Field(None, description="Assigned collector")
    first_time_login: bool = Field(..., description="Whether this is the member's first login")
    profile_updated: bool = Field(..., description="Whether the profile has been completed")
    password_changed: bool = Field(..., description="Whether the member chose a password")
    password_reset_required: bool = Field(
        ..., description="Whether a temporary password must be replaced"
    )
    created_at: datetime | None = Field(None, description="When the member was created")

    model_config = {"from_attributes": True}


class SessionResponse(BaseModel):
    """Session tokens issued by the identity service."""

    access_token: str = Field(..., description="Bearer access token")
    refresh_token: str | None = Field(None, description="Refresh token")
    token_type: str = Field("bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds")
    user_id: str = Field(..., description="Account identity ID")


class MemberLoginResponse(BaseModel):
    """Response for a successful member login."""

    session: SessionResponse = Field(..., description="Authenticated session")
    member: MemberSummary = Field(..., description="Member information")
    role: str = Field(..., description="Effective role: admin, collector or member")
    password_change_required: bool = Field(
        ..., description="Whether the member must change their password before continuing"
    )


class ChangePasswordRequest(BaseModel):
    """Request body for changing the signed-in member's password."""

    current_password: str | None = Field(
        None, description="Current password, required once a password has been chosen"
    )
    new_password: str = Field(..., min_length=1, description="New password")
    confirm_password: str = Field(..., min_length=1, description="New password again")


class UpdateProfileRequest(BaseModel):
    """Request body for completing or editing the signed-in member's profile."""

    full_name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="Email address replacing the current one")
    phone: str | None = Field(None, max_length=50, description="Phone number")


class UpdateProfileResponse(BaseModel):
    """Response after a profile update."""

    member: MemberSummary
    email_verification_required: bool = Field(
        ..., description="Whether the new email still has to be verified"
    )


class MessageResponse(BaseModel):
    message: str


class CurrentMemberResponse(BaseModel):
    """Response for the current member endpoint."""

    member: MemberSummary = Field(..., description="Member information")
    role: str = Field(..., description="Effective role")
    tabs: list[str] = Field(..., description="Dashboard tabs the role may open")
    password_change_required: bool


class ValidationErrorDetail(BaseModel):
    """Detail for a single validation error."""

    field: str = Field(..., description="Field name that failed validation")
    message: str = Field(..., description="Human-readable error message")
    code: str | None = Field(None, description="Machine-readable error code")


class ErrorResponse(BaseModel):
    """Response body for handled errors."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    details: list[ValidationErrorDetail] | None = None
