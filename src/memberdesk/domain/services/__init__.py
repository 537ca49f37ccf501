"""Domain services for MemberDesk.

Services contain the login, credential and role logic that does not belong
to a single entity.
"""

from memberdesk.domain.services.credential_policy import (
    CredentialPolicy,
    CredentialStage,
    normalize_member_number,
)
from memberdesk.domain.services.collector_service import CollectorService
from memberdesk.domain.services.login_lockout_service import LoginLockoutService
from memberdesk.domain.services.member_admin_service import (
    MemberAdminService,
    PasswordResetResult,
)
from memberdesk.domain.services.member_identity_reconciler import (
    MemberIdentityReconciler,
    ReconciliationResult,
    ReconciliationState,
)
from memberdesk.domain.services.member_login_service import (
    MemberLoginResult,
    MemberLoginService,
)
from memberdesk.domain.services.password_change_service import PasswordChangeService
from memberdesk.domain.services.password_validator import (
    PasswordValidationError,
    PasswordValidator,
    default_password_validator,
)
from memberdesk.domain.services.profile_service import ProfileService
from memberdesk.domain.services.role_resolver import (
    MemberRole,
    RoleResolver,
    accessible_tabs,
    can_access_tab,
)

__all__ = [
    "CollectorService",
    "CredentialPolicy",
    "CredentialStage",
    "LoginLockoutService",
    "MemberAdminService",
    "MemberIdentityReconciler",
    "MemberLoginResult",
    "MemberLoginService",
    "MemberRole",
    "PasswordChangeService",
    "PasswordResetResult",
    "PasswordValidationError",
    "PasswordValidator",
    "ProfileService",
    "ReconciliationResult",
    "ReconciliationState",
    "RoleResolver",
    "accessible_tabs",
    "can_access_tab",
    "default_password_validator",
    "normalize_member_number",
]
