"""Persistence repositories for database operations."""

from memberdesk.infrastructure.persistence.repositories.audit_log_repository import (
    AuditLogRepository,
)
from memberdesk.infrastructure.persistence.repositories.collector_repository import (
    CollectorRepository,
)
from memberdesk.infrastructure.persistence.repositories.identity_repository import (
    AccountIdentityRepository,
)
from memberdesk.infrastructure.persistence.repositories.member_repository import (
    MemberRepository,
)
from memberdesk.infrastructure.persistence.repositories.user_role_repository import (
    UserRoleRepository,
)

__all__ = [
    "AccountIdentityRepository",
    "AuditLogRepository",
    "CollectorRepository",
    "MemberRepository",
    "UserRoleRepository",
]
