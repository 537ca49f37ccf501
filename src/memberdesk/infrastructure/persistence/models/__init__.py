"""SQLAlchemy models for MemberDesk tables.

All models inherit from the Base class defined in database.py and are
created on application startup outside production.
"""

from memberdesk.infrastructure.persistence.models.audit_log import AuditLogModel
from memberdesk.infrastructure.persistence.models.collector import CollectorModel
from memberdesk.infrastructure.persistence.models.identity import AccountIdentityModel
from memberdesk.infrastructure.persistence.models.member import MemberModel
from memberdesk.infrastructure.persistence.models.user_role import UserRoleModel

__all__ = [
    "AccountIdentityModel",
    "AuditLogModel",
    "CollectorModel",
    "MemberModel",
    "UserRoleModel",
]
