"""API routes for MemberDesk."""

from memberdesk.infrastructure.api.routes.audit_logs_router import router as audit_logs_router
from memberdesk.infrastructure.api.routes.auth_router import router as auth_router
from memberdesk.infrastructure.api.routes.collectors_router import router as collectors_router
from memberdesk.infrastructure.api.routes.members_router import router as members_router

__all__ = [
    "audit_logs_router",
    "auth_router",
    "collectors_router",
    "members_router",
]
