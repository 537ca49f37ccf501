"""Role resolution for signed-in identities.

Roles rank ``admin > collector > member``. An identity's role is the highest
role assigned to it in ``user_roles``; without assignments, a member who is
registered as an active collector is a collector, and everyone else is a
member.
"""

from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession

from memberdesk.core.logging import get_logger
from memberdesk.infrastructure.persistence.repositories import (
    CollectorRepository,
    UserRoleRepository,
)

logger = get_logger(__name__)


class MemberRole(str, Enum):
    """Application roles."""

    ADMIN = "admin"
    COLLECTOR = "collector"
    MEMBER = "member"


ROLE_PRECEDENCE: tuple[MemberRole, ...] = (
    MemberRole.ADMIN,
    MemberRole.COLLECTOR,
    MemberRole.MEMBER,
)

ROLE_TABS: dict[MemberRole, tuple[str, ...]] = {
    MemberRole.ADMIN: ("dashboard", "users", "collectors", "audit", "system", "financials"),
    MemberRole.COLLECTOR: ("dashboard", "users"),
    MemberRole.MEMBER: ("dashboard",),
}


def highest_role(roles: list[str]) -> MemberRole | None:
    """Pick the highest-ranking known role from a list of role names."""
    for role in ROLE_PRECEDENCE:
        if role.value in roles:
            return role
    return None


def accessible_tabs(role: MemberRole) -> list[str]:
    return list(ROLE_TABS[role])


def can_access_tab(role: MemberRole, tab: str) -> bool:
    """Check whether a role may open a dashboard tab."""
    return tab in ROLE_TABS[role]


class RoleResolver:
    """Resolves the effective role of an account identity."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.role_repo = UserRoleRepository(session)
        self.collector_repo = CollectorRepository(session)

    async def resolve(self, user_id: str, member_number: str | None = None) -> MemberRole:
        """Resolve the role of an identity.

        Args:
            user_id: Account identity ID.
            member_number: Member number of the linked record, used for the
                collector fallback.

        Returns:
            The effective role.
        """
        assigned = highest_role(await self.role_repo.list_roles(user_id))
        if assigned is not None:
            return assigned

        if member_number and await self.collector_repo.is_active_collector(member_number):
            logger.debug("Role resolved from collectors table", member_number=member_number)
            return MemberRole.COLLECTOR

        return MemberRole.MEMBER
