"""Domain entities for MemberDesk.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from memberdesk.domain.entities.identity import AccountIdentity, AuthSession
from memberdesk.domain.entities.member import MemberRecord, MemberStatus

__all__ = [
    "AccountIdentity",
    "AuthSession",
    "MemberRecord",
    "MemberStatus",
]
