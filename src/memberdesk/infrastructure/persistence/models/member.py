"""SQLAlchemy model for the members table.

Members are uniquely identified by their member number. The email column is
unique too, since each placeholder email is derived from exactly one number.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from memberdesk.infrastructure.persistence.database import Base


class MemberModel(Base):
    """SQLAlchemy model for the members table.

    Attributes:
        id: Primary key (UUID string).
        member_number: Unique human-facing identifier.
        email: Identity email (placeholder until the profile is updated).
        full_name: Display name.
        auth_user_id: ID of the linked account identity.
        collector_id: Foreign key to the collector the member pays through.
        failed_login_attempts: Consecutive rejected logins.
        locked_until: Lockout expiry.
    """

    __tablename__ = "members"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Member ID (UUID)",
    )
    member_number: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        unique=True,
        index=True,
        comment="Human-facing member identifier",
    )
    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        unique=True,
        comment="Email used as the identity key",
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    profile_updated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    password_changed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    first_time_login: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    registration_completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    password_reset_required: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    failed_login_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    locked_until: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    password_set_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    auth_user_id: Mapped[str | None] = mapped_column(
        String(36),
        nullable=True,
        index=True,
        comment="Linked account identity ID",
    )
    collector_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("collectors.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    collector: Mapped["CollectorModel | None"] = relationship(  # noqa: F821
        "CollectorModel",
        back_populates="members",
        foreign_keys=[collector_id],
    )

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, member_number={self.member_number})>"
