"""SQLAlchemy model for the collectors table.

A collector is a member who collects payments from the members assigned to
them. Collectors are identified by a short prefix and a sequence number.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from memberdesk.infrastructure.persistence.database import Base


class CollectorModel(Base):
    """SQLAlchemy model for the collectors table."""

    __tablename__ = "collectors"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    prefix: Mapped[str] = mapped_column(String(8), nullable=False)
    number: Mapped[str] = mapped_column(String(8), nullable=False)
    member_number: Mapped[str | None] = mapped_column(
        String(32),
        nullable=True,
        index=True,
        comment="Member number of the member acting as collector",
    )
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )

    members: Mapped[list["MemberModel"]] = relationship(  # noqa: F821
        "MemberModel",
        back_populates="collector",
    )

    __table_args__ = (
        UniqueConstraint("prefix", "number", name="uq_collectors_prefix_number"),
    )

    def __repr__(self) -> str:
        return f"<Collector(id={self.id}, name={self.name}, prefix={self.prefix})>"
