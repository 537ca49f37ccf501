"""SQLAlchemy model for locally stored account identities.

Only used when the identity backend is ``local``. With the hosted backend
identities live in the hosted service and this table stays empty.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from memberdesk.infrastructure.persistence.database import Base


class AccountIdentityModel(Base):
    """SQLAlchemy model for the auth_identities table."""

    __tablename__ = "auth_identities"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Identity ID (UUID)",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Argon2id password hash",
    )
    user_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata",
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )
    last_sign_in_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return f"<AccountIdentity(id={self.id}, email={self.email})>"
