"""create_member_tables

Revision ID: 3f2a9c1d7e40
Revises:
Create Date: 2026-10-19 09:12:44.118203

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7e40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "collectors",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("prefix", sa.String(length=8), nullable=False),
        sa.Column("number", sa.String(length=8), nullable=False),
        sa.Column(
            "member_number",
            sa.String(length=32),
            nullable=True,
            comment="Member number of the member acting as collector",
        ),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("prefix", "number", name="uq_collectors_prefix_number"),
    )
    op.create_index("ix_collectors_member_number", "collectors", ["member_number"])

    op.create_table(
        "members",
        sa.Column("id", sa.String(length=36), nullable=False, comment="Member ID (UUID)"),
        sa.Column(
            "member_number",
            sa.String(length=32),
            nullable=False,
            comment="Human-facing member identifier",
        ),
        sa.Column(
            "email",
            sa.String(length=255),
            nullable=True,
            comment="Email used as the identity key",
        ),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False),
        sa.Column("email_verified", sa.Boolean(), nullable=False),
        sa.Column("profile_updated", sa.Boolean(), nullable=False),
        sa.Column("password_changed", sa.Boolean(), nullable=False),
        sa.Column("first_time_login", sa.Boolean(), nullable=False),
        sa.Column("registration_completed", sa.Boolean(), nullable=False),
        sa.Column("password_reset_required", sa.Boolean(), nullable=False),
        sa.Column("failed_login_attempts", sa.Integer(), nullable=False),
        sa.Column("locked_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("password_set_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "auth_user_id",
            sa.String(length=36),
            nullable=True,
            comment="Linked account identity ID",
        ),
        sa.Column("collector_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["collector_id"], ["collectors.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_members_member_number", "members", ["member_number"], unique=True)
    op.create_index("ix_members_auth_user_id", "members", ["auth_user_id"])
    op.create_index("ix_members_collector_id", "members", ["collector_id"])

    op.create_table(
        "auth_identities",
        sa.Column("id", sa.String(length=36), nullable=False, comment="Identity ID (UUID)"),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column(
            "password_hash",
            sa.String(length=255),
            nullable=False,
            comment="Argon2id password hash",
        ),
        sa.Column("metadata", JSON_TYPE, nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("last_sign_in_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_auth_identities_email", "auth_identities", ["email"], unique=True)

    op.create_table(
        "user_roles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "user_id",
            sa.String(length=36),
            nullable=False,
            comment="Account identity ID",
        ),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "role IN ('admin', 'collector', 'member')", name="ck_user_roles_role"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )
    op.create_index("ix_user_roles_user_id", "user_roles", ["user_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("timestamp", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("operation", sa.String(length=10), nullable=False),
        sa.Column("table_name", sa.String(length=64), nullable=False),
        sa.Column("record_id", sa.String(length=64), nullable=True),
        sa.Column("old_values", JSON_TYPE, nullable=True),
        sa.Column("new_values", JSON_TYPE, nullable=True),
        sa.Column("severity", sa.String(length=10), nullable=False),
        sa.CheckConstraint(
            "operation IN ('create', 'update', 'delete')", name="ck_audit_logs_operation"
        ),
        sa.CheckConstraint(
            "severity IN ('info', 'warning', 'error', 'critical')",
            name="ck_audit_logs_severity",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"])
    op.create_index("ix_audit_logs_table_record", "audit_logs", ["table_name", "record_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_audit_logs_table_record", table_name="audit_logs")
    op.drop_index("ix_audit_logs_user_id", table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index("ix_user_roles_user_id", table_name="user_roles")
    op.drop_table("user_roles")

    op.drop_index("ix_auth_identities_email", table_name="auth_identities")
    op.drop_table("auth_identities")

    op.drop_index("ix_members_collector_id", table_name="members")
    op.drop_index("ix_members_auth_user_id", table_name="members")
    op.drop_index("ix_members_member_number", table_name="members")
    op.drop_table("members")

    op.drop_index("ix_collectors_member_number", table_name="collectors")
    op.drop_table("collectors")
