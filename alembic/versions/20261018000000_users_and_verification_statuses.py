"""Users with encrypted credentials, and step-up verification statuses.

Revision ID: 20261018000000
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "20261018000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=21), nullable=False),
        sa.Column("username", sa.String(length=128), nullable=True),
        sa.Column("primary_email", sa.String(length=128), nullable=True),
        sa.Column("name", sa.String(length=128), nullable=True),
        sa.Column("avatar", sa.String(length=2048), nullable=True),
        sa.Column("password_encrypted", sa.String(length=255), nullable=True),
        sa.Column("password_encryption_method", sa.String(length=32), nullable=True),
        sa.Column("is_suspended", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column(
            "custom_data",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.CheckConstraint(
            "(password_encrypted IS NULL) = (password_encryption_method IS NULL)",
            name=op.f("ck_users_password_pair"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
    )
    op.create_index(
        "ix_users_username_lower",
        "users",
        [sa.text("lower(username)")],
        unique=True,
    )
    op.create_index(
        "ix_users_primary_email_lower",
        "users",
        [sa.text("lower(primary_email)")],
        unique=True,
    )

    op.create_table(
        "verification_statuses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=21), nullable=False),
        sa.Column("session_id", sa.String(length=128), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name=op.f("fk_verification_statuses_user_id_users"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_verification_statuses")),
        sa.UniqueConstraint(
            "user_id", "session_id", name=op.f("uq_verification_statuses_user_id")
        ),
    )
    op.create_index(
        op.f("ix_verification_statuses_user_id"),
        "verification_statuses",
        ["user_id"],
    )
    op.create_index(
        op.f("ix_verification_statuses_created_at"),
        "verification_statuses",
        ["created_at"],
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_verification_statuses_created_at"), table_name="verification_statuses")
    op.drop_index(op.f("ix_verification_statuses_user_id"), table_name="verification_statuses")
    op.drop_table("verification_statuses")
    op.drop_index("ix_users_primary_email_lower", table_name="users")
    op.drop_index("ix_users_username_lower", table_name="users")
    op.drop_table("users")
