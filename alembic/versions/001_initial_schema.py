"""Initial schema — members, notifications.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "members",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_login", sa.String(60), nullable=False),
        sa.Column("user_nicename", sa.String(50), nullable=False),
        sa.Column("display_name", sa.String(250), nullable=False, server_default=""),
        sa.Column("user_email", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("roles", sa.JSON, nullable=False),
        sa.Column("extra_caps", sa.JSON, nullable=False),
        sa.Column("member_types", sa.JSON, nullable=False),
        sa.Column("xprofile", sa.JSON, nullable=False),
        sa.Column("user_registered", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_members_user_login", "members", ["user_login"], unique=True)
    op.create_index("ix_members_user_email", "members", ["user_email"], unique=True)

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id", sa.Integer,
            sa.ForeignKey("members.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("item_id", sa.Integer, nullable=False, server_default="0"),
        sa.Column("secondary_item_id", sa.Integer, nullable=False, server_default="0"),
        sa.Column("component_name", sa.String(75), nullable=False),
        sa.Column("component_action", sa.String(75), nullable=False),
        sa.Column("date_notified", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("is_new", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("content", sa.Text, nullable=False, server_default=""),
        sa.Column("href", sa.String(2000), nullable=False, server_default=""),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_notifications_user_id", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_members_user_email", table_name="members")
    op.drop_index("ix_members_user_login", table_name="members")
    op.drop_table("members")
