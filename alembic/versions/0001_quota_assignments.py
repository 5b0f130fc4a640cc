"""Create the user quota assignment history table."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_quota_assignments"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "user_quota_assignments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("plan_type", sa.String(length=64), nullable=False),
        sa.Column("activated", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("reason", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_user_quota_assignments_user_id", "user_quota_assignments", ["user_id"]
    )
    op.create_index(
        "ix_user_quota_assignments_user_created",
        "user_quota_assignments",
        ["user_id", "created_at", "id"],
    )
    op.create_index(
        "uq_user_quota_assignments_active",
        "user_quota_assignments",
        ["user_id"],
        unique=True,
        sqlite_where=sa.text("activated = 1"),
        postgresql_where=sa.text("activated"),
    )


def downgrade() -> None:
    op.drop_index("uq_user_quota_assignments_active", table_name="user_quota_assignments")
    op.drop_index("ix_user_quota_assignments_user_created", table_name="user_quota_assignments")
    op.drop_index("ix_user_quota_assignments_user_id", table_name="user_quota_assignments")
    op.drop_table("user_quota_assignments")
