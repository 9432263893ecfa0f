"""Create users and analytics tables"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=20), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=30), nullable=False),
        sa.Column("last_name", sa.String(length=30), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "date_of_joining",
            sa.DateTime(timezone=True),
            server_default=sa.text("timezone('utc', now())"),
            nullable=True,
        ),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "analytics",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("wpm", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("accuracy", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("test_timings", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("total_par", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("max_streak", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("last_test_taken", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "progress",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        sa.Column("version", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.CheckConstraint("accuracy >= 0 AND accuracy <= 100", name="ck_analytics_accuracy_range"),
        sa.CheckConstraint("jsonb_array_length(progress) <= 10", name="ck_analytics_progress_window"),
    )
    op.create_index("ix_analytics_user_id", "analytics", ["user_id"], unique=True)
    op.create_index("ix_analytics_total_par", "analytics", ["total_par"], unique=False)
    op.create_index("ix_analytics_wpm_accuracy", "analytics", ["wpm", "accuracy"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_analytics_wpm_accuracy", table_name="analytics")
    op.drop_index("ix_analytics_total_par", table_name="analytics")
    op.drop_index("ix_analytics_user_id", table_name="analytics")
    op.drop_table("analytics")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
