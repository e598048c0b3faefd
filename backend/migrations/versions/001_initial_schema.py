"""Initial schema: users, user_verifications, pomodoro sessions and rounds.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17

- users: credentials plus per-user timer settings (50/10/7 defaults).
- user_verifications: bcrypt-hashed secret with pending/accepted status.
- pomodoro_sessions / pomodoro_rounds: one session per user per day,
  rounds ordered by position.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import ENUM, UUID

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

verification_status = ENUM(
    "pending", "accepted", name="verification_status", create_type=False
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    # =========================================================================
    # users
    # =========================================================================
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "work_interval", sa.Integer(), server_default=sa.text("50"), nullable=False
        ),
        sa.Column(
            "break_interval", sa.Integer(), server_default=sa.text("10"), nullable=False
        ),
        sa.Column(
            "intervals_count", sa.Integer(), server_default=sa.text("7"), nullable=False
        ),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    # =========================================================================
    # user_verifications
    # =========================================================================
    verification_status.create(op.get_bind(), checkfirst=True)
    op.create_table(
        "user_verifications",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("secret", sa.String(255), nullable=False),
        sa.Column(
            "status",
            verification_status,
            server_default="pending",
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index(
        "ix_user_verifications_user_id", "user_verifications", ["user_id"]
    )

    # =========================================================================
    # pomodoro_sessions / pomodoro_rounds
    # =========================================================================
    op.create_table(
        "pomodoro_sessions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "is_completed", sa.Boolean(), server_default=sa.false(), nullable=False
        ),
        *_timestamps(),
    )
    op.create_index("ix_pomodoro_sessions_user_id", "pomodoro_sessions", ["user_id"])

    op.create_table(
        "pomodoro_rounds",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "session_id",
            UUID(as_uuid=True),
            sa.ForeignKey("pomodoro_sessions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "total_seconds", sa.Integer(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column(
            "is_completed", sa.Boolean(), server_default=sa.false(), nullable=False
        ),
        *_timestamps(),
    )
    op.create_index("ix_pomodoro_rounds_session_id", "pomodoro_rounds", ["session_id"])


def downgrade() -> None:
    op.drop_table("pomodoro_rounds")
    op.drop_table("pomodoro_sessions")
    op.drop_table("user_verifications")
    verification_status.drop(op.get_bind(), checkfirst=True)
    op.drop_table("users")
