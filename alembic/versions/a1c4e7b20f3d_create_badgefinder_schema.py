"""create users, badge catalog and badge progress tables

Revision ID: a1c4e7b20f3d
Revises:
Create Date: 2026-10-19 10:12:03.518204
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "a1c4e7b20f3d"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ---- users ----
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("membership_number", sa.String(length=100), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)

    # ---- badges (catalog, badge_id comes from the export) ----
    op.create_table(
        "badges",
        sa.Column("badge_id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("badge_name", sa.String(length=255), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("categories", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("badge_id"),
    )
    op.create_index(op.f("ix_badges_badge_name"), "badges", ["badge_name"], unique=False)

    # ---- requirements ----
    op.create_table(
        "requirements",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("badge_id", sa.Integer(), nullable=False),
        sa.Column("requirement_id", sa.Integer(), nullable=False),
        sa.Column("requirement_string", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["badge_id"], ["badges.badge_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_requirements_id"), "requirements", ["id"], unique=False)
    op.create_index(
        "idx_requirements_badge_requirement", "requirements", ["badge_id", "requirement_id"], unique=True
    )

    # ---- user_badges ----
    op.create_table(
        "user_badges",
        sa.Column("id", sa.Integer(), nullable=False),
        # users.id is VARCHAR(36)
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("badge_id", sa.Integer(), nullable=False),
        sa.Column("kind", sa.String(length=20), nullable=False),
        sa.Column("added_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["badge_id"], ["badges.badge_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_badges_id"), "user_badges", ["id"], unique=False)
    op.create_index("idx_user_badges_unique", "user_badges", ["user_id", "badge_id", "kind"], unique=True)

    # ---- user_requirements ----
    op.create_table(
        "user_requirements",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_badge_id", sa.Integer(), nullable=False),
        # requirements.id, not the per-badge requirement_id
        sa.Column("requirement_pk", sa.Integer(), nullable=False),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.ForeignKeyConstraint(["user_badge_id"], ["user_badges.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["requirement_pk"], ["requirements.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_requirements_id"), "user_requirements", ["id"], unique=False)
    op.create_index(
        "idx_user_requirements_unique", "user_requirements", ["user_badge_id", "requirement_pk"], unique=True
    )


def downgrade() -> None:
    op.drop_index("idx_user_requirements_unique", table_name="user_requirements")
    op.drop_index(op.f("ix_user_requirements_id"), table_name="user_requirements")
    op.drop_table("user_requirements")

    op.drop_index("idx_user_badges_unique", table_name="user_badges")
    op.drop_index(op.f("ix_user_badges_id"), table_name="user_badges")
    op.drop_table("user_badges")

    op.drop_index("idx_requirements_badge_requirement", table_name="requirements")
    op.drop_index(op.f("ix_requirements_id"), table_name="requirements")
    op.drop_table("requirements")

    op.drop_index(op.f("ix_badges_badge_name"), table_name="badges")
    op.drop_table("badges")

    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
