"""Initial schema: users, insights, categories and course assignments

Revision ID: 202610190001
Revises:
Create Date: 2026-10-19 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610190001"
down_revision = None
branch_labels = None
depends_on = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=True),
        sa.Column("image", sa.String(length=512), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        _created_at(),
    )

    op.create_table(
        "insights",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("course_code", sa.String(length=32), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("difficulty", sa.Integer(), nullable=False),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
    )
    op.create_index("ix_insights_course_code", "insights", ["course_code"])
    op.create_index("ix_insights_user_id", "insights", ["user_id"])

    op.create_table(
        "categories",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        _created_at(),
    )
    op.create_index("ix_categories_user_id", "categories", ["user_id"])

    op.create_table(
        "course_categories",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("course_code", sa.String(length=32), nullable=False),
        sa.Column(
            "category_id",
            sa.String(length=36),
            sa.ForeignKey("categories.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _created_at(),
        sa.UniqueConstraint(
            "user_id", "course_code", "category_id", name="uq_course_category_assignment"
        ),
    )
    op.create_index("ix_course_categories_user_id", "course_categories", ["user_id"])
    op.create_index("ix_course_categories_course_code", "course_categories", ["course_code"])


def downgrade() -> None:
    op.drop_index("ix_course_categories_course_code", "course_categories")
    op.drop_index("ix_course_categories_user_id", "course_categories")
    op.drop_table("course_categories")
    op.drop_index("ix_categories_user_id", "categories")
    op.drop_table("categories")
    op.drop_index("ix_insights_user_id", "insights")
    op.drop_index("ix_insights_course_code", "insights")
    op.drop_table("insights")
    op.drop_table("users")
