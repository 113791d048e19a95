"""Initial tables: catalog, user_progress, challenge_completions, user_subscriptions.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "courses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("image_src", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "units",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_units_course_id"), "units", ["course_id"], unique=False)

    op.create_table(
        "lessons",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("unit_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["unit_id"], ["units.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_lessons_unit_id"), "lessons", ["unit_id"], unique=False)

    op.create_table(
        "challenges",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lesson_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False, server_default="10"),
        sa.ForeignKeyConstraint(["lesson_id"], ["lessons.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_challenges_lesson_id"), "challenges", ["lesson_id"], unique=False)

    op.create_table(
        "user_progress",
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("active_course_id", sa.Integer(), nullable=True),
        sa.Column("hearts", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("has_active_subscription", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_heart_regen_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint("hearts >= 0", name="ck_user_progress_hearts_non_negative"),
        sa.CheckConstraint("points >= 0", name="ck_user_progress_points_non_negative"),
        sa.ForeignKeyConstraint(["active_course_id"], ["courses.id"]),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_index(op.f("ix_user_progress_active_course_id"), "user_progress", ["active_course_id"], unique=False)

    op.create_table(
        "challenge_completions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("challenge_id", sa.Integer(), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["user_progress.user_id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "course_id", "challenge_id", name="uq_challenge_completions_user_course_challenge"
        ),
    )
    op.create_index(op.f("ix_challenge_completions_user_id"), "challenge_completions", ["user_id"], unique=False)

    op.create_table(
        "user_subscriptions",
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("current_period_end", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
    )


def downgrade() -> None:
    op.drop_table("user_subscriptions")
    op.drop_index(op.f("ix_challenge_completions_user_id"), table_name="challenge_completions")
    op.drop_table("challenge_completions")
    op.drop_index(op.f("ix_user_progress_active_course_id"), table_name="user_progress")
    op.drop_table("user_progress")
    op.drop_index(op.f("ix_challenges_lesson_id"), table_name="challenges")
    op.drop_table("challenges")
    op.drop_index(op.f("ix_lessons_unit_id"), table_name="lessons")
    op.drop_table("lessons")
    op.drop_index(op.f("ix_units_course_id"), table_name="units")
    op.drop_table("units")
    op.drop_table("courses")
