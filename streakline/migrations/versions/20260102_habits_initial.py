"""Add habit and habit log tables.

Revision ID: 20260102_habits_initial
Revises: 20260101_core_initial
Create Date: 2026-01-02

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20260102_habits_initial"
down_revision: Union[str, None] = "20260101_core_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create habits_habit and habits_habit_log; one log per habit per day."""
    op.create_table(
        "habits_habit",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "habit_type",
            sa.String(length=32),
            nullable=False,
            comment="yes_no, measurable, quit",
        ),
        sa.Column("goal", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_habits_habit_user_id", "habits_habit", ["user_id"])
    op.create_index(
        "ix_habits_habit_user_created", "habits_habit", ["user_id", "created_at"]
    )

    op.create_table(
        "habits_habit_log",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("habit_id", sa.Integer(), nullable=False),
        sa.Column("logged_date", sa.Date(), nullable=False),
        sa.Column("bool_value", sa.Boolean(), nullable=True),
        sa.Column("numeric_value", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["habit_id"], ["habits_habit.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("habit_id", "logged_date", name="uq_habits_log_habit_date"),
    )
    op.create_index("ix_habits_habit_log_habit_id", "habits_habit_log", ["habit_id"])


def downgrade() -> None:
    op.drop_index("ix_habits_habit_log_habit_id", table_name="habits_habit_log")
    op.drop_table("habits_habit_log")
    op.drop_index("ix_habits_habit_user_created", table_name="habits_habit")
    op.drop_index("ix_habits_habit_user_id", table_name="habits_habit")
    op.drop_table("habits_habit")
