"""add scheduled tasks outbox

Revision ID: 8f4d2e6b1a73
Revises: 3b7e1c9a5d20
Create Date: 2026-10-14 16:42:03.901266

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "8f4d2e6b1a73"
down_revision: Union[str, Sequence[str], None] = "3b7e1c9a5d20"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


task_type_enum = sa.Enum("UPDATE_USER_STATS", "UPDATE_USER_STAT", name="task_type_enum")
task_status_enum = sa.Enum("PENDING", "RUNNING", "FAILED", name="task_status_enum")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "scheduled_tasks",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("task_type", task_type_enum, nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("status", task_status_enum, nullable=False, server_default="PENDING"),
        sa.Column("run_at", sa.DateTime(), nullable=False),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("locked_until", sa.DateTime(), nullable=True),
        sa.Column("lease_token", sa.String(length=32), nullable=True),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_scheduled_tasks_status_run_at", "scheduled_tasks", ["status", "run_at"])
    op.alter_column("scheduled_tasks", "status", server_default=None)
    op.alter_column("scheduled_tasks", "attempts", server_default=None)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_scheduled_tasks_status_run_at", table_name="scheduled_tasks")
    op.drop_table("scheduled_tasks")
    task_status_enum.drop(op.get_bind(), checkfirst=True)
    task_type_enum.drop(op.get_bind(), checkfirst=True)
