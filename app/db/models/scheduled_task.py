from datetime import datetime

from app.db.base import Base, utcnow
from sqlalchemy import JSON, DateTime, Enum, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from app.db.enums import TaskStatus, TaskType


class ScheduledTask(Base):
    """Outbox row for a deferred task.

    Rows are written in the same transaction as the work that schedules them
    and deleted in the same transaction as the work that completes them.
    """

    __tablename__ = "scheduled_tasks"

    __table_args__ = (
        Index("ix_scheduled_tasks_status_run_at", "status", "run_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    task_type: Mapped[TaskType] = mapped_column(Enum(TaskType, name="task_type_enum"), nullable=False)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, name="task_status_enum"), nullable=False, default=TaskStatus.PENDING
    )
    run_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    locked_until: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    lease_token: Mapped[str | None] = mapped_column(String(32), nullable=True)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
