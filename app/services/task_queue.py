import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from app.db.base import utcnow
from app.db.enums import TaskStatus, TaskType
from app.db.models.scheduled_task import ScheduledTask
from app.errors import SchedulingError

logger = logging.getLogger(__name__)


def enqueue(
    db,
    task_type: TaskType,
    payload: dict,
    delay_seconds: float = 0,
    now: datetime | None = None,
) -> ScheduledTask:
    """Add a deferred task to the outbox inside the caller's transaction.

    The task only becomes visible to workers once that transaction commits,
    so everything enqueued in one transaction is scheduled together or not
    at all.
    """
    run_at = (now or utcnow()) + timedelta(seconds=delay_seconds)
    task = ScheduledTask(
        task_type=task_type,
        payload=payload,
        status=TaskStatus.PENDING,
        run_at=run_at,
        attempts=0,
    )

    try:
        db.add(task)
        db.flush()
    except SQLAlchemyError as exc:
        logger.error("Unable to enqueue %s %r: %s", task_type, payload, exc)
        raise SchedulingError(f"Unable to enqueue {task_type}") from exc

    logger.debug("Enqueued %s #%s at %s", task_type, task.id, run_at)
    return task
