"""Polling worker that delivers outbox tasks at least once.

A task is claimed by stamping it with a lease token and an expiry, then run in
a fresh transaction that also deletes its outbox row. If the handler fails the
transaction rolls back, so anything the handler enqueued is discarded with it,
and the row is rescheduled with exponential backoff. A worker that dies
mid-task leaves the lease to expire, after which another worker picks the
task up again.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import and_, delete, or_, select, update
from sqlalchemy.exc import SQLAlchemyError

from app.config.settings import Settings, get_settings
from app.db.base import utcnow
from app.db.enums import TaskStatus, TaskType
from app.db.models.scheduled_task import ScheduledTask
from app.errors import LeaseLostError, UnknownTaskTypeError

logger = logging.getLogger(__name__)

MAX_ERROR_LENGTH = 2000


@dataclass(frozen=True)
class ClaimedTask:
    id: int
    task_type: TaskType
    payload: dict
    attempts: int
    lease_token: str


def retry_delay_seconds(attempts: int, base_seconds: int, max_seconds: int) -> int:
    return int(min(max_seconds, base_seconds * (2 ** max(0, attempts - 1))))


class TaskWorker:
    def __init__(self, session_factory, registry: dict, settings: Settings | None = None):
        self._session_factory = session_factory
        self._registry = registry
        self._settings = settings or get_settings()

    def claim(self, now: datetime) -> ClaimedTask | None:
        lease_token = uuid.uuid4().hex

        with self._session_factory() as db, db.begin():
            task = db.execute(
                select(ScheduledTask)
                .where(
                    or_(
                        and_(ScheduledTask.status == TaskStatus.PENDING, ScheduledTask.run_at <= now),
                        and_(ScheduledTask.status == TaskStatus.RUNNING, ScheduledTask.locked_until <= now),
                    )
                )
                .order_by(ScheduledTask.run_at, ScheduledTask.id)
                .limit(1)
                .with_for_update(skip_locked=True)
            ).scalar_one_or_none()

            if task is None:
                return None

            if task.status == TaskStatus.RUNNING:
                logger.warning("Lease expired on %s #%s; redelivering", task.task_type, task.id)

            task.status = TaskStatus.RUNNING
            task.attempts += 1
            task.lease_token = lease_token
            task.locked_until = now + timedelta(seconds=self._settings.task_lease_seconds)

            return ClaimedTask(
                id=task.id,
                task_type=task.task_type,
                payload=dict(task.payload or {}),
                attempts=task.attempts,
                lease_token=lease_token,
            )

    def run_once(self, now: datetime | None = None) -> bool:
        """Run at most one due task. Returns False when nothing was due."""
        now = now or utcnow()
        claimed = self.claim(now)
        if claimed is None:
            return False

        logger.info("Running %s #%s (attempt %s)", claimed.task_type, claimed.id, claimed.attempts)
        try:
            self._execute(claimed)
        except Exception as exc:
            logger.exception("Task %s #%s failed", claimed.task_type, claimed.id)
            self._record_failure(claimed, exc, now)
        else:
            logger.info("Finished %s #%s", claimed.task_type, claimed.id)

        return True

    def run_until_empty(self, max_tasks: int | None = None, now: datetime | None = None) -> int:
        processed = 0
        while max_tasks is None or processed < max_tasks:
            if not self.run_once(now=now):
                break
            processed += 1
        return processed

    def poll(self) -> bool:
        """One polling step. Database errors count as an idle poll so the loop outlives outages."""
        try:
            return self.run_once()
        except (SQLAlchemyError, LookupError):
            logger.exception("Task worker poll failed; retrying after %ss", self._settings.task_poll_interval_seconds)
            return False

    def run_forever(self) -> None:
        logger.info("Task worker started; polling every %ss", self._settings.task_poll_interval_seconds)
        while True:
            if not self.poll():
                time.sleep(self._settings.task_poll_interval_seconds)

    def _execute(self, claimed: ClaimedTask) -> None:
        handler = self._registry.get(claimed.task_type)
        if handler is None:
            raise UnknownTaskTypeError(claimed.task_type)

        with self._session_factory() as db, db.begin():
            handler(db, claimed.payload)
            result = db.execute(
                delete(ScheduledTask).where(
                    ScheduledTask.id == claimed.id,
                    ScheduledTask.lease_token == claimed.lease_token,
                )
            )
            if result.rowcount != 1:
                # another worker owns the task now; roll back this delivery
                raise LeaseLostError(f"Lease lost on task #{claimed.id}")

    def _record_failure(self, claimed: ClaimedTask, exc: Exception, now: datetime) -> None:
        values = {
            "lease_token": None,
            "locked_until": None,
            "last_error": repr(exc)[:MAX_ERROR_LENGTH],
        }
        if claimed.attempts >= self._settings.task_max_attempts:
            logger.error(
                "Giving up on %s #%s after %s attempts",
                claimed.task_type,
                claimed.id,
                claimed.attempts,
            )
            values["status"] = TaskStatus.FAILED
        else:
            delay = retry_delay_seconds(
                claimed.attempts,
                self._settings.task_retry_base_seconds,
                self._settings.task_retry_max_seconds,
            )
            values["status"] = TaskStatus.PENDING
            values["run_at"] = now + timedelta(seconds=delay)

        with self._session_factory() as db, db.begin():
            db.execute(
                update(ScheduledTask)
                .where(
                    ScheduledTask.id == claimed.id,
                    ScheduledTask.lease_token == claimed.lease_token,
                )
                .values(**values)
            )
