from collections.abc import Callable

from sqlalchemy.orm import Session

from app.db.enums import TaskType
from app.services.user_stats import process_batch, update_user_stats

TaskHandler = Callable[[Session, dict], object]


def _handle_update_user_stats(db: Session, payload: dict) -> None:
    process_batch(db, payload["user_ids"])


def _handle_update_user_stat(db: Session, payload: dict) -> None:
    update_user_stats(db, payload["user_id"])


def build_task_registry() -> dict[TaskType, TaskHandler]:
    """Dispatch table from task type to handler.

    Built once by whichever process runs the worker and handed to it; there
    is no module-level registry to mutate.
    """
    return {
        TaskType.UPDATE_USER_STATS: _handle_update_user_stats,
        TaskType.UPDATE_USER_STAT: _handle_update_user_stat,
    }
