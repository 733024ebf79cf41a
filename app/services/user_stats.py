import logging

from app.config.settings import Settings, get_settings
from app.db.base import utcnow
from app.db.enums import TaskType
from app.db.models.user import User
from app.db.models.user_stats import UserStats
from app.db.repositories.stats_counters import get_user_counts
from app.db.repositories.user_stats import replace_user_stats
from app.errors import UserNotFoundError
from app.services.ratings import get_current_rating
from app.services.stats_metrics import compute_derived_metrics
from app.services.task_queue import enqueue

logger = logging.getLogger(__name__)

PRIVATE_IDENTITY_FIELDS = ("email",)


def scrub_identity(snapshot: dict | None) -> dict | None:
    """Drop private fields from an identity snapshot before it leaves the service."""
    if snapshot is None:
        return None
    return {key: value for key, value in snapshot.items() if key not in PRIVATE_IDENTITY_FIELDS}


def recalculate(db, user_id: str) -> dict:
    counts = get_user_counts(db, user_id)
    return {**counts, **compute_derived_metrics(counts)}


def load_identity_snapshot(db, user_id: str) -> dict:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user.identity_snapshot()


def update_user_stats(db, user_id: str) -> UserStats:
    """Recompute and replace the stats row for one user.

    Each step aborts the update on failure, so the row is either written in
    full from this pass or not touched at all.
    """
    logger.info("update_user_stats(%r)", user_id)

    try:
        fields = recalculate(db, user_id)
    except Exception:
        logger.error("Unable to recalculate user stats for %r", user_id)
        raise

    try:
        rating = get_current_rating(db, user_id)
    except Exception:
        logger.error("Unable to get current rating for %r", user_id)
        raise

    try:
        identity = load_identity_snapshot(db, user_id)
    except Exception:
        logger.error("Unable to load user %r", user_id)
        raise

    try:
        stats = replace_user_stats(
            db,
            user_id,
            rating=rating,
            identity_snapshot=identity,
            updated_at=utcnow(),
            **fields,
        )
    except Exception:
        logger.error("Unable to store stats for %r: %r", user_id, fields)
        raise

    logger.info("update_user_stats(%r) *** SUCCESS ***", user_id)
    return stats


def process_batch(db, user_ids: list[str]) -> None:
    """Peel the head off a batch: schedule its update and chain the tail.

    Both enqueues land in the caller's transaction. The task worker commits
    that transaction together with the completion of the current chain step,
    so the tail is never dropped after the head has been scheduled.
    """
    if not user_ids:
        logger.warning("process_batch called with an empty batch")
        return

    logger.info("process_batch(%r)", user_ids)

    enqueue(db, TaskType.UPDATE_USER_STAT, {"user_id": user_ids[0]})
    if len(user_ids) > 1:
        enqueue(db, TaskType.UPDATE_USER_STATS, {"user_ids": list(user_ids[1:])})

    logger.info("process_batch(%r) *** SUCCESS ***", user_ids)


def schedule_stats_update(db, user_ids, settings: Settings | None = None):
    """Schedule a stats refresh for the given users.

    Outside local environments the first chain step is delayed so rapid
    successive triggers collapse into fewer recalculations. The outbox row is
    committed by the caller; SchedulingError leaves nothing scheduled.
    """
    user_ids = list(user_ids)
    if not user_ids:
        return None

    settings = settings or get_settings()
    delay = 0 if settings.is_local else settings.stats_update_delay_seconds

    return enqueue(db, TaskType.UPDATE_USER_STATS, {"user_ids": user_ids}, delay_seconds=delay)
