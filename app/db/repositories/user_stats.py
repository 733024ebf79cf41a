from sqlalchemy import select

from app.db.models.user_stats import UserStats


def get_user_stats(db, user_id: str):
    return db.get(UserStats, user_id)


def list_user_stats(db, cursor: str | None = None, limit: int = 20):
    """Page of stats ordered by user id, plus the cursor for the next page."""
    stmt = select(UserStats).order_by(UserStats.user_id).limit(limit + 1)
    if cursor:
        stmt = stmt.where(UserStats.user_id > cursor)

    rows = db.execute(stmt).scalars().all()
    if len(rows) > limit:
        rows = rows[:limit]
        return rows, rows[-1].user_id

    return rows, None


def replace_user_stats(db, user_id: str, **fields) -> UserStats:
    # callers pass every column; merge copies them over the stored row wholesale
    stats = db.merge(UserStats(user_id=user_id, **fields))
    db.flush()
    return stats
