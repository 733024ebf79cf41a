import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.config.settings import Settings, get_settings
from app.db.base import utcnow
from app.db.models.user import User
from app.db.repositories.user_stats import get_user_stats, list_user_stats, replace_user_stats
from app.errors import SchedulingError
from app.schemas.user_stats import (
    StatsRefreshRequest,
    StatsRefreshResponse,
    UserStatsPage,
    UserStatsRead,
    UserStatsWrite,
)
from app.services.user_stats import schedule_stats_update

logger = logging.getLogger(__name__)

router = APIRouter(tags=["UserStats"])

@router.get("/users/{user_id}/stats", response_model=UserStatsRead)
def get_stats(user_id: str, db: Session=Depends(get_db), _: User=Depends(get_current_user)):
    stats = get_user_stats(db, user_id)
    if stats is None:
        # never recalculated yet: an empty record, not a 404
        return UserStatsRead(user_id=user_id)
    return stats

@router.put("/users/{user_id}/stats", response_model=UserStatsRead)
def put_stats(
    user_id: str,
    payload: UserStatsWrite,
    db: Session=Depends(get_db),
    settings: Settings=Depends(get_settings),
):
    if not settings.is_local:
        raise HTTPException(status_code=403, detail="only accessible in local dev mode")

    stats = replace_user_stats(db, user_id, updated_at=utcnow(), **payload.model_dump(mode="json"))
    db.commit()
    db.refresh(stats)
    return stats

@router.get("/stats", response_model=UserStatsPage)
def list_stats(
    cursor: str | None = None,
    limit: int = Query(20, ge=1, le=100),
    db: Session=Depends(get_db),
    _: User=Depends(get_current_user),
):
    items, next_cursor = list_user_stats(db, cursor=cursor, limit=limit)
    return UserStatsPage(
        items=[UserStatsRead.model_validate(item) for item in items],
        next_cursor=next_cursor,
    )

@router.post("/stats/refresh", response_model=StatsRefreshResponse, status_code=202)
def refresh_stats(
    payload: StatsRefreshRequest,
    db: Session=Depends(get_db),
    settings: Settings=Depends(get_settings),
    _: User=Depends(get_current_user),
):
    try:
        schedule_stats_update(db, payload.user_ids, settings=settings)
        db.commit()
    except (SchedulingError, SQLAlchemyError):
        db.rollback()
        raise HTTPException(status_code=503, detail="Unable to schedule stats update")

    return StatsRefreshResponse(queued=len(payload.user_ids))
