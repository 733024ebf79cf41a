from sqlalchemy import select

from app.db.models.glicko_rating import GlickoRating


def get_latest_rating(db, user_id: str):
    return db.execute(
        select(GlickoRating)
        .where(GlickoRating.user_id == user_id)
        .order_by(GlickoRating.created_at.desc(), GlickoRating.id.desc())
        .limit(1)
    ).scalar_one_or_none()
