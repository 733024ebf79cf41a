from datetime import datetime

from app.db.base import Base
from sqlalchemy import JSON, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column


class UserStats(Base):
    """Aggregate gameplay statistics for one user.

    Every column is recomputed from the source collections on each update and
    the row is replaced as a whole. Nothing here is ever incremented in place,
    which is what lets a redelivered or concurrent update run without locks:
    the last complete write wins.
    """

    __tablename__ = "user_stats"

    user_id: Mapped[str] = mapped_column(String, primary_key=True)

    started_games: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    finished_games: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    solo_wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    forced_draw_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    eliminated_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    dropped_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    missed_turn_phases: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    active_turn_phases: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ready_turn_phases: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reliability: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    quickness: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    owned_ban_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    shared_ban_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hater_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    hated_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    rating: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    identity_snapshot: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
