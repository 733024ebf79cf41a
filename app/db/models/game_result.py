from datetime import datetime

from app.db.base import Base, utcnow
from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from app.db.enums import GameOutcome


class GameResult(Base):
    __tablename__ = "game_results"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    game_id: Mapped[int] = mapped_column(ForeignKey("games.id"), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)


class GameResultUser(Base):
    """One row per (result, user, outcome); a user may carry several outcomes in one result."""

    __tablename__ = "game_result_users"

    __table_args__ = (
        UniqueConstraint("result_id", "user_id", "outcome", name="uq_game_result_users_result_user_outcome"),
        Index("ix_game_result_users_user_id_outcome", "user_id", "outcome"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    result_id: Mapped[int] = mapped_column(ForeignKey("game_results.id"), nullable=False)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    outcome: Mapped[GameOutcome] = mapped_column(Enum(GameOutcome, name="game_outcome_enum"), nullable=False)
