from datetime import datetime

from app.db.base import Base, utcnow
from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column


class Ban(Base):
    __tablename__ = "bans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)


class BanUser(Base):
    """A party to a ban. Owners are parties too, flagged with is_owner."""

    __tablename__ = "ban_users"

    __table_args__ = (
        UniqueConstraint("ban_id", "user_id", name="uq_ban_users_ban_id_user_id"),
        Index("ix_ban_users_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ban_id: Mapped[int] = mapped_column(ForeignKey("bans.id"), nullable=False)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    is_owner: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
