from app.db.base import Base
from sqlalchemy import Enum, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from app.db.enums import PhaseStatus


class PhaseResult(Base):
    __tablename__ = "phase_results"

    __table_args__ = (
        UniqueConstraint("game_id", "phase_ordinal", name="uq_phase_results_game_id_phase_ordinal"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    game_id: Mapped[int] = mapped_column(ForeignKey("games.id"), nullable=False)
    phase_ordinal: Mapped[int] = mapped_column(Integer, nullable=False)


class PhaseResultUser(Base):
    __tablename__ = "phase_result_users"

    __table_args__ = (
        UniqueConstraint("phase_result_id", "user_id", name="uq_phase_result_users_phase_result_id_user_id"),
        Index("ix_phase_result_users_user_id_status", "user_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    phase_result_id: Mapped[int] = mapped_column(ForeignKey("phase_results.id"), nullable=False)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    status: Mapped[PhaseStatus] = mapped_column(Enum(PhaseStatus, name="phase_status_enum"), nullable=False)
