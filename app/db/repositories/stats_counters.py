from sqlalchemy import select, func

from app.db.enums import GameOutcome, PhaseStatus
from app.db.models.ban import BanUser
from app.db.models.game import Game, GameMember
from app.db.models.game_result import GameResultUser
from app.db.models.phase_result import PhaseResultUser


def _count(db, stmt) -> int:
    return int(db.execute(stmt).scalar_one())


def count_member_games(db, user_id: str, started: bool | None = None, finished: bool | None = None) -> int:
    stmt = (
        select(func.count(func.distinct(GameMember.game_id)))
        .select_from(GameMember)
        .join(Game, Game.id == GameMember.game_id)
        .where(GameMember.user_id == user_id)
    )
    if started is not None:
        stmt = stmt.where(Game.started.is_(started))
    if finished is not None:
        stmt = stmt.where(Game.finished.is_(finished))

    return _count(db, stmt)


def count_game_results(db, user_id: str, outcome: GameOutcome) -> int:
    return _count(
        db,
        select(func.count())
        .select_from(GameResultUser)
        .where(
            GameResultUser.user_id == user_id,
            GameResultUser.outcome == outcome,
        ),
    )


def count_phase_results(db, user_id: str, status: PhaseStatus) -> int:
    return _count(
        db,
        select(func.count())
        .select_from(PhaseResultUser)
        .where(
            PhaseResultUser.user_id == user_id,
            PhaseResultUser.status == status,
        ),
    )


def count_bans(db, user_id: str, owner_only: bool = False) -> int:
    stmt = select(func.count()).select_from(BanUser).where(BanUser.user_id == user_id)
    if owner_only:
        stmt = stmt.where(BanUser.is_owner.is_(True))

    return _count(db, stmt)


def get_user_counts(db, user_id: str) -> dict[str, int]:
    """Run every counted query for one user.

    The queries are independent; the first failure propagates and no partial
    result is returned.
    """
    return {
        "started_games": count_member_games(db, user_id, started=True),
        "finished_games": count_member_games(db, user_id, finished=True),
        "solo_wins": count_game_results(db, user_id, GameOutcome.SOLO_WINNER),
        "forced_draw_count": count_game_results(db, user_id, GameOutcome.FORCED_DRAW),
        "eliminated_count": count_game_results(db, user_id, GameOutcome.ELIMINATED),
        "dropped_count": count_game_results(db, user_id, GameOutcome.DROPPED),
        "missed_turn_phases": count_phase_results(db, user_id, PhaseStatus.MISSED),
        "active_turn_phases": count_phase_results(db, user_id, PhaseStatus.ACTIVE),
        "ready_turn_phases": count_phase_results(db, user_id, PhaseStatus.READY),
        "owned_ban_count": count_bans(db, user_id, owner_only=True),
        "shared_ban_count": count_bans(db, user_id),
    }
