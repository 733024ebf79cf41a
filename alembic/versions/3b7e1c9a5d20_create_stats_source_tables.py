"""create stats source tables

Revision ID: 3b7e1c9a5d20
Revises:
Create Date: 2026-10-12 09:14:27.518204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3b7e1c9a5d20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


game_outcome_enum = sa.Enum("SOLO_WINNER", "FORCED_DRAW", "ELIMINATED", "DROPPED", name="game_outcome_enum")
phase_status_enum = sa.Enum("MISSED", "ACTIVE", "READY", name="phase_status_enum")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("given_name", sa.String(), nullable=True),
        sa.Column("family_name", sa.String(), nullable=True),
        sa.Column("picture", sa.String(), nullable=True),
        sa.Column("locale", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "games",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("started", sa.Boolean(), nullable=False),
        sa.Column("finished", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "game_members",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("game_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(["game_id"], ["games.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("game_id", "user_id", name="uq_game_members_game_id_user_id"),
    )
    op.create_index("ix_game_members_user_id", "game_members", ["user_id"])

    op.create_table(
        "game_results",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("game_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["game_id"], ["games.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("game_id"),
    )
    op.create_table(
        "game_result_users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("result_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("outcome", game_outcome_enum, nullable=False),
        sa.ForeignKeyConstraint(["result_id"], ["game_results.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("result_id", "user_id", "outcome", name="uq_game_result_users_result_user_outcome"),
    )
    op.create_index("ix_game_result_users_user_id_outcome", "game_result_users", ["user_id", "outcome"])

    op.create_table(
        "phase_results",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("game_id", sa.Integer(), nullable=False),
        sa.Column("phase_ordinal", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["game_id"], ["games.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("game_id", "phase_ordinal", name="uq_phase_results_game_id_phase_ordinal"),
    )
    op.create_table(
        "phase_result_users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("phase_result_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("status", phase_status_enum, nullable=False),
        sa.ForeignKeyConstraint(["phase_result_id"], ["phase_results.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("phase_result_id", "user_id", name="uq_phase_result_users_phase_result_id_user_id"),
    )
    op.create_index("ix_phase_result_users_user_id_status", "phase_result_users", ["user_id", "status"])

    op.create_table(
        "bans",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "ban_users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("ban_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("is_owner", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(["ban_id"], ["bans.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("ban_id", "user_id", name="uq_ban_users_ban_id_user_id"),
    )
    op.create_index("ix_ban_users_user_id", "ban_users", ["user_id"])

    op.create_table(
        "glicko_ratings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("rating", sa.Float(), nullable=False),
        sa.Column("deviation", sa.Float(), nullable=False),
        sa.Column("volatility", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_glicko_ratings_user_id_created_at", "glicko_ratings", ["user_id", "created_at"])

    op.create_table(
        "user_stats",
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("started_games", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("finished_games", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("solo_wins", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("forced_draw_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("eliminated_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("dropped_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("missed_turn_phases", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("active_turn_phases", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("ready_turn_phases", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reliability", sa.Float(), nullable=False, server_default="0"),
        sa.Column("quickness", sa.Float(), nullable=False, server_default="0"),
        sa.Column("owned_ban_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("shared_ban_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("hater_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("hated_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("rating", sa.JSON(), nullable=True),
        sa.Column("identity_snapshot", sa.JSON(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("user_id"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("user_stats")
    op.drop_index("ix_glicko_ratings_user_id_created_at", table_name="glicko_ratings")
    op.drop_table("glicko_ratings")
    op.drop_index("ix_ban_users_user_id", table_name="ban_users")
    op.drop_table("ban_users")
    op.drop_table("bans")
    op.drop_index("ix_phase_result_users_user_id_status", table_name="phase_result_users")
    op.drop_table("phase_result_users")
    op.drop_table("phase_results")
    op.drop_index("ix_game_result_users_user_id_outcome", table_name="game_result_users")
    op.drop_table("game_result_users")
    op.drop_table("game_results")
    op.drop_index("ix_game_members_user_id", table_name="game_members")
    op.drop_table("game_members")
    op.drop_table("games")
    op.drop_table("users")
    phase_status_enum.drop(op.get_bind(), checkfirst=True)
    game_outcome_enum.drop(op.get_bind(), checkfirst=True)
