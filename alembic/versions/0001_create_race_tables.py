"""create game mode, player and game session tables

Revision ID: 0001_create_race_tables
Revises:
Create Date: 2024-05-01 12:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001_create_race_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "game_modes",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("max_players", sa.Integer(), nullable=False),
        sa.Column("entry_price", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("prize_tiers", sa.JSON(), nullable=False),
        sa.Column("max_winners", sa.Integer(), nullable=False),
        sa.Column("repetitions", sa.Integer(), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_game_modes")),
    )
    op.create_table(
        "players",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("display_name", sa.String(length=100), nullable=False),
        sa.Column("assigned_number", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_players")),
    )
    op.create_table(
        "game_sessions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("mode_id", sa.String(length=36), nullable=False),
        sa.Column("start_range", sa.Integer(), nullable=False),
        sa.Column("end_range", sa.Integer(), nullable=False),
        sa.Column("repetitions", sa.Integer(), nullable=False),
        sa.Column("num_winners", sa.Integer(), nullable=False),
        sa.Column("player_ids", sa.JSON(), nullable=False),
        sa.Column("winning_numbers", sa.JSON(), nullable=False),
        sa.Column("winner_ids", sa.JSON(), nullable=False),
        sa.Column("dropped_numbers", sa.JSON(), nullable=False),
        sa.Column("played_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("gross_income", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("payout", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("profit", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_game_sessions")),
    )
    op.create_index(
        op.f("ix_game_sessions_mode_id"), "game_sessions", ["mode_id"], unique=False
    )
    op.create_index(
        "ix_game_sessions_played_at", "game_sessions", ["played_at"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_game_sessions_played_at", table_name="game_sessions")
    op.drop_index(op.f("ix_game_sessions_mode_id"), table_name="game_sessions")
    op.drop_table("game_sessions")
    op.drop_table("players")
    op.drop_table("game_modes")
