"""add favorites and listening history

Revision ID: 20261019_02
Revises: 20261019_01
Create Date: 2026-10-19 00:10:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_02"
down_revision = "20261019_01"
branch_labels = None
depends_on = None


def _track_columns():
    return [
        sa.Column("track_id", sa.String(length=64), nullable=False),
        sa.Column("track_name", sa.String(length=500), nullable=False),
        sa.Column("artist_name", sa.String(length=500), nullable=False),
        sa.Column("artwork_url", sa.Text(), nullable=True),
        sa.Column("preview_url", sa.Text(), nullable=True),
    ]


def upgrade():
    op.create_table(
        "favorites",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_track_columns(),
        sa.Column(
            "added_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="fk_favorites_user_id",
        ),
        sa.UniqueConstraint("user_id", "track_id", name="uq_favorites_user_track"),
    )
    op.create_index("ix_favorites_user_id", "favorites", ["user_id"])
    op.create_table(
        "listening_history",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_track_columns(),
        sa.Column(
            "played_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="fk_listening_history_user_id",
        ),
    )
    op.create_index("ix_listening_history_user_id", "listening_history", ["user_id"])
    op.create_index("ix_listening_history_played_at", "listening_history", ["played_at"])


def downgrade():
    op.drop_index("ix_listening_history_played_at", table_name="listening_history")
    op.drop_index("ix_listening_history_user_id", table_name="listening_history")
    op.drop_table("listening_history")
    op.drop_index("ix_favorites_user_id", table_name="favorites")
    op.drop_table("favorites")
